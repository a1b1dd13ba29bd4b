"""Tests for item CLI commands: init-db, list, sync."""

import sys
from pathlib import Path

from promption.__main__ import cli, main
from promption.models import ItemKind


def test_init_db_creates_database(db_path: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["init-db"])

    assert result.exit_code == 0
    assert "Database ready" in result.output
    assert db_path.exists()


def test_init_db_with_explicit_path(tmp_path: Path, cli_runner) -> None:
    target = tmp_path / "custom" / "records.db"

    result = cli_runner.invoke(cli, ["--db", str(target), "init-db"])

    assert result.exit_code == 0
    assert target.exists()


def test_missing_database_is_reported(db_path: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["list"])

    assert result.exit_code == 1
    assert "Promption database not found" in result.output
    assert "init-db" in result.output
    assert not db_path.exists()


def test_list_empty(store, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    assert "No items found." in result.output


def test_list_filters_by_type(seed_items, cli_runner) -> None:
    seed_items(
        {"item_id": "rule-1", "name": "Style", "kind": ItemKind.RULE},
        {"item_id": "skill-1", "name": "Helper", "kind": ItemKind.SKILL},
    )

    result = cli_runner.invoke(cli, ["list", "-t", "rule"])

    assert result.exit_code == 0
    assert "rule-1" in result.output
    assert "skill-1" not in result.output


def test_list_rejects_unknown_type(store, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["list", "--type", "snippet"])

    assert result.exit_code == 2


def test_sync_to_cursor(seed_items, project_root: Path, cli_runner) -> None:
    seed_items(
        {"item_id": "a", "name": "Style Guide", "content": "rules", "kind": ItemKind.RULE},
        {"item_id": "b", "name": "Helper", "content": "docs", "kind": ItemKind.SKILL},
    )

    result = cli_runner.invoke(
        cli,
        ["--project-dir", str(project_root), "sync", "--ids", "a,b", "--target", "cursor"],
    )

    assert result.exit_code == 0
    assert "2 record(s) synced to cursor." in result.output
    assert (project_root / ".cursor/rules/style-guide.mdc").exists()
    assert (project_root / ".cursor/rules/helper.md").read_text() == "docs"


def test_sync_defaults_to_antigravity(seed_items, project_root: Path, cli_runner) -> None:
    seed_items({"item_id": "a", "name": "Flow", "kind": ItemKind.WORKFLOW})

    result = cli_runner.invoke(
        cli, ["--project-dir", str(project_root), "sync", "--ids", "a"]
    )

    assert result.exit_code == 0
    assert (project_root / ".agent/workflows/flow.md").exists()


def test_sync_repeated_ids_option(seed_items, project_root: Path, cli_runner) -> None:
    seed_items(
        {"item_id": "a", "name": "One", "kind": ItemKind.RULE},
        {"item_id": "b", "name": "Two", "kind": ItemKind.RULE},
    )

    result = cli_runner.invoke(
        cli,
        [
            "--project-dir",
            str(project_root),
            "sync",
            "--ids",
            "a",
            "--ids",
            "b",
            "--target",
            "cline",
        ],
    )

    assert result.exit_code == 0
    assert (project_root / ".clinerules/one.md").exists()
    assert (project_root / ".clinerules/two.md").exists()


def test_sync_partial_match_still_writes(seed_items, project_root: Path, cli_runner) -> None:
    seed_items({"item_id": "a", "name": "Only", "kind": ItemKind.RULE})

    result = cli_runner.invoke(
        cli,
        ["--project-dir", str(project_root), "sync", "--ids", "a,ghost", "--target", "windsurf"],
    )

    assert result.exit_code == 0
    assert "ghost" in result.output
    assert (project_root / ".windsurf/rules/only.md").exists()


def test_sync_without_ids_fails(store, project_root: Path, cli_runner) -> None:
    result = cli_runner.invoke(cli, ["--project-dir", str(project_root), "sync"])

    assert result.exit_code == 1
    assert "No item IDs provided" in result.output


def test_sync_unknown_ids_fail(store, project_root: Path, cli_runner) -> None:
    result = cli_runner.invoke(
        cli, ["--project-dir", str(project_root), "sync", "--ids", "ghost"]
    )

    assert result.exit_code == 1
    assert "No items found" in result.output
    assert list(project_root.iterdir()) == []


def test_sync_unknown_kind_writes_nothing(seed_items, project_root: Path, cli_runner) -> None:
    seed_items(
        {"item_id": "a", "name": "Fine", "kind": ItemKind.RULE},
        {"item_id": "b", "name": "Odd", "kind": "snippet"},
    )

    result = cli_runner.invoke(
        cli, ["--project-dir", str(project_root), "sync", "--ids", "a,b"]
    )

    assert result.exit_code == 1
    assert "unknown kind 'snippet'" in result.output
    assert list(project_root.iterdir()) == []


def test_sync_dry_run(seed_items, project_root: Path, cli_runner) -> None:
    seed_items({"item_id": "a", "name": "Helper", "kind": ItemKind.SKILL})

    result = cli_runner.invoke(
        cli,
        [
            "--project-dir",
            str(project_root),
            "sync",
            "--ids",
            "a",
            "--target",
            "opencode",
            "--dry-run",
        ],
    )

    assert result.exit_code == 0
    assert "1 record(s) planned to opencode." in result.output
    assert list(project_root.iterdir()) == []


def test_sync_copilot_appends(seed_items, project_root: Path, cli_runner) -> None:
    seed_items({"item_id": "a", "name": "Style", "content": "Body", "kind": ItemKind.RULE})
    args = ["--project-dir", str(project_root), "sync", "--ids", "a", "--target", "copilot"]

    cli_runner.invoke(cli, args)
    result = cli_runner.invoke(cli, args)

    assert result.exit_code == 0
    text = (project_root / ".github/copilot-instructions.md").read_text()
    assert text.count("# Style\nBody\n") == 2


def test_main_returns_exit_code(db_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("PROMPTION_DB", str(db_path))
    monkeypatch.setattr(sys, "argv", ["promption", "list"])

    assert main() == 1


def test_main_help_returns_zero(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["promption", "--help"])

    assert main() == 0


def test_list_shows_bracketed_names_verbatim(seed_items, cli_runner) -> None:
    seed_items(
        {"item_id": "a", "name": "Fix [/] parsing", "kind": ItemKind.RULE},
        {"item_id": "b", "name": "[red]x", "kind": ItemKind.SKILL},
    )

    result = cli_runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    assert "Fix [/] parsing" in result.output
    assert "[red]x" in result.output


def test_list_unknown_kind_is_shown(seed_items, cli_runner) -> None:
    seed_items({"item_id": "a", "name": "Odd", "kind": "[bold]snippet"})

    result = cli_runner.invoke(cli, ["list"])

    assert result.exit_code == 0
    assert "Odd" in result.output
