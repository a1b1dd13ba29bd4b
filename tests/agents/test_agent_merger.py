import json
import os
import stat
from pathlib import Path

import pytest

from promption.agents.merger import OpenCodeAgentMerger
from promption.constants import OPENCODE_SCHEMA_URL
from promption.errors import InvalidConfigDocumentError, ProjectionFileError
from promption.models import AgentMode


def _write_config(path: Path, payload) -> None:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")


def _read_config(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_merge_creates_document_when_missing(project_root: Path, make_agent) -> None:
    agent = make_agent(name="alpha", model="gpt-4", prompt_content="Be helpful.")

    result = OpenCodeAgentMerger(root=project_root).merge([agent])

    config_path = project_root / "opencode.json"
    assert result.config_path == config_path
    assert result.agents == ["alpha"]
    assert result.backup_path is None
    assert _read_config(config_path) == {
        "$schema": OPENCODE_SCHEMA_URL,
        "agent": {
            "alpha": {
                "mode": "subagent",
                "model": "gpt-4",
                "prompt": "{file:.opencode/prompts/alpha.txt}",
            }
        },
    }
    prompt_path = project_root / ".opencode/prompts/alpha.txt"
    assert result.prompt_files == [prompt_path]
    assert prompt_path.read_text(encoding="utf-8") == "Be helpful."


def test_merge_preserves_other_agents_and_foreign_keys(
    project_root: Path, make_agent
) -> None:
    config_path = project_root / "opencode.json"
    _write_config(
        config_path,
        {
            "$schema": OPENCODE_SCHEMA_URL,
            "theme": "dark",
            "agent": {
                "beta": {"mode": "primary", "model": "claude"},
                "alpha": {"mode": "primary", "model": "old"},
            },
            "mcp": {"server": {"command": ["x"]}},
        },
    )
    agent = make_agent(
        name="alpha",
        mode=AgentMode.SUBAGENT,
        tools={"bash": True},
        permissions={"edit": "ask"},
    )

    OpenCodeAgentMerger(root=project_root).merge([agent])

    payload = _read_config(config_path)
    assert list(payload) == ["$schema", "theme", "agent", "mcp"]
    assert payload["theme"] == "dark"
    assert payload["mcp"] == {"server": {"command": ["x"]}}
    assert payload["agent"]["beta"] == {"mode": "primary", "model": "claude"}
    assert payload["agent"]["alpha"] == {
        "mode": "subagent",
        "tools": {"bash": True},
        "permissions": {"edit": "ask"},
    }


def test_merge_without_prompt_writes_no_prompt_file(project_root: Path, make_agent) -> None:
    result = OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha")])

    assert result.prompt_files == []
    assert not (project_root / ".opencode").exists()
    assert "prompt" not in _read_config(project_root / "opencode.json")["agent"]["alpha"]


def test_merge_is_stable_on_rerun(project_root: Path, make_agent) -> None:
    merger = OpenCodeAgentMerger(root=project_root)
    agents = [
        make_agent(agent_id="a", name="alpha", prompt_content="one"),
        make_agent(agent_id="b", name="beta", mode=AgentMode.PRIMARY),
    ]

    merger.merge(agents)
    first = (project_root / "opencode.json").read_bytes()
    merger.merge(agents)

    assert (project_root / "opencode.json").read_bytes() == first


def test_merge_backs_up_unparseable_config(project_root: Path, make_agent) -> None:
    config_path = project_root / "opencode.json"
    config_path.write_text("{ not json", encoding="utf-8")

    result = OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha")])

    assert result.backup_path is not None
    assert result.backup_path.read_text(encoding="utf-8") == "{ not json"
    assert _read_config(config_path) == {
        "$schema": OPENCODE_SCHEMA_URL,
        "agent": {"alpha": {"mode": "subagent"}},
    }


def test_merge_backs_up_non_object_config(project_root: Path, make_agent) -> None:
    config_path = project_root / "opencode.json"
    _write_config(config_path, ["not", "an", "object"])

    result = OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha")])

    assert result.backup_path is not None
    assert json.loads(result.backup_path.read_text(encoding="utf-8")) == ["not", "an", "object"]
    assert _read_config(config_path)["agent"] == {"alpha": {"mode": "subagent"}}


def test_invalid_entry_leaves_disk_untouched(project_root: Path, make_agent) -> None:
    config_path = project_root / "opencode.json"
    _write_config(config_path, {"agent": {"beta": {"mode": "primary"}}})
    before = config_path.read_bytes()
    agent = make_agent(
        name="alpha", prompt_content="text", tools=["bash"]
    )

    with pytest.raises(InvalidConfigDocumentError) as excinfo:
        OpenCodeAgentMerger(root=project_root).merge([agent])

    assert "alpha" in excinfo.value.detail
    assert config_path.read_bytes() == before
    assert not (project_root / ".opencode/prompts/alpha.txt").exists()


def test_custom_config_path(project_root: Path, tmp_path: Path, make_agent) -> None:
    config_path = tmp_path / "elsewhere" / "opencode.json"
    config_path.parent.mkdir()

    result = OpenCodeAgentMerger(root=project_root, config_path=config_path).merge(
        [make_agent(name="alpha", prompt_content="p")]
    )

    assert result.config_path == config_path
    assert config_path.exists()
    assert not (project_root / "opencode.json").exists()
    assert (project_root / ".opencode/prompts/alpha.txt").read_text() == "p"


def test_preview_touches_nothing(project_root: Path, make_agent) -> None:
    agents = [
        make_agent(agent_id="a", name="alpha", prompt_content="x", model="m"),
        make_agent(agent_id="b", name="beta", mode=AgentMode.PRIMARY),
    ]

    snippet = OpenCodeAgentMerger(root=project_root).preview(agents)

    assert snippet == {
        "agent": {
            "alpha": {
                "mode": "subagent",
                "model": "m",
                "prompt": "{file:.opencode/prompts/alpha.txt}",
            },
            "beta": {"mode": "primary"},
        }
    }
    assert list(project_root.iterdir()) == []


def test_merge_copies_tool_values_verbatim(project_root: Path, make_agent) -> None:
    agent = make_agent(
        name="alpha",
        tools={"write": True, "bash": "ask"},
        permissions={"edit": {"*.md": "allow"}},
    )

    OpenCodeAgentMerger(root=project_root).merge([agent])

    entry = _read_config(project_root / "opencode.json")["agent"]["alpha"]
    assert entry["tools"] == {"write": True, "bash": "ask"}
    assert entry["permissions"] == {"edit": {"*.md": "allow"}}


def test_merge_keeps_empty_tools_object(project_root: Path, make_agent) -> None:
    OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha", tools={})])

    assert _read_config(project_root / "opencode.json")["agent"]["alpha"] == {
        "mode": "subagent",
        "tools": {},
    }


@pytest.mark.parametrize("mode", [0o644, 0o640])
def test_merge_keeps_config_file_mode(project_root: Path, make_agent, mode: int) -> None:
    config_path = project_root / "opencode.json"
    _write_config(config_path, {"agent": {}})
    config_path.chmod(mode)

    OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha")])

    assert stat.S_IMODE(config_path.stat().st_mode) == mode


def test_new_config_file_follows_umask(project_root: Path, make_agent) -> None:
    umask = os.umask(0o022)
    try:
        OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha")])
    finally:
        os.umask(umask)

    assert stat.S_IMODE((project_root / "opencode.json").stat().st_mode) == 0o644


def test_backup_failure_is_reported(project_root: Path, make_agent, monkeypatch) -> None:
    config_path = project_root / "opencode.json"
    config_path.write_text("{ not json", encoding="utf-8")

    def _fail(path: Path) -> Path:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr("promption.agents.merger.backup_file", _fail)

    with pytest.raises(ProjectionFileError, match="Could not back up config"):
        OpenCodeAgentMerger(root=project_root).merge([make_agent(name="alpha")])

    assert config_path.read_text(encoding="utf-8") == "{ not json"
