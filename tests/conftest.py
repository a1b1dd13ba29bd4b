import logging
import sys
from pathlib import Path
from typing import Any, Callable, Iterator

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from promption.models import Agent, AgentMode, Item, ItemKind  # noqa: E402
from promption.store.repository import RecordStore  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.delenv("PROMPTION_DB", raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture(autouse=True)
def reset_promption_logger() -> Iterator[None]:
    logger = logging.getLogger("promption")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate
    yield
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "com.abdssamie.promption" / "promption.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[RecordStore]:
    with RecordStore.open(db_path, create=True) as opened:
        yield opened


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def make_item() -> Callable[..., Item]:
    def _make(
        item_id: str = "item-1",
        name: str = "My Skill",
        content: str = "Skill body.\n",
        kind: ItemKind | str = ItemKind.SKILL,
        updated_at: str = "2026-01-01T00:00:00+00:00",
    ) -> Item:
        return Item(
            id=item_id,
            name=name,
            content=content,
            kind=kind,
            created_at=updated_at,
            updated_at=updated_at,
        )

    return _make


@pytest.fixture
def make_agent() -> Callable[..., Agent]:
    def _make(
        agent_id: str = "agent-1",
        name: str = "alpha",
        mode: AgentMode = AgentMode.SUBAGENT,
        updated_at: str = "2026-01-01T00:00:00+00:00",
        **kwargs: Any,
    ) -> Agent:
        return Agent(
            id=agent_id,
            name=name,
            mode=mode,
            created_at=updated_at,
            updated_at=updated_at,
            **kwargs,
        )

    return _make


@pytest.fixture
def seed_items(store: RecordStore, make_item) -> Callable[..., list[Item]]:
    def _seed(*overrides: dict[str, Any]) -> list[Item]:
        items = [make_item(**fields) for fields in overrides]
        for item in items:
            store.insert_item(item)
        return items

    return _seed


@pytest.fixture
def cli_runner(tmp_path: Path, db_path: Path) -> CliRunner:
    class PromptionCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            env.setdefault("PROMPTION_DB", str(db_path))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return PromptionCliRunner()
