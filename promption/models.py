from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Union

from promption.errors import PartialMatchWarning


class ItemKind(str, Enum):
    SKILL = "skill"
    RULE = "rule"
    WORKFLOW = "workflow"


class AgentMode(str, Enum):
    PRIMARY = "primary"
    SUBAGENT = "subagent"


class PermissionValue(str, Enum):
    ASK = "ask"
    ALLOW = "allow"
    DENY = "deny"


class ProjectionTarget(str, Enum):
    ANTIGRAVITY = "antigravity"
    CURSOR = "cursor"
    WINDSURF = "windsurf"
    OPENCODE = "opencode"
    CLINE = "cline"
    COPILOT = "copilot"


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class WriteMode(str, Enum):
    WRITE = "write"
    APPEND = "append"


@dataclass(frozen=True)
class Item:
    id: str
    name: str
    content: str
    # Raw string when the stored value is outside ItemKind.
    kind: Union[ItemKind, str]
    created_at: str = ""
    updated_at: str = ""

    @property
    def kind_value(self) -> str:
        return self.kind.value if isinstance(self.kind, ItemKind) else str(self.kind)


@dataclass(frozen=True)
class Agent:
    id: str
    name: str
    mode: AgentMode
    model: Optional[str] = None
    prompt_content: Optional[str] = None
    tools: Optional[dict[str, Any]] = None
    permissions: Optional[dict[str, Any]] = None
    created_at: str = ""
    updated_at: str = ""

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "mode": self.mode.value,
        }
        if self.model is not None:
            payload["model"] = self.model
        if self.prompt_content is not None:
            payload["prompt_content"] = self.prompt_content
        if self.tools is not None:
            payload["tools_config"] = dict(self.tools)
        if self.permissions is not None:
            payload["permissions_config"] = dict(self.permissions)
        payload["created_at"] = self.created_at
        payload["updated_at"] = self.updated_at
        return payload


class _Unset:
    _instance: Optional["_Unset"] = None

    def __new__(cls) -> "_Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True)
class AgentUpdate:
    """Partial agent update.

    Every field defaults to ``UNSET`` (leave untouched). Nullable fields
    accept ``None`` to clear the stored value.
    """

    name: Any = UNSET
    mode: Any = UNSET
    model: Any = UNSET
    prompt_content: Any = UNSET
    tools: Any = UNSET
    permissions: Any = UNSET

    def supplied(self) -> dict[str, Any]:
        values = {item.name: getattr(self, item.name) for item in fields(self)}
        return {key: value for key, value in values.items() if value is not UNSET}

    def is_empty(self) -> bool:
        return not self.supplied()


@dataclass(frozen=True)
class PlannedWrite:
    path: Path
    content: str
    mode: WriteMode = WriteMode.WRITE
    item_id: Optional[str] = None


@dataclass
class SyncOutcome:
    target: str
    requested: list[str]
    resolved: list[str] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    warnings: list[PartialMatchWarning] = field(default_factory=list)
    dry_run: bool = False

    def summary(self) -> dict[str, int]:
        return {
            "requested": len(self.requested),
            "resolved": len(self.resolved),
            "written": len(self.written),
            "warnings": len(self.warnings),
        }
