"""Typed model of the shared opencode.json document."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Optional

from jsonschema import Draft202012Validator

from promption.constants import OPENCODE_SCHEMA_URL

SCHEMA_KEY = "$schema"
AGENT_KEY = "agent"

AGENT_ENTRY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["mode"],
    "properties": {
        "mode": {"type": "string", "enum": ["primary", "subagent"]},
        "model": {"type": "string"},
        "prompt": {"type": "string"},
        "tools": {"type": "object"},
        "permissions": {"type": "object"},
    },
}

DOCUMENT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": [AGENT_KEY],
    "properties": {
        SCHEMA_KEY: {"type": "string"},
        AGENT_KEY: {"type": "object"},
    },
}


def prompt_pointer(relative_path: str) -> str:
    return f"{{file:{relative_path}}}"


@dataclass
class AgentConfigEntry:
    mode: str
    model: Optional[str] = None
    prompt: Optional[str] = None
    tools: Optional[dict[str, Any]] = None
    permissions: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"mode": self.mode}
        if self.model is not None:
            payload["model"] = self.model
        if self.prompt is not None:
            payload["prompt"] = self.prompt
        if self.tools is not None:
            payload["tools"] = deepcopy(self.tools)
        if self.permissions is not None:
            payload["permissions"] = deepcopy(self.permissions)
        return payload


@dataclass
class OpenCodeConfigDocument:
    """opencode.json with foreign keys captured in ``extra``.

    ``agents`` holds raw entries so agents outside a merge request round-trip
    unchanged; ``order`` remembers the original top-level key order.
    """

    schema: Optional[str] = OPENCODE_SCHEMA_URL
    agents: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)
    order: list[str] = field(default_factory=lambda: [SCHEMA_KEY, AGENT_KEY])

    @classmethod
    def skeleton(cls) -> "OpenCodeConfigDocument":
        return cls()

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "OpenCodeConfigDocument":
        agents = payload.get(AGENT_KEY)
        schema = payload.get(SCHEMA_KEY)
        order = list(payload.keys())
        if AGENT_KEY not in order:
            order.append(AGENT_KEY)
        return cls(
            schema=schema if isinstance(schema, str) else None,
            agents=deepcopy(agents) if isinstance(agents, dict) else {},
            extra={
                key: deepcopy(value)
                for key, value in payload.items()
                if key not in (SCHEMA_KEY, AGENT_KEY)
            },
            order=order,
        )

    def set_agent(self, name: str, entry: AgentConfigEntry) -> None:
        self.agents[name] = entry.to_dict()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for key in self.order:
            if key == SCHEMA_KEY:
                if self.schema is not None:
                    payload[SCHEMA_KEY] = self.schema
            elif key == AGENT_KEY:
                payload[AGENT_KEY] = deepcopy(self.agents)
            elif key in self.extra:
                payload[key] = deepcopy(self.extra[key])
        for key, value in self.extra.items():
            if key not in payload:
                payload[key] = deepcopy(value)
        return payload


def _schema_error_message(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


def document_errors(
    payload: dict[str, Any], touched: list[str]
) -> Optional[str]:
    """Return the first structural error of ``payload``, checking only touched agents."""
    error = next(iter(Draft202012Validator(DOCUMENT_SCHEMA).iter_errors(payload)), None)
    if error is not None:
        return _schema_error_message(error)
    entry_validator = Draft202012Validator(AGENT_ENTRY_SCHEMA)
    for name in touched:
        error = next(iter(entry_validator.iter_errors(payload[AGENT_KEY][name])), None)
        if error is not None:
            return f"agent '{name}': {_schema_error_message(error)}"
    return None
