"""Agent create/read/update/delete with validation and partial updates."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from promption.agents.parser import parse_permissions, parse_tools
from promption.errors import ConflictError, NotFoundError, ProjectionFileError
from promption.models import UNSET, Agent, AgentMode, AgentUpdate
from promption.naming import validate_agent_name
from promption.store.repository import RecordStore
from promption.utils import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgentWriteResult:
    agent: Agent
    rejected_permissions: list[str] = field(default_factory=list)


def read_prompt_file(path: str | Path) -> str:
    prompt_path = Path(path).expanduser()
    try:
        return prompt_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ProjectionFileError(prompt_path, f"Error reading prompt file ({exc})") from exc


def resolve_prompt(prompt: Optional[str], prompt_file: bool) -> Optional[str]:
    if prompt is None:
        return None
    return read_prompt_file(prompt) if prompt_file else prompt


class AgentService:
    def __init__(
        self,
        store: RecordStore,
        clock: Optional[Callable[[], str]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._store = store
        self._clock = clock or utc_now_iso
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def create(
        self,
        name: str,
        mode: AgentMode = AgentMode.SUBAGENT,
        model: Optional[str] = None,
        prompt: Optional[str] = None,
        prompt_file: bool = False,
        tools: Iterable[str] = (),
        permissions: Iterable[str] = (),
    ) -> AgentWriteResult:
        validate_agent_name(name)
        if self._store.name_exists(name):
            raise ConflictError(f"Agent with name '{name}' already exists")

        prompt_content = resolve_prompt(prompt, prompt_file)
        parsed_permissions = parse_permissions(permissions)

        now = self._clock()
        agent = Agent(
            id=self._id_factory(),
            name=name,
            mode=AgentMode(mode),
            model=model,
            prompt_content=prompt_content,
            tools=parse_tools(tools),
            permissions=parsed_permissions.permissions,
            created_at=now,
            updated_at=now,
        )
        self._store.insert_agent(agent)
        logger.info("Created agent %s (%s)", agent.name, agent.id)
        return AgentWriteResult(agent=agent, rejected_permissions=parsed_permissions.rejected)

    def find(self, id_or_name: str) -> Optional[Agent]:
        return self._store.find_agent(id_or_name)

    def get(self, id_or_name: str) -> Agent:
        agent = self._store.find_agent(id_or_name)
        if agent is None:
            raise NotFoundError(f"Agent '{id_or_name}' not found")
        return agent

    def list_agents(self) -> list[Agent]:
        return self._store.list_agents()

    def update(self, id_or_name: str, update: AgentUpdate) -> Agent:
        agent = self.get(id_or_name)

        columns: dict[str, object] = {}
        if update.name is not UNSET:
            validate_agent_name(update.name)
            if self._store.name_exists(update.name, exclude_id=agent.id):
                raise ConflictError(f"Agent with name '{update.name}' already exists")
            columns["name"] = update.name
        if update.mode is not UNSET:
            columns["mode"] = AgentMode(update.mode)
        if update.model is not UNSET:
            columns["model"] = update.model
        if update.prompt_content is not UNSET:
            columns["prompt_content"] = update.prompt_content
        if update.tools is not UNSET:
            columns["tools_config"] = update.tools or None
        if update.permissions is not UNSET:
            columns["permissions_config"] = update.permissions or None
        columns["updated_at"] = self._clock()

        self._store.update_agent(agent.id, columns)
        logger.info("Updated agent %s (%s)", agent.name, agent.id)
        return self.get(agent.id)

    def delete(self, id_or_name: str) -> Agent:
        agent = self.get(id_or_name)
        self._store.delete_agent(agent.id)
        logger.info("Deleted agent %s (%s)", agent.name, agent.id)
        return agent


def build_agent_update(
    *,
    name: Optional[str] = None,
    mode: Optional[str] = None,
    model: Optional[str] = None,
    clear_model: bool = False,
    prompt: Optional[str] = None,
    prompt_file: bool = False,
    clear_prompt: bool = False,
    tools: Iterable[str] = (),
    clear_tools: bool = False,
    permissions: Iterable[str] = (),
    clear_permissions: bool = False,
) -> tuple[AgentUpdate, list[str]]:
    """Map option-style arguments to an ``AgentUpdate``; clear flags win over values."""
    tool_list = list(tools)
    permission_list = list(permissions)
    rejected: list[str] = []

    new_tools = UNSET
    if clear_tools:
        new_tools = None
    elif tool_list:
        new_tools = parse_tools(tool_list)

    new_permissions = UNSET
    if clear_permissions:
        new_permissions = None
    elif permission_list:
        parsed = parse_permissions(permission_list)
        new_permissions = parsed.permissions
        rejected = parsed.rejected

    new_prompt = UNSET
    if clear_prompt:
        new_prompt = None
    elif prompt is not None:
        new_prompt = resolve_prompt(prompt, prompt_file)

    update = AgentUpdate(
        name=UNSET if name is None else name,
        mode=UNSET if mode is None else AgentMode(mode),
        model=None if clear_model else (UNSET if model is None else model),
        prompt_content=new_prompt,
        tools=new_tools,
        permissions=new_permissions,
    )
    return update, rejected
