"""Merge agent definitions into a shared opencode.json without clobbering it."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from promption.agents.config import (
    AGENT_KEY,
    AgentConfigEntry,
    OpenCodeConfigDocument,
    document_errors,
    prompt_pointer,
)
from promption.constants import OPENCODE_CONFIG_FILENAME, OPENCODE_PROMPTS_DIR
from promption.errors import InvalidConfigDocumentError, ProjectionFileError
from promption.executor import WriteExecutor
from promption.models import Agent, PlannedWrite
from promption.utils import backup_file, read_json_safe, write_json_atomic

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    config_path: Path
    agents: list[str] = field(default_factory=list)
    prompt_files: list[Path] = field(default_factory=list)
    backup_path: Optional[Path] = None


class OpenCodeAgentMerger:
    def __init__(
        self,
        root: Optional[Path] = None,
        config_path: Optional[Path] = None,
        executor: Optional[WriteExecutor] = None,
    ) -> None:
        self._root = root or Path.cwd()
        self._config_path = config_path or (self._root / OPENCODE_CONFIG_FILENAME)
        self._executor = executor or WriteExecutor()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self._config_path

    def prompt_relative_path(self, agent: Agent) -> str:
        return f"{OPENCODE_PROMPTS_DIR}/{agent.name}.txt"

    def build_entry(self, agent: Agent) -> AgentConfigEntry:
        prompt = None
        if agent.prompt_content is not None:
            prompt = prompt_pointer(self.prompt_relative_path(agent))
        return AgentConfigEntry(
            mode=agent.mode.value,
            model=agent.model,
            prompt=prompt,
            tools=agent.tools,
            permissions=agent.permissions,
        )

    def preview(self, agents: list[Agent]) -> dict[str, Any]:
        """The ``agent`` snippet for ``agents``; touches nothing on disk."""
        return {
            AGENT_KEY: {agent.name: self.build_entry(agent).to_dict() for agent in agents}
        }

    def _backup(self) -> Path:
        try:
            return backup_file(self.config_path)
        except OSError as exc:
            raise ProjectionFileError(
                self.config_path, f"Could not back up config ({exc.strerror or exc})"
            ) from exc

    def load_document(self) -> tuple[OpenCodeConfigDocument, Optional[Path]]:
        try:
            payload, error = read_json_safe(self.config_path)
        except OSError as exc:
            raise ProjectionFileError(
                self.config_path, f"Could not read config ({exc.strerror or exc})"
            ) from exc

        if error is not None:
            backup = self._backup()
            logger.warning(
                "Could not parse %s (%s); starting from a fresh document, "
                "previous content saved to %s",
                self.config_path,
                error,
                backup,
            )
            return OpenCodeConfigDocument.skeleton(), backup
        if payload is None:
            return OpenCodeConfigDocument.skeleton(), None
        if not isinstance(payload, dict):
            backup = self._backup()
            logger.warning(
                "%s is not a JSON object; starting from a fresh document, "
                "previous content saved to %s",
                self.config_path,
                backup,
            )
            return OpenCodeConfigDocument.skeleton(), backup
        return OpenCodeConfigDocument.from_dict(payload), None

    def merge(self, agents: list[Agent]) -> MergeResult:
        document, backup = self.load_document()

        prompt_writes: list[PlannedWrite] = []
        touched: list[str] = []
        for agent in agents:
            document.set_agent(agent.name, self.build_entry(agent))
            if agent.name not in touched:
                touched.append(agent.name)
            if agent.prompt_content is not None:
                prompt_writes.append(
                    PlannedWrite(
                        path=self.root / self.prompt_relative_path(agent),
                        content=agent.prompt_content,
                        item_id=agent.id,
                    )
                )

        payload = document.to_dict()
        detail = document_errors(payload, touched)
        if detail is not None:
            raise InvalidConfigDocumentError(self.config_path, detail)

        prompt_files = self._executor.execute(prompt_writes)
        for path in prompt_files:
            logger.info("Saved prompt to %s", path)

        try:
            write_json_atomic(self.config_path, payload)
        except OSError as exc:
            raise ProjectionFileError(
                self.config_path, f"Could not write config ({exc.strerror or exc})"
            ) from exc
        logger.info("Updated %s with %d agent(s)", self.config_path, len(touched))

        return MergeResult(
            config_path=self.config_path,
            agents=touched,
            prompt_files=prompt_files,
            backup_path=backup,
        )
