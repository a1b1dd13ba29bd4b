"""Resolve sync requests to records and dispatch them to a target or the merger."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from promption.agents.merger import MergeResult, OpenCodeAgentMerger
from promption.errors import NotFoundError, PartialMatchWarning, ValidationError
from promption.models import Agent, Item, ProjectionTarget, SyncOutcome
from promption.store.repository import RecordStore
from promption.targets import TargetAdapter, create_target_adapter

logger = logging.getLogger(__name__)

AGENTS_TARGET_LABEL = "opencode.json"


def _partial_match(
    record: str, requested: list[str], resolved_ids: list[str]
) -> Optional[PartialMatchWarning]:
    found = set(resolved_ids)
    missing = [item_id for item_id in requested if item_id not in found]
    if not missing:
        return None
    warning = PartialMatchWarning(record, len(resolved_ids), len(requested), missing)
    logger.warning("%s", warning)
    return warning


def _dedupe(ids: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(item_id for item_id in ids if item_id))


class ProjectionService:
    def __init__(self, store: RecordStore, root: Optional[Path] = None) -> None:
        self._store = store
        self._root = root or Path.cwd()

    @property
    def root(self) -> Path:
        return self._root

    def adapter_for(self, target: ProjectionTarget) -> TargetAdapter:
        return create_target_adapter(target, root=self.root)

    def resolve_items(self, ids: Sequence[str]) -> tuple[list[str], list[Item]]:
        requested = _dedupe(ids)
        if not requested:
            raise ValidationError("No item IDs provided. Use --ids=id1,id2,id3")
        items = self._store.get_items(requested)
        if not items:
            raise NotFoundError("No items found with the provided IDs")
        return requested, items

    def resolve_agents(self, ids: Sequence[str]) -> tuple[list[str], list[Agent]]:
        requested = _dedupe(ids)
        if not requested:
            raise ValidationError("No agent IDs provided. Use --ids=id1,id2,id3")
        agents = self._store.get_agents(requested)
        if not agents:
            raise NotFoundError("No agents found with the provided IDs")
        return requested, agents

    def sync_items(
        self,
        ids: Sequence[str],
        target: ProjectionTarget,
        dry_run: bool = False,
    ) -> SyncOutcome:
        requested, items = self.resolve_items(ids)
        outcome = SyncOutcome(
            target=target.value,
            requested=requested,
            resolved=[item.id for item in items],
            dry_run=dry_run,
        )
        warning = _partial_match("item", requested, outcome.resolved)
        if warning is not None:
            outcome.warnings.append(warning)

        adapter = self.adapter_for(target)
        if dry_run:
            outcome.written = [write.path for write in adapter.plan(items)]
        else:
            outcome.written = adapter.emit(items)
        return outcome

    def sync_agents(
        self, ids: Sequence[str], config_path: Optional[Path] = None
    ) -> tuple[SyncOutcome, MergeResult]:
        requested, agents = self.resolve_agents(ids)
        outcome = SyncOutcome(
            target=AGENTS_TARGET_LABEL,
            requested=requested,
            resolved=[agent.id for agent in agents],
        )
        warning = _partial_match("agent", requested, outcome.resolved)
        if warning is not None:
            outcome.warnings.append(warning)

        merger = OpenCodeAgentMerger(root=self.root, config_path=config_path)
        result = merger.merge(agents)
        outcome.written = [*result.prompt_files, result.config_path]
        return outcome, result

    def preview_agents(self, ids: Sequence[str]) -> tuple[SyncOutcome, dict]:
        requested, agents = self.resolve_agents(ids)
        outcome = SyncOutcome(
            target=AGENTS_TARGET_LABEL,
            requested=requested,
            resolved=[agent.id for agent in agents],
            dry_run=True,
        )
        warning = _partial_match("agent", requested, outcome.resolved)
        if warning is not None:
            outcome.warnings.append(warning)
        return outcome, OpenCodeAgentMerger(root=self.root).preview(agents)
