"""Single-file target that only ever grows."""

from pathlib import Path

from promption.constants import COPILOT_INSTRUCTIONS_PATH
from promption.models import Item, PlannedWrite, ProjectionTarget, WriteMode
from promption.targets.base import TargetAdapter, require_kind


class CopilotTargetAdapter(TargetAdapter):
    TARGET = ProjectionTarget.COPILOT
    DIRECTORIES = (".github",)

    @property
    def instructions_path(self) -> Path:
        return self.root / COPILOT_INSTRUCTIONS_PATH

    def plan(self, items: list[Item]) -> list[PlannedWrite]:
        for item in items:
            require_kind(item)
        return [
            PlannedWrite(
                path=self.instructions_path,
                content=f"\n\n# {item.name}\n{item.content}\n",
                mode=WriteMode.APPEND,
                item_id=item.id,
            )
            for item in items
        ]
