"""Target adapter contract and the layout-table base shared by adapters."""

from __future__ import annotations

import logging
from abc import ABCMeta, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar, Optional, cast

from promption.errors import ProjectionFileError, UnknownItemKindError
from promption.executor import WriteExecutor
from promption.models import Item, ItemKind, PlannedWrite, ProjectionTarget
from promption.naming import normalize
from promption.targets.frontmatter import render_frontmatter

logger = logging.getLogger(__name__)


class Wrapping(str, Enum):
    NONE = "none"
    RULE_HEADER = "rule_header"
    SKILL_HEADER = "skill_header"


@dataclass(frozen=True)
class KindRoute:
    """Destination template (relative to project root) and wrapping for one kind."""

    path: str
    wrapping: Wrapping = Wrapping.NONE

    def resolve(self, root: Path, slug: str) -> Path:
        return root / self.path.format(slug=slug)


def wrap_content(item: Item, slug: str, wrapping: Wrapping) -> str:
    if wrapping == Wrapping.RULE_HEADER:
        return render_frontmatter(
            {"description": item.name}, item.content, literal={"globs": "*"}
        )
    if wrapping == Wrapping.SKILL_HEADER:
        return render_frontmatter({"name": slug, "description": item.name}, item.content)
    return item.content


def require_kind(item: Item) -> ItemKind:
    if not isinstance(item.kind, ItemKind):
        raise UnknownItemKindError(item.id, item.kind_value)
    return item.kind


class TargetAdapterRegistryMeta(ABCMeta):
    _registry: dict[ProjectionTarget, type["TargetAdapter"]] = {}

    def __new__(
        mcls,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        **kwargs: Any,
    ):
        cls = super().__new__(mcls, name, bases, namespace, **kwargs)
        target = getattr(cls, "TARGET", None)
        is_abstract = bool(getattr(cls, "__abstractmethods__", False))
        if target is not None and not is_abstract:
            mcls._registry[target] = cast(type["TargetAdapter"], cls)  # type: ignore[assignment]
        return cls


class TargetAdapter(metaclass=TargetAdapterRegistryMeta):
    TARGET: ClassVar[Optional[ProjectionTarget]] = None
    DIRECTORIES: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self, root: Optional[Path] = None, executor: Optional[WriteExecutor] = None
    ) -> None:
        self._root = root or Path.cwd()
        self._executor = executor or WriteExecutor()

    @property
    def root(self) -> Path:
        return self._root

    @property
    def target(self) -> ProjectionTarget:
        if self.TARGET is None:
            raise NotImplementedError
        return self.TARGET

    @abstractmethod
    def plan(self, items: list[Item]) -> list[PlannedWrite]:
        """Return the writes this adapter would perform for ``items``."""

    def ensure_directories(self) -> None:
        for relative in self.DIRECTORIES:
            path = self.root / relative
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise ProjectionFileError(path, f"Could not create directory ({exc})") from exc

    def emit(self, items: list[Item]) -> list[Path]:
        planned = self.plan(items)
        self.ensure_directories()
        written = self._executor.execute(planned)
        logger.info("%s: wrote %d file(s)", self.target.value, len(written))
        return written


class LayoutTargetAdapter(TargetAdapter):
    """Adapter driven by a per-kind routing table."""

    ROUTES: ClassVar[dict[ItemKind, KindRoute]] = {}

    def plan(self, items: list[Item]) -> list[PlannedWrite]:
        planned: list[PlannedWrite] = []
        for item in items:
            kind = require_kind(item)
            route = self.ROUTES[kind]
            slug = normalize(item.name)
            planned.append(
                PlannedWrite(
                    path=route.resolve(self.root, slug),
                    content=wrap_content(item, slug, route.wrapping),
                    item_id=item.id,
                )
            )
        return planned


def list_registered_targets() -> list[ProjectionTarget]:
    _load_registered_modules()
    return sorted(TargetAdapterRegistryMeta._registry.keys(), key=lambda item: item.value)


def create_target_adapter(
    target: ProjectionTarget, root: Optional[Path] = None
) -> TargetAdapter:
    _load_registered_modules()
    adapter_class = TargetAdapterRegistryMeta._registry.get(target)
    if adapter_class is None:
        raise KeyError(f"No target adapter registered for: {target.value}")
    return adapter_class(root=root)


def _load_registered_modules() -> None:
    from promption.targets.loader import load_target_modules

    load_target_modules()
