"""Parse comma-list tool and permission options into config mappings."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from promption.models import PermissionValue

logger = logging.getLogger(__name__)

_PERMISSION_VALUES = tuple(value.value for value in PermissionValue)


@dataclass(frozen=True)
class PermissionParseResult:
    permissions: Optional[dict[str, str]]
    rejected: list[str] = field(default_factory=list)


def parse_tools(tools: Iterable[str]) -> Optional[dict[str, bool]]:
    parsed = {tool: True for tool in tools if tool}
    return parsed or None


def parse_permissions(entries: Iterable[str]) -> PermissionParseResult:
    parsed: dict[str, str] = {}
    rejected: list[str] = []
    for entry in entries:
        parts = entry.split(":")
        if len(parts) != 2 or not parts[0]:
            logger.warning(
                "Invalid permission format '%s', skipping. Use 'name:value' format.",
                entry,
            )
            rejected.append(entry)
            continue
        key, value = parts
        if value not in _PERMISSION_VALUES:
            logger.warning(
                "Invalid permission value '%s' for '%s', skipping. "
                "Use 'ask', 'allow', or 'deny'.",
                value,
                key,
            )
            rejected.append(entry)
            continue
        parsed[key] = value
    return PermissionParseResult(permissions=parsed or None, rejected=rejected)
