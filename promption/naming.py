"""Slug normalization and agent-name validation."""

from __future__ import annotations

import re

from promption.constants import AGENT_NAME_MAX_LENGTH, UNNAMED_SLUG
from promption.errors import ValidationError

_AGENT_NAME_RE = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")


def normalize(display_name: str) -> str:
    """Turn a free-form display name into a filesystem-safe slug."""
    lowered = display_name.replace("/", "-").replace("\\", "-").lower()
    mapped = "".join(char if char.isalnum() else "-" for char in lowered)
    slug = "-".join(part for part in mapped.split("-") if part)
    return slug or UNNAMED_SLUG


def validate_agent_name(name: str) -> None:
    if not _AGENT_NAME_RE.match(name):
        raise ValidationError(
            "Agent name must be in kebab-case format "
            "(lowercase letters, numbers, and hyphens only)"
        )
    if len(name) > AGENT_NAME_MAX_LENGTH:
        raise ValidationError(
            f"Agent name exceeds maximum length of {AGENT_NAME_MAX_LENGTH} characters"
        )
