"""YAML frontmatter rendering shared by target adapters."""

from __future__ import annotations

from typing import Any, Optional

import yaml


def render_frontmatter(
    fields: dict[str, Any],
    content: str,
    literal: Optional[dict[str, str]] = None,
) -> str:
    """Wrap ``content`` in a ``---`` header, one line per field.

    ``literal`` values are written as-is after the YAML-dumped fields; Cursor
    reads ``globs: *`` unquoted.
    """
    if not fields and not literal:
        return content
    lines: list[str] = ["---"]
    if fields:
        lines.append(
            yaml.dump(
                fields,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                width=float("inf"),
            ).rstrip()
        )
    for key, value in (literal or {}).items():
        lines.append(f"{key}: {value}")
    lines.extend(["---", "", content])
    return "\n".join(lines)
