from typing import Iterable, Optional

from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text

from promption.tui.enums import UIStyle


class UISection:
    @staticmethod
    def wrap(
        title: str,
        body: RenderableType,
        style: str = UIStyle.BLUE.value,
        subtitle: Optional[str] = None,
    ) -> Panel:
        return Panel(body, title=title, subtitle=subtitle, border_style=style, padding=(0, 1))

    @staticmethod
    def note(title: str, body: str, style: str) -> Panel:
        return Panel(body, title=title, border_style=style, padding=(0, 1))

    @staticmethod
    def bullets(
        title: str,
        lines: Iterable[object],
        style: str = UIStyle.YELLOW.value,
        footer: Optional[str] = None,
    ) -> Panel:
        """Plain-text bullet list; entries are user data and never parsed as markup."""
        body = Text("\n".join(f"- {line}" for line in lines))
        if footer:
            body.append(f"\n{footer}", style=UIStyle.DIM.value)
        return Panel(body, title=title, border_style=style, padding=(0, 1))
