import json
from pathlib import Path

from rich.table import Column, Table
from rich.text import Text

from promption.models import Agent, Item, SyncOutcome
from promption.tui.enums import AGENT_MODE_STYLE, ITEM_KIND_STYLE, UIStyle


def _display_path(path: Path, root: Path) -> str:
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)


class ItemsTable:
    @staticmethod
    def items_table(items: list[Item]) -> Table:
        table = Table(
            Column(header="ID", overflow="fold"),
            Column(header="Type", width=10),
            Column(header="Name", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            kind = item.kind_value
            style = ITEM_KIND_STYLE.get(kind, UIStyle.RED.value)
            table.add_row(Text(item.id), Text(kind, style=style), Text(item.name))
        return table


class AgentsTable:
    @staticmethod
    def agents_table(agents: list[Agent]) -> Table:
        table = Table(
            Column(header="ID", overflow="fold"),
            Column(header="Mode", width=10),
            Column(header="Name", overflow="fold"),
            Column(header="Model", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for agent in agents:
            style = AGENT_MODE_STYLE.get(agent.mode, UIStyle.WHITE.value)
            table.add_row(
                Text(agent.id),
                Text(agent.mode.value, style=style),
                Text(agent.name),
                Text(agent.model or ""),
            )
        return table

    @staticmethod
    def detail_table(agent: Agent, verbose: bool = True) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column(overflow="fold")
        table.add_row("ID", Text(agent.id))
        table.add_row("Name", Text(agent.name))
        table.add_row("Mode", agent.mode.value)
        if agent.model is not None:
            table.add_row("Model", Text(agent.model))
        if agent.prompt_content is not None:
            table.add_row("Prompt", f"{len(agent.prompt_content)} characters")
        if agent.tools is not None:
            table.add_row(
                "Tools",
                Text(json.dumps(agent.tools, indent=2))
                if verbose
                else f"{len(agent.tools)} configured",
            )
        if agent.permissions is not None:
            table.add_row(
                "Permissions",
                Text(json.dumps(agent.permissions, indent=2))
                if verbose
                else f"{len(agent.permissions)} configured",
            )
        return table


class SyncTable:
    @staticmethod
    def summary_block(outcome: SyncOutcome, mode: str) -> Table:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold")
        table.add_column()
        table.add_row("Mode", mode)
        table.add_row("Target", outcome.target)
        for key, value in outcome.summary().items():
            table.add_row(key.capitalize(), str(value))
        return table

    @staticmethod
    def written_table(outcome: SyncOutcome, root: Path) -> Table:
        verb = "plan" if outcome.dry_run else "write"
        table = Table(
            Column(header="Action", width=8),
            Column(header="Path", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for path in outcome.written:
            table.add_row(Text(verb, style=UIStyle.GREEN.value), Text(_display_path(path, root)))
        return table
