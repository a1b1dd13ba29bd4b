import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from promption.agents.merger import MergeResult
from promption.models import Agent, Item, SyncOutcome
from promption.tui.enums import UIStyle
from promption.tui.sections import UISection
from promption.tui.tables import AgentsTable, ItemsTable, SyncTable
from promption.utils import compact_home_path


class PromptionConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_json(self, payload: Any) -> None:
        self.console.print(
            json.dumps(payload, indent=2, ensure_ascii=False),
            soft_wrap=True,
            markup=False,
            highlight=False,
            emoji=False,
        )

    def render_items(self, items: list[Item]) -> None:
        if not items:
            self.console.print(
                UISection.note("items", "No items found.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap("items", ItemsTable.items_table(items), style=UIStyle.BLUE.value)
        )

    def render_agents(self, agents: list[Agent]) -> None:
        if not agents:
            self.console.print(
                UISection.note("agents", "No agents found.", style=UIStyle.YELLOW.value)
            )
            return
        self.console.print(
            UISection.wrap(
                "agents", AgentsTable.agents_table(agents), style=UIStyle.BLUE.value
            )
        )

    def render_agent(self, agent: Agent, title: str = "agent", verbose: bool = True) -> None:
        self.console.print(
            UISection.wrap(
                title,
                AgentsTable.detail_table(agent, verbose=verbose),
                style=UIStyle.GREEN.value,
            )
        )

    def render_agent_created(self, agent: Agent) -> None:
        self.render_agent(agent, title="agent created", verbose=False)
        self.console.print(
            UISection.note(
                "next",
                "To sync to opencode.json, run:\n"
                f"- promption sync-agents --ids={escape(agent.id)}",
                style=UIStyle.DIM.value,
            )
        )

    def render_agent_deleted(self, agent: Agent) -> None:
        self.console.print(
            UISection.note(
                "agent",
                f"Agent deleted: [bold]{escape(agent.name)}[/bold]\n{escape(agent.id)}",
                style=UIStyle.YELLOW.value,
            )
        )

    def render_rejected_permissions(self, rejected: list[str]) -> None:
        if not rejected:
            return
        self.console.print(
            UISection.bullets(
                "skipped permissions",
                rejected,
                footer="Use 'name:value' with ask, allow or deny.",
            )
        )

    def render_warnings(self, outcome: SyncOutcome) -> None:
        if not outcome.warnings:
            return
        self.console.print(UISection.bullets("warnings", outcome.warnings))

    def render_sync_outcome(self, outcome: SyncOutcome, root: Path) -> None:
        mode = "dry-run" if outcome.dry_run else "sync"
        self.console.print(
            UISection.wrap(
                "sync overview",
                SyncTable.summary_block(outcome, mode=mode),
                style=UIStyle.BLUE.value,
            )
        )
        self.render_warnings(outcome)
        if outcome.written:
            self.console.print(
                UISection.wrap(
                    "files",
                    SyncTable.written_table(outcome, root),
                    style=UIStyle.CYAN.value,
                )
            )
        verb = "planned" if outcome.dry_run else "synced"
        self.console.print(
            UISection.note(
                "done",
                f"{len(outcome.resolved)} record(s) {verb} to {outcome.target}.",
                style=UIStyle.GREEN.value,
            )
        )

    def render_merge_result(self, result: MergeResult) -> None:
        if result.backup_path is not None:
            self.console.print(
                UISection.note(
                    "backup",
                    "Existing config could not be parsed; saved a copy to\n"
                    f"{escape(compact_home_path(result.backup_path))}",
                    style=UIStyle.YELLOW.value,
                )
            )
        agents = ", ".join(result.agents)
        self.console.print(
            UISection.note(
                "opencode.json",
                f"Updated {escape(compact_home_path(result.config_path))}\nAgents: {escape(agents)}",
                style=UIStyle.GREEN.value,
            )
        )
