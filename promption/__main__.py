import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from promption.agents.service import AgentService, build_agent_update
from promption.config import PromptionPaths
from promption.errors import PromptionError
from promption.models import AgentMode, ItemKind, OutputFormat, ProjectionTarget
from promption.projection import ProjectionService
from promption.store.repository import RecordStore
from promption.tui import PromptionConsoleUI
from promption.utils import compact_home_path, split_csv


TARGET_VALUES = [target.value for target in ProjectionTarget]
KIND_VALUES = [kind.value for kind in ItemKind]
MODE_VALUES = [mode.value for mode in AgentMode]
FORMAT_VALUES = [fmt.value for fmt in OutputFormat]


def _ids_option(noun: str) -> Callable:
    return click.option(
        "--ids",
        "ids",
        multiple=True,
        help=f"Comma-separated list of {noun} IDs (repeatable).",
    )


def _format_option() -> Callable:
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(FORMAT_VALUES, case_sensitive=False),
        default=OutputFormat.TEXT.value,
        show_default=True,
    )


def _configure_logging(verbose: bool) -> None:
    logger = logging.getLogger("promption")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    logger.addHandler(handler)
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    logger.propagate = False


def _paths_from_obj(obj: Dict[str, Any]) -> PromptionPaths:
    return PromptionPaths.resolve(
        db_path=obj.get("db_path"), project_root=obj.get("project_dir")
    )


@contextmanager
def _user_errors() -> Iterator[None]:
    try:
        yield
    except PromptionError as exc:
        raise click.ClickException(str(exc)) from exc


@contextmanager
def _open_store(obj: Dict[str, Any]) -> Iterator[RecordStore]:
    paths = _paths_from_obj(obj)
    with _user_errors():
        try:
            store = RecordStore.open(paths.db_path)
        except PromptionError as exc:
            raise PromptionError(
                f"{exc}\nMake sure you have run the Promption app at least once, "
                "or run 'promption init-db'."
            ) from exc
        with store:
            yield store


def _ui() -> PromptionConsoleUI:
    return PromptionConsoleUI(Console())


def _side_ui(output_format: str) -> PromptionConsoleUI:
    """Console for notes that must not mix with JSON on stdout."""
    if output_format == OutputFormat.JSON.value:
        return PromptionConsoleUI(Console(stderr=True))
    return _ui()


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--db",
    "db_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Database file (default: $PROMPTION_DB or the user config dir).",
)
@click.option(
    "--project-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Project root that files are synced into (default: cwd).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log progress.")
@click.pass_context
def cli(
    ctx: click.Context,
    db_path: Optional[Path],
    project_dir: Optional[Path],
    verbose: bool,
) -> None:
    """AI prompt manager: project stored items and agents into tool layouts."""
    _configure_logging(verbose)
    ctx.obj = {"db_path": db_path, "project_dir": project_dir}


@cli.command("init-db", help="Create the database and its tables if missing.")
@click.pass_obj
def init_db(obj: Dict[str, Any]) -> None:
    ui = _ui()
    paths = _paths_from_obj(obj)
    with _user_errors():
        with RecordStore.open(paths.db_path, create=True):
            pass
    ui.console.print(f"Database ready: {compact_home_path(paths.db_path)}")


@cli.command(help="Sync selected items to a tool's project layout.")
@_ids_option("item")
@click.option(
    "--target",
    type=click.Choice(TARGET_VALUES, case_sensitive=False),
    default=ProjectionTarget.ANTIGRAVITY.value,
    show_default=True,
)
@click.option("--dry-run", is_flag=True, default=False, help="Show paths only.")
@click.pass_obj
def sync(obj: Dict[str, Any], ids: tuple[str, ...], target: str, dry_run: bool) -> None:
    ui = _ui()
    paths = _paths_from_obj(obj)
    with _open_store(obj) as store, _user_errors():
        outcome = ProjectionService(store, root=paths.project_root).sync_items(
            split_csv(ids), ProjectionTarget(target.lower()), dry_run=dry_run
        )
    ui.render_sync_outcome(outcome, paths.project_root)


@cli.command("list", help="List stored items, most recently updated first.")
@click.option(
    "-t",
    "--type",
    "kind",
    type=click.Choice(KIND_VALUES, case_sensitive=False),
    default=None,
)
@click.pass_obj
def list_items(obj: Dict[str, Any], kind: Optional[str]) -> None:
    ui = _ui()
    with _open_store(obj) as store, _user_errors():
        items = store.list_items(kind.lower() if kind else None)
    ui.render_items(items)


@cli.command("sync-agents", help="Merge agent configurations into opencode.json.")
@_ids_option("agent")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config document to merge into (default: <project>/opencode.json).",
)
@click.pass_obj
def sync_agents(
    obj: Dict[str, Any], ids: tuple[str, ...], config_path: Optional[Path]
) -> None:
    ui = _ui()
    paths = _paths_from_obj(obj)
    with _open_store(obj) as store, _user_errors():
        outcome, result = ProjectionService(
            store, root=paths.project_root
        ).sync_agents(split_csv(ids), config_path=config_path)
    ui.render_sync_outcome(outcome, paths.project_root)
    ui.render_merge_result(result)


@cli.command("export-agents", help="Print the opencode.json agent block without writing.")
@_ids_option("agent")
@click.pass_obj
def export_agents(obj: Dict[str, Any], ids: tuple[str, ...]) -> None:
    paths = _paths_from_obj(obj)
    with _open_store(obj) as store, _user_errors():
        outcome, snippet = ProjectionService(
            store, root=paths.project_root
        ).preview_agents(split_csv(ids))
    _side_ui(OutputFormat.JSON.value).render_warnings(outcome)
    _ui().render_json(snippet)


@cli.command("list-agents", help="List agents, most recently updated first.")
@click.pass_obj
def list_agents(obj: Dict[str, Any]) -> None:
    ui = _ui()
    with _open_store(obj) as store, _user_errors():
        agents = AgentService(store).list_agents()
    ui.render_agents(agents)


@cli.command("create-agent", help="Create a new agent.")
@click.option("--name", required=True, help="Agent name (kebab-case).")
@click.option(
    "--mode",
    type=click.Choice(MODE_VALUES, case_sensitive=False),
    default=AgentMode.SUBAGENT.value,
    show_default=True,
)
@click.option("--model", default=None, help="AI model to use.")
@click.option("--prompt", default=None, help="Prompt text, or a path with --prompt-file.")
@click.option("--prompt-file", is_flag=True, default=False, help="Read --prompt as a file path.")
@click.option("--tools", multiple=True, help="Tools to enable, e.g. write,edit,bash.")
@click.option("--permissions", multiple=True, help="name:value pairs, e.g. edit:ask,bash:allow.")
@_format_option()
@click.pass_obj
def create_agent(
    obj: Dict[str, Any],
    name: str,
    mode: str,
    model: Optional[str],
    prompt: Optional[str],
    prompt_file: bool,
    tools: tuple[str, ...],
    permissions: tuple[str, ...],
    output_format: str,
) -> None:
    output_format = output_format.lower()
    with _open_store(obj) as store, _user_errors():
        result = AgentService(store).create(
            name=name,
            mode=AgentMode(mode.lower()),
            model=model,
            prompt=prompt,
            prompt_file=prompt_file,
            tools=split_csv(tools),
            permissions=split_csv(permissions),
        )
    _side_ui(output_format).render_rejected_permissions(result.rejected_permissions)
    ui = _ui()
    if output_format == OutputFormat.JSON.value:
        ui.render_json(result.agent.as_dict())
        return
    ui.render_agent_created(result.agent)


@cli.command("get-agent", help="Show an agent by ID or name.")
@click.option("--id", "id_or_name", required=True, help="Agent ID or name.")
@_format_option()
@click.pass_obj
def get_agent(obj: Dict[str, Any], id_or_name: str, output_format: str) -> None:
    ui = _ui()
    with _open_store(obj) as store, _user_errors():
        agent = AgentService(store).get(id_or_name)
    if output_format.lower() == OutputFormat.JSON.value:
        ui.render_json(agent.as_dict())
        return
    ui.render_agent(agent)


@cli.command("update-agent", help="Update fields of an existing agent.")
@click.option("--id", "id_or_name", required=True, help="Agent ID or name.")
@click.option("--name", default=None, help="New name (kebab-case).")
@click.option("--mode", type=click.Choice(MODE_VALUES, case_sensitive=False), default=None)
@click.option("--model", default=None)
@click.option("--clear-model", is_flag=True, default=False)
@click.option("--prompt", default=None)
@click.option("--prompt-file", is_flag=True, default=False)
@click.option("--clear-prompt", is_flag=True, default=False)
@click.option("--tools", multiple=True, help="Replaces the existing tools.")
@click.option("--clear-tools", is_flag=True, default=False)
@click.option("--permissions", multiple=True, help="Replaces the existing permissions.")
@click.option("--clear-permissions", is_flag=True, default=False)
@_format_option()
@click.pass_obj
def update_agent(
    obj: Dict[str, Any],
    id_or_name: str,
    name: Optional[str],
    mode: Optional[str],
    model: Optional[str],
    clear_model: bool,
    prompt: Optional[str],
    prompt_file: bool,
    clear_prompt: bool,
    tools: tuple[str, ...],
    clear_tools: bool,
    permissions: tuple[str, ...],
    clear_permissions: bool,
    output_format: str,
) -> None:
    output_format = output_format.lower()
    with _open_store(obj) as store, _user_errors():
        update, rejected = build_agent_update(
            name=name,
            mode=mode.lower() if mode else None,
            model=model,
            clear_model=clear_model,
            prompt=prompt,
            prompt_file=prompt_file,
            clear_prompt=clear_prompt,
            tools=split_csv(tools),
            clear_tools=clear_tools,
            permissions=split_csv(permissions),
            clear_permissions=clear_permissions,
        )
        agent = AgentService(store).update(id_or_name, update)
    _side_ui(output_format).render_rejected_permissions(rejected)
    ui = _ui()
    if output_format == OutputFormat.JSON.value:
        ui.render_json(agent.as_dict())
        return
    ui.render_agent(agent, title="agent updated")


@cli.command("delete-agent", help="Delete an agent by ID or name.")
@click.option("--id", "id_or_name", required=True, help="Agent ID or name.")
@click.pass_obj
def delete_agent(obj: Dict[str, Any], id_or_name: str) -> None:
    ui = _ui()
    with _open_store(obj) as store, _user_errors():
        agent = AgentService(store).delete(id_or_name)
    ui.render_agent_deleted(agent)


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
