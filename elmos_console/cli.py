from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .errors import InvalidMenuNode, TerminalHandoffError
from .logging import setup_console_logging
from .settings import Settings, load_settings
from .tui.actions import ActionTable
from .tui.handoff import InteractiveHandoff
from .tui.menu import MenuNode, default_menu
from .tui.runner import AsyncCommandRunner
from .tui.session import ConsoleSession

app = typer.Typer(
    add_completion=False,
    help="elmos-console: interactive menu for elmos build actions",
    rich_markup_mode="rich",
)
console = Console()
err_console = Console(stderr=True)


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

def _settings(ctx: typer.Context) -> Settings:
    if isinstance(ctx.obj, Settings):
        return ctx.obj
    return load_settings()


def _build(settings: Settings) -> tuple[ConsoleSession, AsyncCommandRunner, InteractiveHandoff]:
    """Construct the menu, session and executors; validates the menu."""
    table = ActionTable()
    tree = default_menu(settings.ELMOS_CONSOLE_TITLE)
    session = ConsoleSession(tree, table, input_limit=settings.ELMOS_CONSOLE_INPUT_LIMIT)
    runner = AsyncCommandRunner(settings.ELMOS_EXECUTABLE, table)
    handoff = InteractiveHandoff(settings.ELMOS_EXECUTABLE)
    return session, runner, handoff


def _mode_label(node: MenuNode) -> str:
    if node.interactive:
        return "[yellow]interactive[/yellow]"
    if node.needs_input:
        return "[cyan]input[/cyan]"
    return "background"


def _launch(settings: Settings, simple: bool = False) -> None:
    # Imported here so `actions`/`check` don't pay for the TUI stack.
    from .tui.app import ConsoleApp
    from .tui.simple import LineModeConsole

    setup_console_logging(settings)
    try:
        session, runner, handoff = _build(settings)
    except InvalidMenuNode as exc:
        err_console.print(f"[bold red]✗ Invalid menu:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if simple:
        LineModeConsole(session, runner, handoff, console=console).run()
        return

    try:
        ConsoleApp(
            session,
            runner,
            handoff,
            spinner_interval=settings.ELMOS_CONSOLE_SPINNER_INTERVAL,
        ).run()
    except TerminalHandoffError as exc:
        err_console.print(
            Panel.fit(
                f"[bold red]✗ Terminal handoff failed[/bold red]\n\n[yellow]Cause:[/yellow] {exc}",
                border_style="red",
                title="Error",
            )
        )
        raise typer.Exit(code=1)


# ═══════════════════════════════════════════════════════════════════════════════
# MAIN CALLBACK
# ═══════════════════════════════════════════════════════════════════════════════

@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    executable: Optional[str] = typer.Option(
        None,
        "--executable",
        "-e",
        help="Action executable (default: $ELMOS_EXECUTABLE or 'elmos')",
    ),
):
    """
    [bold]elmos-console[/bold]: navigate elmos actions from one terminal screen.

    [dim]Run without arguments to launch the interactive console.[/dim]

    [bold]Keys:[/bold]
      ↑/↓ k/j   Move        Enter   Select
      Esc       Back        q       Back / quit at root
      [ ]       Page log    c       Clear log view
    """
    ctx.obj = load_settings(ELMOS_EXECUTABLE=executable)
    if ctx.invoked_subcommand is None:
        _launch(ctx.obj)
        raise typer.Exit(code=0)


# ═══════════════════════════════════════════════════════════════════════════════
# COMMANDS
# ═══════════════════════════════════════════════════════════════════════════════

@app.command("ui", help="Launch the interactive console")
def ui(
    ctx: typer.Context,
    simple: bool = typer.Option(
        False,
        "--simple",
        "-s",
        help="Line-mode prompts instead of the full-screen console",
    ),
):
    _launch(_settings(ctx), simple=simple)


@app.command("actions", help="List every action and the argv it runs")
def actions(ctx: typer.Context):
    settings = _settings(ctx)
    table = ActionTable()
    tree = default_menu(settings.ELMOS_CONSOLE_TITLE)
    runner = AsyncCommandRunner(settings.ELMOS_EXECUTABLE, table)

    out = Table(title="[bold]Actions[/bold]")
    out.add_column("Action", style="bold")
    out.add_column("Menu")
    out.add_column("Mode")
    out.add_column("Template")
    out.add_column("Runs", style="cyan")

    for node in tree.leaves():
        value = (node.input_placeholder or "<value>") if node.needs_input else ""
        action = node.require_action()
        argv = runner.command_line(table.invoke(action, value))
        out.add_row(action.value, node.label, _mode_label(node), node.command, " ".join(argv))

    console.print(out)


@app.command("check", help="Validate the menu against the action table")
def check(ctx: typer.Context):
    settings = _settings(ctx)
    try:
        _build(settings)
    except InvalidMenuNode as exc:
        err_console.print(f"[bold red]✗ Invalid menu:[/bold red] {exc}")
        raise typer.Exit(code=1)
    console.print("[green]✓ Menu OK[/green]")


def main() -> None:
    app()
