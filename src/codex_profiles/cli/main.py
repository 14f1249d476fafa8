from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config import clear_codex_home_override, get_codex_home_override, set_codex_home_override
from ..domain.errors import CodexProfilesError
from ..logging_setup import configure_logging
from .context import AppContext, get_context
from .profile_commands import app as profile_app, fail
from .provider_commands import app as provider_app

app = typer.Typer()
console = Console()

app.add_typer(profile_app, name="profile", help="Manage Codex profiles")
app.add_typer(provider_app, name="provider", help="Manage providers inside a profile")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
    root: Optional[Path] = typer.Option(
        None, "--root", envvar="CODEX_PROFILES_HOME", help="Directory holding saved profiles"
    ),
    codex_home: Optional[Path] = typer.Option(
        None, "--codex-home", help="Codex config directory (default: $CODEX_HOME or ~/.codex)"
    ),
):
    """manage Codex CLI profiles and apply them to the live Codex config."""
    configure_logging(verbose)
    ctx.obj = AppContext.build(root, codex_home)


@app.command()
def version():
    """print the version."""
    console.print(__version__)


@app.command()
def apply(ctx: typer.Context, profile_id: str):
    """write a profile into config.toml and auth.json and mark it active."""
    app_ctx = get_context(ctx)

    try:
        result = app_ctx.synchronizer.apply(profile_id)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Applied profile [cyan]{profile_id}[/cyan]")
    console.print(f"  model_provider = {result.model_provider}")
    console.print(f"  model          = {result.model}")
    if result.model_reasoning_effort:
        console.print(f"  effort         = {result.model_reasoning_effort}")
    if not result.api_key_written:
        console.print("[yellow]Note:[/yellow] no API key set, OPENAI_API_KEY removed from auth.json")


@app.command()
def active(ctx: typer.Context):
    """show the active profile."""
    app_ctx = get_context(ctx)

    try:
        profile = app_ctx.manager.get_active_profile()
    except CodexProfilesError as e:
        fail(e)

    if profile is None:
        console.print("[yellow]No active profile.[/yellow]")
        console.print("\nApply one with: [cyan]codex-profiles apply <id>[/cyan]")
        return
    console.print(f"[bold]Active Profile:[/bold] [cyan]{profile.name}[/cyan] [dim]({profile.id})[/dim]")


@app.command()
def status(ctx: typer.Context):
    """show where the live Codex files are and whether they exist."""
    app_ctx = get_context(ctx)
    st = app_ctx.reader.status()

    grid = Table.grid(expand=True)
    grid.add_column(style="bold cyan", justify="right")
    grid.add_column(style="white")
    grid.add_row("config.toml:", f"{st.config_path} {'✓' if st.config_exists else '(missing)'}")
    grid.add_row("auth.json:", f"{st.auth_path} {'✓' if st.auth_exists else '(missing)'}")
    grid.add_row("Profiles:", str(app_ctx.paths.profiles_dir))
    console.print(Panel(grid, title="Codex config status", border_style="cyan"))


@app.command()
def current(ctx: typer.Context):
    """show the provider and model Codex is configured with right now."""
    app_ctx = get_context(ctx)

    try:
        live = app_ctx.reader.read_current()
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[bold]model_provider:[/bold] {live.model_provider}")
    console.print(f"[bold]model:[/bold]          {live.model or '-'}")
    console.print(f"[bold]effort:[/bold]         {live.model_reasoning_effort or '-'}")
    console.print(f"[bold]api key:[/bold]        {'set' if live.api_key else '-'}")
    for provider_id in sorted(live.providers):
        p = live.providers[provider_id]
        marker = "[green]*[/green]" if provider_id == live.model_provider else " "
        console.print(f" {marker} {provider_id}: {p.base_url or ''} [dim]{p.wire_api or ''}[/dim]")


@app.command()
def home(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="New Codex config directory"),
    clear: bool = typer.Option(False, "--clear", help="Go back to $CODEX_HOME or ~/.codex"),
):
    """show or change the Codex config directory used by apply."""
    app_ctx = get_context(ctx)
    root = app_ctx.paths.root

    try:
        if clear:
            clear_codex_home_override(root)
            console.print("[green]✓[/green] Codex home override cleared")
        elif path:
            set_codex_home_override(path, root)
            console.print(f"[green]✓[/green] Codex home set to {path}")
        else:
            override = get_codex_home_override(root)
            console.print(f"{app_ctx.paths.codex_home}" + (" [dim](override)[/dim]" if override else ""))
    except RuntimeError as e:
        fail(e)


def main():
    app()


if __name__ == "__main__":
    main()
