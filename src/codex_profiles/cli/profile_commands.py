from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..domain.errors import CodexProfilesError
from .context import get_context

app = typer.Typer()
console = Console()


def fail(e: Exception) -> None:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(1)


@app.command("list")
def list_profiles(ctx: typer.Context):
    """list all profiles, creating a default one if there are none."""
    app_ctx = get_context(ctx)

    try:
        profiles = app_ctx.manager.ensure_profiles()
        active = app_ctx.store.get_active_id()
    except CodexProfilesError as e:
        fail(e)

    table = Table(title="Codex Profiles")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Provider", style="white")
    table.add_column("Updated", style="dim")
    table.add_column("Status", style="green")

    for profile in profiles:
        status = "active" if profile.id == active else ""
        updated = profile.updated_at.split("T")[0]  # just the date
        table.add_row(profile.id, profile.name, profile.model_provider, updated, status)

    console.print(table)


@app.command("show")
def show_profile(ctx: typer.Context, profile_id: str):
    """show a profile and its providers."""
    app_ctx = get_context(ctx)

    try:
        profile = app_ctx.store.get(profile_id)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"\n[bold]Profile:[/bold] [cyan]{profile.name}[/cyan] [dim]({profile.id})[/dim]")
    if profile.description:
        console.print(f"  {profile.description}")
    console.print(f"  Provider:   {profile.model_provider}")
    console.print(f"  Model:      {profile.model}")
    console.print(f"  Effort:     {profile.model_reasoning_effort or '-'}")
    console.print(f"  Created:    {profile.created_at}")
    console.print(f"  Updated:    {profile.updated_at}\n")

    if profile.providers:
        table = Table(title="Providers")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Base URL")
        table.add_column("Wire API")
        table.add_column("Model")
        table.add_column("API key", style="dim")
        for provider_id in sorted(profile.providers):
            p = profile.providers[provider_id]
            table.add_row(
                provider_id,
                p.name or "",
                p.base_url or "",
                p.wire_api or "",
                p.model or "",
                "set" if p.api_key else "",
            )
        console.print(table)


@app.command("create")
def create_profile(
    ctx: typer.Context,
    name: str,
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Free-text description"),
):
    """create an empty profile."""
    app_ctx = get_context(ctx)

    try:
        profile = app_ctx.manager.create_profile(name, description)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Profile '{profile.name}' created with id [cyan]{profile.id}[/cyan]")


@app.command("rename")
def rename_profile(ctx: typer.Context, profile_id: str, name: str):
    """rename a profile."""
    app_ctx = get_context(ctx)

    try:
        app_ctx.manager.rename(profile_id, name)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Profile renamed to '{name}'")


@app.command("delete")
def delete_profile(ctx: typer.Context, profile_id: str):
    """delete a profile."""
    app_ctx = get_context(ctx)

    try:
        app_ctx.store.delete(profile_id)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Profile '{profile_id}' removed")


@app.command("duplicate")
def duplicate_profile(ctx: typer.Context, profile_id: str, new_name: str):
    """copy a profile under a new name."""
    app_ctx = get_context(ctx)

    try:
        profile = app_ctx.store.duplicate(profile_id, new_name)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Created '{profile.name}' with id [cyan]{profile.id}[/cyan]")


@app.command("import-live")
def import_live(ctx: typer.Context, profile_id: str):
    """overwrite a profile's providers and model with the live Codex config."""
    app_ctx = get_context(ctx)

    try:
        profile = app_ctx.manager.load_from_live(profile_id)
    except CodexProfilesError as e:
        fail(e)

    console.print(
        f"[green]✓[/green] Imported {len(profile.providers)} provider(s) into '{profile.name}'"
    )


if __name__ == "__main__":
    app()
