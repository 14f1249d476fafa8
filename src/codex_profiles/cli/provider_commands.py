from typing import Dict, List, Optional

import typer
from rich.console import Console

from ..domain.errors import CodexProfilesError, InvalidArgumentError
from ..domain.models import ProviderConfig
from .context import get_context
from .profile_commands import fail

app = typer.Typer()
console = Console()


def parse_pairs(values: Optional[List[str]], option: str) -> Optional[Dict[str, str]]:
    """turn repeated KEY=VALUE options into a dict."""
    if not values:
        return None
    pairs = {}
    for item in values:
        if "=" not in item:
            raise InvalidArgumentError(f"{option} expects KEY=VALUE, got '{item}'")
        key, value = item.split("=", 1)
        pairs[key.strip()] = value
    return pairs


@app.command("add")
def add_provider(
    ctx: typer.Context,
    profile_id: str,
    provider_id: str,
    name: Optional[str] = typer.Option(None, "--name", help="Display name"),
    base_url: Optional[str] = typer.Option(None, "--base-url", help="Endpoint base URL"),
    wire_api: Optional[str] = typer.Option(None, "--wire-api", help="Wire protocol, e.g. responses or chat"),
    requires_openai_auth: Optional[bool] = typer.Option(
        None, "--requires-openai-auth/--no-requires-openai-auth", help="Use Codex's built-in auth"
    ),
    env_key: Optional[str] = typer.Option(None, "--env-key", help="Environment variable holding the key"),
    env_key_instructions: Optional[str] = typer.Option(None, "--env-key-instructions"),
    header: Optional[List[str]] = typer.Option(None, "--header", help="HTTP header KEY=VALUE, repeatable"),
    query_param: Optional[List[str]] = typer.Option(None, "--query-param", help="Query param KEY=VALUE, repeatable"),
    model: Optional[str] = typer.Option(None, "--model", "-m"),
    effort: Optional[str] = typer.Option(None, "--effort", help="Reasoning effort"),
    api_key: Optional[str] = typer.Option(None, "--api-key"),
):
    """add or replace a provider in a profile."""
    app_ctx = get_context(ctx)

    try:
        config = ProviderConfig(
            name=name,
            base_url=base_url,
            wire_api=wire_api,
            requires_openai_auth=requires_openai_auth,
            env_key=env_key,
            env_key_instructions=env_key_instructions,
            http_headers=parse_pairs(header, "--header"),
            query_params=parse_pairs(query_param, "--query-param"),
            model=model,
            model_reasoning_effort=effort,
            api_key=api_key,
        )
        profile = app_ctx.store.get(profile_id)
        if provider_id in profile.providers:
            app_ctx.manager.update_provider(profile_id, provider_id, config)
        else:
            app_ctx.manager.add_provider(profile_id, provider_id, config)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Provider '{provider_id}' saved in '{profile.name}'")


@app.command("remove")
def remove_provider(ctx: typer.Context, profile_id: str, provider_id: str):
    """remove a provider from a profile."""
    app_ctx = get_context(ctx)

    try:
        app_ctx.manager.delete_provider(profile_id, provider_id)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] Provider '{provider_id}' removed")


@app.command("use")
def use_provider(ctx: typer.Context, profile_id: str, provider_id: str):
    """make a provider the profile's default."""
    app_ctx = get_context(ctx)

    try:
        profile = app_ctx.manager.set_active_provider(profile_id, provider_id)
    except CodexProfilesError as e:
        fail(e)

    console.print(f"[green]✓[/green] '{profile.name}' now uses provider '{provider_id}'")
