"""sitestream CLI — Typer + Rich terminal interface.

Commands: serve, generate, keys.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from sitestream import __version__
from sitestream.apply_client import ApplyServiceClient
from sitestream.keys import has_any_key, key_status, load_keys_env
from sitestream.providers.registry import load_settings
from sitestream.relay import GenerationRelay
from sitestream.schemas.config import Settings
from sitestream.schemas.events import (
    ApplicationCompleteEvent,
    ApplicationProgressEvent,
    ApplicationStartEvent,
    ContentEvent,
    ErrorEvent,
    PackageEvent,
    ProgressEvent,
)
from sitestream.schemas.request import GenerationRequest

# Load API keys from ~/.sitestream/keys.env and .env on startup
load_keys_env()

console = Console()

app = typer.Typer(
    name="sitestream",
    help="Stream LLM-generated websites into a live preview sandbox.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

_CONFIG_OPTION = typer.Option(
    None, "--config", "-c",
    help="Settings TOML (defaults to the bundled defaults.toml)",
    exists=True, dir_okay=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"sitestream {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """sitestream — streaming website generation relay."""


# ── Helpers ──────────────────────────────────────────────────────


def _load_settings(config: Path | None) -> Settings:
    """Load settings, exit on error."""
    try:
        return load_settings(config)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error loading settings:[/red] {e}")
        raise typer.Exit(1) from None


def _render_event(event: ProgressEvent) -> None:
    """Print one progress event. Content is streamed raw."""
    if isinstance(event, ContentEvent):
        console.print(event.content, end="", markup=False, highlight=False, soft_wrap=True)
    elif isinstance(event, PackageEvent):
        console.print(f"\n[cyan]▸ {event.message}[/cyan]")
    elif isinstance(event, ApplicationStartEvent):
        console.print(f"\n[bold blue]{event.message}[/bold blue]")
    elif isinstance(event, ApplicationProgressEvent):
        stage = event.stage or "progress"
        detail = event.payload.get("message", "")
        console.print(f"[dim]  {stage}[/dim] {detail}", highlight=False)
    elif isinstance(event, ApplicationCompleteEvent):
        console.print(f"[bold green]✓ {event.message}[/bold green]")
    elif isinstance(event, ErrorEvent):
        console.print(f"\n[red]✗ {event.error}[/red]")


# ── Commands ─────────────────────────────────────────────────────


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to serve on"),
    config: Path | None = _CONFIG_OPTION,
    log_level: str = typer.Option("info", "--log-level", help="uvicorn log level"),
) -> None:
    """Run the generation API server."""
    import uvicorn

    from sitestream.server import create_app

    settings = _load_settings(config)
    if not has_any_key(settings):
        console.print(
            "[yellow]No provider API keys found.[/yellow] "
            "Generation requests will fail until one is set (see [bold]sitestream keys[/bold])."
        )
    console.print(f"[bold]sitestream[/bold] listening on http://{host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port, log_level=log_level)


@app.command()
def generate(
    prompt: str = typer.Argument(..., help="Description of the website to build"),
    model: str | None = typer.Option(None, "--model", "-m", help="Namespaced model id"),
    temperature: float | None = typer.Option(None, "--temperature", "-t"),
    max_tokens: int | None = typer.Option(None, "--max-tokens"),
    sandbox_id: str | None = typer.Option(None, "--sandbox-id", help="Target sandbox"),
    apply_url: str | None = typer.Option(
        None, "--apply-url", help="Apply service endpoint (overrides settings)",
    ),
    config: Path | None = _CONFIG_OPTION,
) -> None:
    """Generate a website in-process and stream progress to the terminal."""
    settings = _load_settings(config)

    url = apply_url or settings.apply.url
    if not url:
        console.print(
            "[red]No apply service configured.[/red] "
            "Pass [bold]--apply-url[/bold] or set [bold]\\[apply] url[/bold]."
        )
        raise typer.Exit(1)

    try:
        request = GenerationRequest(
            prompt=prompt,
            model=model or settings.relay.default_model,
            temperature=(
                settings.relay.default_temperature if temperature is None else temperature
            ),
            max_tokens=max_tokens or settings.relay.default_max_tokens,
            sandbox_id=sandbox_id,
        )
    except ValueError as e:
        console.print(f"[red]Invalid request:[/red] {e}")
        raise typer.Exit(1) from None

    relay = GenerationRelay(
        settings,
        ApplyServiceClient(url, timeout=settings.apply.timeout or None),
    )

    async def _run() -> bool:
        failed = False
        async for event in relay.run(request):
            _render_event(event)
            failed = failed or isinstance(event, ErrorEvent)
        return not failed

    if not asyncio.run(_run()):
        raise typer.Exit(1)


@app.command()
def keys(config: Path | None = _CONFIG_OPTION) -> None:
    """Show which provider API keys are configured."""
    settings = _load_settings(config)
    status = key_status(settings)

    table = Table(title="Model Providers")
    table.add_column("Provider", style="bold cyan")
    table.add_column("Prefix")
    table.add_column("Env Var", style="dim")
    table.add_column("Key", justify="center")

    for name, provider in settings.providers.items():
        prefix = provider.prefix or "[dim](default)[/dim]"
        table.add_row(
            provider.display_name,
            prefix,
            provider.api_key_env,
            "[green]✓[/green]" if status[name] else "[red]✗[/red]",
        )

    console.print(table)


if __name__ == "__main__":
    app()
