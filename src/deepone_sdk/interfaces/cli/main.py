# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""CLI interface for the DeepOne SDK."""

import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ...config.settings import settings
from ...coordinator import DeepOne
from ...device.providers import build_fingerprint
from ...errors import DeepOneError
from ...models.attribution import AttributionData
from ...models.link_builder import CreateLinkBuilder
from ...storage.first_session import FirstSessionTracker
from ...storage.key_value import FileKeyValueStore

app = typer.Typer(
    name="deepone",
    help="DeepOne attribution CLI - resolve deep links and create attributed links",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _show_attribution(data: AttributionData) -> None:
    """Display an attribution record."""
    table = Table(title="Attribution")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Origin URL", data.origin_url or "-")
    table.add_row("Route path", data.route_path or "-")
    table.add_row("First session", str(data.is_first_session))
    for key, value in data.utm_parameters.items():
        table.add_row(key, value)
    if data.referrer is not None:
        table.add_row("Referrer", data.referrer)
    if data.campaign_identifier is not None:
        table.add_row("Campaign ID", data.campaign_identifier)

    console.print(table)

    if data.query_parameters:
        query_table = Table(title="Query Parameters")
        query_table.add_column("Key", style="cyan")
        query_table.add_column("Value")
        for key, value in data.query_parameters.items():
            query_table.add_row(key, "[dim]<none>[/dim]" if value is None else value)
        console.print(query_table)


def _show_error(error: DeepOneError) -> None:
    console.print(f"[red]{error.code.name}:[/red] {error.message}")


def _parse_custom_params(params: list[str]) -> dict[str, str]:
    parsed = {}
    for param in params:
        key, sep, value = param.partition("=")
        if not sep or not key:
            console.print(f"[red]Invalid parameter (expected key=value):[/red] {param}")
            raise typer.Exit(1)
        parsed[key] = value
    return parsed


@app.command()
def parse(
    url: str = typer.Argument(..., help="Attribution URL to parse"),
    first_session: bool = typer.Option(
        False,
        "--first-session",
        help="Mark the record as a first session",
    ),
) -> None:
    """Parse a URL into an attribution record."""
    _show_attribution(AttributionData.from_url(url, first_session))


@app.command()
def verify(
    development: bool = typer.Option(
        False,
        "--development",
        "-d",
        help="Use the test API key",
    ),
) -> None:
    """Resolve deferred attribution for this device."""
    received: list[tuple[Optional[AttributionData], Optional[DeepOneError]]] = []

    async def _run() -> None:
        deepone = DeepOne.from_settings(settings)
        try:
            await deepone.configure(
                development_mode=development,
                attribution_handler=lambda data, error: received.append((data, error)),
            )
            # Let the dispatched handler run
            await asyncio.sleep(0)
        finally:
            await deepone.transport.close()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        progress.add_task("Verifying device...", total=None)
        asyncio.run(_run())

    if not received:
        console.print("[yellow]No attribution received.[/yellow]")
        raise typer.Exit(1)

    data, error = received[-1]
    if error is not None:
        _show_error(error)
        raise typer.Exit(1)
    _show_attribution(data)


@app.command("create-link")
def create_link(
    path: str = typer.Argument(..., help="Deep link destination path"),
    name: str = typer.Argument(..., help="Unique link identifier"),
    description: Optional[str] = typer.Option(None, "--description", help="Link description"),
    title: Optional[str] = typer.Option(None, "--title", help="Social preview title"),
    preview_description: Optional[str] = typer.Option(
        None, "--preview-description", help="Social preview description"
    ),
    image_url: Optional[str] = typer.Option(None, "--image-url", help="Social preview image URL"),
    utm_source: Optional[str] = typer.Option(None, "--utm-source"),
    utm_medium: Optional[str] = typer.Option(None, "--utm-medium"),
    utm_campaign: Optional[str] = typer.Option(None, "--utm-campaign"),
    utm_term: Optional[str] = typer.Option(None, "--utm-term"),
    utm_content: Optional[str] = typer.Option(None, "--utm-content"),
    param: list[str] = typer.Option(
        [],
        "--param",
        "-p",
        help="Custom parameter as key=value (repeatable)",
    ),
    development: bool = typer.Option(
        False,
        "--development",
        "-d",
        help="Use the test API key",
    ),
) -> None:
    """Create an attributed link."""
    builder = CreateLinkBuilder(
        destination_path=path,
        link_identifier=name,
        link_description=description,
        social_title=title,
        social_description=preview_description,
        social_image_url=image_url,
        marketing_source=utm_source,
        marketing_medium=utm_medium,
        marketing_campaign=utm_campaign,
        marketing_term=utm_term,
        marketing_content=utm_content,
    )
    for key, value in _parse_custom_params(param).items():
        builder.add_custom_parameter(key, value)

    async def _run():
        deepone = DeepOne.from_settings(settings)
        try:
            deepone.development_mode = development
            return await deepone.create_attributed_link(builder)
        finally:
            await deepone.transport.close()

    result = asyncio.run(_run())
    if result.error is not None:
        _show_error(result.error)
        raise typer.Exit(1)

    console.print(Panel(f"[green]{result.url}[/green]", title="Link Created"))


@app.command()
def fingerprint() -> None:
    """Show the fingerprint collected for this device."""
    table = Table(title="Device Fingerprint")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for key, value in build_fingerprint().to_payload().items():
        table.add_row(key, str(value))
    console.print(table)


@app.command()
def reset() -> None:
    """Clear the first-session marker."""
    tracker = FirstSessionTracker(FileKeyValueStore(settings.resolve_storage_dir()))
    tracker.reset()
    console.print("[green]First-session marker cleared.[/green]")


if __name__ == "__main__":
    app()
