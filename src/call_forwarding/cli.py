"""
Call Forwarding CLI

Command-line interface for running the webhook server and checking the
business-hours window.
"""

from datetime import datetime
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import Config, load_config
from .errors import ConfigurationError
from .hours.business_hours import BusinessHoursEvaluator

console = Console()


def _mask(value: str) -> str:
    if not value:
        return "[red]not set[/]"
    if len(value) <= 4:
        return "****"
    return "*" * (len(value) - 4) + value[-4:]


@click.group()
@click.pass_context
def cli(ctx):
    """Call Forwarding - forward calls in business hours, voicemail otherwise."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = load_config()
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration error:[/] {e}")
        ctx.exit(1)


@cli.command("serve")
@click.option("--host", default=None, help="Bind host (default: WEBHOOK_HOST)")
@click.option("--port", "-p", type=int, default=None, help="Bind port (default: WEBHOOK_PORT)")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int]):
    """Start the webhook server."""
    import uvicorn

    from .server import create_app

    config: Config = ctx.obj["config"]
    missing = config.validate()
    if missing:
        console.print(f"[bold red]Missing configuration:[/] {', '.join(missing)}")
        ctx.exit(1)

    host = host or config.webhook_host
    port = port if port is not None else config.webhook_port
    console.print(f"[bold blue]Starting server on {host}:{port}[/]")
    uvicorn.run(create_app(config), host=host, port=port)


@cli.command("hours")
@click.option("--at", "at", default=None, help="ISO datetime to check instead of now")
@click.pass_context
def hours(ctx, at: Optional[str]):
    """Check whether an instant is inside business hours."""
    config: Config = ctx.obj["config"]
    evaluator = BusinessHoursEvaluator(config.window)

    if at:
        try:
            instant = datetime.fromisoformat(at)
        except ValueError:
            raise click.BadParameter(f"not an ISO datetime: {at!r}", param_hint="--at")
    else:
        instant = evaluator.clock.now()

    instant = instant if instant.tzinfo else config.window.tz.localize(instant)
    local = instant.astimezone(config.window.tz)

    if evaluator.is_open_at(instant):
        verdict = "[bold green]OPEN[/] - calls are forwarded"
    else:
        verdict = "[bold yellow]CLOSED[/] - calls go to voicemail"
        next_open = evaluator.next_open_time(instant)
        if next_open is not None:
            verdict += f"\n[dim]Opens {next_open.strftime('%A %Y-%m-%d at %H:%M %Z')}[/]"

    console.print(Panel(
        f"{verdict}\n[dim]{local.strftime('%A %Y-%m-%d %H:%M %Z')}[/]",
        title=f"Business hours: {evaluator.describe()}",
    ))


@cli.command("config")
@click.pass_context
def show_config(ctx):
    """Show the loaded configuration."""
    config: Config = ctx.obj["config"]

    table = Table(title="Configuration")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("Business hours", config.window.describe())
    table.add_row("Forward to", config.forward_to_number or "[red]not set[/]")
    table.add_row("Twilio number", config.twilio_phone_number or "[red]not set[/]")
    table.add_row("Twilio account SID", _mask(config.twilio_account_sid))
    table.add_row("Twilio auth token", _mask(config.twilio_auth_token))
    table.add_row("Webhook", f"{config.webhook_host}:{config.webhook_port}")
    table.add_row("Voicemail", f"max {config.voicemail_max_length}s, timeout {config.voicemail_timeout}s")

    console.print(table)

    missing = config.validate()
    if missing:
        console.print(f"[yellow]Missing: {', '.join(missing)}[/]")


if __name__ == "__main__":
    cli()
