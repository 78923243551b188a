"""CLI command for application logs."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import LOG_LEVEL_COLORS
from ..utils import format_timestamp, sanitize_terminal_output
from .options import app_option, json_option, org_option


@click.command()
@app_option
@org_option
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=100,
    show_default=True,
    help="Number of log entries to fetch",
)
@json_option
@click.pass_obj
def logs(store: ConfigStore, app_id: UUID | None, org_id: UUID | None, limit: int, as_json: bool):
    """Show recent logs of an application.

    Examples:
        quome logs
        quome logs -n 20 --app 0f3e9b2a-...
    """
    org_id = store.resolve_org(org_id)
    app_id = store.resolve_app(app_id)
    client = QuomeClient(token=store.require_token())
    entries = client.get_logs(org_id, app_id, limit=limit)

    if as_json:
        click.echo(json.dumps([e.model_dump(mode="json") for e in entries], indent=2))
        return

    if not entries:
        click.echo("No logs found.")
        return

    for entry in entries:
        label = f"{sanitize_terminal_output(entry.level.upper()):<5}"
        color = LOG_LEVEL_COLORS.get(entry.level.lower())
        level = click.style(label, fg=color) if color else click.style(label, dim=True)
        click.echo(
            f"{click.style(format_timestamp(entry.timestamp), dim=True)} "
            f"{level} {sanitize_terminal_output(entry.message)}"
        )
