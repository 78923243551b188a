"""CLI command for the organization audit log."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..utils import format_timestamp, sanitize_terminal_output
from .options import json_option, org_option


@click.command()
@org_option
@click.option(
    "--limit",
    "-n",
    type=click.IntRange(min=1),
    default=50,
    show_default=True,
    help="Number of events to fetch",
)
@json_option
@click.pass_obj
def events(store: ConfigStore, org_id: UUID | None, limit: int, as_json: bool):
    """Show recent activity in an organization."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    org_events = client.list_events(org_id, limit=limit)

    if as_json:
        click.echo(
            json.dumps([e.model_dump(mode="json", by_alias=True) for e in org_events], indent=2)
        )
        return

    if not org_events:
        click.echo("No events found.")
        return

    for event in org_events:
        resource = event.resource
        name = sanitize_terminal_output(resource.name) if resource.name else str(resource.id)
        click.echo(
            " ".join(
                [
                    click.style(format_timestamp(event.created_at), dim=True),
                    click.style(sanitize_terminal_output(event.actor.email), fg="cyan"),
                    click.style(sanitize_terminal_output(event.event_type), fg="yellow"),
                    click.style(sanitize_terminal_output(resource.resource_type), dim=True),
                    "on",
                    click.style(name, bold=True),
                    click.style(f"({resource.id})", dim=True),
                ]
            )
        )
