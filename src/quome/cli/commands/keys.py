"""CLI commands for organization API keys."""

import json
from datetime import datetime, timedelta, timezone
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import print_success, print_table
from ..utils import format_timestamp
from .options import force_option, json_option, org_option


@click.group()
def keys():
    """Manage organization API keys."""
    pass


@keys.command("list")
@org_option
@json_option
@click.pass_obj
def list_keys(store: ConfigStore, org_id: UUID | None, as_json: bool):
    """List API keys of an organization."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    org_keys = client.list_keys(org_id)

    if as_json:
        click.echo(json.dumps([k.model_dump(mode="json") for k in org_keys], indent=2))
        return

    if not org_keys:
        click.echo("No API keys found.")
        return

    rows = [[str(key.id), format_timestamp(key.created_at)] for key in org_keys]
    print_table(["ID", "CREATED"], rows)


@keys.command("create")
@click.option(
    "--expires-days",
    type=click.IntRange(min=0),
    default=0,
    show_default=True,
    help="Days until expiration (0 = never expires)",
)
@org_option
@json_option
@click.pass_obj
def create_key(store: ConfigStore, expires_days: int, org_id: UUID | None, as_json: bool):
    """Create an API key.

    The key is shown once; only its hash is kept by the server.
    """
    org_id = store.resolve_org(org_id)
    expiration = None
    if expires_days > 0:
        expiration = datetime.now(timezone.utc) + timedelta(days=expires_days)

    client = QuomeClient(token=store.require_token())
    key = client.create_key(org_id, expiration)

    if as_json:
        click.echo(json.dumps(key.model_dump(mode="json"), indent=2))
        return

    print_success("Created API key", [("ID", str(key.id))])
    click.echo()
    click.echo(f"  {click.style('Key:', fg='yellow', bold=True)} {click.style(key.key, fg='cyan')}")
    click.echo()
    click.echo(click.style("  Save this key - it won't be shown again!", fg="yellow"))


@keys.command("delete")
@click.argument("key_id", type=click.UUID)
@org_option
@force_option
@click.pass_obj
def delete_key(store: ConfigStore, key_id: UUID, org_id: UUID | None, force: bool):
    """Delete an API key."""
    org_id = store.resolve_org(org_id)
    if not force:
        if not click.confirm(f"Are you sure you want to delete API key {key_id}?", default=False):
            click.echo("Cancelled.")
            return

    client = QuomeClient(token=store.require_token())
    client.delete_key(org_id, key_id)
    print_success("Deleted API key", [("ID", str(key_id))])
