"""CLI commands for organization members."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import print_success, print_table
from ..utils import format_timestamp
from .options import json_option, org_option


@click.group()
def members():
    """Manage organization members."""
    pass


@members.command("list")
@org_option
@json_option
@click.pass_obj
def list_members(store: ConfigStore, org_id: UUID | None, as_json: bool):
    """List members of an organization."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    org_members = client.list_members(org_id)

    if as_json:
        click.echo(json.dumps([m.model_dump(mode="json") for m in org_members], indent=2))
        return

    if not org_members:
        click.echo("No members found.")
        return

    rows = [
        [
            str(member.id) if member.id else "-",
            str(member.user_id),
            format_timestamp(member.created_at),
        ]
        for member in org_members
    ]
    print_table(["ID", "USER ID", "JOINED"], rows)


@members.command("add")
@click.argument("user_id", type=click.UUID)
@org_option
@json_option
@click.pass_obj
def add_member(store: ConfigStore, user_id: UUID, org_id: UUID | None, as_json: bool):
    """Add a user to an organization by user ID."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    member = client.add_member(org_id, user_id)

    if as_json:
        click.echo(json.dumps(member.model_dump(mode="json"), indent=2))
        return

    print_success(
        "Added member",
        [
            ("Member ID", str(member.id) if member.id else "-"),
            ("User ID", str(member.user_id)),
        ],
    )
