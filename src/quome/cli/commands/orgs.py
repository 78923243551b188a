"""CLI commands for organizations."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import print_detail, print_success, print_table
from ..utils import format_timestamp, sanitize_terminal_output
from .options import json_option


@click.group()
def orgs():
    """Manage organizations."""
    pass


@orgs.command("list")
@json_option
@click.pass_obj
def list_orgs(store: ConfigStore, as_json: bool):
    """List the organizations you belong to."""
    client = QuomeClient(token=store.require_token())
    organizations = client.list_orgs()

    if as_json:
        click.echo(json.dumps([o.model_dump(mode="json") for o in organizations], indent=2))
        return

    if not organizations:
        click.echo("No organizations found.")
        return

    linked_org = store.get_linked_org_id()
    rows = []
    for org in organizations:
        marker = "*" if org.id == linked_org else ""
        rows.append(
            [
                str(org.id),
                sanitize_terminal_output(org.name) + marker,
                format_timestamp(org.created_at),
            ]
        )
    print_table(["ID", "NAME", "CREATED"], rows)


@orgs.command("create")
@click.argument("name")
@json_option
@click.pass_obj
def create_org(store: ConfigStore, name: str, as_json: bool):
    """Create a new organization."""
    client = QuomeClient(token=store.require_token())
    org = client.create_org(name)

    if as_json:
        click.echo(json.dumps(org.model_dump(mode="json"), indent=2))
        return

    print_success(
        "Created organization",
        [("ID", str(org.id)), ("Name", sanitize_terminal_output(org.name))],
    )


@orgs.command("get")
@click.option(
    "--id",
    "-i",
    "org_id",
    type=click.UUID,
    default=None,
    help="Organization ID (uses linked org if not provided)",
)
@json_option
@click.pass_obj
def get_org(store: ConfigStore, org_id: UUID | None, as_json: bool):
    """Show organization details."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    org = client.get_org(org_id)

    if as_json:
        click.echo(json.dumps(org.model_dump(mode="json"), indent=2))
        return

    print_detail(
        "Organization",
        [
            ("ID", str(org.id)),
            ("Name", sanitize_terminal_output(org.name)),
            ("Created", format_timestamp(org.created_at)),
            ("Updated", format_timestamp(org.updated_at)),
        ],
    )
