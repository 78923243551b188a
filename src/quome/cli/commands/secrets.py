"""CLI commands for organization secrets.

Secrets are addressed by name; the ID is looked up from the list.
"""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..platform.types import CreateSecretRequest, UpdateSecretRequest
from ..render import print_success, print_table
from ..utils import format_timestamp, sanitize_terminal_output
from .options import force_option, json_option, org_option


@click.group()
def secrets():
    """Manage organization secrets.

    Examples:

        quome secrets set DATABASE_URL postgres://...

        quome secrets get DATABASE_URL

        quome secrets delete DATABASE_URL
    """
    pass


@secrets.command("list")
@org_option
@json_option
@click.pass_obj
def list_secrets(store: ConfigStore, org_id: UUID | None, as_json: bool):
    """List secret names. Values are never shown here."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    org_secrets = client.list_secrets(org_id)

    if as_json:
        click.echo(json.dumps([s.model_dump(mode="json") for s in org_secrets], indent=2))
        return

    if not org_secrets:
        click.echo("No secrets found.")
        return

    rows = [
        [sanitize_terminal_output(s.name), str(s.id), format_timestamp(s.updated_at)]
        for s in org_secrets
    ]
    print_table(["NAME", "ID", "UPDATED"], rows)


@secrets.command("set")
@click.argument("name")
@click.argument("value")
@click.option("--description", "-d", default=None, help="Secret description")
@org_option
@json_option
@click.pass_obj
def set_secret(
    store: ConfigStore,
    name: str,
    value: str,
    description: str | None,
    org_id: UUID | None,
    as_json: bool,
):
    """Create a secret, or replace the value of an existing one."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())

    existing = next((s for s in client.list_secrets(org_id) if s.name == name), None)
    if existing is not None:
        secret = client.update_secret(
            org_id, existing.id, UpdateSecretRequest(value=value, description=description)
        )
    else:
        secret = client.create_secret(
            org_id, CreateSecretRequest(name=name, value=value, description=description)
        )

    if as_json:
        click.echo(json.dumps(secret.model_dump(mode="json"), indent=2))
        return

    action = "Updated" if existing is not None else "Created"
    print_success(
        f"{action} secret",
        [("Name", sanitize_terminal_output(secret.name)), ("ID", str(secret.id))],
    )


@secrets.command("get")
@click.argument("name")
@org_option
@json_option
@click.pass_obj
def get_secret(store: ConfigStore, name: str, org_id: UUID | None, as_json: bool):
    """Print the value of a secret."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    secret = client.get_secret(org_id, client.find_secret(org_id, name).id)

    if as_json:
        click.echo(json.dumps(secret.model_dump(mode="json"), indent=2))
        return

    click.echo(secret.value or "")


@secrets.command("delete")
@click.argument("name")
@org_option
@force_option
@click.pass_obj
def delete_secret(store: ConfigStore, name: str, org_id: UUID | None, force: bool):
    """Delete a secret."""
    org_id = store.resolve_org(org_id)
    if not force:
        if not click.confirm(f"Are you sure you want to delete secret '{name}'?", default=False):
            click.echo("Cancelled.")
            return

    client = QuomeClient(token=store.require_token())
    secret = client.find_secret(org_id, name)
    client.delete_secret(org_id, secret.id)
    print_success("Deleted secret", [("Name", sanitize_terminal_output(name))])
