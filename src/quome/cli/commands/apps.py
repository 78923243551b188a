"""CLI commands for applications."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..platform.types import AppSpec, ContainerSpec, CreateAppRequest, UpdateAppRequest
from ..render import print_detail, print_success, print_table
from ..utils import format_timestamp, sanitize_terminal_output, truncate
from .options import force_option, json_option, org_option


@click.group()
def apps():
    """Manage applications."""
    pass


@apps.command("list")
@org_option
@json_option
@click.pass_obj
def list_apps(store: ConfigStore, org_id: UUID | None, as_json: bool):
    """List applications in an organization."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())
    applications = client.list_apps(org_id)

    if as_json:
        click.echo(json.dumps([a.model_dump(mode="json") for a in applications], indent=2))
        return

    if not applications:
        click.echo("No applications found.")
        return

    rows = [
        [
            str(app.id),
            sanitize_terminal_output(app.name),
            truncate(sanitize_terminal_output(app.description or ""), 40),
            format_timestamp(app.created_at, short=True),
        ]
        for app in applications
    ]
    print_table(["ID", "NAME", "DESCRIPTION", "CREATED"], rows)


@apps.command("create")
@click.argument("name")
@click.option("--description", "-d", default=None, help="Application description")
@click.option("--image", required=True, help="Container image (e.g., nginx:latest)")
@click.option(
    "--port", type=click.IntRange(1, 65535), default=80, show_default=True, help="Container port"
)
@org_option
@json_option
@click.pass_obj
def create_app(
    store: ConfigStore,
    name: str,
    description: str | None,
    image: str,
    port: int,
    org_id: UUID | None,
    as_json: bool,
):
    """Create an application running a single container.

    Examples:
        quome apps create web --image nginx:latest
        quome apps create api --image ghcr.io/acme/api:1.2 --port 8080 -d "Public API"
    """
    org_id = store.resolve_org(org_id)
    request = CreateAppRequest(
        name=name,
        description=description,
        spec=AppSpec(containers=[ContainerSpec(name=name, image=image, port=port)]),
    )
    client = QuomeClient(token=store.require_token())
    app = client.create_app(org_id, request)

    if as_json:
        click.echo(json.dumps(app.model_dump(mode="json"), indent=2))
        return

    print_success(
        "Created application",
        [("ID", str(app.id)), ("Name", sanitize_terminal_output(app.name))],
    )


@apps.command("get")
@click.option(
    "--id",
    "-i",
    "app_id",
    type=click.UUID,
    default=None,
    help="Application ID (uses linked app if not provided)",
)
@org_option
@json_option
@click.pass_obj
def get_app(store: ConfigStore, app_id: UUID | None, org_id: UUID | None, as_json: bool):
    """Show application details."""
    org_id = store.resolve_org(org_id)
    app_id = store.resolve_app(app_id)
    client = QuomeClient(token=store.require_token())
    app = client.get_app(org_id, app_id)

    if as_json:
        click.echo(json.dumps(app.model_dump(mode="json"), indent=2))
        return

    details = [("ID", str(app.id)), ("Name", sanitize_terminal_output(app.name))]
    if app.description:
        details.append(("Description", sanitize_terminal_output(app.description)))
    details.append(("Created", format_timestamp(app.created_at)))
    print_detail("Application", details)

    if app.spec and app.spec.containers:
        click.echo()
        click.echo(click.style("  Containers:", bold=True))
        for container in app.spec.containers:
            click.echo(f"    - {sanitize_terminal_output(container.name)}")
            click.echo(f"      Image: {sanitize_terminal_output(container.image)}")
            click.echo(f"      Port:  {container.port}")


@apps.command("update")
@click.option(
    "--id",
    "-i",
    "app_id",
    type=click.UUID,
    default=None,
    help="Application ID (uses linked app if not provided)",
)
@click.option("--name", default=None, help="New name")
@click.option("--description", default=None, help="New description")
@org_option
@json_option
@click.pass_obj
def update_app(
    store: ConfigStore,
    app_id: UUID | None,
    name: str | None,
    description: str | None,
    org_id: UUID | None,
    as_json: bool,
):
    """Rename an application or change its description."""
    org_id = store.resolve_org(org_id)
    app_id = store.resolve_app(app_id)
    client = QuomeClient(token=store.require_token())
    app = client.update_app(org_id, app_id, UpdateAppRequest(name=name, description=description))

    if as_json:
        click.echo(json.dumps(app.model_dump(mode="json"), indent=2))
        return

    print_success(
        "Updated application",
        [("ID", str(app.id)), ("Name", sanitize_terminal_output(app.name))],
    )


@apps.command("delete")
@click.argument("app_id", type=click.UUID)
@org_option
@force_option
@click.pass_obj
def delete_app(store: ConfigStore, app_id: UUID, org_id: UUID | None, force: bool):
    """Delete an application. This cannot be undone."""
    org_id = store.resolve_org(org_id)
    if not force:
        if not click.confirm(
            f"Are you sure you want to delete application {app_id}?", default=False
        ):
            click.echo("Cancelled.")
            return

    client = QuomeClient(token=store.require_token())
    client.delete_app(org_id, app_id)
    print_success("Deleted application", [("ID", str(app_id))])
