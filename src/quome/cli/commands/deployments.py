"""CLI commands for application deployments."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import DEPLOYMENT_STATUS_COLORS, print_detail, print_table, styled_status
from ..utils import format_timestamp, sanitize_terminal_output
from .options import app_option, json_option, org_option


@click.group()
def deployments():
    """Inspect application deployments."""
    pass


@deployments.command("list")
@app_option
@org_option
@json_option
@click.pass_obj
def list_deployments(
    store: ConfigStore, app_id: UUID | None, org_id: UUID | None, as_json: bool
):
    """List deployments of an application."""
    org_id = store.resolve_org(org_id)
    app_id = store.resolve_app(app_id)
    client = QuomeClient(token=store.require_token())
    rollouts = client.list_deployments(org_id, app_id)

    if as_json:
        click.echo(json.dumps([d.model_dump(mode="json") for d in rollouts], indent=2))
        return

    if not rollouts:
        click.echo("No deployments found.")
        return

    rows = [
        [str(d.id), sanitize_terminal_output(d.status), format_timestamp(d.created_at)]
        for d in rollouts
    ]
    print_table(["ID", "STATUS", "CREATED"], rows)


@deployments.command("get")
@click.argument("deployment_id", type=click.UUID)
@app_option
@org_option
@json_option
@click.pass_obj
def get_deployment(
    store: ConfigStore,
    deployment_id: UUID,
    app_id: UUID | None,
    org_id: UUID | None,
    as_json: bool,
):
    """Show a deployment and its events."""
    org_id = store.resolve_org(org_id)
    app_id = store.resolve_app(app_id)
    client = QuomeClient(token=store.require_token())
    deployment = client.get_deployment(org_id, app_id, deployment_id)

    if as_json:
        click.echo(json.dumps(deployment.model_dump(mode="json"), indent=2))
        return

    details = [
        ("ID", str(deployment.id)),
        ("Status", styled_status(deployment.status, DEPLOYMENT_STATUS_COLORS)),
        ("Created", format_timestamp(deployment.created_at)),
    ]
    if deployment.failure_message:
        details.append(("Failure", sanitize_terminal_output(deployment.failure_message)))
    print_detail("Deployment", details)

    if deployment.events:
        click.echo()
        click.echo(click.style("  Events:", bold=True))
        for event in deployment.events:
            when = event.created_at.astimezone().strftime("%H:%M:%S") if event.created_at else ""
            click.echo(f"    {click.style(when, dim=True)} - {sanitize_terminal_output(event.message)}")
