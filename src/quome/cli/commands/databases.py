"""CLI commands for managed PostgreSQL databases."""

import json
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..platform.types import (
    ComputeRequested,
    CreateDatabaseRequest,
    Database,
    DatabaseCompute,
    DatabasePostgres,
    DatabaseReplicas,
    DatabaseStorage,
    StorageRequested,
    UpdateDatabaseRequest,
)
from ..render import DATABASE_STATE_COLORS, print_detail, print_success, print_table, styled_status
from ..utils import Spinner, format_timestamp, sanitize_terminal_output
from .options import force_option, json_option, org_option

POSTGRES_VERSIONS = ["15", "16", "17"]


def _spinner(text: str, quiet: bool) -> Spinner:
    return Spinner(text, enabled=False if quiet else None)


def _state(db: Database) -> str:
    return db.status.state if db.status else "-"


@click.group()
def databases():
    """Manage PostgreSQL databases."""
    pass


@databases.command("list")
@org_option
@json_option
@click.pass_obj
def list_databases(store: ConfigStore, org_id: UUID | None, as_json: bool):
    """List databases in an organization."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())

    with _spinner("Fetching databases...", as_json):
        dbs = client.list_databases(org_id)

    if as_json:
        click.echo(json.dumps([db.model_dump(mode="json") for db in dbs], indent=2))
        return

    if not dbs:
        click.echo("No databases found.")
        return

    rows = [
        [
            str(db.id),
            sanitize_terminal_output(db.name),
            f"PG {db.postgres.major_version}",
            sanitize_terminal_output(_state(db)),
            format_timestamp(db.created_at),
        ]
        for db in dbs
    ]
    print_table(["ID", "NAME", "VERSION", "STATUS", "CREATED"], rows)


@databases.command("create")
@click.argument("name")
@click.option(
    "--version",
    "major_version",
    type=click.Choice(POSTGRES_VERSIONS),
    default="17",
    show_default=True,
    help="PostgreSQL major version",
)
@click.option("--vcpu", default="1", show_default=True, help="Number of vCPUs")
@click.option("--memory", default="2Gi", show_default=True, help="Memory allocation")
@click.option("--disk", default="1024Mi", show_default=True, help="Disk space")
@click.option(
    "--replicas", type=click.IntRange(min=1), default=1, show_default=True, help="Number of replicas"
)
@org_option
@json_option
@click.pass_obj
def create_database(
    store: ConfigStore,
    name: str,
    major_version: str,
    vcpu: str,
    memory: str,
    disk: str,
    replicas: int,
    org_id: UUID | None,
    as_json: bool,
):
    """Create a database.

    Examples:
        quome databases create orders
        quome databases create analytics --version 16 --vcpu 2 --memory 4Gi --disk 10Gi
    """
    org_id = store.resolve_org(org_id)
    request = CreateDatabaseRequest(
        name=name,
        compute=DatabaseCompute(requested=ComputeRequested(vcpu=vcpu, memory=memory)),
        storage=DatabaseStorage(requested=StorageRequested(disk_space=disk)),
        replicas=DatabaseReplicas(requested=replicas),
        postgres=DatabasePostgres(major_version=int(major_version)),
    )
    client = QuomeClient(token=store.require_token())

    with _spinner("Creating database...", as_json):
        db = client.create_database(org_id, request)

    if as_json:
        click.echo(json.dumps(db.model_dump(mode="json"), indent=2))
        return

    print_success("Created database", [("ID", str(db.id)), ("Name", sanitize_terminal_output(db.name))])


@databases.command("get")
@click.argument("db_id", type=click.UUID)
@org_option
@json_option
@click.pass_obj
def get_database(store: ConfigStore, db_id: UUID, org_id: UUID | None, as_json: bool):
    """Show database details."""
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())

    with _spinner("Fetching database...", as_json):
        db = client.get_database(org_id, db_id)

    if as_json:
        click.echo(json.dumps(db.model_dump(mode="json"), indent=2))
        return

    requested = db.compute.requested
    print_detail(
        sanitize_terminal_output(db.name),
        [
            ("ID", str(db.id)),
            ("Name", sanitize_terminal_output(db.name)),
            ("Status", styled_status(_state(db), DATABASE_STATE_COLORS)),
            ("PostgreSQL", f"v{db.postgres.major_version}"),
            ("Compute", f"{requested.vcpu} vCPU, {requested.memory} memory"),
            ("Storage", db.storage.requested.disk_space),
            ("Replicas", str(db.replicas.requested)),
            ("Created", format_timestamp(db.created_at)),
            ("Updated", format_timestamp(db.updated_at)),
        ],
    )


@databases.command("update")
@click.argument("db_id", type=click.UUID)
@click.option("--name", default=None, help="New name")
@click.option("--vcpu", default=None, help="Number of vCPUs")
@click.option("--memory", default=None, help="Memory allocation (e.g., 2Gi)")
@click.option("--disk", default=None, help="Disk space (e.g., 1024Mi)")
@click.option("--replicas", type=click.IntRange(min=1), default=None, help="Number of replicas")
@org_option
@json_option
@click.pass_obj
def update_database(
    store: ConfigStore,
    db_id: UUID,
    name: str | None,
    vcpu: str | None,
    memory: str | None,
    disk: str | None,
    replicas: int | None,
    org_id: UUID | None,
    as_json: bool,
):
    """Rename or resize a database. Only the given settings change.

    vCPU and memory are sent together; when only one is given the other
    keeps its current value.
    """
    org_id = store.resolve_org(org_id)
    client = QuomeClient(token=store.require_token())

    compute = None
    if vcpu is not None or memory is not None:
        if vcpu is None or memory is None:
            current = client.get_database(org_id, db_id).compute.requested
            vcpu = vcpu if vcpu is not None else current.vcpu
            memory = memory if memory is not None else current.memory
        compute = DatabaseCompute(requested=ComputeRequested(vcpu=vcpu, memory=memory))

    request = UpdateDatabaseRequest(
        name=name,
        compute=compute,
        storage=DatabaseStorage(requested=StorageRequested(disk_space=disk)) if disk else None,
        replicas=DatabaseReplicas(requested=replicas) if replicas is not None else None,
    )

    with _spinner("Updating database...", as_json):
        db = client.update_database(org_id, db_id, request)

    if as_json:
        click.echo(json.dumps(db.model_dump(mode="json"), indent=2))
        return

    print_success("Updated database", [("ID", str(db.id)), ("Name", sanitize_terminal_output(db.name))])


@databases.command("delete")
@click.argument("db_id", type=click.UUID)
@org_option
@force_option
@click.pass_obj
def delete_database(store: ConfigStore, db_id: UUID, org_id: UUID | None, force: bool):
    """Delete a database and its data. This cannot be undone."""
    org_id = store.resolve_org(org_id)
    if not force:
        if not click.confirm(f"Are you sure you want to delete database {db_id}?", default=False):
            click.echo("Cancelled.")
            return

    client = QuomeClient(token=store.require_token())

    with _spinner("Deleting database...", False):
        client.delete_database(org_id, db_id)

    print_success("Deleted database", [("ID", str(db_id))])
