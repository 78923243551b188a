"""Show the authenticated user."""

import json

import click

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import print_detail
from ..utils import Spinner, sanitize_terminal_output


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def whoami(store: ConfigStore, as_json: bool) -> None:
    """Show the current user and the directory's linked context."""
    client = QuomeClient(token=store.require_token())

    with Spinner("Fetching user info...", enabled=False if as_json else None):
        user = client.get_current_user()

    if as_json:
        click.echo(json.dumps(user.model_dump(mode="json"), indent=2))
        return

    details = [
        ("ID", str(user.id)),
        ("Name", sanitize_terminal_output(user.name)),
        ("Email", user.email),
    ]
    linked = store.get_linked()
    if linked:
        details.append(("Organization", sanitize_terminal_output(linked.org_name)))
        if linked.app_name:
            details.append(("Application", sanitize_terminal_output(linked.app_name)))

    print_detail(sanitize_terminal_output(user.name or user.email), details)
