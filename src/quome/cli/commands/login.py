"""Authenticate with the Quome platform.

The `quome login` command validates an API key against the Platform API
and stores it in ~/.quome/config.json.

Usage:
    quome login                # Prompt for the API key
    quome login --token KEY    # Non-interactive
"""

import sys

import click
import questionary

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..render import PROMPT_STYLE, print_success
from ..utils import Spinner


@click.command()
@click.option("--token", "-t", default=None, help="API key (will prompt if not provided)")
@click.pass_obj
def login(store: ConfigStore, token: str | None) -> None:
    """Authenticate with the Quome platform.

    The key is checked by fetching the current user before it is saved.

    Examples:
        quome login              # Interactive prompt
        quome login --token KEY  # Use API key
    """
    if token is None:
        click.echo(click.style("Generate an API key from the Quome dashboard.", dim=True))
        token = questionary.password("API Key:", style=PROMPT_STYLE).ask()
        if not token:
            click.echo("Cancelled.", err=True)
            sys.exit(1)

    client = QuomeClient(token=token)
    with Spinner("Validating token..."):
        user = client.get_current_user()

    store.set_user(token, user.id, user.email)
    store.save()

    print_success("Logged in", [("Email", user.email), ("User ID", str(user.id))])
