"""Log out from the Quome platform.

The `quome logout` command clears the stored API key. Linked directories
are kept.
"""

import click

from ..platform.store import ConfigStore


@click.command()
@click.pass_obj
def logout(store: ConfigStore) -> None:
    """Log out from the Quome platform.

    Clears the stored credentials from ~/.quome/config.json.
    """
    if store.config.user is None:
        click.echo("Not logged in.")
        return

    store.clear_user()
    store.save()
    click.echo(f"{click.style('Success!', fg='green', bold=True)} Logged out successfully.")
