"""Link the current directory to an organization and application.

Commands that work on "the current org" or "the current app" read the
link of the directory they are run in. Links are stored per absolute
path in ~/.quome/config.json.

Usage:
    quome link                       # Pick interactively
    quome link --org ID [--app ID]   # Non-interactive
    quome unlink
"""

import sys
from uuid import UUID

import click
import questionary

from ..platform.client import QuomeClient
from ..platform.store import ConfigStore
from ..platform.types import App, LinkedContext, Organization
from ..render import PROMPT_STYLE
from ..utils import sanitize_terminal_output

SKIP_APP = "_skip"


def _ask(question: questionary.Question):
    answer = question.ask()
    if answer is None:
        click.echo("Cancelled.", err=True)
        sys.exit(1)
    return answer


def _choose_org(client: QuomeClient, org_id: UUID | None) -> Organization | None:
    if org_id is not None:
        return client.get_org(org_id)

    orgs = client.list_orgs()
    if not orgs:
        return None
    choices = [
        questionary.Choice(f"{sanitize_terminal_output(o.name)} ({o.id})", value=o)
        for o in orgs
    ]
    return _ask(
        questionary.select("Select organization:", choices=choices, style=PROMPT_STYLE)
    )


def _choose_app(client: QuomeClient, org_id: UUID, app_id: UUID | None) -> App | None:
    if app_id is not None:
        return client.get_app(org_id, app_id)

    apps = client.list_apps(org_id)
    if not apps:
        click.echo("No applications found in this organization.")
        return None
    choices = [
        questionary.Choice(f"{sanitize_terminal_output(a.name)} ({a.id})", value=a)
        for a in apps
    ]
    choices.append(questionary.Choice("(Skip - don't link an app)", value=SKIP_APP))
    answer = _ask(
        questionary.select("Select application:", choices=choices, style=PROMPT_STYLE)
    )
    return None if answer == SKIP_APP else answer


@click.command()
@click.option("--org", "org_id", type=click.UUID, default=None, help="Organization ID (skips selection)")
@click.option("--app", "app_id", type=click.UUID, default=None, help="Application ID (skips selection)")
@click.pass_obj
def link(store: ConfigStore, org_id: UUID | None, app_id: UUID | None) -> None:
    """Link the current directory to an organization and application.

    Examples:
        quome link
        quome link --org 6a1c... --app 0f3e...
    """
    client = QuomeClient(token=store.require_token())

    org = _choose_org(client, org_id)
    if org is None:
        click.echo("No organizations found. Create one in the Quome dashboard first.")
        return
    app = _choose_app(client, org.id, app_id)

    store.set_linked(
        LinkedContext(
            org_id=org.id,
            org_name=org.name,
            app_id=app.id if app else None,
            app_name=app.name if app else None,
        )
    )
    store.save()

    click.echo(f"{click.style('Success!', fg='green', bold=True)} Linked to:")
    org_name = sanitize_terminal_output(org.name)
    click.echo(f"  {click.style('Organization:', dim=True)} {click.style(org_name, fg='cyan')}")
    if app:
        app_name = sanitize_terminal_output(app.name)
        click.echo(f"  {click.style('Application:', dim=True)} {click.style(app_name, fg='cyan')}")


@click.command()
@click.pass_obj
def unlink(store: ConfigStore) -> None:
    """Remove the current directory's link."""
    if not store.clear_linked():
        click.echo("Not linked to any organization or application.")
        return

    store.save()
    click.echo(f"{click.style('Success!', fg='green', bold=True)} Unlinked current directory.")
