#!/usr/bin/env python3
"""Quome CLI - build and run apps on the Quome platform

Usage:
    quome login [--token=TOKEN]
    quome logout
    quome whoami
    quome link [--org=ID] [--app=ID]
    quome unlink
    quome orgs list|create|get
    quome apps list|create|get|update|delete
    quome members list|add
    quome keys list|create|delete
    quome deployments list|get
    quome logs [-n LIMIT]
    quome events [-n LIMIT]
    quome databases list|create|get|update|delete
    quome secrets list|set|get|delete
    quome agent start|prompt|state|stop|pull
    quome upgrade
"""

import logging
import sys

import click

from .commands import login, logout, whoami
from .commands.agent import agent
from .commands.apps import apps
from .commands.databases import databases
from .commands.deployments import deployments
from .commands.events import events
from .commands.keys import keys
from .commands.link import link, unlink
from .commands.logs import logs
from .commands.members import members
from .commands.orgs import orgs
from .commands.secrets import secrets
from .commands.upgrade import upgrade
from .platform.config import CLI_VERSION, CONFIG_FILE, is_debug_enabled
from .platform.errors import (
    APIError,
    ConfigError,
    InvalidResponseError,
    NotFoundError,
    QuomeError,
    RateLimitedError,
    TransportError,
    UnauthorizedError,
    UpgradeError,
)
from .platform.store import ConfigStore
from .platform.watch import WatchCancelled
from .utils import sanitize_terminal_output


@click.group()
@click.version_option(version=CLI_VERSION)
@click.option("--debug", is_flag=True, help="Log API traffic and polling to stderr")
@click.pass_context
def cli(ctx: click.Context, debug: bool):
    """Quome CLI - build and run apps on the Quome platform"""
    if debug or is_debug_enabled():
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    if ctx.obj is None:
        ctx.obj = ConfigStore()


# Authentication
cli.add_command(login.login)
cli.add_command(logout.logout)
cli.add_command(whoami.whoami)

# Directory context
cli.add_command(link)
cli.add_command(unlink)

# Organizations
cli.add_command(orgs)
cli.add_command(members)
cli.add_command(keys)
cli.add_command(events)

# Applications
cli.add_command(apps)
cli.add_command(deployments)
cli.add_command(logs)

# Data
cli.add_command(databases)
cli.add_command(secrets)

# AI app builder
cli.add_command(agent)

# Maintenance
cli.add_command(upgrade)


def error_hint(error: QuomeError) -> str | None:
    """Suggest what the user can do about an error."""
    if isinstance(error, UnauthorizedError):
        return "Hint: Run 'quome login' to authenticate."
    if isinstance(error, NotFoundError):
        return "Hint: Check the ID and try again."
    if isinstance(error, RateLimitedError):
        return "Hint: Too many requests. Wait a moment, then re-run the command."
    if isinstance(error, APIError) and error.status_code >= 500:
        return "Hint: This is a server issue. Please try again later."
    if isinstance(error, InvalidResponseError):
        return None
    if isinstance(error, TransportError):
        return "Hint: Check your internet connection and try again."
    if isinstance(error, ConfigError):
        return f"Hint: Fix or remove {CONFIG_FILE}."
    if isinstance(error, UpgradeError):
        return "Hint: Upgrade manually with 'pip install -U quome'."
    return None


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except WatchCancelled:
        click.echo("\nCancelled.", err=True)
        sys.exit(130)
    except QuomeError as e:
        click.echo(f"Error: {sanitize_terminal_output(e.message)}", err=True)
        hint = error_hint(e)
        if hint:
            click.echo(hint, err=True)
        sys.exit(1)
    except (click.Abort, KeyboardInterrupt):
        click.echo(err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        click.echo(
            "Hint: If this persists, try updating with 'pip install -U quome'.",
            err=True,
        )
        sys.exit(1)


if __name__ == "__main__":
    main()
