"""Upgrade the CLI to the latest release on PyPI.

Usage:
    quome upgrade          # Ask before installing
    quome upgrade --yes    # Install without asking
"""

import logging
import subprocess
import sys

import click
import requests

from ..platform.config import CLI_VERSION, DEFAULT_TIMEOUT, PACKAGE_NAME, PYPI_URL
from ..platform.errors import TransportError, UpgradeError
from ..render import print_success
from ..utils import Spinner

logger = logging.getLogger(__name__)


def fetch_latest_version(timeout: int = DEFAULT_TIMEOUT) -> str:
    """Return the newest version of the package published on PyPI."""
    try:
        resp = requests.get(PYPI_URL, timeout=timeout)
        resp.raise_for_status()
        return resp.json()["info"]["version"]
    except requests.exceptions.HTTPError as e:
        raise UpgradeError(f"Could not check for updates: {e}") from e
    except requests.exceptions.RequestException as e:
        raise TransportError("Could not reach PyPI to check for updates", e) from e
    except (ValueError, KeyError, TypeError) as e:
        raise UpgradeError("Unexpected response from PyPI") from e


def install_latest() -> None:
    """pip-install the latest release into the running interpreter."""
    cmd = [sys.executable, "-m", "pip", "install", "--upgrade", PACKAGE_NAME]
    logger.debug("Running %s", " ".join(cmd))
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        raise UpgradeError(f"pip upgrade failed: {e.stderr.strip()}") from e
    except OSError as e:
        raise UpgradeError(f"Could not run pip: {e}") from e


@click.command()
@click.option("--yes", "-y", is_flag=True, help="Upgrade without asking")
def upgrade(yes: bool):
    """Upgrade quome to the latest version."""
    click.echo(f"  Current version: {CLI_VERSION}")

    spinner = Spinner("Checking for updates...")
    with spinner:
        latest = fetch_latest_version()
    click.echo(f"  Latest version:  {latest}")

    if latest == CLI_VERSION:
        click.echo()
        print_success("quome is already up to date")
        return

    click.echo()
    if not yes and not click.confirm(f"Upgrade from {CLI_VERSION} to {latest}?", default=True):
        click.echo("Upgrade cancelled.")
        return

    spinner.start("Upgrading quome...")
    try:
        install_latest()
    finally:
        spinner.stop()
    print_success(f"Upgraded to {latest}")
