"""Options shared by the resource commands."""

import click

org_option = click.option(
    "--org",
    "org_id",
    type=click.UUID,
    default=None,
    help="Organization ID (uses linked org if not provided)",
)

app_option = click.option(
    "--app",
    "app_id",
    type=click.UUID,
    default=None,
    help="Application ID (uses linked app if not provided)",
)

json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")

force_option = click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
