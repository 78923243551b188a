"""CLI commands for the AI app-building agent.

A workflow is started with `quome agent start`, which by default keeps
polling the server and shows progress until the app is deployed or the
build fails. The other commands address an existing workflow by its
thread ID.
"""

import json
import signal
import sys
import threading
from collections.abc import Callable
from uuid import UUID

import click

from ..platform.client import QuomeClient
from ..platform.config import WATCH_POLL_INTERVAL
from ..platform.store import ConfigStore
from ..platform.types import (
    AgentState,
    ColorPreferences,
    StackConfig,
    StartAgentRequest,
    TechStack,
)
from ..platform.watch import WatchRenderer, watch_workflow
from ..render import (
    TerminalWatchRenderer,
    print_agent_state,
    print_error,
    print_success,
)
from ..utils import Spinner, sanitize_terminal_output

DEFAULT_APP_NAME = "your app"


def _spinner(text: str, quiet: bool) -> Spinner:
    return Spinner(text, enabled=False if quiet else None)


def _echo_json(model) -> None:
    click.echo(json.dumps(model.model_dump(mode="json"), indent=2))


def build_start_request(
    prompt: str,
    name: str | None = None,
    github: bool = False,
    parallel: bool = False,
    accessibility: str = "AA",
    backend: str | None = None,
    backend_lang: str | None = None,
    frontend: str | None = None,
    frontend_lang: str | None = None,
    database: str | None = None,
    primary_color: str | None = None,
    secondary_color: str | None = None,
) -> StartAgentRequest:
    """Assemble the start request from CLI options.

    Tech stack and colour preferences are only sent when at least one of
    their options was given.
    """
    tech_stack = None
    if any((backend, backend_lang, frontend, frontend_lang, database)):
        tech_stack = TechStack(
            backend=(
                StackConfig(stack=backend, language=backend_lang)
                if backend or backend_lang
                else None
            ),
            frontend=(
                StackConfig(stack=frontend, language=frontend_lang)
                if frontend or frontend_lang
                else None
            ),
            database=database,
        )

    color_preferences = None
    if primary_color or secondary_color:
        color_preferences = ColorPreferences(
            primary_color=primary_color, secondary_color=secondary_color
        )

    return StartAgentRequest(
        prompt=prompt,
        project_name=name,
        include_github=github,
        parallel_mode=parallel,
        accessibility_target=accessibility,
        tech_stack=tech_stack,
        color_preferences=color_preferences,
    )


def _state_fetcher(
    client: QuomeClient, thread_id: UUID, first: AgentState | None = None
) -> Callable[[], AgentState]:
    """Poll function for the watch loop, optionally replaying one snapshot first."""
    pending = [first] if first is not None else []

    def fetch() -> AgentState:
        if pending:
            return pending.pop()
        return client.get_workflow_state(thread_id)

    return fetch


def watch_progress(
    client: QuomeClient,
    thread_id: UUID,
    prompt: str = "",
    app_name: str = DEFAULT_APP_NAME,
    as_json: bool = False,
    first: AgentState | None = None,
) -> None:
    """Watch a workflow to the end and report it.

    A failed build is reported in the summary; it is not a CLI error.
    Ctrl+C stops watching (the workflow keeps running on the server).
    Cancellation is checked between polls, so an interrupt that lands
    during a state request takes effect once that request returns or
    times out (30 seconds by default).
    """
    cancel = threading.Event()
    renderer: WatchRenderer
    if as_json:
        renderer = WatchRenderer()
    else:
        renderer = TerminalWatchRenderer(app_name=app_name, prompt=prompt)
        renderer.begin()

    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: cancel.set())
    try:
        result = watch_workflow(
            _state_fetcher(client, thread_id, first),
            renderer,
            poll_interval=WATCH_POLL_INTERVAL,
            cancel=cancel,
        )
    finally:
        signal.signal(signal.SIGINT, previous_handler)

    if as_json:
        _echo_json(result.state)


@click.group()
def agent():
    """AI-powered app building agent."""
    pass


@agent.command("start")
@click.argument("prompt")
@click.option("--name", default=None, help="Project name (auto-generated if not provided)")
@click.option("--github", is_flag=True, help="Create a GitHub repository for the app")
@click.option(
    "--parallel", is_flag=True, help="Run build stages in parallel for faster completion"
)
@click.option(
    "--accessibility",
    type=click.Choice(["A", "AA", "AAA"]),
    default="AA",
    show_default=True,
    help="WCAG accessibility compliance target",
)
@click.option("--backend", default=None, help="Backend stack (e.g., fastapi, express, django)")
@click.option(
    "--backend-lang", default=None, help="Backend language (e.g., python, typescript)"
)
@click.option("--frontend", default=None, help="Frontend stack (e.g., react, vue, nextjs)")
@click.option(
    "--frontend-lang", default=None, help="Frontend language (e.g., javascript, typescript)"
)
@click.option(
    "--database", default=None, help="Database type (e.g., postgresql, sqlite, mongodb)"
)
@click.option("--primary-color", default=None, help="Primary color hex code (e.g., #3B82F6)")
@click.option("--secondary-color", default=None, help="Secondary color hex code")
@click.option(
    "--no-watch", is_flag=True, help="Don't watch progress (just start and print thread ID)"
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def start(
    store: ConfigStore,
    prompt: str,
    name: str | None,
    github: bool,
    parallel: bool,
    accessibility: str,
    backend: str | None,
    backend_lang: str | None,
    frontend: str | None,
    frontend_lang: str | None,
    database: str | None,
    primary_color: str | None,
    secondary_color: str | None,
    no_watch: bool,
    as_json: bool,
):
    """Start a new AI app building workflow.

    PROMPT describes the application to build.

    Examples:
        quome agent start "A todo app with user accounts"
        quome agent start "Recipe sharing site" --name recipes --github
        quome agent start "Inventory API" --backend fastapi --database postgresql
    """
    request = build_start_request(
        prompt,
        name=name,
        github=github,
        parallel=parallel,
        accessibility=accessibility,
        backend=backend,
        backend_lang=backend_lang,
        frontend=frontend,
        frontend_lang=frontend_lang,
        database=database,
        primary_color=primary_color,
        secondary_color=secondary_color,
    )
    client = QuomeClient(token=store.require_token())

    try:
        with _spinner("Starting AI workflow...", as_json):
            response = client.start_workflow(request)
    except KeyboardInterrupt:
        click.echo("\nCancelled.", err=True)
        sys.exit(130)

    if no_watch:
        if as_json:
            _echo_json(response)
            return
        print_success(
            "Started AI workflow",
            [
                ("Thread ID", str(response.thread_id)),
                ("Status", sanitize_terminal_output(response.status)),
                ("Message", sanitize_terminal_output(response.message)),
            ],
        )
        click.echo()
        click.echo(
            click.style("Use 'quome agent state <thread-id>' to check progress.", dim=True)
        )
        return

    watch_progress(
        client,
        response.thread_id,
        prompt=prompt,
        app_name=name or DEFAULT_APP_NAME,
        as_json=as_json,
    )


@agent.command("prompt")
@click.argument("thread_id", type=click.UUID)
@click.argument("text")
@click.option("--watch", "-w", is_flag=True, help="Watch progress after sending prompt")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def send_prompt(store: ConfigStore, thread_id: UUID, text: str, watch: bool, as_json: bool):
    """Send a follow-up prompt to an active workflow.

    Examples:
        quome agent prompt 3f2a... "Make the header blue"
        quome agent prompt 3f2a... "Add a contact page" --watch
    """
    client = QuomeClient(token=store.require_token())

    with _spinner("Sending prompt...", as_json):
        response = client.send_prompt(thread_id, text)

    if as_json and not watch:
        _echo_json(response)
        return

    if not response.success:
        print_error(response.message)
        return

    if not as_json:
        print_success("Prompt sent", [("Message", sanitize_terminal_output(response.message))])

    if watch:
        if not as_json:
            click.echo()
        watch_progress(client, thread_id, prompt=text, as_json=as_json)


@agent.command("state")
@click.argument("thread_id", type=click.UUID)
@click.option("--watch", "-w", is_flag=True, help="Watch progress continuously")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def get_state(store: ConfigStore, thread_id: UUID, watch: bool, as_json: bool):
    """Get the current state of a workflow."""
    client = QuomeClient(token=store.require_token())

    with _spinner("Fetching workflow state...", as_json or watch):
        state = client.get_workflow_state(thread_id)

    if watch:
        watch_progress(
            client,
            thread_id,
            app_name=state.app_name or DEFAULT_APP_NAME,
            as_json=as_json,
            first=state,
        )
        return

    if as_json:
        _echo_json(state)
    else:
        print_agent_state(state)


@agent.command("stop")
@click.argument("thread_id", type=click.UUID)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation prompt")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def stop(store: ConfigStore, thread_id: UUID, force: bool, as_json: bool):
    """Stop an active workflow.

    The server may report the workflow as working for a short while
    after it accepted the stop request.
    """
    if not force:
        if not click.confirm(
            f"Are you sure you want to stop workflow {thread_id}?", default=False
        ):
            click.echo("Cancelled.")
            return

    client = QuomeClient(token=store.require_token())

    with _spinner("Stopping workflow...", as_json):
        response = client.stop_workflow(thread_id)

    if as_json:
        _echo_json(response)
    elif response.success:
        print_success("Workflow stopped", [("Message", sanitize_terminal_output(response.message))])
    else:
        print_error(response.message)


@agent.command("pull")
@click.argument("thread_id", type=click.UUID)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def pull(store: ConfigStore, thread_id: UUID, as_json: bool):
    """Pull the latest changes from a workflow."""
    client = QuomeClient(token=store.require_token())

    with _spinner("Pulling latest changes...", as_json):
        response = client.pull_latest(thread_id)

    if as_json:
        _echo_json(response)
    elif response.success:
        print_success(
            "Pulled latest changes", [("Message", sanitize_terminal_output(response.message))]
        )
        if response.state is not None:
            click.echo()
            print_agent_state(response.state)
    else:
        print_error(response.message)
