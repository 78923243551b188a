"""Terminal rendering for CLI output.

Panels and tables for plain command results, the detailed workflow
state view, and :class:`TerminalWatchRenderer`, the live progress
display driven by the watch loop.
"""

from __future__ import annotations

import dataclasses
import sys
import threading
import time
from collections.abc import Sequence

import click
from questionary import Style

from .platform.types import AgentMessage, AgentState, MessageKind, Phase
from .platform.watch import WatchRenderer, WatchResult, WatchView
from .utils import Spinner, format_elapsed, sanitize_terminal_output, truncate

# Pastel prompt style for interactive questions
PROMPT_STYLE = Style(
    [
        ("qmark", "fg:#88c0d0"),  # pastel cyan question mark
        ("question", "fg:#d8dee9 bold"),  # light grey-white question text
        ("answer", "fg:#a3be8c"),  # soft green answers
        ("pointer", "fg:#88c0d0 bold"),  # cyan pointer
        ("highlighted", "fg:#88c0d0 bold"),  # cyan for focused item
        ("instruction", "fg:#4c566a"),  # muted grey instructions
    ]
)

PHASE_ICONS = {
    Phase.PLANNING: "📋",
    Phase.BUILDING: "🔨",
    Phase.TESTING: "🧪",
    Phase.DEPLOYING: "🚀",
    Phase.DEPLOYED: "✅",
    Phase.COMPLETE: "✅",
    Phase.FAILED: "❌",
    Phase.UNKNOWN: "⚡",
}

MESSAGE_LABELS = {
    MessageKind.USER: ("You", "blue"),
    MessageKind.ASSISTANT: ("AI", "green"),
    MessageKind.SYSTEM: ("System", "yellow"),
    MessageKind.TOOL: ("Tool", "magenta"),
}

STATUS_WIDTH = 50
MESSAGE_WIDTH = 70
PROMPT_WIDTH = 60
DETAIL_MESSAGE_WIDTH = 100

BOX_WIDTH = 58


# ==================== PANELS & TABLES ====================


def _print_pairs(details: Sequence[tuple[str, str]]) -> None:
    if not details:
        return
    width = max(len(key) for key, _ in details) + 1
    for key, value in details:
        click.echo(f"  {key + ':':<{width}} {value}")


def print_success(title: str, details: Sequence[tuple[str, str]] = ()) -> None:
    """Print a check-marked title followed by aligned key/value rows."""
    click.echo(f"{click.style('✓', fg='green')} {click.style(title, fg='green', bold=True)}")
    _print_pairs(details)


def print_detail(title: str, details: Sequence[tuple[str, str]] = ()) -> None:
    """Print a bold title followed by aligned key/value rows."""
    click.echo(click.style(title, bold=True))
    _print_pairs(details)


def print_error(message: str) -> None:
    """Print a server-reported failure that is not an API error."""
    click.echo(
        f"{click.style('error:', fg='red', bold=True)} {sanitize_terminal_output(message)}",
        err=True,
    )


def print_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    """Print a left-aligned table sized to its widest cells."""
    if not rows:
        return
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))
    header = "  ".join(f"{h:<{w}}" for h, w in zip(headers, widths))
    click.echo(click.style(header, bold=True))
    click.echo("-" * len(header))
    for row in rows:
        click.echo("  ".join(f"{c:<{w}}" for c, w in zip(row, widths)).rstrip())


# ==================== RESOURCE STATUS ====================

DEPLOYMENT_STATUS_COLORS = {
    "created": "yellow",
    "in_progress": "blue",
    "deployed": "green",
    "success": "green",
    "failed": "red",
}

DATABASE_STATE_COLORS = {
    "Initializing": "yellow",
    "Ready": "green",
    "Paused": None,
    "Stopping": "yellow",
    "Error": "red",
}

LOG_LEVEL_COLORS = {
    "debug": None,
    "info": "blue",
    "warn": "yellow",
    "error": "red",
}


def styled_status(value: str, colors: dict[str, str | None]) -> str:
    """Colour a status string; unknown values and None entries are dimmed."""
    text = sanitize_terminal_output(value)
    color = colors.get(value)
    if color is None:
        return click.style(text, dim=True)
    return click.style(text, fg=color)


# ==================== WORKFLOW STATE ====================


def phase_icon(phase: str | None) -> str:
    kind = Phase.parse(phase)
    return PHASE_ICONS[kind] if kind else PHASE_ICONS[Phase.UNKNOWN]


def message_label(message: AgentMessage) -> str:
    """Coloured author label; unknown types show the raw type."""
    kind = message.kind
    if kind is MessageKind.UNKNOWN:
        return sanitize_terminal_output(message.type)
    label, color = MESSAGE_LABELS[kind]
    return click.style(label, fg=color)


def _heading(title: str) -> None:
    click.echo()
    click.echo(click.style(title, bold=True))


def _field(label: str, value: object) -> None:
    click.echo(f"  {click.style(label + ':', fg='cyan')} {value}")


def print_agent_state(state: AgentState) -> None:
    """Print everything a snapshot says about a workflow."""
    clean = sanitize_terminal_output

    click.echo(click.style("Workflow State", bold=True))
    _field("Thread ID", state.thread_id)
    _field("Working", "Yes" if state.is_working else "No")
    if state.status:
        _field("Status", clean(state.status))
    if state.phase:
        _field("Phase", clean(state.phase))
    if state.progress and state.progress.percentage is not None:
        current = state.progress.current_stage or 0
        total = state.progress.total_stages or 0
        _field("Progress", f"{state.progress.percentage:.0f}% (stage {current}/{total})")

    ctx = state.app_context
    if ctx and ctx.name:
        _heading("Application")
        _field("Name", clean(ctx.name))
    if ctx and ctx.goal:
        _field("Goal", clean(ctx.goal))

    deployment = state.deployment
    if deployment and deployment.url:
        _heading("Deployment")
        _field("URL", deployment.url)
    if deployment and deployment.status:
        _field("Status", clean(deployment.status))

    container = state.container_info
    if container and (container.frontend_url or container.backend_url):
        _heading("Preview")
        if container.frontend_url:
            _field("Frontend", container.frontend_url)
        if container.backend_url:
            _field("Backend", container.backend_url)
        if container.is_healthy is not None:
            _field("Healthy", "Yes" if container.is_healthy else "No")

    if state.github_repo_created and state.github_repo_url:
        _heading("GitHub")
        _field("Repository", state.github_repo_url)

    if state.tests_ran:
        _heading("Tests")
        passed = click.style(str(state.tests_passed or 0), fg="green")
        failed = click.style(str(state.tests_failed or 0), fg="red")
        click.echo(f"  {passed} passed, {failed} failed ({state.tests_ran} total)")

    if state.files:
        click.echo()
        click.echo(f"{click.style('Files:', fg='cyan')} {len(state.files)} files generated")

    if state.messages:
        _heading("Recent Messages")
        for msg in state.messages[-3:]:
            if msg.content is None:
                continue
            text = truncate(clean(msg.content), DETAIL_MESSAGE_WIDTH)
            click.echo(f"  {message_label(msg)} {click.style(text, dim=True)}")


def _box_line(text: str = "", style: dict | None = None) -> str:
    border = click.style("║", fg="green")
    padded = f"  {text}".ljust(BOX_WIDTH)
    if style:
        padded = click.style(padded, **style)
    return f"  {border}{padded}{border}"


def print_deployment_success(state: AgentState, deployment_url: str | None) -> None:
    """Print the 'app is live' box and what the workflow produced."""
    edge = "═" * BOX_WIDTH
    click.echo(click.style(f"  ╔{edge}╗", fg="green"))
    click.echo(_box_line())
    click.echo(_box_line("🎉 Your app is live!", {"bold": True}))
    click.echo(_box_line())
    if deployment_url:
        click.echo(_box_line(f" {deployment_url}", {"fg": "cyan", "bold": True}))
        click.echo(_box_line())
    click.echo(click.style(f"  ╚{edge}╝", fg="green"))
    click.echo()

    details: list[tuple[str, str]] = []
    if state.app_name:
        details.append(("App Name", sanitize_terminal_output(state.app_name)))
    if state.app_uuid:
        details.append(("App ID", str(state.app_uuid)))
    if state.github_repo_created and state.github_repo_url:
        details.append(("GitHub", state.github_repo_url))
    if state.files:
        details.append(("Files", f"{len(state.files)} files generated"))
    if state.tests_ran:
        details.append(
            ("Tests", f"{state.tests_passed or 0} passed, {state.tests_failed or 0} failed")
        )
    for key, value in details:
        click.echo(f"  {click.style(key + ':', dim=True)} {value}")

    click.echo()
    click.echo(
        click.style(
            f"  Run 'quome agent prompt {state.thread_id} \"your changes\"' to iterate.",
            dim=True,
        )
    )


def print_build_failed(state: AgentState) -> None:
    """Print the failure summary with the last status line."""
    click.echo(
        f"  {click.style('✗', fg='red', bold=True)} "
        f"{click.style('Build failed', fg='red', bold=True)}"
    )
    if state.status:
        click.echo(click.style(f"  {sanitize_terminal_output(state.status)}", dim=True))


# ==================== WATCH DISPLAY ====================


class TerminalWatchRenderer(WatchRenderer):
    """Progress display for a watched workflow.

    On a terminal, a block of up to four lines (progress bar, spinner
    with status, phase, preview/live URLs) is redrawn in place on stderr
    and agent messages scroll above it on stdout. Elsewhere each line is
    printed once whenever its content changes.

    Args:
        app_name: Name shown in the header.
        prompt: Prompt shown (truncated) under the header.
        live: Force in-place redrawing on or off. Defaults to stderr.isatty().
    """

    BAR_WIDTH = 40
    _INTERVAL = 0.1  # seconds between spinner frames

    def __init__(self, app_name: str = "your app", prompt: str = "", live: bool | None = None):
        self.app_name = app_name
        self.prompt = prompt
        self._live = sys.stderr.isatty() if live is None else live
        self._view: WatchView | None = None
        self._printed: dict[str, str] = {}
        self._lock = threading.Lock()
        self._drawn = 0
        self._frame = 0
        self._running = False
        self._thread: threading.Thread | None = None
        self._start_time = time.monotonic()

    def begin(self) -> None:
        """Print the header and start animating."""
        click.echo()
        click.echo(click.style(f"  Building: {self.app_name}", fg="cyan", bold=True))
        if self.prompt:
            click.echo(click.style(f"  {truncate(self.prompt, PROMPT_WIDTH)}", dim=True))
        click.echo()
        self._start_time = time.monotonic()
        if self._live:
            self._running = True
            self._thread = threading.Thread(target=self._animate, daemon=True)
            self._thread.start()

    # ---- WatchRenderer ----

    def update(self, view: WatchView) -> None:
        snapshot = dataclasses.replace(view, info=list(view.info))
        with self._lock:
            self._view = snapshot
            if self._live:
                self._redraw()
                return
        self._print_changes(snapshot)

    def message(self, message: AgentMessage) -> None:
        text = truncate(sanitize_terminal_output(message.content or ""), MESSAGE_WIDTH)
        line = f"  {click.style('AI:', fg='green', bold=True)} {click.style(text, dim=True)}"
        with self._lock:
            if self._live:
                self._clear()
                click.echo(line)
                self._redraw()
                return
        click.echo(line)

    def close(self) -> None:
        with self._lock:
            self._running = False
        if self._thread:
            self._thread.join(timeout=0.5)
            self._thread = None
        with self._lock:
            self._clear()

    def finish(self, result: WatchResult) -> None:
        click.echo()
        if result.succeeded:
            print_deployment_success(result.state, result.deployment_url)
        else:
            print_build_failed(result.state)

    # ---- line building ----

    def _progress_line(self, view: WatchView) -> str:
        filled = round(self.BAR_WIDTH * view.percentage / 100)
        bar = click.style("━" * filled, fg="cyan") + click.style(
            "─" * (self.BAR_WIDTH - filled), dim=True
        )
        line = f"  {bar} {view.percentage:>3}%"
        if view.stage:
            line += f"  Stage {view.stage[0]}/{view.stage[1]}"
        return line

    def _status_text(self, view: WatchView) -> str:
        if view.status is None:
            return "Working..."
        return truncate(sanitize_terminal_output(view.status), STATUS_WIDTH)

    def _phase_line(self, view: WatchView) -> str | None:
        if view.phase is None:
            return None
        phase = sanitize_terminal_output(view.phase).upper()
        return click.style(f"  {phase_icon(view.phase)} Phase: {phase}", dim=True)

    def _info_line(self, view: WatchView) -> str | None:
        if not view.info:
            return None
        parts = []
        for label, url in view.info:
            if label == "Live":
                parts.append(f"{label}: {click.style(url, fg='green', bold=True)}")
            else:
                parts.append(f"{label}: {click.style(url, fg='cyan')}")
        return "  " + "  │  ".join(parts)

    # ---- live mode (call with lock held) ----

    def _block(self) -> list[str]:
        frame = Spinner.FRAMES[self._frame % len(Spinner.FRAMES)]
        frame = click.style(frame, fg="cyan")
        elapsed = click.style(format_elapsed(time.monotonic() - self._start_time), dim=True)
        view = self._view
        if view is None:
            return [f"  {frame} Waiting for workflow... {elapsed}"]
        lines = [
            self._progress_line(view),
            f"  {frame} {self._status_text(view)} {elapsed}",
        ]
        for extra in (self._phase_line(view), self._info_line(view)):
            if extra:
                lines.append(extra)
        return lines

    def _clear(self) -> None:
        if self._drawn:
            sys.stderr.write(f"\033[{self._drawn}F\033[J")
            sys.stderr.flush()
            self._drawn = 0

    def _redraw(self) -> None:
        lines = self._block()
        out = f"\033[{self._drawn}F" if self._drawn else ""
        out += "".join(f"\r\033[K{line}\n" for line in lines)
        if len(lines) < self._drawn:
            out += "\033[J"
        sys.stderr.write(out)
        sys.stderr.flush()
        self._drawn = len(lines)

    def _animate(self) -> None:
        while True:
            with self._lock:
                if not self._running:
                    break
                self._frame += 1
                self._redraw()
            time.sleep(self._INTERVAL)

    # ---- plain mode ----

    def _print_changes(self, view: WatchView) -> None:
        lines = {
            "progress": self._progress_line(view),
            "status": f"  • {self._status_text(view)}" if view.status else None,
            "phase": self._phase_line(view),
            "info": self._info_line(view),
        }
        for key, line in lines.items():
            if line is None or self._printed.get(key) == line:
                continue
            self._printed[key] = line
            click.echo(line, err=True)
