"""Watch loop for agent workflows.

A workflow runs on the server; the client only observes it by fetching
a fresh :class:`AgentState` every few seconds. :func:`watch_workflow`
drives that polling, folds each snapshot into a :class:`WatchTracker`
(message cursor, last known deployment URL, display view) and hands the
increments to a :class:`WatchRenderer` until the workflow reaches a
terminal condition.

Errors from a poll end the watch immediately; nothing is retried.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .config import WATCH_POLL_INTERVAL
from .errors import QuomeError
from .types import TERMINAL_PHASES, AgentMessage, AgentState, MessageKind, Phase

logger = logging.getLogger(__name__)


class WatchOutcome(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


class WatchCancelled(QuomeError):
    """The watch was interrupted through its cancel event."""

    def __init__(self, message: str = "Watch cancelled") -> None:
        super().__init__(message)


@dataclass
class WatchView:
    """What the progress display currently shows.

    Fields are only overwritten by values present in a snapshot, so a
    poll without progress keeps the previous bar position.
    """

    percentage: int = 0
    stage: tuple[int, int] | None = None
    status: str | None = None
    phase: str | None = None
    info: list[tuple[str, str]] = field(default_factory=list)

    @property
    def phase_kind(self) -> Phase | None:
        return Phase.parse(self.phase)


@dataclass
class WatchResult:
    """How a watch ended."""

    outcome: WatchOutcome
    state: AgentState
    deployment_url: str | None = None
    polls: int = 0

    @property
    def succeeded(self) -> bool:
        return self.outcome is WatchOutcome.SUCCESS


def terminal_outcome(state: AgentState) -> WatchOutcome | None:
    """Decide whether a snapshot ends the watch.

    A live deployment wins over everything else, including is_working.
    Otherwise the workflow must be idle and in a terminal phase.

    Returns:
        The outcome, or None if polling should continue.
    """
    if state.is_deployed:
        return WatchOutcome.SUCCESS
    phase = state.phase_kind
    if not state.is_working and phase in TERMINAL_PHASES:
        return WatchOutcome.FAILED if phase is Phase.FAILED else WatchOutcome.SUCCESS
    return None


class WatchTracker:
    """Cursors carried from one poll to the next."""

    def __init__(self) -> None:
        self.rendered_messages = 0
        self.deployment_url: str | None = None
        self.view = WatchView()

    def observe(self, state: AgentState) -> list[AgentMessage]:
        """Fold a snapshot into the view and cursors.

        Args:
            state: Freshly polled snapshot.

        Returns:
            Messages to render, each returned exactly once per watch.
        """
        view = self.view

        if state.progress is not None:
            if state.progress.percentage is not None:
                view.percentage = max(0, min(100, round(state.progress.percentage)))
            current, total = state.progress.current_stage, state.progress.total_stages
            if current is not None and total is not None:
                view.stage = (current, total)

        if state.status is not None:
            view.status = state.status
        if state.phase is not None:
            view.phase = state.phase

        info: list[tuple[str, str]] = []
        if state.container_info and state.container_info.frontend_url:
            info.append(("Preview", state.container_info.frontend_url))
        if state.deployment and state.deployment.url:
            self.deployment_url = state.deployment.url
            if state.is_deployed:
                info.append(("Live", state.deployment.url))
        if info:
            view.info = info

        return self._new_messages(state.messages)

    def _new_messages(self, messages: list[AgentMessage]) -> list[AgentMessage]:
        if len(messages) < self.rendered_messages:
            logger.warning(
                "Message list shrank from %d to %d; waiting for it to grow back",
                self.rendered_messages,
                len(messages),
            )
            return []
        fresh = [
            msg
            for msg in messages[self.rendered_messages :]
            if msg.kind is MessageKind.ASSISTANT and msg.content
        ]
        if len(messages) > self.rendered_messages:
            logger.debug(
                "Messages %d..%d seen, %d to render",
                self.rendered_messages,
                len(messages) - 1,
                len(fresh),
            )
        self.rendered_messages = len(messages)
        return fresh

    def preferred_url(self, state: AgentState) -> str | None:
        """Deployment URL for the summary.

        The last URL seen while polling wins, since a later snapshot may
        have dropped it.
        """
        if self.deployment_url:
            return self.deployment_url
        return state.deployment.url if state.deployment else None


class WatchRenderer:
    """Receives the watch loop's output. This base class draws nothing.

    Used as-is for --json output, where only the final structure is
    printed.
    """

    def update(self, view: WatchView) -> None:
        pass

    def message(self, message: AgentMessage) -> None:
        pass

    def close(self) -> None:
        """Tear down live display. Called on every exit path."""

    def finish(self, result: WatchResult) -> None:
        """Render the final summary. Only called when the watch completes."""


def watch_workflow(
    fetch_state: Callable[[], AgentState],
    renderer: WatchRenderer | None = None,
    *,
    poll_interval: float = WATCH_POLL_INTERVAL,
    cancel: threading.Event | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> WatchResult:
    """Poll a workflow until it finishes.

    Args:
        fetch_state: Returns a fresh snapshot. Any exception it raises
            aborts the watch and propagates unchanged.
        renderer: Display for progress, messages and the final summary.
        poll_interval: Seconds between polls.
        cancel: Optional event; once set, the watch raises WatchCancelled
            instead of polling again.
        sleep: Wait function used when no cancel event is given.

    Returns:
        The terminal outcome and the final snapshot.

    Raises:
        WatchCancelled: If ``cancel`` was set.
    """
    renderer = renderer or WatchRenderer()
    tracker = WatchTracker()
    try:
        result = _poll_until_terminal(
            fetch_state, renderer, tracker, poll_interval, cancel, sleep
        )
    finally:
        renderer.close()
    renderer.finish(result)
    return result


def _poll_until_terminal(
    fetch_state: Callable[[], AgentState],
    renderer: WatchRenderer,
    tracker: WatchTracker,
    poll_interval: float,
    cancel: threading.Event | None,
    sleep: Callable[[float], None],
) -> WatchResult:
    polls = 0
    while True:
        if cancel is not None and cancel.is_set():
            raise WatchCancelled()

        state = fetch_state()
        polls += 1
        logger.debug(
            "Poll %d: working=%s phase=%s messages=%d",
            polls,
            state.is_working,
            state.phase,
            len(state.messages),
        )

        new_messages = tracker.observe(state)
        outcome = terminal_outcome(state)
        if outcome is not None and state.is_deployed:
            tracker.view.percentage = 100

        renderer.update(tracker.view)
        for message in new_messages:
            renderer.message(message)

        if outcome is not None:
            logger.debug("Workflow finished after %d polls: %s", polls, outcome.value)
            return WatchResult(
                outcome=outcome,
                state=state,
                deployment_url=tracker.preferred_url(state),
                polls=polls,
            )

        if cancel is not None:
            if cancel.wait(poll_interval):
                raise WatchCancelled()
        else:
            sleep(poll_interval)
