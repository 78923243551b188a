"""Shared utility functions for CLI commands."""

from __future__ import annotations

import re
import sys
import threading
import time
from datetime import datetime


def format_timestamp(ts: datetime | str | None, short: bool = False) -> str:
    """Format a timestamp as readable local time.

    Args:
        ts: Datetime or ISO 8601 timestamp string.
        short: If True, show only the date (for list views).

    Returns:
        Formatted local time string.
    """
    if not ts:
        return ""
    if isinstance(ts, str):
        try:
            ts = datetime.fromisoformat(ts.replace("Z", "+00:00"))
        except ValueError:
            return ts[:16]
    local = ts.astimezone() if ts.tzinfo else ts
    if short:
        return local.strftime("%Y-%m-%d")
    return local.strftime("%Y-%m-%d %H:%M:%S")


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as human-readable duration.

    Args:
        seconds: Elapsed time in seconds.

    Returns:
        Human-readable duration string (e.g., "45s", "2m 30s").
    """
    secs = int(seconds)
    if secs < 60:
        return f"{secs}s"
    return f"{secs // 60}m {secs % 60}s"


def truncate(text: str, limit: int) -> str:
    """Cut text to ``limit`` characters, marking the cut with '...'."""
    if len(text) > limit:
        return text[:limit] + "..."
    return text


# Regex pattern to match ANSI escape sequences
# This covers CSI sequences (most common), OSC sequences, and other control sequences
_ANSI_ESCAPE_PATTERN = re.compile(
    r"""
    \x1b          # ESC character
    (?:
        \[        # CSI (Control Sequence Introducer)
        [0-?]*    # Parameter bytes
        [ -/]*    # Intermediate bytes
        [@-~]     # Final byte
        |
        \]        # OSC (Operating System Command)
        .*?       # Content
        (?:\x07|\x1b\\)  # String terminator (BEL or ESC \)
        |
        [PX^_]    # DCS, SOS, PM, APC
        .*?       # Content
        \x1b\\    # String terminator
        |
        [NO]      # SS2, SS3
        .         # Single character
        |
        [()*/+]   # Designate character set
        .         # Charset selector
        |
        [=>]      # Application/Normal keypad mode
        |
        c         # RIS (Reset to Initial State)
    )
    """,
    re.VERBOSE,
)


def sanitize_terminal_output(text: str) -> str:
    """Remove ANSI escape sequences from text to prevent terminal injection.

    Agent messages, status lines and error details come from the server
    and may carry escape sequences that would move the cursor or hide
    text in the live progress display.

    Args:
        text: Text that may contain ANSI escape sequences.

    Returns:
        Text with all ANSI escape sequences removed.
    """
    return _ANSI_ESCAPE_PATTERN.sub("", text)


class Spinner:
    """Animated terminal spinner for single API calls.

    Displays a Braille-character spinner on stderr with a status message.
    Thread-based so the blocking request can run on the main thread.
    Does nothing when stderr is not a terminal. Usable as a context
    manager, which clears the line on exit.

    Args:
        text: Status text shown next to the spinner.
        enabled: Force the spinner on or off. Defaults to stderr.isatty().
    """

    FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    _INTERVAL = 0.08  # seconds between frames

    def __init__(self, text: str = "", enabled: bool | None = None):
        self._text = text
        self._enabled = sys.stderr.isatty() if enabled is None else enabled
        self._running = False
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    def __enter__(self) -> Spinner:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self, text: str | None = None) -> None:
        """Start the spinner, optionally replacing the status text."""
        with self._lock:
            if text is not None:
                self._text = text
            if self._running or not self._enabled:
                return
            self._running = True
        self._thread = threading.Thread(target=self._animate, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the spinner and clear the line. Idempotent."""
        with self._lock:
            if not self._running:
                return
            self._running = False
        if self._thread:
            self._thread.join(timeout=0.2)
            self._thread = None
        sys.stderr.write("\r\033[K")
        sys.stderr.flush()

    def _animate(self) -> None:
        idx = 0
        while True:
            with self._lock:
                if not self._running:
                    break
                text = self._text
            frame = self.FRAMES[idx % len(self.FRAMES)]
            sys.stderr.write(f"\r\033[K{frame} {text}")
            sys.stderr.flush()
            idx += 1
            time.sleep(self._INTERVAL)
