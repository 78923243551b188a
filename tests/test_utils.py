"""Tests for quome CLI utility functions."""

from datetime import datetime

from quome.cli.utils import (
    Spinner,
    format_elapsed,
    format_timestamp,
    sanitize_terminal_output,
    truncate,
)


class TestFormatTimestamp:
    """Tests for format_timestamp."""

    def test_empty(self):
        assert format_timestamp("") == ""
        assert format_timestamp(None) == ""

    def test_full_format_utc_z(self):
        result = format_timestamp("2026-02-16T04:31:05.837895Z")
        # Converted to local time, no T separator
        assert "T" not in result
        assert result.count(":") == 2

    def test_short_format_is_date_only(self):
        result = format_timestamp("2026-02-16T12:00:00+00:00", short=True)
        assert len(result) == 10
        assert ":" not in result

    def test_naive_datetime(self):
        assert format_timestamp(datetime(2026, 1, 2, 3, 4, 5)) == "2026-01-02 03:04:05"

    def test_fallback_on_invalid(self):
        assert format_timestamp("not-a-timestamp-at-all") == "not-a-timestamp-"


class TestFormatElapsed:
    def test_seconds(self):
        assert format_elapsed(45.9) == "45s"

    def test_minutes(self):
        assert format_elapsed(150) == "2m 30s"


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("hello", 10) == "hello"

    def test_long_text_marked(self):
        assert truncate("abcdefghij", 4) == "abcd..."


class TestSanitizeTerminalOutput:
    """Tests for stripping escape sequences from server text."""

    def test_plain_text_unchanged(self):
        assert sanitize_terminal_output("Building frontend") == "Building frontend"

    def test_strips_color_codes(self):
        assert sanitize_terminal_output("\x1b[31mred\x1b[0m") == "red"

    def test_strips_cursor_movement(self):
        assert sanitize_terminal_output("a\x1b[2Kb\x1b[1A") == "ab"

    def test_strips_osc_title(self):
        assert sanitize_terminal_output("\x1b]0;pwned\x07ok") == "ok"


class TestSpinner:
    def test_disabled_spinner_writes_nothing(self, capsys):
        with Spinner("Working...", enabled=False):
            pass
        assert capsys.readouterr().err == ""

    def test_stop_is_idempotent(self):
        spinner = Spinner("x", enabled=False)
        spinner.stop()
        spinner.stop()
