"""Tests for terminal rendering of workflow progress, state and resource status."""

from conftest import THREAD_ID, make_state

from quome.cli.platform.types import AgentMessage, Phase
from quome.cli.platform.watch import WatchOutcome, WatchResult, WatchView
from quome.cli.render import (
    DEPLOYMENT_STATUS_COLORS,
    PHASE_ICONS,
    TerminalWatchRenderer,
    message_label,
    phase_icon,
    print_deployment_success,
    print_table,
    styled_status,
)


class TestPhaseIcons:
    def test_every_phase_has_an_icon(self):
        assert set(PHASE_ICONS) == set(Phase)

    def test_unknown_and_missing_phase(self):
        assert phase_icon("reticulating") == PHASE_ICONS[Phase.UNKNOWN]
        assert phase_icon(None) == PHASE_ICONS[Phase.UNKNOWN]

    def test_unknown_message_type_shows_raw_type(self):
        assert message_label(AgentMessage(type="critic")) == "critic"


class TestPlainWatchRenderer:
    """Tests for the non-terminal progress output."""

    def test_prints_only_changed_lines(self, capsys):
        renderer = TerminalWatchRenderer(live=False)
        view = WatchView(percentage=20, status="Planning", phase="planning")
        renderer.update(view)
        renderer.update(view)
        view.percentage = 40
        renderer.update(view)

        err = capsys.readouterr().err
        assert err.count("Planning") == 1
        assert err.count("Phase: PLANNING") == 1
        assert " 20%" in err
        assert " 40%" in err

    def test_message_on_stdout_and_sanitized(self, capsys):
        renderer = TerminalWatchRenderer(live=False)
        renderer.message(AgentMessage(type="assistant", content="\x1b[31mCreated routes"))

        out = capsys.readouterr().out
        assert "AI:" in out
        assert "Created routes" in out
        assert "[31m" not in out

    def test_begin_prints_header(self, capsys):
        TerminalWatchRenderer(app_name="todo", prompt="A todo app", live=False).begin()
        out = capsys.readouterr().out
        assert "Building: todo" in out
        assert "A todo app" in out

    def test_finish_failed(self, capsys):
        state = make_state(is_working=False, phase="failed", status="build error: syntax")
        TerminalWatchRenderer(live=False).finish(WatchResult(WatchOutcome.FAILED, state))
        out = capsys.readouterr().out
        assert "Build failed" in out
        assert "build error: syntax" in out


class TestSummaries:
    def test_deployment_success(self, capsys):
        state = make_state(
            is_working=False,
            app_context={"name": "todo"},
            github_repo_created=True,
            github_repo_url="https://github.com/acme/todo",
            files={"a.py": "", "b.py": ""},
            tests_ran=3,
            tests_passed=3,
            tests_failed=0,
        )
        print_deployment_success(state, "https://x.test")

        out = capsys.readouterr().out
        assert "Your app is live!" in out
        assert "https://x.test" in out
        assert "https://github.com/acme/todo" in out
        assert "2 files generated" in out
        assert "3 passed, 0 failed" in out
        assert f"quome agent prompt {THREAD_ID}" in out

    def test_table(self, capsys):
        print_table(["ID", "NAME"], [["1", "alpha"], ["22", "b"]])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("ID  NAME")
        assert lines[2] == "1   alpha"
        assert lines[3] == "22  b"

    def test_empty_table_prints_nothing(self, capsys):
        print_table(["ID"], [])
        assert capsys.readouterr().out == ""


class TestStyledStatus:
    def test_known_status_is_coloured(self):
        assert styled_status("failed", DEPLOYMENT_STATUS_COLORS) == "\x1b[31mfailed\x1b[0m"

    def test_unknown_status_is_dimmed_and_sanitized(self):
        assert styled_status("\x1b[1mrolling", DEPLOYMENT_STATUS_COLORS) == "\x1b[2mrolling\x1b[0m"
