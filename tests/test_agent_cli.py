"""Tests for the quome agent CLI commands."""

import json
from unittest.mock import MagicMock, patch

import pytest
from conftest import THREAD_ID, assistant, make_state

from quome.cli.cli import cli
from quome.cli.commands.agent import build_start_request
from quome.cli.platform.errors import NotFoundError, TransportError
from quome.cli.platform.types import (
    PullLatestResponse,
    SendPromptResponse,
    StartAgentResponse,
    StopWorkflowResponse,
)

T = str(THREAD_ID)


@pytest.fixture
def mock_client():
    """Patch the client class used by the agent commands."""
    with patch("quome.cli.commands.agent.QuomeClient") as mock_client_cls:
        client = MagicMock()
        mock_client_cls.return_value = client
        yield client


@pytest.fixture(autouse=True)
def no_poll_delay():
    with patch("quome.cli.commands.agent.WATCH_POLL_INTERVAL", 0):
        yield


def _started():
    return StartAgentResponse(thread_id=THREAD_ID, status="accepted", message="ok")


def _deployed(**overrides):
    fields = dict(
        is_working=False,
        phase="complete",
        messages=[assistant("done")],
        deployment={"url": "https://x.test", "status": "deployed"},
        app_context={"name": "todo"},
    )
    fields.update(overrides)
    return make_state(**fields)


# ==================== start ====================


class TestStart:
    """Tests for quome agent start."""

    def test_start_watches_until_deployed(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()
        mock_client.get_workflow_state.side_effect = [
            make_state(is_working=True, phase="building", messages=[]),
            _deployed(),
        ]

        result = runner.invoke(cli, ["agent", "start", "A todo app"], obj=logged_in_store)

        assert result.exit_code == 0, result.output
        assert "Building: your app" in result.output
        assert result.output.count("done") == 1
        assert "Your app is live!" in result.output
        assert "https://x.test" in result.output
        assert mock_client.get_workflow_state.call_count == 2
        mock_client.get_workflow_state.assert_called_with(THREAD_ID)

    def test_start_failed_build_reports_and_exits_0(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()
        mock_client.get_workflow_state.return_value = make_state(
            is_working=False, phase="failed", status="build error: syntax"
        )

        result = runner.invoke(cli, ["agent", "start", "A todo app"], obj=logged_in_store)

        assert result.exit_code == 0
        assert "Build failed" in result.output
        assert "build error: syntax" in result.output
        assert "Your app is live!" not in result.output

    def test_start_no_watch(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()

        result = runner.invoke(
            cli, ["agent", "start", "A todo app", "--no-watch"], obj=logged_in_store
        )

        assert result.exit_code == 0
        assert "Started AI workflow" in result.output
        assert T in result.output
        mock_client.get_workflow_state.assert_not_called()

    def test_start_no_watch_json(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()

        result = runner.invoke(
            cli, ["agent", "start", "A todo app", "--no-watch", "--json"], obj=logged_in_store
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {"thread_id": T, "status": "accepted", "message": "ok"}

    def test_start_json_prints_final_state_only(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()
        mock_client.get_workflow_state.side_effect = [make_state(phase="building"), _deployed()]

        result = runner.invoke(cli, ["agent", "start", "A todo app", "--json"], obj=logged_in_store)

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["thread_id"] == T
        assert data["deployment"]["url"] == "https://x.test"

    def test_start_sends_options(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()

        result = runner.invoke(
            cli,
            [
                "agent", "start", "Inventory API",
                "--name", "inv",
                "--github",
                "--accessibility", "AAA",
                "--backend", "fastapi",
                "--database", "postgresql",
                "--primary-color", "#3B82F6",
                "--no-watch",
            ],
            obj=logged_in_store,
        )

        assert result.exit_code == 0, result.output
        request = mock_client.start_workflow.call_args[0][0]
        payload = request.to_payload()
        assert payload["project_name"] == "inv"
        assert payload["include_github"] is True
        assert payload["accessibility_target"] == "AAA"
        assert payload["tech_stack"] == {"backend": {"stack": "fastapi"}, "database": "postgresql"}
        assert payload["color_preferences"] == {"type": "custom", "primary_color": "#3B82F6"}

    def test_start_rejects_bad_accessibility(self, runner, logged_in_store, mock_client):
        result = runner.invoke(
            cli, ["agent", "start", "x", "--accessibility", "B"], obj=logged_in_store
        )
        assert result.exit_code == 2
        mock_client.start_workflow.assert_not_called()

    def test_start_requires_login(self, runner, store, mock_client):
        result = runner.invoke(cli, ["agent", "start", "x"], obj=store)
        assert result.exit_code == 1
        assert "Not logged in" in str(result.exception)
        mock_client.start_workflow.assert_not_called()

    def test_interrupt_while_starting_exits_130(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.side_effect = KeyboardInterrupt

        result = runner.invoke(cli, ["agent", "start", "x"], obj=logged_in_store)

        assert result.exit_code == 130
        assert "Cancelled." in result.output
        assert "Aborted!" not in result.output
        mock_client.get_workflow_state.assert_not_called()

    def test_transport_error_mid_watch_propagates(self, runner, logged_in_store, mock_client):
        mock_client.start_workflow.return_value = _started()
        mock_client.get_workflow_state.side_effect = [
            make_state(phase="building"),
            TransportError("Cannot connect to Quome API"),
        ]

        result = runner.invoke(cli, ["agent", "start", "x"], obj=logged_in_store)

        assert isinstance(result.exception, TransportError)
        assert "Your app is live!" not in result.output


class TestBuildStartRequest:
    """Tests for assembling the start request."""

    def test_minimal_request(self):
        payload = build_start_request("A blog").to_payload()
        assert payload == {
            "prompt": "A blog",
            "include_github": False,
            "parallel_mode": False,
            "accessibility_target": "AA",
        }

    def test_frontend_language_only(self):
        request = build_start_request("x", frontend_lang="typescript")
        assert request.tech_stack.frontend.language == "typescript"
        assert request.tech_stack.backend is None


# ==================== prompt ====================


class TestPrompt:
    """Tests for quome agent prompt."""

    def test_prompt_sent(self, runner, logged_in_store, mock_client):
        mock_client.send_prompt.return_value = SendPromptResponse(success=True, message="queued")

        result = runner.invoke(cli, ["agent", "prompt", T, "Make it blue"], obj=logged_in_store)

        assert result.exit_code == 0
        assert "Prompt sent" in result.output
        mock_client.send_prompt.assert_called_once_with(THREAD_ID, "Make it blue")
        mock_client.get_workflow_state.assert_not_called()

    def test_prompt_rejected(self, runner, logged_in_store, mock_client):
        mock_client.send_prompt.return_value = SendPromptResponse(
            success=False, message="workflow is busy"
        )

        result = runner.invoke(cli, ["agent", "prompt", T, "x"], obj=logged_in_store)

        assert result.exit_code == 0
        assert "error: workflow is busy" in result.output

    def test_prompt_with_watch(self, runner, logged_in_store, mock_client):
        mock_client.send_prompt.return_value = SendPromptResponse(success=True, message="queued")
        mock_client.get_workflow_state.return_value = _deployed()

        result = runner.invoke(cli, ["agent", "prompt", T, "x", "--watch"], obj=logged_in_store)

        assert result.exit_code == 0
        assert "Your app is live!" in result.output

    def test_prompt_invalid_thread_id(self, runner, logged_in_store, mock_client):
        result = runner.invoke(cli, ["agent", "prompt", "not-a-uuid", "x"], obj=logged_in_store)
        assert result.exit_code == 2
        mock_client.send_prompt.assert_not_called()


# ==================== state ====================


class TestState:
    """Tests for quome agent state."""

    def test_state_detail_view(self, runner, logged_in_store, mock_client):
        mock_client.get_workflow_state.return_value = make_state(
            phase="testing",
            status="Running tests",
            progress={"percentage": 75, "current_stage": 3, "total_stages": 4},
            app_context={"name": "todo", "goal": "Track tasks"},
            container_info={"frontend_url": "https://preview.test"},
            messages=[{"type": "user", "content": "build it"}, assistant("working")],
        )

        result = runner.invoke(cli, ["agent", "state", T], obj=logged_in_store)

        assert result.exit_code == 0
        assert "Workflow State" in result.output
        assert "75% (stage 3/4)" in result.output
        assert "https://preview.test" in result.output
        assert "working" in result.output

    def test_state_json(self, runner, logged_in_store, mock_client):
        mock_client.get_workflow_state.return_value = make_state(phase="brand-new-phase")

        result = runner.invoke(cli, ["agent", "state", T, "--json"], obj=logged_in_store)

        assert result.exit_code == 0
        assert json.loads(result.output)["phase"] == "brand-new-phase"

    def test_state_watch_reuses_first_snapshot(self, runner, logged_in_store, mock_client):
        mock_client.get_workflow_state.side_effect = [
            make_state(phase="building", app_context={"name": "todo"}),
            _deployed(),
        ]

        result = runner.invoke(cli, ["agent", "state", T, "--watch"], obj=logged_in_store)

        assert result.exit_code == 0, result.output
        assert "Building: todo" in result.output
        assert mock_client.get_workflow_state.call_count == 2

    def test_state_not_found(self, runner, logged_in_store, mock_client):
        mock_client.get_workflow_state.side_effect = NotFoundError("Workflow not found")

        result = runner.invoke(cli, ["agent", "state", T], obj=logged_in_store)

        assert isinstance(result.exception, NotFoundError)


# ==================== stop / pull ====================


class TestStop:
    """Tests for quome agent stop."""

    def test_stop_force(self, runner, logged_in_store, mock_client):
        mock_client.stop_workflow.return_value = StopWorkflowResponse(success=True, message="stopping")

        result = runner.invoke(cli, ["agent", "stop", T, "--force"], obj=logged_in_store)

        assert result.exit_code == 0
        assert "Workflow stopped" in result.output
        mock_client.stop_workflow.assert_called_once_with(THREAD_ID)

    def test_stop_declined(self, runner, logged_in_store, mock_client):
        result = runner.invoke(cli, ["agent", "stop", T], obj=logged_in_store, input="n\n")

        assert result.exit_code == 0
        assert "Cancelled." in result.output
        mock_client.stop_workflow.assert_not_called()

    def test_stop_confirmed(self, runner, logged_in_store, mock_client):
        mock_client.stop_workflow.return_value = StopWorkflowResponse(success=True, message="stopping")

        result = runner.invoke(cli, ["agent", "stop", T], obj=logged_in_store, input="y\n")

        assert result.exit_code == 0
        mock_client.stop_workflow.assert_called_once()

    def test_stop_rejected_json(self, runner, logged_in_store, mock_client):
        mock_client.stop_workflow.return_value = StopWorkflowResponse(
            success=False, message="already finished"
        )

        result = runner.invoke(cli, ["agent", "stop", T, "-f", "--json"], obj=logged_in_store)

        assert result.exit_code == 0
        assert json.loads(result.output) == {"success": False, "message": "already finished"}


class TestPull:
    """Tests for quome agent pull."""

    def test_pull_with_state(self, runner, logged_in_store, mock_client):
        mock_client.pull_latest.return_value = PullLatestResponse(
            success=True, message="synced", state=make_state(phase="building")
        )

        result = runner.invoke(cli, ["agent", "pull", T], obj=logged_in_store)

        assert result.exit_code == 0
        assert "Pulled latest changes" in result.output
        assert "Workflow State" in result.output

    def test_pull_failure(self, runner, logged_in_store, mock_client):
        mock_client.pull_latest.return_value = PullLatestResponse(success=False, message="no changes")

        result = runner.invoke(cli, ["agent", "pull", T], obj=logged_in_store)

        assert result.exit_code == 0
        assert "error: no changes" in result.output
