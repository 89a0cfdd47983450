"""Tests for the click command line interface."""

import json
from pathlib import Path

import pytest
import responses
from click.testing import CliRunner

import app
from postman_exporter.errors import (
    BatchPartialFailureError,
    WorkspaceNotFoundError,
)
from postman_exporter.types import (
    CollectionSummary,
    ExportReport,
    ExportResult,
    WorkspaceSummary,
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(mocker):
    mocker.patch.object(app, "setup_logging")


class TestSplitList:
    def test_commas_and_newlines(self):
        assert app.split_list("a, b\nc\r\n,, d ") == ["a", "b", "c", "d"]

    def test_empty(self):
        assert app.split_list(None) == []
        assert app.split_list("") == []


class TestExportCommand:
    def test_success_prints_report(self, runner, mocker, tmp_path):
        report = ExportReport(
            results=(ExportResult.ok("User API", str(tmp_path / "User_API.json")),)
        )
        mock_export = mocker.patch.object(app, "export_workspace", return_value=report)

        result = runner.invoke(
            app.cli,
            [
                "export",
                "-w",
                "ws1",
                "-k",
                "pmak",
                "-o",
                str(tmp_path),
                "-n",
                "user,auth",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Export completed successfully!" in result.output
        assert "✓ User API" in result.output
        args, kwargs = mock_export.call_args
        assert args == ("ws1", str(tmp_path))
        assert kwargs["api_key"] == "pmak"
        assert kwargs["names"] == ["user", "auth"]
        assert kwargs["ids"] == []

    def test_api_key_from_environment(self, runner, mocker, monkeypatch):
        monkeypatch.setenv("POSTMAN_API_KEY", "pmak-env")
        mock_export = mocker.patch.object(
            app, "export_workspace", return_value=ExportReport()
        )

        result = runner.invoke(app.cli, ["export", "-w", "ws1"])

        assert result.exit_code == 0, result.output
        assert mock_export.call_args.kwargs["api_key"] == "pmak-env"
        assert mock_export.call_args.args[1] == "./openapi-exports"

    def test_api_key_prompted_when_missing(self, runner, mocker):
        mock_export = mocker.patch.object(
            app, "export_workspace", return_value=ExportReport()
        )

        result = runner.invoke(app.cli, ["export", "-w", "ws1"], input="typed-key\n")

        assert result.exit_code == 0, result.output
        assert mock_export.call_args.kwargs["api_key"] == "typed-key"

    def test_partial_failure_prints_report_and_exits_1(self, runner, mocker):
        report = ExportReport(
            results=(
                ExportResult.ok("User API", "out/User_API.json"),
                ExportResult.failed("Auth", "Failed to export collection: boom"),
            )
        )
        mocker.patch.object(
            app, "export_workspace", side_effect=BatchPartialFailureError(report)
        )

        result = runner.invoke(app.cli, ["export", "-w", "ws1", "-k", "k"])

        assert result.exit_code == 1
        assert "✗ Auth: Failed to export collection: boom" in result.output
        assert "Successful: 1" in result.output
        assert "Failed: 1" in result.output

    def test_json_report(self, runner, mocker):
        report = ExportReport(
            results=(ExportResult.ok("User API", "out/User_API.json", uid="col1"),)
        )
        mocker.patch.object(app, "export_workspace", return_value=report)

        result = runner.invoke(app.cli, ["export", "-w", "ws1", "-k", "k", "--json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {
            "total": 1,
            "successful": 1,
            "failed": 0,
            "results": [
                {"name": "User API", "success": True, "uid": "col1", "file": "out/User_API.json"}
            ],
        }

    def test_json_report_on_partial_failure(self, runner, mocker):
        report = ExportReport(
            results=(
                ExportResult.ok("User API", "out/User_API.json"),
                ExportResult.failed("Auth", "Failed to export collection: boom"),
            )
        )
        mocker.patch.object(
            app, "export_workspace", side_effect=BatchPartialFailureError(report)
        )

        result = runner.invoke(app.cli, ["export", "-w", "ws1", "-k", "k", "--json"])

        assert result.exit_code == 1
        assert '"failed": 1' in result.output
        assert '"error": "Failed to export collection: boom"' in result.output
        assert "Export Summary" not in result.output

    def test_fatal_error_is_single_line(self, runner, mocker):
        mocker.patch.object(
            app, "export_workspace", side_effect=WorkspaceNotFoundError("missing-ws")
        )

        result = runner.invoke(app.cli, ["export", "-w", "missing-ws", "-k", "k"])

        assert result.exit_code == 1
        assert "Error: Workspace not found: missing-ws" in result.output
        assert "Traceback" not in result.output

    def test_debug_prints_traceback(self, runner, mocker):
        mocker.patch.object(
            app, "export_workspace", side_effect=WorkspaceNotFoundError("missing-ws")
        )

        result = runner.invoke(app.cli, ["export", "-w", "missing-ws", "-k", "k", "--debug"])

        assert result.exit_code == 1
        assert "Traceback" in result.output

    def test_workspace_is_required(self, runner):
        result = runner.invoke(app.cli, ["export", "-k", "k"])
        assert result.exit_code == 2


class TestListCommands:
    def test_workspaces(self, runner, mocker):
        mocker.patch.object(
            app,
            "list_workspaces",
            return_value=[WorkspaceSummary(id="ws1", name="Team", description="shared")],
        )

        result = runner.invoke(app.cli, ["workspaces", "-k", "k"])

        assert result.exit_code == 0, result.output
        assert "ws1  Team - shared" in result.output

    def test_no_workspaces(self, runner, mocker):
        mocker.patch.object(app, "list_workspaces", return_value=[])

        result = runner.invoke(app.cli, ["workspaces", "-k", "k"])

        assert "No workspaces found" in result.output

    def test_collections(self, runner, mocker):
        mock_list = mocker.patch.object(
            app,
            "list_collections",
            return_value=[CollectionSummary(uid="col1", name="User API")],
        )

        result = runner.invoke(app.cli, ["collections", "ws1", "-k", "k"])

        assert result.exit_code == 0, result.output
        assert "col1  User API" in result.output
        assert mock_list.call_args.args == ("ws1", "k")


def test_end_to_end_export_with_mocked_api(runner, tmp_path, monkeypatch, collection_body):
    """Full CLI run against a mocked Postman API and the built-in converter."""
    monkeypatch.chdir(tmp_path)
    base = "https://api.getpostman.com"
    workspace = {
        "workspace": {
            "id": "ws1",
            "name": "Team",
            "collections": [
                {"uid": "col1", "name": "User API"},
                {"uid": "col2", "name": "Auth"},
            ],
        }
    }

    with responses.RequestsMock() as rsps:
        rsps.add(responses.GET, f"{base}/workspaces/ws1", json=workspace)
        rsps.add(responses.GET, f"{base}/collections/col1", json=collection_body)

        result = runner.invoke(
            app.cli, ["export", "-w", "ws1", "-k", "k", "-o", "out", "-n", "user"]
        )

    assert result.exit_code == 0, result.output
    document = json.loads(Path(tmp_path / "out" / "User_API.json").read_text(encoding="utf-8"))
    assert document["info"]["title"] == "User API"
