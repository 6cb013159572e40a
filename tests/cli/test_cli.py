"""Unit tests for CLI commands.

Tests CLI behavior using Click's CliRunner for isolated, fast testing.
Server calls are patched at the command module, so no server runs.
"""

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from headless_proxy import __version__
from headless_proxy.cli import cli
from headless_proxy.cli.api_client import ServerAPIError, ServerNotRunningError
from headless_proxy.cli.commands.members import classify_register_response, parse_emails
from headless_proxy.cli.commands.projects import mask_key
from headless_proxy.config import ServerConfig

SERVER = ["--server", "http://proxy.test"]


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def app_dir(tmp_path: Path):
    """Point the app directory at a temp dir."""
    with patch("headless_proxy.config.get_app_dir", return_value=tmp_path):
        yield tmp_path


class TestVersion:
    """Tests for --version flag."""

    def test_version_flag_shows_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_no_command_shows_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        assert "members" in result.output
        assert "serve" in result.output


class TestParseEmails:
    """Tests for parse_emails."""

    def test_mixed_separators(self) -> None:
        text = "a@example.com, b@example.com\nc@example.com  d@example.com,,"

        assert parse_emails(text) == ["a@example.com", "b@example.com", "c@example.com", "d@example.com"]

    def test_drops_entries_without_at(self) -> None:
        assert parse_emails("a@example.com, not-an-email, , b@example.com") == ["a@example.com", "b@example.com"]

    def test_empty(self) -> None:
        assert parse_emails(" ,\n ") == []


class TestClassifyRegisterResponse:
    """Tests for classify_register_response."""

    def test_instant_registration(self) -> None:
        result = classify_register_response("a@example.com", 200, {"state": "SUCCESS"})

        assert result.status == "Success"
        assert result.message == "Member registered instantly."

    def test_verification_required(self) -> None:
        result = classify_register_response("a@example.com", 200, {"state": "REQUIRE_EMAIL_VERIFICATION"})

        assert result.status == "Success"
        assert result.message == "Success (Email verification sent)."

    def test_upstream_error_message(self) -> None:
        result = classify_register_response("a@example.com", 409, {"message": "Member already exists"})

        assert result.status == "Failed"
        assert result.message == "Member already exists"

    def test_unknown_state(self) -> None:
        result = classify_register_response("a@example.com", 200, {"state": "PENDING"})

        assert result.status == "Failed"
        assert result.message == "Registration failed."


class TestMembersImport:
    """Tests for 'members import'."""

    def test_registers_each_email(self, runner: CliRunner) -> None:
        """One register call per email; a failure sets the exit code."""
        responses = {
            "a@example.com": httpx.Response(200, json={"state": "SUCCESS"}),
            "b@example.com": httpx.Response(409, json={"message": "Member already exists"}),
        }

        def fake_send(method, endpoint, *, server_url, json_data=None, **kwargs):
            assert endpoint == "/api/headless-register"
            assert json_data["siteId"] == "site-a"
            return responses[json_data["email"]]

        with patch("headless_proxy.cli.commands.members.send_request", side_effect=fake_send) as mock_send:
            result = runner.invoke(
                cli, [*SERVER, "members", "import", "-s", "site-a", "a@example.com,", "b@example.com", "junk"]
            )

        assert mock_send.call_count == 2
        assert "Member registered instantly." in result.output
        assert "Member already exists" in result.output
        assert "1 succeeded, 1 failed" in result.output
        assert result.exit_code == 1

    def test_reads_file(self, runner: CliRunner, tmp_path: Path) -> None:
        email_file = tmp_path / "emails.txt"
        email_file.write_text("a@example.com\nb@example.com\n")

        with patch(
            "headless_proxy.cli.commands.members.send_request",
            return_value=httpx.Response(200, json={"state": "REQUIRE_EMAIL_VERIFICATION"}),
        ) as mock_send:
            result = runner.invoke(cli, [*SERVER, "members", "import", "-s", "site-a", "--file", str(email_file)])

        assert result.exit_code == 0
        assert mock_send.call_count == 2
        assert "2 succeeded, 0 failed" in result.output

    def test_json_output(self, runner: CliRunner) -> None:
        with patch(
            "headless_proxy.cli.commands.members.send_request",
            return_value=httpx.Response(200, json={"state": "SUCCESS"}),
        ):
            result = runner.invoke(cli, [*SERVER, "members", "import", "-s", "site-a", "--json", "a@example.com"])

        assert result.exit_code == 0
        report = json.loads(result.output[result.output.index("[") :])
        assert report == [
            {
                "email": "a@example.com",
                "status": "Success",
                "message": "Member registered instantly.",
                "fullResponse": {"state": "SUCCESS"},
            }
        ]

    def test_no_valid_emails(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.members.send_request") as mock_send:
            result = runner.invoke(cli, [*SERVER, "members", "import", "-s", "site-a", "nobody"])

        assert result.exit_code == 1
        assert "Please enter at least one valid email address." in result.output
        mock_send.assert_not_called()

    def test_non_json_reply_is_a_failed_row(self, runner: CliRunner) -> None:
        with patch(
            "headless_proxy.cli.commands.members.send_request",
            return_value=httpx.Response(502, text="Bad Gateway"),
        ):
            result = runner.invoke(cli, [*SERVER, "members", "import", "-s", "site-a", "a@example.com"])

        assert result.exit_code == 1
        assert "Network error connecting to local server." in result.output

    def test_server_not_running_fails_each_row(self, runner: CliRunner) -> None:
        """An unreachable server fails every row; the import still finishes."""
        with patch(
            "headless_proxy.cli.commands.members.send_request",
            side_effect=ServerNotRunningError("http://proxy.test"),
        ) as mock_send:
            result = runner.invoke(
                cli, [*SERVER, "members", "import", "-s", "site-a", "a@example.com,b@example.com"]
            )

        assert mock_send.call_count == 2
        assert result.output.count("Network error connecting to local server.") == 2
        assert "0 succeeded, 2 failed" in result.output
        assert result.exit_code == 1

    def test_site_id_required(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, [*SERVER, "members", "import", "a@example.com"], env={"HEADLESS_SITE_ID": None})

        assert result.exit_code == 2
        assert "--site-id" in result.output


class TestMembersCommands:
    """Tests for members search, list and delete."""

    def test_search(self, runner: CliRunner) -> None:
        found = {"members": [{"id": "m1", "loginEmail": "a@example.com", "profile": {"nickname": "Ann"}}]}

        with patch("headless_proxy.cli.commands.members.api_request", return_value=found) as mock_api:
            result = runner.invoke(cli, [*SERVER, "members", "search", "-s", "site-a", "a@example.com"])

        assert result.exit_code == 0
        assert "m1" in result.output
        assert "Ann" in result.output
        mock_api.assert_called_once_with(
            "POST",
            "/api/headless-search",
            server_url="http://proxy.test",
            json_data={"query": "a@example.com", "siteId": "site-a"},
        )

    def test_search_no_results(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.members.api_request", return_value={"members": []}):
            result = runner.invoke(cli, [*SERVER, "members", "search", "-s", "site-a", "x@example.com"])

        assert "No members found" in result.output

    def test_list_json(self, runner: CliRunner) -> None:
        members = [{"id": "m1"}, {"id": "m2"}]

        with patch("headless_proxy.cli.commands.members.api_request", return_value={"members": members}):
            result = runner.invoke(cli, [*SERVER, "members", "list", "-s", "site-a", "--json"])

        assert result.exit_code == 0
        assert json.loads(result.output) == members

    def test_delete_reports_each_result(self, runner: CliRunner) -> None:
        results = [
            {"memberId": "m1", "status": "success"},
            {"memberId": "m2", "status": "failed", "error": "not found"},
        ]

        with patch("headless_proxy.cli.commands.members.api_request", return_value=results) as mock_api:
            result = runner.invoke(cli, [*SERVER, "members", "delete", "-s", "site-a", "--yes", "m1", "m2"])

        assert result.exit_code == 1
        assert "Deleted m1" in result.output
        assert "Failed m2: not found" in result.output
        assert mock_api.call_args.kwargs["json_data"] == {"memberIds": ["m1", "m2"], "siteId": "site-a"}

    def test_delete_aborts_without_confirmation(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.members.api_request") as mock_api:
            result = runner.invoke(cli, [*SERVER, "members", "delete", "-s", "site-a", "m1"], input="n\n")

        assert result.exit_code == 1
        mock_api.assert_not_called()

    def test_api_error_is_reported(self, runner: CliRunner) -> None:
        with patch(
            "headless_proxy.cli.commands.members.api_request",
            side_effect=ServerAPIError("Project configuration not found for siteId: nope", 404),
        ):
            result = runner.invoke(cli, [*SERVER, "members", "list", "-s", "nope"])

        assert result.exit_code == 1
        assert "API error (404)" in result.output


class TestProjectsCommands:
    """Tests for projects list and replace."""

    def test_mask_key(self) -> None:
        assert mask_key("abcdefghijkl") == "********ijkl"
        assert mask_key("abc") == "***"

    def test_list_masks_keys(self, runner: CliRunner) -> None:
        data = [{"siteId": "site-a", "projectName": "Alpha", "apiKey": "secret-key-1234"}]

        with patch("headless_proxy.cli.commands.projects.api_request", return_value=data):
            result = runner.invoke(cli, [*SERVER, "projects", "list"])

        assert result.exit_code == 0
        assert "Alpha" in result.output
        assert "site-a" in result.output
        assert "********1234" in result.output
        assert "secret-key" not in result.output

    def test_list_empty(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.projects.api_request", return_value=[]):
            result = runner.invoke(cli, [*SERVER, "projects", "list"])

        assert "No projects configured." in result.output

    def test_replace_posts_file_contents(self, runner: CliRunner, tmp_path: Path) -> None:
        new_projects = [{"siteId": "site-c", "projectName": "Gamma", "apiKey": "key-c"}]
        source = tmp_path / "projects.json"
        source.write_text(json.dumps(new_projects))

        with patch(
            "headless_proxy.cli.commands.projects.api_request",
            return_value={"message": "Config updated successfully.", "count": 1},
        ) as mock_api:
            result = runner.invoke(cli, [*SERVER, "projects", "replace", str(source)])

        assert result.exit_code == 0
        assert "Config updated successfully." in result.output
        assert mock_api.call_args.kwargs["json_data"] == {"config": new_projects}

    def test_replace_rejects_invalid_json(self, runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "projects.json"
        source.write_text("[oops")

        with patch("headless_proxy.cli.commands.projects.api_request") as mock_api:
            result = runner.invoke(cli, [*SERVER, "projects", "replace", str(source)])

        assert result.exit_code == 1
        mock_api.assert_not_called()


class TestSenderCommands:
    """Tests for sender show and set-name."""

    def test_show(self, runner: CliRunner) -> None:
        details = {"senderDetails": {"fromName": "Shop", "fromEmail": "news@example.com"}}

        with patch("headless_proxy.cli.commands.sender.api_request", return_value=details):
            result = runner.invoke(cli, [*SERVER, "sender", "show", "-s", "site-a"])

        assert "Shop" in result.output
        assert "news@example.com" in result.output

    def test_set_name_keeps_email(self, runner: CliRunner) -> None:
        """The current fromEmail is sent back unchanged."""
        details = {"senderDetails": {"fromName": "Shop", "fromEmail": "news@example.com"}}

        with patch("headless_proxy.cli.commands.sender.api_request", return_value=details) as mock_api:
            result = runner.invoke(cli, [*SERVER, "sender", "set-name", "-s", "site-a", "New Shop"])

        assert result.exit_code == 0
        method, endpoint = mock_api.call_args.args
        assert (method, endpoint) == ("PATCH", "/api/headless-sender-details")
        assert mock_api.call_args.kwargs["json_data"] == {
            "siteId": "site-a",
            "senderDetails": {"fromName": "New Shop", "fromEmail": "news@example.com"},
        }


class TestCampaignCommands:
    """Tests for campaign commands."""

    def test_stats(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.campaigns.api_request", return_value={"statistics": []}) as mock_api:
            result = runner.invoke(cli, [*SERVER, "campaigns", "stats", "-s", "site-a", "c1", "c2"])

        assert result.exit_code == 0
        assert json.loads(result.output) == {"statistics": []}
        assert mock_api.call_args.kwargs["json_data"] == {"campaignIds": ["c1", "c2"], "siteId": "site-a"}

    def test_send_test(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.campaigns.api_request", return_value={}) as mock_api:
            result = runner.invoke(
                cli,
                [*SERVER, "campaigns", "send-test", "-s", "site-a", "c1", "--subject", "Hi", "--to", "me@example.com"],
            )

        assert result.exit_code == 0
        assert "Test email sent to me@example.com" in result.output
        assert mock_api.call_args.kwargs["json_data"] == {
            "campaignId": "c1",
            "emailSubject": "Hi",
            "toEmailAddress": "me@example.com",
            "siteId": "site-a",
        }

    def test_recipients_default_activity(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.campaigns.api_request", return_value={}) as mock_api:
            runner.invoke(cli, [*SERVER, "campaigns", "recipients", "-s", "site-a", "c1"])

        assert mock_api.call_args.kwargs["json_data"]["activity"] == "DELIVERED"

    def test_validate_html_reads_file(self, runner: CliRunner, tmp_path: Path) -> None:
        html_file = tmp_path / "mail.html"
        html_file.write_text('<a href="https://example.com">x</a>')

        with patch("headless_proxy.cli.commands.campaigns.api_request", return_value={}) as mock_api:
            runner.invoke(cli, [*SERVER, "campaigns", "validate-html", "-s", "site-a", str(html_file)])

        assert mock_api.call_args.kwargs["json_data"]["html"] == '<a href="https://example.com">x</a>'


class TestServerUrl:
    """Tests for server URL resolution."""

    def test_defaults_to_server_config(self, runner: CliRunner, app_dir: Path) -> None:
        (app_dir / "server.json").write_text(json.dumps({"port": 9999}))

        with patch("headless_proxy.cli.commands.projects.api_request", return_value=[]) as mock_api:
            runner.invoke(cli, ["projects", "list"], env={"HEADLESS_PROXY_URL": None})

        assert mock_api.call_args.kwargs["server_url"] == "http://127.0.0.1:9999"

    def test_env_var(self, runner: CliRunner) -> None:
        with patch("headless_proxy.cli.commands.projects.api_request", return_value=[]) as mock_api:
            runner.invoke(cli, ["projects", "list"], env={"HEADLESS_PROXY_URL": "http://elsewhere:1/"})

        assert mock_api.call_args.kwargs["server_url"] == "http://elsewhere:1"


class TestConfigCommands:
    """Tests for config init, show and path."""

    def test_init_creates_files(self, runner: CliRunner, app_dir: Path) -> None:
        result = runner.invoke(cli, ["config", "init"])

        assert result.exit_code == 0
        assert json.loads((app_dir / "server.json").read_text())["port"] == 8787
        assert json.loads((app_dir / "headless-config.json").read_text()) == []

    def test_init_seeds_projects(self, runner: CliRunner, app_dir: Path, tmp_path: Path) -> None:
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps([{"siteId": "s", "apiKey": "k"}]))

        result = runner.invoke(cli, ["config", "init", "--projects-from", str(seed)])

        assert result.exit_code == 0
        assert json.loads((app_dir / "headless-config.json").read_text()) == [
            {"siteId": "s", "apiKey": "k", "projectName": ""}
        ]

    def test_init_rejects_bad_seed(self, runner: CliRunner, app_dir: Path, tmp_path: Path) -> None:
        seed = tmp_path / "seed.json"
        seed.write_text(json.dumps([{"projectName": "no ids"}]))

        result = runner.invoke(cli, ["config", "init", "--projects-from", str(seed)])

        assert result.exit_code == 1
        assert not (app_dir / "headless-config.json").exists()

    def test_init_keeps_existing_without_force(self, runner: CliRunner, app_dir: Path) -> None:
        (app_dir / "server.json").write_text(json.dumps({"port": 9001}))

        result = runner.invoke(cli, ["config", "init"])

        assert "already exists" in result.output
        assert json.loads((app_dir / "server.json").read_text()) == {"port": 9001}

    def test_show(self, runner: CliRunner, app_dir: Path) -> None:
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0
        assert json.loads(result.output)["port"] == 8787

    def test_path_marks_missing_files(self, runner: CliRunner, app_dir: Path) -> None:
        result = runner.invoke(cli, ["config", "path"])

        assert str(app_dir / "server.json") in result.output
        assert "(missing)" in result.output


class TestServe:
    """Tests for the serve command."""

    def test_options_override_config(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "server.json"
        config_file.write_text(json.dumps({"port": 9000, "host": "0.0.0.0"}))

        with patch("headless_proxy.cli.commands.serve.run_server") as mock_run:
            result = runner.invoke(
                cli,
                [
                    "serve",
                    "--config",
                    str(config_file),
                    "--port",
                    "9100",
                    "--fallback-url",
                    "http://127.0.0.1:3000",
                    "--log-level",
                    "debug",
                ],
            )

        assert result.exit_code == 0
        config: ServerConfig = mock_run.call_args.args[0]
        assert config.port == 9100
        assert config.host == "0.0.0.0"
        assert config.fallback_url == "http://127.0.0.1:3000"
        assert config.log_level == "DEBUG"

    def test_broken_config_exits(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "server.json"
        config_file.write_text("{broken")

        with patch("headless_proxy.cli.commands.serve.run_server") as mock_run:
            result = runner.invoke(cli, ["serve", "--config", str(config_file)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output
        mock_run.assert_not_called()
