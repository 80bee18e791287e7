"""
Unit tests for the 'hubreg register', 'hubreg auth' and 'hubreg config' commands.

Tests the CLI behavior with mocked dependencies:
- Option parsing into a TrackhubSubmission
- Dry-run output
- Password resolution
- Success and failure reporting
"""

import json
import sys
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

import hubreg.cli.commands.auth  # noqa: F401 - ensure module is in sys.modules
import hubreg.cli.commands.register  # noqa: F401 - ensure module is in sys.modules
from hubreg.cli.commands.auth import auth
from hubreg.cli.commands.config import config
from hubreg.cli.commands.register import register
from hubreg.cli.context import HubregContext
from hubreg.core.interfaces.registration import RegisterResult
from hubreg.core.models.trackhub import Assembly, TrackhubType, Visibility

register_module = sys.modules["hubreg.cli.commands.register"]
auth_module = sys.modules["hubreg.cli.commands.auth"]


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def hubreg_ctx(tmp_path):
    """Non-interactive context rooted in an empty directory."""
    return HubregContext(cwd=tmp_path, is_interactive=False)


@pytest.fixture
def mock_service():
    service = MagicMock()
    service.session.server = "https://registry.example"
    service.session.user = "alice"
    service.session.is_authenticated = False
    return service


class TestRegisterCommand:
    """Tests for hubreg register."""

    def test_dry_run_prints_payload(self, runner, hubreg_ctx):
        result = runner.invoke(
            register,
            ["https://example.org/hub.txt", "-t", "proteomics", "-a", "hg38", "--private", "--dry-run"],
            obj=hubreg_ctx,
        )

        assert result.exit_code == 0, result.output
        assert "Dry run - would post to https://www.trackhubregistry.org/api/trackhub:" in result.output
        body = result.output[result.output.index("{") :]
        assert json.loads(body) == {
            "url": "https://example.org/hub.txt",
            "type": "PROTEOMICS",
            "public": 0,
            "assembliesNames": {"hg38": "GCA_000001405.21"},
        }

    def test_dry_run_does_not_need_password(self, runner, hubreg_ctx):
        with patch.object(register_module, "resolve_password") as mock_resolve:
            result = runner.invoke(
                register,
                ["https://example.org/hub.txt", "-t", "GENOMICS", "--dry-run"],
                obj=hubreg_ctx,
            )

        assert result.exit_code == 0, result.output
        mock_resolve.assert_not_called()

    def test_builds_submission_from_options(self, runner, hubreg_ctx, mock_service):
        mock_service.register.return_value = RegisterResult(
            success=True, registry_response="https://registry.example/hub/1\n", logged_out=True
        )

        with patch.object(register_module, "build_service", return_value=mock_service) as build:
            result = runner.invoke(
                register,
                [
                    "https://example.org/hub.txt",
                    "--type",
                    "PROTEOMICS",
                    "--assembly",
                    "hg38",
                    "--private",
                    "--user",
                    "alice",
                    "--password",
                    "pw",
                ],
                obj=hubreg_ctx,
            )

        assert result.exit_code == 0, result.output
        build.assert_called_once_with(hubreg_ctx, None, "alice", "pw")
        submission = mock_service.register.call_args.args[0]
        assert submission.hub_type is TrackhubType.PROTEOMICS
        assert submission.visibility is Visibility.PRIVATE
        assert submission.assemblies == (Assembly.HG38,)
        assert "Registered track hub: https://example.org/hub.txt" in result.output
        assert "Registry: https://registry.example/hub/1" in result.output

    def test_warns_without_assembly(self, runner, hubreg_ctx, mock_service):
        mock_service.register.return_value = RegisterResult(success=True, logged_out=True)

        with patch.object(register_module, "build_service", return_value=mock_service):
            result = runner.invoke(
                register,
                ["https://example.org/hub.txt", "-t", "GENOMICS", "--password", "pw"],
                obj=hubreg_ctx,
            )

        assert result.exit_code == 0, result.output
        assert "no --assembly given" in result.output

    def test_failure_exits_nonzero(self, runner, hubreg_ctx, mock_service):
        mock_service.register.return_value = RegisterResult(
            success=False, error="Track hub was not registered: Bad Request", logged_out=True
        )

        with patch.object(register_module, "build_service", return_value=mock_service):
            result = runner.invoke(
                register,
                ["https://example.org/hub.txt", "-t", "GENOMICS", "--password", "pw"],
                obj=hubreg_ctx,
            )

        assert result.exit_code == 1
        assert "Bad Request" in result.output

    def test_missing_password_when_not_interactive(self, runner, hubreg_ctx):
        result = runner.invoke(
            register,
            ["https://example.org/hub.txt", "-t", "GENOMICS"],
            obj=hubreg_ctx,
        )

        assert result.exit_code == 1
        assert "No registry password" in result.output

    def test_password_from_environment(self, runner, hubreg_ctx, mock_service, monkeypatch):
        monkeypatch.setenv("HUBREG_REGISTRY__PASSWORD", "from-env")
        mock_service.register.return_value = RegisterResult(success=True, logged_out=True)

        with patch.object(register_module, "build_service", return_value=mock_service) as build:
            result = runner.invoke(
                register,
                ["https://example.org/hub.txt", "-t", "GENOMICS"],
                obj=hubreg_ctx,
            )

        assert result.exit_code == 0, result.output
        assert build.call_args.args[3] == "from-env"

    def test_invalid_hub_url(self, runner, hubreg_ctx):
        result = runner.invoke(
            register,
            ["example.org/hub.txt", "-t", "GENOMICS", "--dry-run"],
            obj=hubreg_ctx,
        )

        assert result.exit_code == 2
        assert "HUB_URL" in result.output

    def test_invalid_type(self, runner, hubreg_ctx):
        result = runner.invoke(
            register,
            ["https://example.org/hub.txt", "-t", "METABOLOMICS", "--dry-run"],
            obj=hubreg_ctx,
        )

        assert result.exit_code == 2


class TestAuthCommand:
    """Tests for hubreg auth test."""

    def test_success(self, runner, hubreg_ctx, mock_service):
        mock_service.check_credentials.return_value = RegisterResult(success=True, logged_out=True)

        with patch.object(auth_module, "build_service", return_value=mock_service):
            result = runner.invoke(auth, ["test", "--password", "pw"], obj=hubreg_ctx)

        assert result.exit_code == 0, result.output
        assert "Logged in and out as alice." in result.output

    def test_failure(self, runner, hubreg_ctx, mock_service):
        mock_service.check_credentials.return_value = RegisterResult(
            success=False, error="Login failed: Unauthorized"
        )

        with patch.object(auth_module, "build_service", return_value=mock_service):
            result = runner.invoke(auth, ["test", "--password", "pw"], obj=hubreg_ctx)

        assert result.exit_code == 1
        assert "Login failed: Unauthorized" in result.output

    def test_against_stub_registry(self, runner, hubreg_ctx, stub_registry):
        stub_registry.add("GET", "/api/login", 200, {"auth_token": "T"})
        stub_registry.add("GET", "/api/logout", 200)

        result = runner.invoke(
            auth,
            ["test", "--server", stub_registry.url, "--user", "alice", "--password", "pw"],
            obj=hubreg_ctx,
        )

        assert result.exit_code == 0, result.output
        assert [r.path for r in stub_registry.requests] == ["/api/login", "/api/logout"]


class TestConfigCommand:
    """Tests for hubreg config."""

    def test_set_then_get(self, runner, hubreg_ctx):
        result = runner.invoke(config, ["set", "registry.user", "alice"], obj=hubreg_ctx)
        assert result.exit_code == 0, result.output
        assert "Set registry.user = alice" in result.output

        result = runner.invoke(config, ["get", "registry.user"], obj=hubreg_ctx)
        assert result.exit_code == 0, result.output
        assert "registry.user: alice" in result.output

    def test_set_unknown_key(self, runner, hubreg_ctx):
        result = runner.invoke(config, ["set", "registry.password", "pw"], obj=hubreg_ctx)

        assert result.exit_code == 1
        assert "Unknown config key" in result.output

    def test_get_password_is_refused(self, runner, hubreg_ctx):
        result = runner.invoke(config, ["get", "registry.password"], obj=hubreg_ctx)

        assert result.exit_code == 1

    def test_list(self, runner):
        result = runner.invoke(config, ["list"])

        assert result.exit_code == 0
        assert "registry.url" in result.output
        assert "registry.password" not in result.output
