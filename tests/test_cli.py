"""Tests for the command-line interface."""

from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner
from unittest.mock import AsyncMock, MagicMock, patch

from ats_automator.cli import app, parse_target
from ats_automator.core.models import ApplicationResult, ApplicationTarget, TargetOutcome

SAMPLE_PROFILE = Path(__file__).resolve().parent.parent / "profiles" / "sample_profile.json"

runner = CliRunner()


def make_runner(*results):
    application_runner = MagicMock()

    async def run(targets, profile):
        return [TargetOutcome(target, result) for target, result in zip(targets, results)]

    application_runner.run = AsyncMock(side_effect=run)
    return application_runner


class TestParseTarget:

    def test_name_and_url(self):
        assert parse_target("Acme Corp=http://localhost:3939/acme.html") == ApplicationTarget(
            name="Acme Corp", url="http://localhost:3939/acme.html"
        )

    def test_url_may_contain_equals(self):
        assert parse_target("X=http://h/apply?id=3").url == "http://h/apply?id=3"

    @pytest.mark.parametrize("value", ["no-separator", "=http://h", "Name="])
    def test_invalid(self, value):
        with pytest.raises(typer.BadParameter):
            parse_target(value)


class TestCli:

    def test_run_all_submitted(self):
        fake = make_runner(
            ApplicationResult.succeeded("CONF-12345", duration_ms=10),
            ApplicationResult.succeeded("GX-1", duration_ms=12),
        )

        with patch("ats_automator.orchestrator.create_application_runner", return_value=fake) as factory, \
                patch("ats_automator.cli.configure_logging"):
            result = runner.invoke(app, ["run", str(SAMPLE_PROFILE), "--no-generate-resume"])

        assert result.exit_code == 0
        assert "Acme Corp: submitted (confirmation CONF-12345, 10ms)" in result.output
        factory.assert_called_once_with(generate_resume=False, headless=True)

    def test_run_exits_nonzero_on_failure(self):
        fake = make_runner(ApplicationResult.failed("No handler found for URL: http://h/x"))

        with patch("ats_automator.orchestrator.create_application_runner", return_value=fake), \
                patch("ats_automator.cli.configure_logging"):
            result = runner.invoke(
                app,
                ["run", str(SAMPLE_PROFILE), "--target", "X=http://h/x", "--headed", "--no-generate-resume"],
            )

        assert result.exit_code == 1
        assert "X: failed (No handler found for URL: http://h/x)" in result.output

    def test_handlers_lists_registration_order(self):
        result = runner.invoke(app, ["handlers"])

        assert result.exit_code == 0
        assert result.output.index("acme") < result.output.index("globex")

    def test_config_hides_secrets(self):
        with patch("ats_automator.cli.settings.openai_api_key", "sk-secret"):
            result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "sk-secret" not in result.output
        assert "configured" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
