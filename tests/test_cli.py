#!/usr/bin/env python3
"""
Tests for the pagemap CLI entry points and their exit codes
"""

import json
from unittest.mock import MagicMock, patch

import pytest

from pagemap_core.cli import run as cli
from pagemap_core.config import Config
from pagemap_core.error_handler import TeardownError
from pagemap_core.models import DEFAULT_TARGET_URL


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep CLI runs local and write logs under tmp_path"""
    monkeypatch.setattr(cli, "config", Config(env="LOCAL", api_key="test-key", log_dir=tmp_path / "logs"))


class TestEnvVariant:

    def test_missing_url_exits_1_without_session(self, monkeypatch):
        monkeypatch.delenv("URL", raising=False)
        factory = MagicMock()

        code = cli.main_env(["--no-run-log"], session_factory=factory)

        assert code == 1
        factory.assert_not_called()

    def test_empty_url_counts_as_missing(self, monkeypatch):
        monkeypatch.setenv("URL", "")
        factory = MagicMock()

        assert cli.main_env(["--no-run-log"], session_factory=factory) == 1
        factory.assert_not_called()

    def test_example_com_empty_result(self, monkeypatch, tmp_path, session_factory):
        monkeypatch.setenv("URL", "https://example.com")
        factory, session = session_factory()
        out = tmp_path / "result.json"

        code = cli.main_env(["--no-run-log", "-o", str(out)], session_factory=factory)

        assert code == 0
        payload = json.loads(out.read_text(encoding="utf-8"))
        assert payload["success"] is True
        assert payload["url"] == "https://example.com"
        assert payload["data"] == {"interactive_elements": []}
        session.page.goto.assert_awaited_once_with("https://example.com")
        session.close.assert_awaited_once()

    def test_teardown_failure_exits_1(self, monkeypatch, session_factory):
        monkeypatch.setenv("URL", "https://example.com")
        factory, _ = session_factory(close_error=TeardownError("close failed"))

        assert cli.main_env(["--no-run-log"], session_factory=factory) == 1


class TestBuiltInTargetVariant:

    def test_defaults_to_built_in_target(self, session_factory):
        factory, session = session_factory()

        code = cli.main(["--no-run-log"], session_factory=factory)

        assert code == 0
        session.page.goto.assert_awaited_once_with(DEFAULT_TARGET_URL)

    def test_url_override(self, session_factory):
        factory, session = session_factory()

        cli.main(["--no-run-log", "--url", "https://example.org"], session_factory=factory)

        session.page.goto.assert_awaited_once_with("https://example.org")

    def test_missing_page_exits_1(self, session_builder):
        factory = MagicMock(return_value=session_builder(page=None))

        assert cli.main(["--no-run-log"], session_factory=factory) == 1

    def test_overrides_reach_session_config(self, session_factory):
        factory, _ = session_factory()

        cli.main(
            ["--no-run-log", "--env", "browserless", "--model", "openai/gpt-4o-mini", "--headed"],
            session_factory=factory,
        )

        cfg = factory.call_args.args[0]
        assert cfg.env == "BROWSERLESS"
        assert cfg.model_name == "openai/gpt-4o-mini"
        assert cfg.headless is False

    def test_run_log_written(self, tmp_path, session_factory):
        factory, _ = session_factory()

        assert cli.main([], session_factory=factory) == 0

        logs = list((tmp_path / "logs").glob("run-*.md"))
        assert len(logs) == 1
        content = logs[0].read_text(encoding="utf-8")
        assert DEFAULT_TARGET_URL in content
        assert "SUCCESS" in content

    def test_run_log_goes_to_configured_dir(self, tmp_path, session_factory):
        factory, _ = session_factory()

        with patch.object(cli, "create_run_logger", wraps=cli.create_run_logger) as create:
            cli.main(["--url", "https://example.org"], session_factory=factory)

        create.assert_called_once()
        assert create.call_args.kwargs["url"] == "https://example.org"
        assert create.call_args.kwargs["log_dir"] == str(tmp_path / "logs")

    def test_no_run_log_flag(self, session_factory):
        factory, _ = session_factory()

        with patch.object(cli, "create_run_logger") as create:
            cli.main(["--no-run-log"], session_factory=factory)

        create.assert_not_called()
