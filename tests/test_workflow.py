"""Tests for the workflow runner: step sequencing, failure mapping and teardown."""

import pytest
from unittest.mock import ANY, MagicMock, patch

from pagemap_core.error_handler import TeardownError
from pagemap_core.models import InteractiveElements
from pagemap_core.workflow import WorkflowResult, run_workflow


URL = "https://example.com"


@pytest.mark.asyncio
class TestSuccessfulRun:

    async def test_empty_extraction_succeeds(self, cfg, session_factory):
        factory, session = session_factory()

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is True
        assert result.exit_code == 0
        assert result.data.interactive_elements == []
        assert result.to_dict()["data"] == {"interactive_elements": []}
        factory.assert_called_once_with(cfg)
        session.close.assert_awaited_once()

    async def test_steps_run_in_order(self, cfg, session_factory, page_builder, sample_records):
        page = page_builder(records=sample_records)
        factory, session = session_factory(page=page)

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is True
        session.init.assert_awaited_once()
        page.goto.assert_awaited_once_with(URL)
        instruction, schema = page.extract.await_args.args
        assert URL in instruction
        assert schema is InteractiveElements
        assert result.data.interactive_elements[0].element_aria_label == "Collapse the sidebar"

    async def test_extracted_records_are_logged(self, cfg, session_factory, page_builder, sample_records):
        factory, _ = session_factory(page=page_builder(records=sample_records))

        with patch("pagemap_core.workflow.logger") as mock_logger:
            await run_workflow(URL, cfg, session_factory=factory)

        messages = [c.args[0] for c in mock_logger.info.call_args_list]
        extracted = [m for m in messages if m.startswith("Extracted:")]
        assert len(extracted) == 1
        assert "nav.sidebar" in extracted[0]
        assert "Workflow completed successfully" in messages

    async def test_custom_instruction(self, cfg, session_factory, page_builder):
        page = page_builder()
        factory, _ = session_factory(page=page)

        await run_workflow(URL, cfg, session_factory=factory, instruction="list buttons")

        assert page.extract.await_args.args[0] == "list buttons"


@pytest.mark.asyncio
class TestFailures:

    async def test_missing_url_never_builds_session(self, cfg):
        factory = MagicMock()

        result = await run_workflow("", cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "configuration"
        factory.assert_not_called()

    async def test_unknown_env_is_configuration_error(self, cfg):
        cfg.env = "CLOUD9"

        result = await run_workflow(URL, cfg)

        assert result.success is False
        assert result.error_category == "configuration"
        assert "Unknown session env" in result.error

    async def test_missing_page_handle_still_closes(self, cfg, session_builder):
        session = session_builder(page=None)
        factory = MagicMock(return_value=session)

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "session"
        assert "page instance" in result.error
        session.close.assert_awaited_once()

    async def test_init_failure_closes_once(self, cfg, session_factory):
        factory, session = session_factory(init_error=RuntimeError("browser crashed"))

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "session"
        session.close.assert_awaited_once()

    async def test_navigation_failure(self, cfg, session_factory, page_builder):
        page = page_builder(goto_error=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))
        factory, session = session_factory(page=page)

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "navigation"
        page.extract.assert_not_awaited()
        session.close.assert_awaited_once()

    async def test_extraction_failure(self, cfg, session_factory, page_builder):
        page = page_builder(extract_error=ValueError("bad reply"))
        factory, session = session_factory(page=page)

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "extraction"
        assert result.data is None
        assert result.to_dict()["error"] == "bad reply"
        session.close.assert_awaited_once()

    async def test_session_construction_failure_has_nothing_to_close(self, cfg):
        factory = MagicMock(side_effect=RuntimeError("bad env"))

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "session"


@pytest.mark.asyncio
class TestTeardownPolicy:

    async def test_teardown_failure_overrides_success(self, cfg, session_factory):
        factory, session = session_factory(close_error=TeardownError("close failed"))

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.exit_code == 1
        assert result.error_category == "teardown"
        assert result.data is not None
        session.close.assert_awaited_once()

    async def test_foreign_teardown_exception_is_categorized(self, cfg, session_factory):
        factory, _ = session_factory(close_error=RuntimeError("socket closed"))

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        assert result.error_category == "teardown"

    async def test_teardown_failure_keeps_earlier_error(self, cfg, session_factory, page_builder):
        page = page_builder(extract_error=ValueError("bad reply"))
        factory, session = session_factory(page=page, close_error=RuntimeError("socket closed"))

        result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.error == "bad reply"
        assert result.error_category == "extraction"
        session.close.assert_awaited_once()


@pytest.mark.asyncio
class TestRunLogger:

    async def test_run_logger_receives_summary(self, cfg, session_factory):
        factory, _ = session_factory()
        run_logger = MagicMock()

        await run_workflow(URL, cfg, session_factory=factory, run_logger=run_logger)

        run_logger.log_json.assert_called_once_with({"interactive_elements": []}, "Extracted")
        run_logger.finalize.assert_called_once_with(True, ANY, None)
        step_names = [c.args[1] for c in run_logger.log_step_result.call_args_list]
        assert step_names == ["init", "navigate", "extract", "close"]

    async def test_run_logger_records_failure(self, cfg, session_builder):
        factory = MagicMock(return_value=session_builder(page=None))
        run_logger = MagicMock()

        await run_workflow(URL, cfg, session_factory=factory, run_logger=run_logger)

        run_logger.log_error.assert_called_once()
        run_logger.finalize.assert_called_once_with(False, ANY, "Failed to get page instance from session")


def test_result_to_dict_without_data():
    result = WorkflowResult(success=False, url=URL, error="boom", error_category="session")

    out = result.to_dict()

    assert out["success"] is False
    assert "data" not in out
    assert out["error_category"] == "session"
    assert result.exit_code == 1


@pytest.mark.asyncio
class TestNavigationDiagnostics:

    async def test_diagnostics_logged_in_debug_mode(self, cfg, session_factory, page_builder):
        cfg.enable_debug = True
        page = page_builder(goto_error=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))
        factory, _ = session_factory(page=page)
        run_logger = MagicMock()
        diagnosis = {"url": URL, "dns_resolves": False}

        with patch("pagemap_core.workflow.diagnose_url_issue", return_value=diagnosis) as diagnose:
            result = await run_workflow(URL, cfg, session_factory=factory, run_logger=run_logger)

        diagnose.assert_called_once_with(URL)
        run_logger.log_json.assert_called_once_with(diagnosis, "URL diagnostics")
        assert result.error_category == "navigation"

    async def test_no_diagnostics_by_default(self, cfg, session_factory, page_builder):
        page = page_builder(goto_error=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))
        factory, _ = session_factory(page=page)

        with patch("pagemap_core.workflow.diagnose_url_issue") as diagnose:
            await run_workflow(URL, cfg, session_factory=factory)

        diagnose.assert_not_called()

    async def test_diagnostics_failure_does_not_escape(self, cfg, session_factory, page_builder):
        cfg.enable_debug = True
        factory, session = session_factory(page=page_builder(goto_error=RuntimeError("goto failed")))

        with patch("pagemap_core.workflow.diagnose_url_issue", side_effect=ValueError("bad url")):
            result = await run_workflow(URL, cfg, session_factory=factory)

        assert result.success is False
        session.close.assert_awaited_once()
