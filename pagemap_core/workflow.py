#!/usr/bin/env python3
"""
Workflow runner: init session -> navigate -> extract -> log -> close.

Every failure is caught here and turned into a failed WorkflowResult; the
session is closed exactly once on every path where it was constructed.
A teardown failure after a successful extraction marks the run as failed.
"""
import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .browser_setup import BrowserSession
from .config import Config, config as default_config
from .diagnostics import diagnose_url_issue, get_logger
from .error_handler import (
    ConfigurationError,
    SessionError,
    format_error_for_logging,
    get_error_category,
)
from .models import InteractiveElements, build_instruction

logger = get_logger(__name__)

SessionFactory = Callable[[Config], Any]


@dataclass
class WorkflowResult:
    success: bool
    url: Optional[str] = None
    data: Optional[InteractiveElements] = None
    error: Optional[str] = None
    error_category: Optional[str] = None
    duration_ms: int = 0

    @property
    def exit_code(self) -> int:
        return 0 if self.success else 1

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success, "url": self.url}
        if self.data is not None:
            out["data"] = self.data.model_dump()
        if self.error is not None:
            out["error"] = self.error
            out["error_category"] = self.error_category
        out["duration_ms"] = self.duration_ms
        return out


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


async def _log_url_diagnostics(url: str, run_logger=None):
    try:
        diagnosis = await asyncio.to_thread(diagnose_url_issue, url)
    except Exception as e:
        logger.warning(f"URL diagnostics failed: {e}")
        return
    logger.info(f"URL diagnostics: {json.dumps(diagnosis, ensure_ascii=False)}")
    if run_logger:
        run_logger.log_json(diagnosis, "URL diagnostics")


async def run_workflow(
    url: Optional[str],
    cfg: Optional[Config] = None,
    session_factory: Optional[SessionFactory] = None,
    run_logger=None,
    instruction: Optional[str] = None,
) -> WorkflowResult:
    """
    Run the extraction workflow against `url`.

    Args:
        url: Target page
        cfg: Configuration (defaults to the module-level config)
        session_factory: Callable building the session from a Config (defaults to BrowserSession)
        run_logger: Optional pagemap_logs.RunLogger
        instruction: Override of the default extraction instruction

    Returns:
        WorkflowResult; never raises for workflow failures
    """
    cfg = cfg or default_config
    factory = session_factory or BrowserSession
    result = WorkflowResult(success=False, url=url)
    started = time.monotonic()
    session = None
    step = "configuration"
    step_index = 0
    step_started = started

    def _step_done(name: str, ok: bool, details: Optional[str] = None):
        nonlocal step_index
        if run_logger:
            run_logger.log_step_result(step_index, name, ok, _elapsed_ms(step_started), details)
        step_index += 1

    try:
        if not url:
            raise ConfigurationError("No target URL given")
        instruction = instruction or build_instruction(url)
        if run_logger:
            run_logger.log_heading("Configuration")
            run_logger.log_kv("Env", cfg.env)
            run_logger.log_kv("Model", cfg.model_name)
            run_logger.log_kv("Headless", str(cfg.headless))

        step = "session"
        logger.info("Initializing session...")
        session = factory(cfg)
        await session.init()
        page = session.page
        if page is None:
            raise SessionError("Failed to get page instance from session")
        logger.info("Session initialized successfully.")
        _step_done("init", True)

        step, step_started = "navigation", time.monotonic()
        logger.info(f"Navigating to: {url}")
        await page.goto(url)
        _step_done("navigate", True, url)

        step, step_started = "extraction", time.monotonic()
        logger.info("Extracting: Reading and extracting data of all interactive elements on this page.")
        data = await page.extract(instruction, InteractiveElements)
        records = data.model_dump()
        logger.info(f"Extracted: {json.dumps(records, indent=2, ensure_ascii=False)}")
        _step_done("extract", True, f"{len(data.interactive_elements)} elements")
        if run_logger:
            run_logger.log_json(records, "Extracted")

        result.success = True
        result.data = data
        logger.info("Workflow completed successfully")
    except Exception as e:
        category = get_error_category(e, step)
        result.error = str(e)
        result.error_category = category
        logger.error(f"Workflow failed: {e}")
        logger.error(format_error_for_logging(e, category))
        _step_done(step, False, str(e))
        if run_logger:
            run_logger.log_error(str(e))
        if category == "navigation" and cfg.enable_debug:
            await _log_url_diagnostics(url, run_logger)
    finally:
        if session is not None:
            logger.info("Closing session.")
            step_started = time.monotonic()
            try:
                await session.close()
                _step_done("close", True)
            except Exception as e:
                logger.error(f"Error closing session: {e}")
                _step_done("close", False, str(e))
                if result.success:
                    result.success = False
                    result.error = str(e)
                    result.error_category = get_error_category(e, "teardown")

    result.duration_ms = _elapsed_ms(started)
    if run_logger:
        run_logger.finalize(result.success, result.duration_ms, result.error)
    return result
