#!/usr/bin/env python3
from typing import Any, Optional, Type

from pydantic import BaseModel

from .browserbase import BrowserbaseClient, RemoteSession
from .config import Config, SESSION_ENVS, config as default_config
from .diagnostics import get_logger
from .error_handler import ConfigurationError, NavigationError, SessionError, TeardownError, WorkflowError
from .extraction import extract_structured
from .llm_factory import setup_llm
from .llm_config import LLMConfig

logger = get_logger(__name__)

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]


class SessionPage:
    """Page handle of a session: navigation plus structured extraction."""

    def __init__(self, page, llm, config: Config):
        self.raw = page
        self.llm = llm
        self.config = config

    @property
    def url(self) -> str:
        return getattr(self.raw, "url", "")

    async def goto(self, url: str):
        try:
            response = await self.raw.goto(
                url,
                wait_until=self.config.wait_until,
                timeout=self.config.navigation_timeout_ms,
            )
        except Exception as e:
            raise NavigationError(f"Navigation to {url} failed: {e}") from e
        if response is not None and not response.ok:
            logger.warning(f"Navigation to {url} returned status {response.status}")
        return response

    async def extract(self, instruction: str, schema: Type[BaseModel]) -> BaseModel:
        return await extract_structured(
            self.raw,
            self.llm,
            instruction,
            schema,
            dom_max_chars=self.config.dom_max_chars,
            max_elements=self.config.max_elements,
        )


class BrowserSession:
    """
    Managed browser session (local Chromium, Browserbase or a browserless CDP endpoint).

    Usage:
        session = BrowserSession(config)
        try:
            await session.init()
            await session.page.goto(url)
            data = await session.page.extract(instruction, InteractiveElements)
        finally:
            await session.close()
    """

    def __init__(self, config: Optional[Config] = None, llm: Any = None):
        self.config = config or default_config
        if self.config.env not in SESSION_ENVS:
            raise ConfigurationError(f"Unknown session env {self.config.env!r}, expected one of {', '.join(SESSION_ENVS)}")
        self._llm = llm
        self._playwright = None
        self._browser = None
        self._context = None
        self._remote: Optional[RemoteSession] = None
        self._browserbase: Optional[BrowserbaseClient] = None
        self._page: Optional[SessionPage] = None

    @property
    def page(self) -> Optional[SessionPage]:
        return self._page

    @property
    def remote_session_id(self) -> Optional[str]:
        return self._remote.id if self._remote else None

    async def init(self) -> "BrowserSession":
        from playwright.async_api import async_playwright

        try:
            llm = self._llm or setup_llm(LLMConfig.from_config(self.config))
        except ValueError as e:
            raise SessionError(str(e)) from e

        try:
            self._playwright = await async_playwright().start()
            if self.config.env == "LOCAL":
                self._browser = await self._playwright.chromium.launch(
                    headless=bool(self.config.headless),
                    args=list(LAUNCH_ARGS),
                )
                self._context = await self._browser.new_context()
            else:
                endpoint = await self._remote_endpoint()
                self._browser = await self._playwright.chromium.connect_over_cdp(endpoint)
                # Remote browsers come with a default context
                contexts = self._browser.contexts
                self._context = contexts[0] if contexts else await self._browser.new_context()
            pages = self._context.pages
            raw_page = pages[0] if pages else await self._context.new_page()
        except WorkflowError:
            raise
        except Exception as e:
            raise SessionError(f"Failed to start {self.config.env} browser session: {e}") from e

        self._page = SessionPage(raw_page, llm, self.config) if raw_page is not None else None
        logger.debug(f"Session started (env={self.config.env})")
        return self

    async def _remote_endpoint(self) -> str:
        if self.config.env == "BROWSERLESS":
            return self.config.browserless_url
        self._browserbase = BrowserbaseClient(
            self.config.browserbase_api_key,
            self.config.browserbase_project_id,
            api_url=self.config.browserbase_api_url,
        )
        self._remote = await self._browserbase.create_session()
        return self._remote.connect_url

    async def close(self) -> None:
        """Release browser, remote session and Playwright. Safe to call when init failed."""
        browser, playwright, remote = self._browser, self._playwright, self._remote
        self._browser = self._playwright = self._remote = None
        self._context = None
        self._page = None
        error: Optional[Exception] = None
        try:
            if browser is not None:
                try:
                    await browser.close()
                except Exception as e:
                    error = e
            # Remote session is billed until released, whatever happened to the browser
            if remote is not None and self._browserbase is not None:
                try:
                    await self._browserbase.release_session(remote.id)
                except Exception as e:
                    if error is None:
                        error = e
                    else:
                        logger.error(f"Error releasing Browserbase session {remote.id}: {e}")
        finally:
            if playwright is not None:
                await playwright.stop()
        if error is not None:
            raise TeardownError(f"Error closing session: {error}") from error

    async def __aenter__(self) -> "BrowserSession":
        try:
            return await self.init()
        except BaseException:
            await self.close()
            raise

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
