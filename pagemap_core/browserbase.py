#!/usr/bin/env python3
"""
Minimal Browserbase REST client: create a remote browser session and release it.
"""
import asyncio
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .diagnostics import get_logger
from .error_handler import SessionError

logger = get_logger(__name__)


@dataclass
class RemoteSession:
    id: str
    connect_url: str


class BrowserbaseClient:
    def __init__(self, api_key: Optional[str], project_id: Optional[str],
                 api_url: str = "https://api.browserbase.com", timeout: int = 30):
        if not api_key or not project_id:
            raise SessionError(
                "BROWSERBASE_API_KEY and BROWSERBASE_PROJECT_ID must be set for env=BROWSERBASE"
            )
        self.api_key = api_key
        self.project_id = project_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        return {"X-BB-API-Key": self.api_key, "Content-Type": "application/json"}

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        resp = requests.post(f"{self.api_url}{path}", json=payload, headers=self._headers(), timeout=self.timeout)
        if resp.status_code >= 400:
            raise SessionError(f"Browserbase API error {resp.status_code}: {resp.text[:300]}")
        return resp.json()

    async def create_session(self) -> RemoteSession:
        data = await asyncio.to_thread(self._post, "/v1/sessions", {"projectId": self.project_id})
        connect_url = data.get("connectUrl")
        if not connect_url:
            raise SessionError("Browserbase session response has no connectUrl")
        logger.info(f"Browserbase session created: {data.get('id')}")
        return RemoteSession(id=data.get("id", ""), connect_url=connect_url)

    async def release_session(self, session_id: str) -> None:
        await asyncio.to_thread(
            self._post,
            f"/v1/sessions/{session_id}",
            {"projectId": self.project_id, "status": "REQUEST_RELEASE"},
        )
        logger.info(f"Browserbase session released: {session_id}")
