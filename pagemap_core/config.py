#!/usr/bin/env python3
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_MODEL = "google/gemini-2.5-flash-preview-05-20"

SESSION_ENVS = ("BROWSERBASE", "LOCAL", "BROWSERLESS")


@dataclass
class Config:
    """Application configuration"""
    env: str = os.getenv("PAGEMAP_ENV", "BROWSERBASE").upper()
    model_name: str = os.getenv("PAGEMAP_MODEL", DEFAULT_MODEL)
    api_key: Optional[str] = os.getenv("GOOGLE_API_KEY") or None
    verbose: int = int(os.getenv("PAGEMAP_VERBOSE", "1"))
    enable_debug: bool = os.getenv("PAGEMAP_DEBUG", "false").lower() == "true"
    headless: bool = os.getenv("PAGEMAP_HEADLESS", "true").lower() == "true"

    # Remote browsers
    browserbase_api_key: Optional[str] = os.getenv("BROWSERBASE_API_KEY") or None
    browserbase_project_id: Optional[str] = os.getenv("BROWSERBASE_PROJECT_ID") or None
    browserbase_api_url: str = os.getenv("BROWSERBASE_API_URL", "https://api.browserbase.com")
    browserless_url: str = os.getenv("BROWSERLESS_URL", "ws://localhost:3000")

    # Navigation
    navigation_timeout_ms: int = int(os.getenv("PAGEMAP_NAV_TIMEOUT_MS", "30000"))
    wait_until: str = os.getenv("PAGEMAP_WAIT_UNTIL", "domcontentloaded")

    # Extraction context sizing
    dom_max_chars: int = int(os.getenv("PAGEMAP_DOM_MAX_CHARS", "30000"))
    max_elements: int = int(os.getenv("PAGEMAP_MAX_ELEMENTS", "300"))

    # LLM
    llm_timeout: int = int(os.getenv("PAGEMAP_LLM_TIMEOUT", "300"))
    temperature: float = float(os.getenv("PAGEMAP_TEMPERATURE", "0.1"))
    max_tokens: int = int(os.getenv("PAGEMAP_NUM_PREDICT", "8192"))

    # Run logs
    log_dir: Path = Path(os.getenv("PAGEMAP_LOG_DIR", "./logs"))
    run_log_enabled: bool = os.getenv("PAGEMAP_RUN_LOG", "true").lower() in ["true", "1", "yes"]

    def __post_init__(self):
        self.env = str(self.env).upper()
        self.log_dir = Path(self.log_dir)


config = Config()
