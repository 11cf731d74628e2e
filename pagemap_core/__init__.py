"""
pagemap_core package: LLM-driven mapping of the interactive elements of a page

Usage:
    import asyncio
    from pagemap_core import run_workflow

    result = asyncio.run(run_workflow("https://example.com"))
    print(result.to_dict())
"""
from .config import Config, config
from .llm_config import LLMConfig
from .llm_factory import setup_llm, create_llm_client
from .models import InteractiveElement, InteractiveElements, build_instruction, DEFAULT_TARGET_URL
from .browser_setup import BrowserSession, SessionPage
from .workflow import WorkflowResult, run_workflow

__all__ = [
    "Config",
    "config",
    "LLMConfig",
    "setup_llm",
    "create_llm_client",
    "InteractiveElement",
    "InteractiveElements",
    "build_instruction",
    "DEFAULT_TARGET_URL",
    "BrowserSession",
    "SessionPage",
    "WorkflowResult",
    "run_workflow",
]
