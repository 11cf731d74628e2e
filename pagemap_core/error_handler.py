"""
Workflow errors and user-friendly error reporting.

Every failure of a run falls into one of the workflow steps: configuration,
session (init or missing page), navigation, extraction or teardown. The
exception classes below carry that step as `category`; foreign exceptions
raised by Playwright or the LLM client are categorized by
`get_error_category`.
"""

from typing import Dict, Optional
import logging
import traceback

logger = logging.getLogger(__name__)


class WorkflowError(Exception):
    """Base class for failures of a workflow run"""
    category = "unknown"


class ConfigurationError(WorkflowError):
    """Missing or invalid configuration (e.g. no target URL)"""
    category = "configuration"


class SessionError(WorkflowError):
    """Browser session failed to start or exposes no page"""
    category = "session"


class NavigationError(SessionError):
    """Page navigation failed"""
    category = "navigation"


class ExtractionError(WorkflowError):
    """Structured extraction call failed"""
    category = "extraction"


class TeardownError(WorkflowError):
    """Closing the browser session failed"""
    category = "teardown"


# Error mappings: pattern -> user-friendly info
ERROR_MAPPINGS = {
    "url environment variable": {
        "message": "No target URL was provided",
        "suggestion": "Set the URL environment variable, e.g. export URL=https://example.com",
        "severity": "critical",
    },
    "api token required": {
        "message": "The model API key is missing",
        "suggestion": "Set GOOGLE_API_KEY (or the key variable of the selected provider)",
        "severity": "critical",
    },
    "browserbase_api_key": {
        "message": "Browserbase credentials are missing",
        "suggestion": "Set BROWSERBASE_API_KEY and BROWSERBASE_PROJECT_ID, or run with PAGEMAP_ENV=LOCAL",
        "severity": "critical",
    },
    "executable doesn't exist": {
        "message": "The local browser is not installed",
        "suggestion": "Install it with: python -m playwright install chromium",
        "severity": "critical",
    },
    "failed to get page instance": {
        "message": "The browser session did not expose a page",
        "suggestion": "Check the session provider status and try again",
        "severity": "error",
    },
    "timeout": {
        "message": "The page or the model took too long to respond",
        "suggestion": "Check that the site is reachable or raise PAGEMAP_NAV_TIMEOUT_MS / PAGEMAP_LLM_TIMEOUT",
        "severity": "warning",
    },
    "connection refused": {
        "message": "Could not connect",
        "suggestion": "Check that the URL is correct and the browser endpoint is running",
        "severity": "error",
    },
    "net::err_name_not_resolved": {
        "message": "The host name could not be resolved",
        "suggestion": "Check the spelling of the URL",
        "severity": "error",
    },
    "invalid json": {
        "message": "The model reply was not valid JSON",
        "suggestion": "Try again or switch to a stronger model with PAGEMAP_MODEL",
        "severity": "error",
    },
    "validation error": {
        "message": "The model reply did not match the extraction schema",
        "suggestion": "Try again or switch to a stronger model with PAGEMAP_MODEL",
        "severity": "error",
    },
}


def format_user_friendly_error(
    error: Exception,
    context: str = "general",
    technical_details: Optional[str] = None
) -> Dict:
    """
    Convert technical error to user-friendly message.

    Returns:
        {
            "message": str,
            "suggestion": str,
            "technical": str,
            "severity": str,   # "critical", "error", "warning"
        }
    """
    error_str = str(error)

    for pattern, friendly_error in ERROR_MAPPINGS.items():
        if pattern in error_str.lower():
            result = friendly_error.copy()
            result["technical"] = technical_details or error_str
            logger.debug(f"Mapped error to user-friendly: {result['message']}")
            return result

    return {
        "message": "An unexpected error occurred during the workflow",
        "suggestion": "Re-run with --verbose and check the run log",
        "technical": technical_details or error_str,
        "severity": "error",
    }


def get_error_category(error: Exception, step: Optional[str] = None) -> str:
    """
    Categorize error type.

    Workflow errors carry their own category. Other exceptions take the
    category of the step they were raised in, falling back to keywords.

    Returns:
        "configuration", "session", "navigation", "extraction", "teardown" or "unknown"
    """
    if isinstance(error, WorkflowError):
        return error.category
    if step:
        return step

    error_str = str(error).lower()
    if any(k in error_str for k in ["browser", "target closed", "session"]):
        return "session"
    elif any(k in error_str for k in ["goto", "navigation", "net::"]):
        return "navigation"
    elif any(k in error_str for k in ["json", "schema", "llm", "model"]):
        return "extraction"
    return "unknown"


def format_error_for_logging(error: Exception, context: str = "") -> str:
    """Format error as log lines: context, message, suggestion, technical detail."""
    friendly = format_user_friendly_error(error, context)

    lines = [
        f"❌ {friendly['message']}",
        f"💡 {friendly['suggestion']}",
        f"🔧 Technical: {friendly['technical']}"
    ]

    if context:
        lines.insert(0, f"📍 Context: {context}")

    return "\n".join(lines)


def create_error_response(
    error: Exception,
    context: str = "",
    include_stacktrace: bool = False
) -> Dict:
    """Standardized error payload for JSON output."""
    friendly = format_user_friendly_error(error, context)

    response = {
        "success": False,
        "error": {
            "message": friendly["message"],
            "suggestion": friendly["suggestion"],
            "severity": friendly["severity"],
            "category": get_error_category(error, context or None),
        }
    }

    if include_stacktrace:
        response["error"]["stacktrace"] = traceback.format_exc()
        response["error"]["technical_details"] = friendly["technical"]

    return response
