"""
Shared fixtures: a config that never touches remote services and fake sessions
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from pagemap_core.config import Config
from pagemap_core.models import InteractiveElement, InteractiveElements


@pytest.fixture
def cfg(tmp_path):
    return Config(env="LOCAL", api_key="test-key", log_dir=tmp_path / "logs", run_log_enabled=False)


@pytest.fixture
def sample_records():
    return [
        InteractiveElement(
            website_section="Sidebar",
            website_section_selector="nav.sidebar",
            state_before="The sidebar is visible.",
            state_after="The sidebar is hidden.",
            change_analysis="The sidebar is hidden after the click.",
            element_aria_label="Collapse the sidebar",
        )
    ]


def make_page(records=None, goto_error=None, extract_error=None):
    page = MagicMock()
    page.goto = AsyncMock(side_effect=goto_error)
    page.extract = AsyncMock(
        return_value=InteractiveElements(interactive_elements=list(records or [])),
        side_effect=extract_error,
    )
    return page


def make_session(page=None, init_error=None, close_error=None):
    session = MagicMock()
    session.init = AsyncMock(side_effect=init_error)
    session.close = AsyncMock(side_effect=close_error)
    session.page = page
    return session


@pytest.fixture
def session_factory():
    """Factory returning a fresh fake session with an empty extraction result"""
    def _build(page=None, **kwargs):
        session = make_session(page=page if page is not None else make_page(), **kwargs)
        factory = MagicMock(return_value=session)
        return factory, session
    return _build


@pytest.fixture
def page_builder():
    return make_page


@pytest.fixture
def session_builder():
    return make_session
