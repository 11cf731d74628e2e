"""
Extraction schema for interactive page elements.

Each record describes one interactive element and the state transition it
causes. Every field is optional text; the LLM receives the field
descriptions through the JSON Schema of InteractiveElements.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


DEFAULT_TARGET_URL = "https://vaul.emilkowal.ski/getting-started"


class InteractiveElement(BaseModel):
    """One interactive element and what interacting with it does."""

    website_section: Optional[str] = Field(
        None,
        description="The section of the website where this element is located "
                    "(e.g., Header, Sidebar, Main Content, Footer, Navigation, etc.)"
    )
    website_section_selector: Optional[str] = Field(
        None,
        description="A CSS selector that targets the section containing this element "
                    "(e.g., 'nav.sidebar', 'header', 'main', '.footer')"
    )
    state_before: Optional[str] = Field(
        None,
        description="Description of the current state before interacting with this element"
    )
    state_after: Optional[str] = Field(
        None,
        description="Description of the expected state after interacting with this element"
    )
    change_analysis: Optional[str] = Field(
        None,
        description="Analysis of what changes occur when this element is interacted with"
    )
    element_aria_label: Optional[str] = Field(
        None,
        description="The best possible text locator for this element "
                    "(e.g., aria-label, innerText, label, alt text, etc.)"
    )


class InteractiveElements(BaseModel):
    """Extraction result: every interactive element found on the page."""

    interactive_elements: List[InteractiveElement] = Field(
        ...,
        description="All interactive elements on the page"
    )

    def __len__(self) -> int:
        return len(self.interactive_elements)


_EXAMPLE_RECORD = """{
  "website_section": "Sidebar",
  "website_section_selector": "nav.sidebar",
  "state_before": "The sidebar is visible.",
  "state_after": "The sidebar is hidden.",
  "change_analysis": "The sidebar is hidden after the click.",
  "element_aria_label": "Collapse the sidebar." // What the action does (later used for the agent)
}"""

_EXAMPLE_LIST = """[
  // For a given nav.sidebar > button(Collapse the sidebar)
  {
    "website_section": "Sidebar",
    "website_section_selector": "nav.sidebar",
    "state_before": "The sidebar is visible.",
    "state_after": "The sidebar is hidden.",
    "change_analysis": "The sidebar is hidden after the click.",
    "element_aria_label": "Collapse the sidebar"
  },
  // For a given nav.sidebar > a(Navigate to the home page)
  {
    "website_section": "Sidebar",
    "website_section_selector": "nav.sidebar",
    "state_before": "The page is on the getting started page.",
    "state_after": "The page is navigated to the home page.",
    "change_analysis": "The page is navigated to the home page after the click.",
    "element_aria_label": "Navigate to the home page."
  },
  // For a given section.main > button(aria-label: Collapse the main body)
  {
    "website_section": "Main Body",
    "website_section_selector": "section.main",
    "state_before": "The main body is visible.",
    "state_after": "The main body is hidden.",
    "change_analysis": "The main body is hidden after the click.",
    "element_aria_label": "Collapse the main body."
  }
]"""


def build_instruction(url: str) -> str:
    """Natural-language extraction instruction for the interactive elements of `url`."""
    return (
        f"give me all the actions possible on {url} annotating them in the following data structure\n\n"
        f"{_EXAMPLE_RECORD}\n\n"
        "Example:\n\n"
        "Website has a sidebar with a button to collapse the sidebar, a link to navigate to a "
        "different page and the website also has a button on a section of the main body of the "
        "page to collapse the section.\n\n"
        f"{_EXAMPLE_LIST}\n\n"
        "Those will be used by an algorithm / agent to locate the elements and interact with them "
        "autonomously, so we need the locators to be accurate and the descriptions to be correct."
    )
