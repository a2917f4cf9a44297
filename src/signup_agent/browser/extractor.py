"""Interactive element extraction with CSS selector synthesis."""

from typing import Any, Dict, Iterable, List, Optional

from signup_agent.core.models import ElementDescriptor
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

INTERACTIVE_ELEMENTS = "input, textarea, select, button"

# Collects raw attributes only; selectors are synthesized in Python.
COLLECT_ATTRIBUTES_SCRIPT = """
(elements) => elements.map((el) => ({
    tag: el.tagName.toLowerCase(),
    id: el.getAttribute("id"),
    name: el.getAttribute("name"),
    placeholder: el.getAttribute("placeholder"),
    type: el.getAttribute("type"),
    text: el.innerText || el.getAttribute("value") || "",
}))
"""


def synthesize_selector(
    tag: str,
    id: Optional[str] = None,
    name: Optional[str] = None,
    placeholder: Optional[str] = None,
    type: Optional[str] = None,
) -> Optional[str]:
    """
    Build a CSS selector for an element from its identifying attributes.

    The first available attribute wins: ``id``, then ``name``, then
    ``placeholder``. Submit inputs and buttons without any of those fall back
    to the generic ``button`` selector. Anything else yields None.
    """
    if id:
        return f"#{id}"
    if name:
        return f'[name="{name}"]'
    if placeholder:
        return f'input[placeholder="{placeholder}"]'
    if type == "submit" or (tag or "").lower() == "button":
        return "button"
    return None


def build_descriptors(raw_elements: Iterable[Dict[str, Any]]) -> List[ElementDescriptor]:
    """Turn raw DOM attribute records into descriptors, dropping unaddressable ones."""
    descriptors = []
    for raw in raw_elements:
        tag = (raw.get("tag") or "").lower()
        selector = synthesize_selector(
            tag,
            id=raw.get("id"),
            name=raw.get("name"),
            placeholder=raw.get("placeholder"),
            type=raw.get("type"),
        )
        if selector is None:
            continue

        descriptors.append(
            ElementDescriptor(
                tag=tag,
                id=raw.get("id") or None,
                name=raw.get("name") or None,
                placeholder=raw.get("placeholder") or None,
                type=raw.get("type") or None,
                text=(raw.get("text") or "").strip() or None,
                selector=selector,
            )
        )
    return descriptors


class SelectorExtractor:
    """Captures the interactive elements of a live page."""

    def __init__(self, element_query: str = INTERACTIVE_ELEMENTS):
        self.element_query = element_query
        self.logger = logger.bind(component="selector_extractor")

    async def extract(self, session) -> List[ElementDescriptor]:
        """
        Snapshot the page behind ``session`` and synthesize selectors.

        Args:
            session: Browser session exposing ``query_elements``

        Returns:
            Descriptors in DOM order
        """
        raw_elements = await session.query_elements(self.element_query, COLLECT_ATTRIBUTES_SCRIPT)
        descriptors = build_descriptors(raw_elements or [])

        self.logger.info(
            "Extracted interactive elements",
            candidates=len(raw_elements or []),
            addressable=len(descriptors)
        )
        return descriptors
