"""Browser automation components for web interaction."""

from signup_agent.browser.session import BrowserSession, create_browser_session
from signup_agent.browser.extractor import SelectorExtractor, build_descriptors, synthesize_selector

__all__ = [
    "BrowserSession", "create_browser_session",
    "SelectorExtractor", "build_descriptors", "synthesize_selector"
]
