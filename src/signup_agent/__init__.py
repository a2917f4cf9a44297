"""
Signup Form Agent: fills signup forms with AI-generated user data.

The agent opens a page with Playwright, asks a vision-capable model which
fields to fill from a screenshot and the page's selectors, asks the same model
for plausible user data, then fills and submits the form.
"""

__version__ = "0.1.0"

from signup_agent.core.agent import FormAgent, create_form_agent
from signup_agent.browser.session import BrowserSession, create_browser_session
from signup_agent.llm.client import LLMClient

__all__ = [
    "FormAgent",
    "create_form_agent",
    "BrowserSession",
    "create_browser_session",
    "LLMClient",
]
