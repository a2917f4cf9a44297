"""Playwright browser session owned by a single agent run."""

import asyncio
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Union

from signup_agent.config import Settings, settings as default_settings
from signup_agent.utils.logging import get_logger

logger = get_logger(__name__)

# Client-side route change for single page apps served from the base URL.
PUSH_ROUTE_SCRIPT = """
(route) => {
    history.pushState({}, "", route);
    window.dispatchEvent(new Event("popstate"));
}
"""


class BrowserSession:
    """
    Chromium session with the operations the form agent needs.

    Errors from Playwright propagate to the caller; the orchestrator and the
    action executor decide which of them are fatal.
    """

    def __init__(
        self,
        headless: bool = False,
        slow_mo_ms: int = 500,
        launch_args: Optional[List[str]] = None,
        navigation_delay_ms: int = 1000,
        settle_delay_ms: int = 2000,
        action_timeout_ms: int = 10000
    ):
        """
        Initialize the browser session.

        Args:
            headless: Run browser in headless mode
            slow_mo_ms: Delay Playwright inserts between operations
            launch_args: Extra Chromium command-line switches
            navigation_delay_ms: Wait after loading the base URL
            settle_delay_ms: Flat wait after the route change
            action_timeout_ms: Timeout for fills and clicks
        """
        self.headless = headless
        self.slow_mo_ms = slow_mo_ms
        self.launch_args = list(launch_args or [])
        self.navigation_delay_ms = navigation_delay_ms
        self.settle_delay_ms = settle_delay_ms
        self.action_timeout_ms = action_timeout_ms
        self.logger = logger.bind(component="browser_session")

        self.playwright = None
        self.browser = None
        self.context = None
        self.page = None

        self.is_started = False
        self.current_url: Optional[str] = None

    async def start(self) -> "BrowserSession":
        """Launch Chromium and open a page."""
        if self.is_started:
            return self

        from playwright.async_api import async_playwright

        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(
            headless=self.headless,
            slow_mo=self.slow_mo_ms,
            args=self.launch_args,
        )
        # viewport=None lets the page follow the window size.
        self.context = await self.browser.new_context(viewport=None)
        self.page = await self.context.new_page()
        self.page.set_default_timeout(self.action_timeout_ms)

        self.is_started = True
        self.logger.info(
            "Browser session started",
            headless=self.headless,
            slow_mo_ms=self.slow_mo_ms
        )
        return self

    async def __aenter__(self) -> "BrowserSession":
        return await self.start()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _require_page(self):
        if not self.is_started or self.page is None:
            raise RuntimeError("Browser session is not started")
        return self.page

    async def navigate(self, start_url: str, route: str = "") -> str:
        """
        Load ``start_url`` and switch to ``route`` client-side.

        Returns:
            The page URL after navigation
        """
        page = self._require_page()

        await page.goto(start_url)
        await asyncio.sleep(self.navigation_delay_ms / 1000)

        if route:
            await page.evaluate(PUSH_ROUTE_SCRIPT, route)
        await page.wait_for_timeout(self.settle_delay_ms)

        self.current_url = page.url
        self.logger.info("Navigated to page", start_url=start_url, route=route, url=self.current_url)
        return self.current_url

    async def screenshot(self, path: Optional[Union[str, Path]] = None) -> bytes:
        """Capture the viewport, writing it to ``path`` when given."""
        page = self._require_page()
        options: Dict[str, Any] = {}
        if path:
            options["path"] = str(path)

        data = await page.screenshot(**options)
        self.logger.debug("Screenshot captured", path=str(path) if path else None, size=len(data))
        return data

    async def query_elements(self, selector: str, script: str) -> List[Dict[str, Any]]:
        """Evaluate ``script`` over every element matching ``selector``."""
        page = self._require_page()
        return await page.eval_on_selector_all(selector, script)

    async def fill(self, selector: str, value: str) -> None:
        page = self._require_page()
        await page.fill(selector, value)
        self.logger.debug("Form field filled", selector=selector, value_length=len(value))

    async def click(self, selector: str) -> None:
        page = self._require_page()
        await page.click(selector)
        self.logger.debug("Element clicked", selector=selector)

    async def click_button_by_name(self, name: Union[str, Pattern[str]]) -> None:
        """Click the first button whose accessible name matches ``name``."""
        page = self._require_page()
        if isinstance(name, str):
            name = re.compile(name, re.IGNORECASE)
        await page.get_by_role("button", name=name).first.click()
        self.logger.debug("Button clicked by accessible name", pattern=name.pattern)

    async def close(self) -> None:
        """Close the browser and cleanup resources. Safe to call more than once."""
        try:
            if self.context is not None:
                await self.context.close()

            if self.browser is not None:
                await self.browser.close()

            if self.playwright is not None:
                await self.playwright.stop()

            if self.is_started:
                self.logger.info("Browser session closed")

        except Exception as e:
            self.logger.error(
                "Error closing browser session",
                error=str(e)
            )
        finally:
            self.page = None
            self.context = None
            self.browser = None
            self.playwright = None
            self.is_started = False
            self.current_url = None


def create_browser_session(settings: Optional[Settings] = None) -> BrowserSession:
    """
    Factory function to create a browser session from settings.

    Args:
        settings: Settings to read browser options from

    Returns:
        Configured, not yet started BrowserSession
    """
    settings = settings or default_settings
    return BrowserSession(
        headless=settings.browser_headless,
        slow_mo_ms=settings.browser_slow_mo_ms,
        launch_args=settings.browser_args,
        navigation_delay_ms=settings.navigation_delay_ms,
        settle_delay_ms=settings.settle_delay_ms,
        action_timeout_ms=settings.action_timeout_ms
    )
