"""Tests for the Playwright browser session and screenshot store."""

import re

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from signup_agent.browser.session import PUSH_ROUTE_SCRIPT, BrowserSession, create_browser_session
from signup_agent.config import Settings
from signup_agent.utils.artifacts import ScreenshotStore


@pytest.fixture
def page():
    page = MagicMock()
    page.url = "https://example.com/signup"
    page.goto = AsyncMock()
    page.evaluate = AsyncMock()
    page.wait_for_timeout = AsyncMock()
    page.screenshot = AsyncMock(return_value=b"png")
    page.eval_on_selector_all = AsyncMock(return_value=[{"tag": "input"}])
    page.fill = AsyncMock()
    page.click = AsyncMock()
    button = MagicMock()
    button.first.click = AsyncMock()
    page.get_by_role = MagicMock(return_value=button)
    return page


@pytest.fixture
def session(page):
    """Create a started session around a mocked page."""
    session = BrowserSession(navigation_delay_ms=0, settle_delay_ms=5)
    session.page = page
    session.context = MagicMock(close=AsyncMock())
    session.browser = MagicMock(close=AsyncMock())
    session.playwright = MagicMock(stop=AsyncMock())
    session.is_started = True
    return session


class TestBrowserSession:

    def test_initialization(self):
        session = BrowserSession()
        assert session.headless is False
        assert session.slow_mo_ms == 500
        assert session.launch_args == []
        assert not session.is_started

    @pytest.mark.asyncio
    async def test_operations_require_start(self):
        with pytest.raises(RuntimeError):
            await BrowserSession().fill("#email", "a@b.co")

    @pytest.mark.asyncio
    async def test_start_launches_chromium(self, page):
        context = MagicMock(new_page=AsyncMock(return_value=page))
        browser = MagicMock(new_context=AsyncMock(return_value=context))
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(return_value=browser)
        starter = MagicMock(start=AsyncMock(return_value=playwright))

        with patch("playwright.async_api.async_playwright", return_value=starter):
            session = BrowserSession(headless=True, slow_mo_ms=0, launch_args=["--disable-extensions"])
            await session.start()

        playwright.chromium.launch.assert_awaited_once_with(
            headless=True, slow_mo=0, args=["--disable-extensions"]
        )
        browser.new_context.assert_awaited_once_with(viewport=None)
        page.set_default_timeout.assert_called_once_with(10000)
        assert session.is_started

    @pytest.mark.asyncio
    async def test_navigate_with_route(self, session, page):
        url = await session.navigate("https://example.com", "/signup")

        page.goto.assert_awaited_once_with("https://example.com")
        page.evaluate.assert_awaited_once_with(PUSH_ROUTE_SCRIPT, "/signup")
        page.wait_for_timeout.assert_awaited_once_with(5)
        assert url == "https://example.com/signup"

    @pytest.mark.asyncio
    async def test_navigate_without_route(self, session, page):
        await session.navigate("https://example.com")

        page.evaluate.assert_not_awaited()
        page.wait_for_timeout.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_screenshot_and_query(self, session, page, tmp_path):
        path = tmp_path / "shot.png"

        assert await session.screenshot(path) == b"png"
        page.screenshot.assert_awaited_once_with(path=str(path))

        assert await session.query_elements("input", "(els) => els") == [{"tag": "input"}]
        page.eval_on_selector_all.assert_awaited_once_with("input", "(els) => els")

    @pytest.mark.asyncio
    async def test_fill_and_click_propagate_errors(self, session, page):
        page.fill.side_effect = Exception("Timeout")

        with pytest.raises(Exception, match="Timeout"):
            await session.fill("#email", "a@b.co")

        await session.click("#submit")
        page.click.assert_awaited_once_with("#submit")

    @pytest.mark.asyncio
    async def test_click_button_by_name(self, session, page):
        await session.click_button_by_name("submit|register")

        role, = page.get_by_role.call_args.args
        assert role == "button"
        pattern = page.get_by_role.call_args.kwargs["name"]
        assert isinstance(pattern, re.Pattern)
        assert pattern.search("REGISTER")
        page.get_by_role.return_value.first.click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, session):
        browser = session.browser

        await session.close()
        await session.close()

        browser.close.assert_awaited_once()
        assert not session.is_started
        assert session.page is None

    @pytest.mark.asyncio
    async def test_context_manager_closes(self, session):
        async with session as active:
            assert active is session
        assert not session.is_started


def test_create_browser_session_from_settings():
    settings = Settings(browser_headless=True, browser_slow_mo_ms=0, settle_delay_ms=100)

    session = create_browser_session(settings)

    assert session.headless is True
    assert session.slow_mo_ms == 0
    assert session.settle_delay_ms == 100
    assert "--start-maximized" in session.launch_args


class TestScreenshotStore:

    def test_new_path_creates_directory(self, tmp_path):
        store = ScreenshotStore(tmp_path / "shots")

        path = store.new_path()

        assert path.parent.is_dir()
        assert re.fullmatch(r"signup-\d+(-\d+)?\.png", path.name)

    def test_new_paths_are_unique(self, tmp_path):
        store = ScreenshotStore(tmp_path)
        first = store.new_path()
        first.write_bytes(b"png")

        assert store.new_path() != first

    def test_discard(self, tmp_path):
        store = ScreenshotStore(tmp_path)
        path = store.new_path()
        path.write_bytes(b"png")

        assert store.discard(path) is True
        assert not path.exists()
        assert store.discard(path) is False
        assert store.discard(None) is False
