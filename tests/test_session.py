"""Tests for the per-target browser session."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from ats_automator.browser.session import BrowserSession, create_browser_session


def mock_playwright(calls):
    page = MagicMock()
    page.close = AsyncMock(side_effect=lambda: calls.append("page"))
    page.set_default_navigation_timeout = MagicMock()

    context = MagicMock()
    context.new_page = AsyncMock(return_value=page)
    context.close = AsyncMock(side_effect=lambda: calls.append("context"))

    browser = MagicMock()
    browser.new_context = AsyncMock(return_value=context)
    browser.close = AsyncMock(side_effect=lambda: calls.append("browser"))

    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(return_value=browser)
    playwright.stop = AsyncMock(side_effect=lambda: calls.append("playwright"))

    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    return starter, playwright, browser, page


class TestBrowserSession:

    @pytest.mark.asyncio
    async def test_session_yields_page_and_closes_in_order(self):
        calls = []
        starter, playwright, browser, page = mock_playwright(calls)
        session = BrowserSession(headless=False, viewport_size=(1280, 720), navigation_timeout_ms=15000)

        with patch("playwright.async_api.async_playwright", return_value=starter):
            async with session as yielded:
                assert yielded is page

        playwright.chromium.launch.assert_awaited_once_with(headless=False)
        browser.new_context.assert_awaited_once_with(viewport={"width": 1280, "height": 720})
        page.set_default_navigation_timeout.assert_called_once_with(15000)
        assert calls == ["page", "context", "browser", "playwright"]
        assert session.page is None

    @pytest.mark.asyncio
    async def test_session_closes_when_body_raises(self):
        calls = []
        starter, _, _, _ = mock_playwright(calls)

        with patch("playwright.async_api.async_playwright", return_value=starter):
            with pytest.raises(RuntimeError):
                async with BrowserSession():
                    raise RuntimeError("handler blew up")

        assert calls == ["page", "context", "browser", "playwright"]

    @pytest.mark.asyncio
    async def test_failed_launch_stops_playwright(self):
        calls = []
        starter, playwright, _, _ = mock_playwright(calls)
        playwright.chromium.launch = AsyncMock(side_effect=RuntimeError("no chromium"))

        with patch("playwright.async_api.async_playwright", return_value=starter):
            with pytest.raises(RuntimeError, match="no chromium"):
                async with BrowserSession():
                    pass

        assert calls == ["playwright"]

    def test_factory_override(self):
        assert create_browser_session(headless=False).headless is False
