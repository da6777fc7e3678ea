"""Per-target Playwright browser session."""

from typing import Any, Optional, Tuple

from ats_automator.config import settings
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)


class BrowserSession:
    """
    Async context manager owning one Chromium instance and one page.

    A session is scoped to a single application attempt: entering it launches
    the browser, leaving it closes page, context, browser and Playwright even
    when the attempt raised.
    """

    def __init__(
        self,
        headless: bool = True,
        viewport_size: Tuple[int, int] = (1366, 768),
        navigation_timeout_ms: int = 30000,
    ):
        """
        Initialize the browser session.

        Args:
            headless: Run browser in headless mode
            viewport_size: Browser viewport size (width, height)
            navigation_timeout_ms: Default navigation timeout for the page
        """
        self.headless = headless
        self.viewport_size = viewport_size
        self.navigation_timeout_ms = navigation_timeout_ms
        self.logger = logger.bind(component="browser_session")

        self.playwright: Optional[Any] = None
        self.browser: Optional[Any] = None
        self.context: Optional[Any] = None
        self.page: Optional[Any] = None

    async def __aenter__(self) -> Any:
        from playwright.async_api import async_playwright

        try:
            self.playwright = await async_playwright().start()
            self.browser = await self.playwright.chromium.launch(headless=self.headless)
            self.context = await self.browser.new_context(
                viewport={"width": self.viewport_size[0], "height": self.viewport_size[1]},
            )
            self.page = await self.context.new_page()
            self.page.set_default_navigation_timeout(self.navigation_timeout_ms)
        except Exception:
            await self.close()
            raise

        self.logger.info(
            "Browser session started",
            headless=self.headless,
            viewport_size=self.viewport_size,
        )
        return self.page

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the browser and cleanup resources."""
        try:
            if self.page:
                await self.page.close()
            if self.context:
                await self.context.close()
            if self.browser:
                await self.browser.close()
            if self.playwright:
                await self.playwright.stop()
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


def create_browser_session(headless: Optional[bool] = None) -> BrowserSession:
    """
    Factory function to create a browser session from settings.

    Args:
        headless: Override for ``settings.browser_headless``

    Returns:
        Configured BrowserSession instance
    """
    return BrowserSession(
        headless=settings.browser_headless if headless is None else headless,
        viewport_size=(settings.browser_viewport_width, settings.browser_viewport_height),
        navigation_timeout_ms=settings.navigation_timeout_ms,
    )
