"""Ordered registry of platform handlers with first-match detection."""

from typing import Any, Dict, List, Optional, Sequence, Type

from ats_automator.browser.timing import HumanTiming
from ats_automator.browser.waits import WaitTimeouts
from ats_automator.core.models import FormLayout
from ats_automator.platforms.acme import AcmeHandler
from ats_automator.platforms.base import PlatformHandler
from ats_automator.platforms.globex import GlobexHandler
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)

HANDLER_TYPES: Dict[FormLayout, Type[PlatformHandler]] = {
    FormLayout.ACME: AcmeHandler,
    FormLayout.GLOBEX: GlobexHandler,
}

# Registration order decides which handler wins when several could match
DEFAULT_LAYOUTS = (FormLayout.ACME, FormLayout.GLOBEX)


class PlatformRegistry:
    """
    Fixed, ordered set of handlers.

    Detection runs in registration order and the first handler that claims
    the page wins. Supporting a new platform means adding one handler to the
    sequence given here.
    """

    def __init__(self, handlers: Sequence[PlatformHandler]):
        self._handlers = tuple(handlers)
        self.logger = logger.bind(component="platform_registry")

    async def find_handler(self, page: Any, url: str) -> Optional[PlatformHandler]:
        """
        Find the handler for the current page.

        Returns:
            The first handler whose detection matches, or None.
        """
        for handler in self._handlers:
            if await handler.detect(page, url):
                self.logger.info("Handler matched", handler=handler.name, url=url)
                return handler

        self.logger.warning(
            "No handler matched",
            url=url,
            registered=[handler.name for handler in self._handlers]
        )
        return None

    @property
    def handlers(self) -> List[PlatformHandler]:
        return list(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)


def create_platform_registry(
    layouts: Sequence[FormLayout] = DEFAULT_LAYOUTS,
    timing: Optional[HumanTiming] = None,
    timeouts: Optional[WaitTimeouts] = None,
) -> PlatformRegistry:
    """
    Factory function to build a registry from layout tags.

    Args:
        layouts: Layouts in registration order
        timing: Timing strategy shared by all handlers
        timeouts: Wait bounds shared by all handlers

    Returns:
        Configured PlatformRegistry instance
    """
    handlers = [HANDLER_TYPES[layout](timing=timing, timeouts=timeouts) for layout in layouts]
    return PlatformRegistry(handlers)
