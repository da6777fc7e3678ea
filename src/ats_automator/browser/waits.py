"""Bounded waits on page state.

Every wait has a timeout. A *tolerant* (best-effort) wait reports expiry by
returning ``False`` so the caller can take a fallback path; a hard wait
raises :class:`StructuralWaitTimeout`, which aborts the current attempt.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ats_automator.config import Settings, settings
from ats_automator.core.errors import StructuralWaitTimeout
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WaitTimeouts:
    """Timeouts in milliseconds for every structural wait."""
    step_transition: int = 3000
    conditional_field: int = 2000
    dropdown: int = 3000
    spinner: int = 2000
    typeahead_results: int = 5000
    confirmation: int = 10000

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "WaitTimeouts":
        config = config or settings
        return cls(
            step_transition=config.step_transition_timeout_ms,
            conditional_field=config.conditional_field_timeout_ms,
            dropdown=config.dropdown_timeout_ms,
            spinner=config.spinner_timeout_ms,
            typeahead_results=config.typeahead_results_timeout_ms,
            confirmation=config.confirmation_timeout_ms,
        )


async def wait_for_selector(
    page: Any,
    selector: str,
    *,
    timeout_ms: int,
    tolerant: bool = False,
    state: str = "visible",
    description: Optional[str] = None,
) -> bool:
    """
    Wait until ``selector`` reaches ``state``.

    Returns:
        True when the element appeared, False when a tolerant wait expired.

    Raises:
        StructuralWaitTimeout: when a hard wait expired.
    """
    try:
        await page.wait_for_selector(selector, state=state, timeout=timeout_ms)
        return True
    except PlaywrightTimeoutError as e:
        if tolerant:
            logger.debug(
                "Best-effort wait expired",
                selector=selector,
                timeout_ms=timeout_ms,
            )
            return False
        raise StructuralWaitTimeout(description or selector, timeout_ms) from e


async def wait_until(
    predicate: Callable[[], Awaitable[bool]],
    *,
    timeout_ms: int,
    tolerant: bool = False,
    poll_interval_ms: int = 100,
    description: str = "condition",
) -> bool:
    """Poll an async predicate until it holds or the timeout expires."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout_ms / 1000

    while True:
        if await predicate():
            return True
        if loop.time() >= deadline:
            break
        await asyncio.sleep(poll_interval_ms / 1000)

    if tolerant:
        logger.debug("Best-effort wait expired", condition=description, timeout_ms=timeout_ms)
        return False
    raise StructuralWaitTimeout(description, timeout_ms)
