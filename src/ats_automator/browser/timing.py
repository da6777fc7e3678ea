"""Human-like pacing for every browser action."""

import asyncio
import random
import string
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)

DelayRange = Tuple[int, int]
Sleeper = Callable[[float], Awaitable[Any]]


@dataclass
class TimingConfig:
    """Delay ranges in milliseconds used by :class:`HumanTiming`."""
    action_delay: DelayRange = (100, 200)
    short_delay: DelayRange = (50, 150)
    hover_delay: DelayRange = (100, 300)
    scroll_delay: DelayRange = (200, 400)
    reading_pause: DelayRange = (500, 1500)
    settle_delay: DelayRange = (300, 500)
    keystroke_base: float = 50.0
    letter_jitter: float = 30.0
    digit_extra: DelayRange = (50, 100)
    symbol_extra: DelayRange = (100, 200)
    micro_pause_probability: float = 0.1
    micro_pause: DelayRange = (400, 900)
    # Multiplier applied to every delay
    scale: float = 1.0

    @classmethod
    def instant(cls) -> "TimingConfig":
        """Zero-delay configuration, used by tests and ``human_timing=False``."""
        return cls(scale=0.0, micro_pause_probability=0.0)


class HumanTiming:
    """
    Produces randomized delays and keystroke pacing.

    The random source and the sleep coroutine are injectable so tests can
    run deterministically without real waiting.
    """

    def __init__(
        self,
        config: Optional[TimingConfig] = None,
        rng: Optional[random.Random] = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.config = config or TimingConfig()
        self.rng = rng or random.Random()
        self._sleep = sleep
        self.action_count = 0
        self.total_delay_ms = 0.0

    def pick_delay(self, low: int, high: int) -> int:
        """Uniform integer delay in ``[low, high]``, scaled."""
        delay = low if high <= low else self.rng.randint(low, high)
        return max(round(delay * self.config.scale), 0)

    async def pause(self, delay_ms: float) -> None:
        self.total_delay_ms += delay_ms
        await self._sleep(delay_ms / 1000)

    async def random_delay(self, low: int, high: int) -> int:
        """Sleep for a random duration between ``low`` and ``high`` milliseconds."""
        delay = self.pick_delay(low, high)
        await self.pause(delay)
        return delay

    async def delay(self, delay_range: DelayRange) -> int:
        return await self.random_delay(*delay_range)

    def keystroke_delay(self, char: str) -> float:
        """Per-character delay: letters fastest, digits slower, symbols slowest."""
        base = self.config.keystroke_base
        if char in string.ascii_letters or char.isspace():
            delay = base + self.rng.random() * self.config.letter_jitter
        elif char in string.digits:
            low, high = self.config.digit_extra
            delay = base + low + self.rng.random() * (high - low)
        else:
            low, high = self.config.symbol_extra
            delay = base + low + self.rng.random() * (high - low)
        return delay * self.config.scale

    def wants_micro_pause(self) -> bool:
        return self.rng.random() < self.config.micro_pause_probability

    async def type_text(self, locator: Any, text: str) -> None:
        """Type ``text`` one character at a time with variable speed."""
        self.action_count += 1
        await locator.click()
        await self.delay(self.config.short_delay)

        for char in text:
            delay = self.keystroke_delay(char)
            self.total_delay_ms += delay
            await locator.press_sequentially(char, delay=delay)

            # Occasional hesitation between characters
            if self.wants_micro_pause():
                await self.delay(self.config.micro_pause)

    async def hover_and_click(self, locator: Any) -> None:
        """Hover over an element, wait briefly, then click it."""
        self.action_count += 1
        await locator.hover()
        await self.delay(self.config.hover_delay)
        await locator.click()

    async def reading_pause(self, low: Optional[int] = None, high: Optional[int] = None) -> int:
        """Longer pause between steps or sections, as if reading the page."""
        default_low, default_high = self.config.reading_pause
        delay = await self.random_delay(
            default_low if low is None else low,
            default_high if high is None else high,
        )
        logger.debug("Reading pause", delay_ms=delay)
        return delay

    async def settle(self) -> int:
        """Wait for an expand/collapse animation to finish."""
        return await self.delay(self.config.settle_delay)

    async def scroll_to(self, locator: Any) -> None:
        await locator.scroll_into_view_if_needed()
        await self.delay(self.config.scroll_delay)

    def stats(self) -> Dict[str, Any]:
        """Action count and accumulated delay for the current run."""
        return {
            "action_count": self.action_count,
            "total_delay_ms": round(self.total_delay_ms),
        }


def create_timing(human: bool = True, rng: Optional[random.Random] = None) -> HumanTiming:
    """Factory for the default timing strategy."""
    config = TimingConfig() if human else TimingConfig.instant()
    return HumanTiming(config, rng=rng)
