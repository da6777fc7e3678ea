"""Field-level interactions shared by every platform handler."""

from pathlib import Path
from typing import Any, Optional, Sequence, Union

from playwright.async_api import Error as PlaywrightError

from ats_automator.browser.timing import HumanTiming
from ats_automator.core.errors import FieldResolutionError
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)

RANGE_SETTER_JS = """(el, value) => {
    el.value = String(value);
    el.dispatchEvent(new Event("input", { bubbles: true }));
    el.dispatchEvent(new Event("change", { bubbles: true }));
}"""

# Placeholders such as "Select..." carry an empty value
SELECTABLE_OPTION = 'option:not([value=""])'


def match_option(search: str, options: Sequence[str]) -> Optional[str]:
    """
    Find the option label that best matches free text.

    Tries, in order: case-insensitive equality, the option containing the
    search text, and the search text containing the option's first word.
    Returns None when nothing matches.
    """
    needle = search.lower().strip()
    labels = [option for option in options if option.strip()]
    if not needle:
        return None

    for option in labels:
        if option.lower().strip() == needle:
            return option

    for option in labels:
        normalized = option.lower().strip()
        if needle in normalized or normalized.split(" ")[0] in needle:
            return option

    return None


class FieldFiller:
    """Wraps each element effect with scrolling and human pacing."""

    def __init__(self, timing: HumanTiming):
        self.timing = timing
        self.logger = logger.bind(component="field_filler")

    async def _prepare(self, locator: Any) -> None:
        await locator.scroll_into_view_if_needed()
        await self.timing.delay(self.timing.config.action_delay)

    async def fill_text(self, locator: Any, value: str, clear_first: bool = True) -> None:
        """Type into a text input like a person would."""
        await self._prepare(locator)

        if clear_first:
            # type_text clicks first, which would drop a mouse selection
            await locator.fill("")
            await self.timing.random_delay(50, 100)

        await self.timing.type_text(locator, value)
        await self.timing.delay(self.timing.config.action_delay)

    async def fill_textarea(self, locator: Any, value: str) -> None:
        await self.fill_text(locator, value)

    async def select_option(self, locator: Any, value: str) -> None:
        """Pick a ``<select>`` option by value."""
        await self._prepare(locator)
        await self.timing.hover_and_click(locator)
        await self.timing.delay(self.timing.config.action_delay)
        await locator.select_option(value)
        await self.timing.delay(self.timing.config.action_delay)

    async def option_labels(self, locator: Any) -> list:
        """Labels of selectable options; empty-value placeholders are left out."""
        return await locator.locator(SELECTABLE_OPTION).all_text_contents()

    async def select_option_by_text(
        self,
        locator: Any,
        search: str,
        options: Optional[Sequence[str]] = None,
        timeout_ms: int = 2000,
    ) -> str:
        """
        Pick a ``<select>`` option from free text.

        Falls back to using ``search`` as a literal option value.

        Returns:
            The label or value that was selected.

        Raises:
            FieldResolutionError: when neither a label nor the literal value
                is accepted by the control.
        """
        await self._prepare(locator)
        await self.timing.hover_and_click(locator)
        await self.timing.delay(self.timing.config.action_delay)

        if options is None:
            options = await self.option_labels(locator)
        match = match_option(search, options)

        try:
            if match is not None:
                await locator.select_option(label=match)
                chosen = match
            else:
                self.logger.debug("No option label matched, trying literal value", search=search)
                await locator.select_option(search, timeout=timeout_ms)
                chosen = search
        except PlaywrightError as e:
            raise FieldResolutionError(
                f"No option matching '{search}' in {list(options)}"
            ) from e

        await self.timing.delay(self.timing.config.action_delay)
        return chosen

    async def ensure_checked(self, locator: Any) -> bool:
        """Check a checkbox unless it already is; returns True if clicked."""
        await self._prepare(locator)
        if await locator.is_checked():
            return False
        await self.timing.hover_and_click(locator)
        await self.timing.delay(self.timing.config.action_delay)
        return True

    async def click_radio(self, locator: Any) -> None:
        await self._prepare(locator)
        await self.timing.hover_and_click(locator)
        await self.timing.delay(self.timing.config.action_delay)

    async def ensure_toggle(self, locator: Any, desired: bool, attribute: str = "data-value") -> bool:
        """Flip a toggle whose state is mirrored in ``attribute``; returns True if flipped."""
        await self._prepare(locator)
        current = (await locator.get_attribute(attribute)) == "true"
        if current == desired:
            return False
        await self.timing.hover_and_click(locator)
        await self.timing.delay(self.timing.config.action_delay)
        return True

    async def ensure_class(self, locator: Any, css_class: str = "selected") -> bool:
        """Click an element unless it already carries ``css_class``; returns True if clicked."""
        await self._prepare(locator)
        classes = (await locator.get_attribute("class") or "").split()
        if css_class in classes:
            return False
        await self.timing.hover_and_click(locator)
        await self.timing.delay(self.timing.config.action_delay)
        return True

    async def upload_file(self, locator: Any, file_path: Union[str, Path]) -> None:
        await locator.scroll_into_view_if_needed()
        await self.timing.random_delay(200, 400)
        await locator.set_input_files(str(file_path))
        # File processing
        await self.timing.random_delay(300, 600)

    async def fill_date(self, locator: Any, date_string: str) -> None:
        """Fill a date input with a ``YYYY-MM-DD`` string."""
        await self._prepare(locator)
        await locator.fill(date_string)
        await self.timing.delay(self.timing.config.action_delay)

    async def set_range(self, locator: Any, value: int) -> None:
        """Assign a range input's value directly and notify listeners."""
        await self._prepare(locator)
        await locator.evaluate(RANGE_SETTER_JS, value)
        await self.timing.random_delay(200, 400)
