"""Observed form structure and the transition guards built on it.

The wizard's active step and the accordion's open sections live in the
page. :class:`DomStateObserver` reads them; :class:`WizardProgress` and
:class:`AccordionProgress` hold what the engine has seen and refuse
transitions the forms do not allow.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Iterable, Optional, Set, Tuple

from ats_automator.browser.waits import wait_for_selector
from ats_automator.core.errors import IncompleteFormError, StepTransitionError
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)


class WizardStep(IntEnum):
    """Steps of the multi-step wizard plus its terminal state."""
    PERSONAL = 1
    EXPERIENCE = 2
    ADDITIONAL = 3
    REVIEW = 4
    SUBMITTED = 5


class SectionState(str, Enum):
    """Accordion section state as observed in the page."""
    OPEN = "open"
    CLOSED = "closed"


class DomStateObserver:
    """Reads wizard and accordion markers from a live page."""

    ACTIVE_STEP = ".form-step.active"
    STEP_ACTIVE_TEMPLATE = '.form-step[data-step="{step}"].active'
    SECTION_HEADER_TEMPLATE = '[data-section="{name}"] .section-header'

    def __init__(self, page: Any):
        self.page = page

    async def active_step(self) -> Optional[int]:
        """Index of the step currently marked active, if any."""
        value = await self.page.locator(self.ACTIVE_STEP).get_attribute("data-step")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            logger.warning("Unparseable step marker", value=value)
            return None

    async def wait_for_step(self, step: int, timeout_ms: int) -> Optional[int]:
        """Hard wait until ``step`` is marked active, then read back the active step."""
        await wait_for_selector(
            self.page,
            self.STEP_ACTIVE_TEMPLATE.format(step=step),
            timeout_ms=timeout_ms,
            description=f"step {step} to become active",
        )
        return await self.active_step()

    async def section_state(self, name: str) -> SectionState:
        header = self.SECTION_HEADER_TEMPLATE.format(name=name)
        if await self.page.locator(f"{header}.open").count() > 0:
            return SectionState.OPEN
        return SectionState.CLOSED


@dataclass
class WizardProgress:
    """
    Engine-side view of the wizard.

    Exactly one step is current. The next step may only be requested once the
    current one was filled, and becomes current only after the page was
    observed marking it active.
    """
    current: WizardStep = WizardStep.PERSONAL
    filled: Set[WizardStep] = field(default_factory=set)

    def mark_filled(self) -> None:
        self.filled.add(self.current)

    def next_step(self) -> WizardStep:
        """Step to request next; raises if the current step is incomplete."""
        if self.current not in self.filled:
            raise StepTransitionError(
                f"Cannot leave step {int(self.current)} before its fields are filled"
            )
        if self.current >= WizardStep.REVIEW:
            raise StepTransitionError(f"No step after step {int(self.current)}")
        return WizardStep(self.current + 1)

    def observe(self, observed: Optional[int], expected: WizardStep) -> WizardStep:
        """Accept ``expected`` as current only if the page reports it active."""
        if observed != int(expected):
            raise StepTransitionError(
                f"Expected step {int(expected)} to be active, page shows {observed}"
            )
        self.current = expected
        return self.current

    def submit(self) -> None:
        if self.current != WizardStep.REVIEW or WizardStep.REVIEW not in self.filled:
            raise StepTransitionError("Submit is only allowed from a completed review step")
        self.current = WizardStep.SUBMITTED


@dataclass
class AccordionProgress:
    """Tracks which accordion sections have been filled."""
    sections: Tuple[str, ...]
    visited: Set[str] = field(default_factory=set)

    def visit(self, name: str) -> None:
        if name not in self.sections:
            raise ValueError(f"Unknown section: {name}")
        self.visited.add(name)

    def missing(self) -> Set[str]:
        return set(self.sections) - self.visited

    def require_complete(self) -> None:
        missing = self.missing()
        if missing:
            raise IncompleteFormError(missing)

    @classmethod
    def for_sections(cls, sections: Iterable[str]) -> "AccordionProgress":
        return cls(sections=tuple(sections))
