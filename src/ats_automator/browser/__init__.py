"""Browser interaction components: timing, waits, page state and fields."""

from ats_automator.browser.timing import HumanTiming, TimingConfig, create_timing
from ats_automator.browser.waits import WaitTimeouts, wait_for_selector, wait_until
from ats_automator.browser.state import (
    AccordionProgress,
    DomStateObserver,
    SectionState,
    WizardProgress,
    WizardStep,
)
from ats_automator.browser.fields import FieldFiller, match_option
from ats_automator.browser.session import BrowserSession, create_browser_session

__all__ = [
    "HumanTiming", "TimingConfig", "create_timing",
    "WaitTimeouts", "wait_for_selector", "wait_until",
    "AccordionProgress", "DomStateObserver", "SectionState", "WizardProgress", "WizardStep",
    "FieldFiller", "match_option",
    "BrowserSession", "create_browser_session",
]
