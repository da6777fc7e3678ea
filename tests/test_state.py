"""Tests for observed wizard and accordion state."""

import pytest

from ats_automator.browser.state import (
    AccordionProgress,
    DomStateObserver,
    SectionState,
    WizardProgress,
    WizardStep,
)
from ats_automator.core.errors import IncompleteFormError, StepTransitionError, StructuralWaitTimeout

from fakes import FakePage


class TestWizardProgress:

    def test_cannot_request_next_step_before_filling(self):
        progress = WizardProgress()

        with pytest.raises(StepTransitionError, match="before its fields are filled"):
            progress.next_step()

    def test_step_changes_only_when_observed(self):
        progress = WizardProgress()
        progress.mark_filled()
        target = progress.next_step()

        assert target == WizardStep.EXPERIENCE
        assert progress.current == WizardStep.PERSONAL

        with pytest.raises(StepTransitionError):
            progress.observe(1, target)
        assert progress.current == WizardStep.PERSONAL

        progress.observe(2, target)
        assert progress.current == WizardStep.EXPERIENCE

    def test_no_step_after_review(self):
        progress = WizardProgress(current=WizardStep.REVIEW)
        progress.mark_filled()

        with pytest.raises(StepTransitionError):
            progress.next_step()

    def test_submit_requires_filled_review(self):
        progress = WizardProgress(current=WizardStep.REVIEW)
        with pytest.raises(StepTransitionError):
            progress.submit()

        progress.mark_filled()
        progress.submit()
        assert progress.current == WizardStep.SUBMITTED

    def test_submit_not_allowed_mid_wizard(self):
        progress = WizardProgress(current=WizardStep.ADDITIONAL)
        progress.mark_filled()

        with pytest.raises(StepTransitionError):
            progress.submit()


class TestAccordionProgress:

    def test_require_complete_lists_missing_sections(self):
        progress = AccordionProgress.for_sections(["contact", "qualifications", "additional"])
        progress.visit("contact")

        with pytest.raises(IncompleteFormError) as exc_info:
            progress.require_complete()

        assert exc_info.value.missing == ["additional", "qualifications"]

    def test_visits_in_any_order(self):
        progress = AccordionProgress.for_sections(["a", "b"])
        progress.visit("b")
        progress.visit("a")
        progress.visit("a")

        progress.require_complete()
        assert progress.missing() == set()

    def test_unknown_section(self):
        progress = AccordionProgress.for_sections(["a"])

        with pytest.raises(ValueError):
            progress.visit("z")


class TestDomStateObserver:

    @pytest.mark.asyncio
    async def test_active_step(self):
        page = FakePage(attributes={".form-step.active": {"data-step": "3"}})

        assert await DomStateObserver(page).active_step() == 3

    @pytest.mark.asyncio
    async def test_missing_step_marker(self):
        assert await DomStateObserver(FakePage()).active_step() is None

    @pytest.mark.asyncio
    async def test_wait_for_step_is_hard(self):
        observer = DomStateObserver(FakePage())

        with pytest.raises(StructuralWaitTimeout, match="step 2 to become active"):
            await observer.wait_for_step(2, timeout_ms=100)

    @pytest.mark.asyncio
    async def test_wait_for_step_reports_observed_step(self):
        page = FakePage(
            present={'.form-step[data-step="2"].active'},
            attributes={".form-step.active": {"data-step": "2"}},
        )

        assert await DomStateObserver(page).wait_for_step(2, timeout_ms=100) == 2

    @pytest.mark.asyncio
    async def test_wait_for_step_reads_back_active_marker(self):
        # Marker matched but the first active step is still the old one
        page = FakePage(
            present={'.form-step[data-step="2"].active'},
            attributes={".form-step.active": {"data-step": "1"}},
        )
        observer = DomStateObserver(page)
        progress = WizardProgress()
        progress.mark_filled()
        target = progress.next_step()

        observed = await observer.wait_for_step(int(target), timeout_ms=100)

        assert observed == 1
        with pytest.raises(StepTransitionError, match="page shows 1"):
            progress.observe(observed, target)
        assert progress.current == WizardStep.PERSONAL

    @pytest.mark.asyncio
    async def test_section_state(self):
        header = DomStateObserver.SECTION_HEADER_TEMPLATE.format(name="contact")
        page = FakePage(present={f"{header}.open"})
        observer = DomStateObserver(page)

        assert await observer.section_state("contact") == SectionState.OPEN
        assert await observer.section_state("additional") == SectionState.CLOSED
