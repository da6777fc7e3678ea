"""Handler for the Acme Corp multi-step application wizard."""

from pathlib import Path
from typing import Any, Optional

from ats_automator.browser.state import WizardProgress, WizardStep
from ats_automator.browser.waits import wait_for_selector
from ats_automator.core.errors import StepTransitionError
from ats_automator.core.models import CandidateProfile, FormLayout
from ats_automator.platforms.base import PlatformHandler


class AcmeHandler(PlatformHandler):
    """
    Fills the four-step Acme wizard.

    Step 1 collects personal details, step 2 experience and education,
    step 3 additional questions and step 4 is a review with a terms
    checkbox. Each step is left through its own Continue button and the
    next step must show up as active before anything else happens.
    """

    name = "acme"
    layout = FormLayout.ACME
    company_name = "Acme Corp"
    url_marker = "/acme.html"
    title_marker = "Acme"
    confirmation_selector = "#confirmation-id"

    CONTINUE_TEMPLATE = '.form-step[data-step="{step}"] button.btn-primary:has-text("Continue")'
    SCHOOL_INPUT = "#school"
    SCHOOL_DROPDOWN_READY = "#school-dropdown:has(li)"
    SCHOOL_RESULTS = "#school-dropdown li"
    VISA_GROUP = "#visa-sponsorship-group"
    SUBMIT_BUTTON = "#submit-btn"

    SKILL_VALUES = {
        "javascript": "javascript",
        "typescript": "typescript",
        "python": "python",
        "react": "react",
        "nodejs": "nodejs",
        "node.js": "nodejs",
        "sql": "sql",
        "git": "git",
        "docker": "docker",
    }

    REFERRAL_VALUES = {
        "linkedin": "linkedin",
        "company-website": "company-website",
        "job-board": "job-board",
        "referral": "referral",
        "university": "university",
        "other": "other",
    }

    async def run(self, page: Any, profile: CandidateProfile, resume_path: Optional[Path]) -> Optional[str]:
        observer = self.observer_factory(page)
        progress = WizardProgress()

        await self._fill_personal(page, profile)
        progress.mark_filled()
        await self._advance(page, progress, observer)
        await self.timing.reading_pause(500, 1000)

        await self._fill_experience(page, profile, resume_path)
        progress.mark_filled()
        await self._advance(page, progress, observer)
        await self.timing.reading_pause(500, 1000)

        await self._fill_additional(page, profile)
        progress.mark_filled()
        await self._advance(page, progress, observer)
        await self.timing.reading_pause(1000, 2000)

        await self._fill_review(page)
        progress.mark_filled()
        await self._submit(page, progress)

        return await self.read_confirmation(page)

    async def _advance(self, page: Any, progress: WizardProgress, observer: Any) -> WizardStep:
        """Leave the current step and wait for the next one to become active."""
        target = progress.next_step()

        active = await observer.active_step()
        if active != int(progress.current):
            raise StepTransitionError(
                f"Expected step {int(progress.current)} to be active, page shows {active}"
            )

        # Only the active step's button; every step has its own Continue
        button = page.locator(self.CONTINUE_TEMPLATE.format(step=int(progress.current)))
        await self.timing.scroll_to(button)
        await self.timing.random_delay(200, 400)
        await button.click()

        observed = await observer.wait_for_step(int(target), self.timeouts.step_transition)
        progress.observe(observed, target)
        self.logger.info("Wizard step active", step=int(target))

        # Step transition animation
        await self.timing.random_delay(300, 600)
        return target

    async def _fill_personal(self, page: Any, profile: CandidateProfile) -> None:
        await self.fields.fill_text(page.locator("#first-name"), profile.first_name)
        await self.fields.fill_text(page.locator("#last-name"), profile.last_name)
        await self.fields.fill_text(page.locator("#email"), profile.email)
        await self.fields.fill_text(page.locator("#phone"), profile.phone)
        await self.fields.fill_text(page.locator("#location"), profile.location)

        if profile.linkedin:
            await self.fields.fill_text(page.locator("#linkedin"), profile.linkedin)

        if profile.portfolio:
            await self.fields.fill_text(page.locator("#portfolio"), profile.portfolio)

    async def _fill_experience(self, page: Any, profile: CandidateProfile, resume_path: Optional[Path]) -> None:
        await self.upload_resume(page.locator("#resume"), resume_path)

        # Form option values match the profile values one to one
        await self.fields.select_option(page.locator("#experience-level"), profile.experience_level.value)
        await self.fields.select_option(page.locator("#education"), profile.education.value)

        await self._fill_school_typeahead(page, profile.school)

        for value in self.map_skills(profile.skills, self.SKILL_VALUES):
            await self.fields.ensure_checked(page.locator(f'input[name="skills"][value="{value}"]'))

    async def _fill_school_typeahead(self, page: Any, school_name: str) -> None:
        """Type the school and take the first suggestion, or commit the text."""
        school_input = page.locator(self.SCHOOL_INPUT)
        await school_input.scroll_into_view_if_needed()
        await self.timing.random_delay(100, 200)
        await school_input.click()
        await self.timing.random_delay(100, 200)

        await self.fields.fill_text(school_input, school_name, clear_first=False)

        await wait_for_selector(
            page,
            self.SCHOOL_DROPDOWN_READY,
            timeout_ms=self.timeouts.dropdown,
            tolerant=True,
        )
        await self.timing.random_delay(300, 500)

        results = page.locator(self.SCHOOL_RESULTS)
        if await results.count() > 0:
            await self.timing.hover_and_click(results.first)
            self.logger.debug("School picked from suggestions", school=school_name)
        else:
            await school_input.press("Enter")
            self.logger.debug("No school suggestions, committed typed text", school=school_name)

        await self.timing.random_delay(200, 400)

    async def _fill_additional(self, page: Any, profile: CandidateProfile) -> None:
        work_auth = "yes" if profile.work_authorized else "no"
        await self.fields.click_radio(page.locator(f'input[name="workAuth"][value="{work_auth}"]'))

        # The sponsorship question is only rendered for authorized candidates
        if profile.work_authorized:
            await wait_for_selector(
                page,
                self.VISA_GROUP,
                timeout_ms=self.timeouts.conditional_field,
                description="visa sponsorship question",
            )
            await self.timing.random_delay(200, 400)
            visa = "yes" if profile.requires_visa else "no"
            await self.fields.click_radio(page.locator(f'input[name="visaSponsorship"][value="{visa}"]'))

        await self.fields.fill_date(page.locator("#start-date"), profile.earliest_start_date.isoformat())

        if profile.salary_expectation:
            await self.fields.fill_text(page.locator("#salary-expectation"), profile.salary_expectation)

        await self.select_referral(
            page,
            profile.referral_source,
            self.REFERRAL_VALUES,
            select_selector="#referral",
            other_block_selector="#referral-other-group",
            other_input_selector="#referral-other",
        )

        cover_letter = self.adapt_cover_letter(profile.cover_letter)
        await self.fields.fill_textarea(page.locator("#cover-letter"), cover_letter)

    async def _fill_review(self, page: Any) -> None:
        await self.fields.ensure_checked(page.locator("#terms-agree"))

    async def _submit(self, page: Any, progress: WizardProgress) -> None:
        progress.submit()
        submit_button = page.locator(self.SUBMIT_BUTTON)
        await self.timing.scroll_to(submit_button)
        await self.timing.random_delay(500, 1000)
        await submit_button.click()
        self.logger.info("Application submitted")
        await self.timing.random_delay(1000, 2000)
