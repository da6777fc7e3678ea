"""Handler for the Globex Corporation accordion application form."""

import re
from pathlib import Path
from typing import Any, List, Optional, Sequence

from ats_automator.browser.state import AccordionProgress, DomStateObserver, SectionState
from ats_automator.browser.waits import wait_for_selector, wait_until
from ats_automator.core.errors import FieldResolutionError
from ats_automator.core.models import CandidateProfile, EducationLevel, ExperienceLevel, FormLayout
from ats_automator.platforms.base import PlatformHandler


def choose_result(texts: Sequence[str], query: str) -> Optional[int]:
    """
    Index of the typeahead result to pick.

    Results arrive in random order, so the list is scanned for the first
    entry containing the query (case-insensitive); without one, the first
    entry is used. Returns None for an empty list.
    """
    needle = query.lower()
    for index, text in enumerate(texts):
        if needle in text.lower():
            return index
    return 0 if texts else None


def parse_salary(value: str) -> Optional[int]:
    """Leading integer of a salary string, e.g. ``"120000 USD"`` -> 120000."""
    match = re.match(r"\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else None


class GlobexHandler(PlatformHandler):
    """
    Fills the three-section Globex accordion.

    Sections open independently and stay open; the engine opens each one
    on first use and requires all of them to be filled before submitting.
    """

    name = "globex"
    layout = FormLayout.GLOBEX
    company_name = "Globex Corporation"
    url_marker = "/globex.html"
    title_marker = "Globex"
    confirmation_selector = "#globex-ref"

    SECTIONS = ("contact", "qualifications", "additional")
    SECTION_HEADER_TEMPLATE = DomStateObserver.SECTION_HEADER_TEMPLATE
    SCHOOL_INPUT = "#g-school"
    SCHOOL_SPINNER = "#g-school-spinner.loading"
    SCHOOL_RESULTS_OPEN = "#g-school-results.open"
    SCHOOL_RESULT_ITEMS = "#g-school-results li:not(.typeahead-no-results)"
    WORK_AUTH_TOGGLE = "#g-work-auth-toggle"
    VISA_BLOCK = "#g-visa-block.visible"
    VISA_TOGGLE = "#g-visa-toggle"
    SUBMIT_BUTTON = "#globex-submit"

    EXPERIENCE_VALUES = {
        ExperienceLevel.ENTRY: "intern",
        ExperienceLevel.JUNIOR: "junior",
        ExperienceLevel.MID: "mid",
        ExperienceLevel.SENIOR: "senior",
        ExperienceLevel.STAFF: "staff",
    }

    DEGREE_VALUES = {
        EducationLevel.HIGH_SCHOOL: "hs",
        EducationLevel.ASSOCIATES: "assoc",
        EducationLevel.BACHELORS: "bs",
        EducationLevel.MASTERS: "ms",
        EducationLevel.PHD: "phd",
    }

    SKILL_CHIPS = {
        "javascript": "js",
        "typescript": "ts",
        "python": "py",
        "react": "react",
        "nodejs": "node",
        "node.js": "node",
        "sql": "sql",
        "git": "git",
        "docker": "docker",
    }

    REFERRAL_VALUES = {
        "linkedin": "linkedin",
        "company-website": "website",
        "job-board": "board",
        "referral": "referral",
        "university": "university",
        "other": "other",
    }

    async def run(self, page: Any, profile: CandidateProfile, resume_path: Optional[Path]) -> Optional[str]:
        observer = self.observer_factory(page)
        progress = AccordionProgress.for_sections(self.SECTIONS)

        await self._open_section(page, observer, "contact")
        await self._fill_contact(page, profile)
        progress.visit("contact")
        await self.timing.reading_pause(300, 600)

        await self._open_section(page, observer, "qualifications")
        await self._fill_qualifications(page, profile, resume_path)
        progress.visit("qualifications")
        await self.timing.reading_pause(300, 600)

        await self._open_section(page, observer, "additional")
        await self._fill_additional(page, profile)
        progress.visit("additional")
        await self.timing.reading_pause(500, 1000)

        progress.require_complete()
        await self._submit(page)

        return await self.read_confirmation(page)

    async def _open_section(self, page: Any, observer: Any, name: str) -> bool:
        """Expand a section unless it is already open; returns True if clicked."""
        header = page.locator(self.SECTION_HEADER_TEMPLATE.format(name=name))
        await self.timing.scroll_to(header)
        await self.timing.random_delay(200, 400)

        if await observer.section_state(name) == SectionState.OPEN:
            self.logger.debug("Section already open", section=name)
            return False

        await self.timing.hover_and_click(header)
        # Expand animation
        await self.timing.settle()
        self.logger.info("Section opened", section=name)
        return True

    async def _fill_contact(self, page: Any, profile: CandidateProfile) -> None:
        await self.fields.fill_text(page.locator("#g-fname"), profile.first_name)
        await self.fields.fill_text(page.locator("#g-lname"), profile.last_name)
        await self.fields.fill_text(page.locator("#g-email"), profile.email)
        await self.fields.fill_text(page.locator("#g-phone"), profile.phone)
        await self.fields.fill_text(page.locator("#g-city"), profile.city)

        if profile.linkedin:
            await self.fields.fill_text(page.locator("#g-linkedin"), profile.linkedin)

        if profile.portfolio:
            await self.fields.fill_text(page.locator("#g-website"), profile.portfolio)

    async def _fill_qualifications(self, page: Any, profile: CandidateProfile, resume_path: Optional[Path]) -> None:
        await self.upload_resume(page.locator("#g-resume"), resume_path)
        await self.fields.select_option(
            page.locator("#g-experience"), self.EXPERIENCE_VALUES[profile.experience_level]
        )
        await self.fields.select_option(page.locator("#g-degree"), self.DEGREE_VALUES[profile.education])

        await self._fill_async_typeahead(page, profile.school)

        for chip in self.map_skills(profile.skills, self.SKILL_CHIPS):
            await self.fields.ensure_class(page.locator(f'#g-skills .chip[data-skill="{chip}"]'), "selected")

    async def _result_texts(self, page: Any) -> List[str]:
        items = page.locator(self.SCHOOL_RESULT_ITEMS)
        return [(await items.nth(index).text_content()) or "" for index in range(await items.count())]

    async def _results_ready(self, page: Any) -> bool:
        if await page.locator(self.SCHOOL_RESULTS_OPEN).count() == 0:
            return False
        return any(text.strip() for text in await self._result_texts(page))

    async def _fill_async_typeahead(self, page: Any, school_name: str) -> str:
        """
        Type the university and pick it from the asynchronously loaded results.

        The spinner only signals that the request went out, so its absence is
        tolerated. The results themselves are required.
        """
        school_input = page.locator(self.SCHOOL_INPUT)
        await school_input.scroll_into_view_if_needed()
        await self.timing.random_delay(100, 200)
        await school_input.click()
        await self.timing.random_delay(100, 200)

        await self.fields.fill_text(school_input, school_name, clear_first=False)

        await wait_for_selector(
            page,
            self.SCHOOL_SPINNER,
            timeout_ms=self.timeouts.spinner,
            tolerant=True,
        )
        await wait_until(
            lambda: self._results_ready(page),
            timeout_ms=self.timeouts.typeahead_results,
            description="university search results",
        )
        await self.timing.random_delay(200, 400)

        texts = await self._result_texts(page)
        index = choose_result(texts, school_name)
        if index is None:
            raise FieldResolutionError(f"No university results for '{school_name}'")

        await self.timing.hover_and_click(page.locator(self.SCHOOL_RESULT_ITEMS).nth(index))
        chosen = texts[index].strip()
        self.logger.info(
            "University selected",
            query=school_name,
            chosen=chosen,
            position=index,
            results_count=len(texts),
        )
        await self.timing.random_delay(200, 400)
        return chosen

    async def _fill_additional(self, page: Any, profile: CandidateProfile) -> None:
        flipped = await self.fields.ensure_toggle(page.locator(self.WORK_AUTH_TOGGLE), profile.work_authorized)
        if flipped:
            # Conditional block fades in
            await self.timing.settle()

        if profile.work_authorized:
            visa_shown = await wait_for_selector(
                page,
                self.VISA_BLOCK,
                timeout_ms=self.timeouts.conditional_field,
                tolerant=True,
            )
            if visa_shown:
                await self.fields.ensure_toggle(page.locator(self.VISA_TOGGLE), profile.requires_visa)
            else:
                self.logger.warning("Visa question never appeared, skipping it")

        await self.fields.fill_date(page.locator("#g-start-date"), profile.earliest_start_date.isoformat())

        if profile.salary_expectation:
            salary = parse_salary(profile.salary_expectation)
            if salary is not None:
                await self.fields.set_range(page.locator("#g-salary"), salary)
            else:
                self.logger.warning("Salary is not numeric, skipping", salary=profile.salary_expectation)

        await self.select_referral(
            page,
            profile.referral_source,
            self.REFERRAL_VALUES,
            select_selector="#g-source",
            other_block_selector="#g-source-other-block.visible",
            other_input_selector="#g-source-other",
        )

        motivation = self.adapt_cover_letter(profile.cover_letter)
        await self.fields.fill_textarea(page.locator("#g-motivation"), motivation)

    async def _submit(self, page: Any) -> None:
        consent = page.locator("#g-consent")
        await self.timing.scroll_to(consent)
        await self.fields.ensure_checked(consent)

        submit_button = page.locator(self.SUBMIT_BUTTON)
        await self.timing.scroll_to(submit_button)
        await self.timing.random_delay(500, 1000)
        await self.timing.hover_and_click(submit_button)
        self.logger.info("Application submitted")
        await self.timing.random_delay(1000, 2000)
