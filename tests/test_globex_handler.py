"""Tests for the Globex accordion handler."""

import asyncio
import random

import pytest
from hypothesis import given, settings, strategies as st

from ats_automator.platforms.globex import GlobexHandler, choose_result, parse_salary

from conftest import make_profile
from fakes import FakePage, build_globex_page

SCHOOLS = [
    "Texas A&M University",
    "University of Texas at Austin",
    "Rice University",
    "Baylor University",
]


@pytest.fixture
def handler(instant_timing, short_timeouts):
    return GlobexHandler(timing=instant_timing, timeouts=short_timeouts)


class TestChooseResult:

    @given(permutation=st.permutations(SCHOOLS))
    @settings(max_examples=30)
    def test_match_found_in_any_order(self, permutation):
        """The matching result is picked wherever it lands in the list."""
        index = choose_result(permutation, "university of texas at austin")

        assert permutation[index] == "University of Texas at Austin"

    def test_first_item_when_nothing_matches(self):
        assert choose_result(["Rice University", "Baylor University"], "MIT") == 0

    def test_empty_results(self):
        assert choose_result([], "anything") is None

    def test_first_match_wins(self):
        assert choose_result(["Baylor", "Rice University", "Rice Institute"], "rice") == 1


class TestParseSalary:

    @pytest.mark.parametrize("value,expected", [
        ("120000", 120000),
        (" 95000 USD", 95000),
        ("competitive", None),
        ("", None),
    ])
    def test_parse_salary(self, value, expected):
        assert parse_salary(value) == expected


class TestGlobexSubmission:

    @pytest.mark.asyncio
    async def test_full_submission(self, handler, profile):
        page = build_globex_page(reference="GX-2024-0042")

        result = await handler.fill_and_submit(page, profile, resume_path="fixtures/resume.pdf")

        assert result.success is True
        assert result.confirmation_id == "GX-2024-0042"
        assert page.values["#g-fname"] == "Jordan"
        assert page.values["#g-city"] == "Austin"
        assert page.values["#g-experience"] == "mid"
        assert page.values["#g-degree"] == "bs"
        assert page.values["#g-salary"] == "120000"
        assert page.values["#g-source"] == "linkedin"
        assert page.checked["#g-consent"] is True

    @pytest.mark.asyncio
    async def test_every_section_opened_once(self, handler, profile):
        page = build_globex_page()

        await handler.fill_and_submit(page, profile)

        for name in GlobexHandler.SECTIONS:
            header = GlobexHandler.SECTION_HEADER_TEMPLATE.format(name=name)
            clicks = [a for a in page.actions if a.name == "click" and a.selector == header]
            assert len(clicks) == 1

    @pytest.mark.asyncio
    async def test_open_section_is_not_toggled_closed(self, handler, profile):
        page = build_globex_page(open_sections=("contact",))

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        assert not page.clicked(GlobexHandler.SECTION_HEADER_TEMPLATE.format(name="contact"))
        assert page.clicked(GlobexHandler.SECTION_HEADER_TEMPLATE.format(name="qualifications"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("seed", [1, 2, 3, 4, 5])
    async def test_typeahead_picks_match_from_shuffled_results(self, handler, profile, seed):
        results = list(SCHOOLS)
        random.Random(seed).shuffle(results)
        page = build_globex_page(results=tuple(results))

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        expected = results.index("University of Texas at Austin")
        assert page.clicked(GlobexHandler.SCHOOL_RESULT_ITEMS, index=expected)

    @pytest.mark.asyncio
    async def test_typeahead_falls_back_to_first_result(self, handler):
        page = build_globex_page(results=("Rice University", "Baylor University"))
        profile = make_profile(school="Massachusetts Institute of Technology")

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        assert page.clicked(GlobexHandler.SCHOOL_RESULT_ITEMS, index=0)

    @pytest.mark.asyncio
    async def test_typeahead_without_results_fails(self, handler, profile):
        page = build_globex_page(results=())

        result = await handler.fill_and_submit(page, profile)

        assert result.success is False
        assert "Timed out" in result.error
        assert "university search results" in result.error
        assert not page.touched(GlobexHandler.SUBMIT_BUTTON)

    @pytest.mark.asyncio
    async def test_missing_spinner_is_tolerated(self, handler, profile):
        page = build_globex_page()

        result = await handler.fill_and_submit(page, profile)

        assert GlobexHandler.SCHOOL_SPINNER in page.waited
        assert result.success is True

    @pytest.mark.asyncio
    async def test_skill_chips_selected_and_unknown_skipped(self, handler, profile):
        page = build_globex_page()

        await handler.fill_and_submit(page, profile)

        for chip in ("js", "ts", "py", "react"):
            assert "selected" in page.attributes[f'#g-skills .chip[data-skill="{chip}"]']["class"].split()
        assert "selected" not in page.attributes['#g-skills .chip[data-skill="docker"]']["class"].split()

    @pytest.mark.asyncio
    async def test_unauthorized_candidate_never_touches_visa(self, handler):
        page = build_globex_page()
        profile = make_profile(work_authorized=False)

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        assert GlobexHandler.VISA_BLOCK not in page.waited
        assert not page.touched(GlobexHandler.VISA_TOGGLE)
        assert not page.clicked(GlobexHandler.WORK_AUTH_TOGGLE)

    @pytest.mark.asyncio
    async def test_authorized_candidate_flips_toggle_then_waits_for_visa(self, handler):
        page = build_globex_page()
        profile = make_profile(work_authorized=True, requires_visa=True)

        await handler.fill_and_submit(page, profile)

        assert page.attributes[GlobexHandler.WORK_AUTH_TOGGLE]["data-value"] == "true"
        assert GlobexHandler.VISA_BLOCK in page.waited
        assert page.attributes[GlobexHandler.VISA_TOGGLE]["data-value"] == "true"

    @pytest.mark.asyncio
    async def test_visa_toggle_untouched_when_block_never_appears(self, handler):
        page = build_globex_page()
        page.hooks.pop(("click", GlobexHandler.WORK_AUTH_TOGGLE))
        profile = make_profile(work_authorized=True, requires_visa=True)

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        assert GlobexHandler.VISA_BLOCK in page.waited
        assert not page.touched(GlobexHandler.VISA_TOGGLE)
        assert page.attributes[GlobexHandler.VISA_TOGGLE]["data-value"] == "false"

    @pytest.mark.asyncio
    async def test_missing_resume_leaves_upload_empty(self, handler, profile):
        page = build_globex_page()

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        assert result.artifact_path is None
        assert not page.touched("#g-resume")

    @pytest.mark.asyncio
    async def test_non_numeric_salary_is_skipped(self, handler):
        page = build_globex_page()
        profile = make_profile(salary_expectation="competitive")

        result = await handler.fill_and_submit(page, profile)

        assert result.success is True
        assert "#g-salary" not in page.values

    @pytest.mark.asyncio
    async def test_motivation_names_target_company(self, handler, profile):
        page = build_globex_page()

        await handler.fill_and_submit(page, profile)

        assert page.values["#g-motivation"] == "I would love to join Globex Corporation and help it grow."


class TestGlobexDetection:

    def test_detection_is_url_first(self, handler):
        page = FakePage(title_text="Something else")

        assert asyncio.run(handler.detect(page, "http://localhost:3939/globex.html"))
