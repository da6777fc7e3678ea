"""Shared fixtures."""

import random
from datetime import date

import pytest

from ats_automator.browser.timing import HumanTiming, TimingConfig
from ats_automator.browser.waits import WaitTimeouts
from ats_automator.core.models import CandidateProfile, EducationLevel, ExperienceLevel


def make_profile(**overrides) -> CandidateProfile:
    data = dict(
        first_name="Jordan",
        last_name="Rivera",
        email="jordan.rivera@example.com",
        phone="+1-555-0142",
        location="Austin, TX",
        linkedin="https://linkedin.com/in/jordanrivera",
        portfolio="https://github.com/jordanrivera",
        school="University of Texas at Austin",
        education=EducationLevel.BACHELORS,
        experience_level=ExperienceLevel.MID,
        skills=frozenset({"javascript", "typescript", "python", "react", "cobol"}),
        work_authorized=True,
        requires_visa=False,
        earliest_start_date=date(2026, 12, 1),
        salary_expectation="120000",
        referral_source="linkedin",
        cover_letter="I would love to join Acme Corp and help it grow.",
    )
    data.update(overrides)
    return CandidateProfile(**data)


@pytest.fixture
def profile() -> CandidateProfile:
    return make_profile()


@pytest.fixture
def instant_timing() -> HumanTiming:
    """Timing that never sleeps."""
    return HumanTiming(TimingConfig.instant(), rng=random.Random(7))


@pytest.fixture
def short_timeouts() -> WaitTimeouts:
    return WaitTimeouts(
        step_transition=200,
        conditional_field=200,
        dropdown=200,
        spinner=100,
        typeahead_results=400,
        confirmation=200,
    )
