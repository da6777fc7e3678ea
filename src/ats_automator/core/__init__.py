"""Core models, errors and profile loading."""

from ats_automator.core.models import (
    ApplicationResult,
    ApplicationTarget,
    CandidateProfile,
    EducationLevel,
    ExperienceLevel,
    FormLayout,
    TargetOutcome,
)
from ats_automator.core.profile import load_profile

__all__ = [
    "ApplicationResult",
    "ApplicationTarget",
    "CandidateProfile",
    "EducationLevel",
    "ExperienceLevel",
    "FormLayout",
    "TargetOutcome",
    "load_profile",
]
