"""Loading candidate profiles from disk."""

from pathlib import Path
from typing import Union

from ats_automator.core.models import CandidateProfile
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)


def load_profile(path: Union[str, Path]) -> CandidateProfile:
    """Load and validate a candidate profile from a JSON file."""
    content = Path(path).read_text(encoding="utf-8")
    profile = CandidateProfile.model_validate_json(content)
    logger.info(
        "Candidate profile loaded",
        path=str(path),
        skills_count=len(profile.skills),
        work_authorized=profile.work_authorized,
    )
    return profile
