"""Core data models for the ATS form automator."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class EducationLevel(str, Enum):
    """Highest completed education."""
    HIGH_SCHOOL = "high-school"
    ASSOCIATES = "associates"
    BACHELORS = "bachelors"
    MASTERS = "masters"
    PHD = "phd"


class ExperienceLevel(str, Enum):
    """Years of professional experience, bucketed."""
    ENTRY = "0-1"
    JUNIOR = "1-3"
    MID = "3-5"
    SENIOR = "5-10"
    STAFF = "10+"


class FormLayout(str, Enum):
    """Known application form layouts."""
    ACME = "acme"
    GLOBEX = "globex"


class CandidateProfile(BaseModel):
    """Candidate data used to fill every application in a run."""

    model_config = ConfigDict(frozen=True)

    first_name: str = Field(..., description="First name")
    last_name: str = Field(..., description="Last name")
    email: str = Field(..., description="Email address")
    phone: str = Field(..., description="Phone number")
    location: str = Field(..., description="Location as 'City, Region'")
    linkedin: Optional[str] = Field(None, description="LinkedIn profile URL")
    portfolio: Optional[str] = Field(None, description="Portfolio or GitHub URL")
    school: str = Field(..., description="School or university name")
    education: EducationLevel = Field(..., description="Highest education level")
    experience_level: ExperienceLevel = Field(..., description="Experience bracket")
    skills: FrozenSet[str] = Field(default_factory=frozenset, description="Skill names")
    work_authorized: bool = Field(..., description="Authorized to work in the job's country")
    requires_visa: bool = Field(False, description="Requires visa sponsorship")
    earliest_start_date: date = Field(..., description="Earliest start date")
    salary_expectation: Optional[str] = Field(None, description="Expected salary")
    referral_source: str = Field("linkedin", description="How the candidate heard about the job")
    cover_letter: str = Field("", description="Cover letter text")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def city(self) -> str:
        return self.location.split(",")[0].strip()


class ApplicationResult(BaseModel):
    """Outcome of one application attempt."""

    model_config = ConfigDict(frozen=True)

    success: bool = Field(..., description="Whether the application was submitted")
    confirmation_id: Optional[str] = Field(None, description="Confirmation shown by the platform")
    error: Optional[str] = Field(None, description="Error message if failed")
    artifact_path: Optional[str] = Field(None, description="Resume attached to the submission")
    duration_ms: int = Field(0, description="Elapsed time in milliseconds")

    @classmethod
    def succeeded(
        cls,
        confirmation_id: Optional[str],
        duration_ms: int,
        artifact_path: Optional[str] = None,
    ) -> "ApplicationResult":
        return cls(
            success=True,
            confirmation_id=confirmation_id or None,
            duration_ms=duration_ms,
            artifact_path=artifact_path,
        )

    @classmethod
    def failed(
        cls,
        error: str,
        duration_ms: int = 0,
        artifact_path: Optional[str] = None,
    ) -> "ApplicationResult":
        return cls(success=False, error=error, duration_ms=duration_ms, artifact_path=artifact_path)


class ApplicationTarget(BaseModel):
    """A form to apply through."""
    name: str = Field(..., description="Company display name")
    url: str = Field(..., description="Form URL")


@dataclass
class TargetOutcome:
    """Result of one target in a run."""
    target: ApplicationTarget
    result: ApplicationResult

    def summary(self) -> str:
        if self.result.success:
            return (
                f"{self.target.name}: submitted "
                f"(confirmation {self.result.confirmation_id}, {self.result.duration_ms}ms)"
            )
        return f"{self.target.name}: failed ({self.result.error})"
