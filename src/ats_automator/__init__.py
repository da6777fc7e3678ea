"""
ATS Form Automator: fills third-party job application forms.

A registry picks the handler for the form layout on the page (the Acme
multi-step wizard or the Globex accordion) and the handler fills and
submits it with human-paced interactions.
"""

__version__ = "0.1.0"

from ats_automator.core.models import ApplicationResult, ApplicationTarget, CandidateProfile
from ats_automator.orchestrator import ApplicationRunner
from ats_automator.platforms.registry import PlatformRegistry, create_platform_registry

__all__ = [
    "ApplicationResult",
    "ApplicationTarget",
    "CandidateProfile",
    "ApplicationRunner",
    "PlatformRegistry",
    "create_platform_registry",
]
