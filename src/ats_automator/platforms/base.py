"""Base class for platform-specific application form handlers."""

import re
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ats_automator.browser.fields import FieldFiller
from ats_automator.browser.state import DomStateObserver
from ats_automator.browser.timing import HumanTiming, create_timing
from ats_automator.browser.waits import WaitTimeouts, wait_for_selector
from ats_automator.config import settings
from ats_automator.core.models import ApplicationResult, CandidateProfile, FormLayout
from ats_automator.utils.logging import get_logger, log_application_result

logger = get_logger(__name__)

# Longest names first so "Globex Corporation" is not matched as "Globex"
COMPANY_NAME_PATTERN = re.compile(r"Acme Corp|Globex Corporation|Globex")


class PlatformHandler(ABC):
    """
    Detects and completes one application form layout.

    Handlers keep no state between calls: everything a run needs lives in the
    ``fill_and_submit`` call, so one instance may serve any number of pages.
    """

    name: str = "generic"
    layout: FormLayout
    company_name: str = ""
    url_marker: str = ""
    title_marker: str = ""
    confirmation_selector: str = ""

    def __init__(
        self,
        timing: Optional[HumanTiming] = None,
        timeouts: Optional[WaitTimeouts] = None,
        observer_factory: Callable[[Any], Any] = DomStateObserver,
    ):
        """
        Initialize the handler.

        Args:
            timing: Pacing strategy; defaults to human timing from settings
            timeouts: Wait bounds; defaults to the configured values
            observer_factory: Builds the page state observer for a page
        """
        self.timing = timing or create_timing(settings.human_timing)
        self.timeouts = timeouts or WaitTimeouts.from_settings()
        self.fields = FieldFiller(self.timing)
        self.observer_factory = observer_factory
        self.logger = logger.bind(handler=self.name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"

    async def detect(self, page: Any, url: str) -> bool:
        """Claim the page when the URL or, failing that, the title matches."""
        if self.url_marker and self.url_marker in url:
            return True
        title = await page.title()
        return bool(self.title_marker) and self.title_marker in (title or "")

    async def fill_and_submit(
        self,
        page: Any,
        profile: CandidateProfile,
        resume_path: Optional[Union[str, Path]] = None,
    ) -> ApplicationResult:
        """
        Fill every section of the form, submit it and read the confirmation.

        Never raises: any error becomes a failed result carrying its message
        and the elapsed time.
        """
        start = time.monotonic()
        artifact = str(resume_path) if resume_path else None
        stats_before = self.timing.stats()
        self.logger.info("Starting application", url=getattr(page, "url", None), has_resume=artifact is not None)

        try:
            confirmation_id = await self.run(page, profile, Path(artifact) if artifact else None)
            result = ApplicationResult.succeeded(
                confirmation_id,
                duration_ms=self._elapsed_ms(start),
                artifact_path=artifact,
            )
        except Exception as e:
            self.logger.error(
                "Application failed",
                error=str(e),
                error_type=type(e).__name__
            )
            result = ApplicationResult.failed(
                str(e) or type(e).__name__,
                duration_ms=self._elapsed_ms(start),
                artifact_path=artifact,
            )

        stats_after = self.timing.stats()
        self.logger.info(
            "Application finished",
            actions=stats_after["action_count"] - stats_before["action_count"],
            delay_ms=stats_after["total_delay_ms"] - stats_before["total_delay_ms"],
            **log_application_result(result)
        )
        return result

    @abstractmethod
    async def run(self, page: Any, profile: CandidateProfile, resume_path: Optional[Path]) -> Optional[str]:
        """Drive the form to submission and return the confirmation text."""

    async def upload_resume(self, locator: Any, resume_path: Optional[Path]) -> None:
        """Attach the resume, or leave the file input empty when there is none."""
        if resume_path is None:
            self.logger.warning("No resume to upload, leaving file input empty")
            return
        await self.fields.upload_file(locator, resume_path)

    async def read_confirmation(self, page: Any) -> Optional[str]:
        """Trimmed text of the confirmation element, after a hard wait for it."""
        await wait_for_selector(
            page,
            self.confirmation_selector,
            timeout_ms=self.timeouts.confirmation,
            description="confirmation element",
        )
        text = await page.text_content(self.confirmation_selector)
        return text.strip() if text else None

    async def select_referral(
        self,
        page: Any,
        source: str,
        values: Mapping[str, str],
        select_selector: str,
        other_block_selector: str,
        other_input_selector: str,
    ) -> str:
        """
        Choose the referral source, typing the free text when "other" is picked.

        Known sources map to option values; anything else is resolved against
        the option labels.
        """
        select = page.locator(select_selector)
        key = source.lower().strip()

        if key in values:
            value = values[key]
            await self.fields.select_option(select, value)
        else:
            await self.fields.select_option_by_text(select, source)
            value = await select.input_value()

        if value == "other":
            await wait_for_selector(
                page,
                other_block_selector,
                timeout_ms=self.timeouts.conditional_field,
                description="referral details field",
            )
            await self.timing.random_delay(200, 400)
            await self.fields.fill_text(page.locator(other_input_selector), source)

        return value

    def adapt_cover_letter(self, cover_letter: str) -> str:
        """Point a cover letter written for another company at this one."""
        return COMPANY_NAME_PATTERN.sub(self.company_name, cover_letter)

    @staticmethod
    def map_skills(skills: Iterable[str], mapping: Mapping[str, str]) -> List[str]:
        """Form identifiers for the skills the form knows; others are skipped."""
        mapped: Dict[str, None] = {}
        for skill in sorted(skills):
            target = mapping.get(skill.lower().strip())
            if target:
                mapped[target] = None
        return list(mapped)

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int((time.monotonic() - start) * 1000)
