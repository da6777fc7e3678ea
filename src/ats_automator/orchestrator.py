"""Sequential run over application targets."""

import asyncio
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from ats_automator.browser.session import create_browser_session
from ats_automator.config import Settings, settings
from ats_automator.core.errors import HandlerNotFoundError
from ats_automator.core.models import (
    ApplicationResult,
    ApplicationTarget,
    CandidateProfile,
    TargetOutcome,
)
from ats_automator.platforms.registry import PlatformRegistry, create_platform_registry
from ats_automator.utils.logging import get_logger, log_application_result, log_run_summary, target_context

logger = get_logger(__name__)


class ApplicationRunner:
    """
    Applies to each target in turn with a fresh browser session.

    The session and the resume obtained for a target belong to that target
    only; both are released before the next target starts, whatever the
    outcome.
    """

    def __init__(
        self,
        registry: Optional[PlatformRegistry] = None,
        document_provider: Optional[Any] = None,
        session_factory: Optional[Callable[[], Any]] = None,
        config: Optional[Settings] = None,
    ):
        """
        Initialize the runner.

        Args:
            registry: Handlers to detect pages with; defaults to all layouts
            document_provider: Object with ``obtain_artifact`` and
                ``release_artifact``; None disables resume generation
            session_factory: Returns an async context manager yielding a page
            config: Settings to use; defaults to the global settings
        """
        self.config = config or settings
        self.registry = registry or create_platform_registry()
        self.document_provider = document_provider
        self.session_factory = session_factory or create_browser_session
        self.logger = logger.bind(component="application_runner")

    async def run(self, targets: Sequence[ApplicationTarget], profile: CandidateProfile) -> List[TargetOutcome]:
        """Apply to every target sequentially and collect the outcomes."""
        outcomes: List[TargetOutcome] = []
        self.logger.info("Run started", targets=[target.name for target in targets])

        for target in targets:
            result = await self.apply_to_target(target, profile)
            outcome = TargetOutcome(target=target, result=result)
            outcomes.append(outcome)
            self.logger.info(outcome.summary())

        self.logger.info("Run finished", **log_run_summary(outcomes))
        return outcomes

    async def apply_to_target(self, target: ApplicationTarget, profile: CandidateProfile) -> ApplicationResult:
        """
        Run one application attempt.

        Never raises: navigation and driver failures become failed results.
        """
        with target_context(target.name, target.url):
            return await self._attempt(target, profile)

    async def _attempt(self, target: ApplicationTarget, profile: CandidateProfile) -> ApplicationResult:
        self.logger.info("Applying")
        try:
            artifact = await self._obtain_artifact(profile, target)
            async with self.session_factory() as page:
                await page.goto(target.url, wait_until="networkidle")
                await page.wait_for_load_state("domcontentloaded")

                handler = await self.registry.find_handler(page, target.url)
                if handler is None:
                    return ApplicationResult.failed(str(HandlerNotFoundError(target.url)), duration_ms=0)

                result = await handler.fill_and_submit(page, profile, resume_path=artifact)

                if self.config.result_linger_ms > 0:
                    await asyncio.sleep(self.config.result_linger_ms / 1000)
                return result
        except Exception as e:
            self.logger.error(
                "Application attempt failed",
                error=str(e),
                error_type=type(e).__name__
            )
            result = ApplicationResult.failed(str(e) or type(e).__name__, duration_ms=0)
            self.logger.debug("Attempt result", **log_application_result(result))
            return result
        finally:
            self._release_artifact()

    async def _obtain_artifact(self, profile: CandidateProfile, target: ApplicationTarget) -> Optional[Path]:
        """Fresh resume for the target, else the static one if it exists."""
        if self.document_provider is not None:
            try:
                return await self.document_provider.obtain_artifact(profile, target.name)
            except Exception as e:
                self.logger.warning(
                    "Resume generation failed, using fallback",
                    error=str(e),
                    error_type=type(e).__name__
                )

        fallback = Path(self.config.resume_path)
        if fallback.exists():
            return fallback

        self.logger.warning("No resume available", fallback=str(fallback))
        return None

    def _release_artifact(self) -> None:
        if self.document_provider is None:
            return
        try:
            self.document_provider.release_artifact()
        except Exception as e:
            self.logger.warning("Failed to release resume", error=str(e))


def create_application_runner(
    generate_resume: Optional[bool] = None,
    headless: Optional[bool] = None,
) -> ApplicationRunner:
    """
    Factory function to create a runner from settings.

    Args:
        generate_resume: Override for ``settings.generate_resume``
        headless: Override for ``settings.browser_headless``

    Returns:
        Configured ApplicationRunner instance
    """
    if generate_resume is None:
        generate_resume = settings.generate_resume

    document_provider = None
    if generate_resume:
        from ats_automator.documents.generator import create_resume_generator
        document_provider = create_resume_generator()

    return ApplicationRunner(
        registry=create_platform_registry(),
        document_provider=document_provider,
        session_factory=lambda: create_browser_session(headless=headless),
    )
