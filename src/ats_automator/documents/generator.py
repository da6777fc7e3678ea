"""
Tailored resume generation.

A language model writes a LaTeX resume for the target company, which is then
compiled to PDF with a local LaTeX installation. Models are tried in order
until one answers; any failure surfaces as DocumentGenerationError so the
caller can fall back to a static resume.
"""

import asyncio
import re
import shutil
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_groq import ChatGroq
from langchain_openai import ChatOpenAI

from ats_automator.config import settings
from ats_automator.core.errors import DocumentGenerationError
from ats_automator.core.models import CandidateProfile
from ats_automator.documents.latex import SYSTEM_PROMPT, build_resume_prompt, clean_latex
from ats_automator.utils.logging import get_logger

logger = get_logger(__name__)

AUXILIARY_SUFFIXES = (".aux", ".log", ".out")


def slugify(value: str) -> str:
    """Lowercase, dash-separated form of a name for use in file names."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "resume"


def extract_latex_errors(log_text: str, limit: int = 5) -> List[str]:
    """Lines of a LaTeX log that report errors."""
    errors = [line.strip() for line in log_text.splitlines() if line.startswith("!") or "Error" in line]
    return errors[:limit]


def create_resume_models() -> List[Tuple[str, Any]]:
    """
    Build the chat models used for resume writing, in the order they are tried.

    Returns:
        List of (model name, chat model) pairs; empty when no API key is set
    """
    models: List[Tuple[str, Any]] = []

    if settings.openai_api_key:
        models.append((
            settings.resume_model_openai,
            ChatOpenAI(
                model=settings.resume_model_openai,
                api_key=settings.openai_api_key,
                temperature=0.7,  # Some variety between companies
                max_tokens=4096,
                timeout=60.0,
            ),
        ))

    if settings.groq_api_key:
        for model_name in [settings.resume_model_groq, *settings.resume_fallback_models]:
            models.append((
                model_name,
                ChatGroq(
                    model=model_name,
                    api_key=settings.groq_api_key,
                    temperature=0.7,
                    max_tokens=4096,
                    timeout=60.0,
                ),
            ))

    return models


class ResumeGenerator:
    """
    Produces a per-target resume PDF and cleans it up afterwards.

    Only the most recently generated file is tracked; ``release_artifact``
    deletes it and is safe to call any number of times.
    """

    def __init__(
        self,
        models: Optional[Sequence[Tuple[str, Any]]] = None,
        output_dir: Optional[str] = None,
        compiler: Optional[str] = None,
    ):
        self.models = list(models) if models is not None else create_resume_models()
        self.output_dir = Path(output_dir or settings.artifact_dir)
        self.compiler = compiler or settings.latex_compiler
        self.current_artifact: Optional[Path] = None
        self.logger = logger.bind(component="resume_generator")

    async def generate_latex(self, profile: CandidateProfile, company_name: str) -> str:
        """
        Ask each configured model in turn for the LaTeX source.

        Raises:
            DocumentGenerationError: If no model is configured or all of them fail
        """
        if not self.models:
            raise DocumentGenerationError("No API keys configured for resume generation")

        messages = [
            SystemMessage(content=SYSTEM_PROMPT),
            HumanMessage(content=build_resume_prompt(profile, company_name)),
        ]
        last_error: Optional[Exception] = None

        for model_name, model in self.models:
            try:
                self.logger.info("Requesting resume", model=model_name, company=company_name)
                response = await model.ainvoke(messages)
                latex = clean_latex(str(response.content))
                if not latex:
                    raise DocumentGenerationError(f"Model {model_name} returned an empty response")
                return latex
            except Exception as e:
                last_error = e
                self.logger.warning(
                    "Resume model failed, trying next",
                    model=model_name,
                    error=str(e),
                    error_type=type(e).__name__
                )

        raise DocumentGenerationError(f"All resume models failed: {last_error}")

    async def compile_pdf(self, latex: str, basename: str) -> Path:
        """
        Compile LaTeX source into ``<output_dir>/<basename>.pdf``.

        A non-zero compiler exit is tolerated as long as a non-empty PDF was
        written; auxiliary files and the source are removed either way.
        """
        if shutil.which(self.compiler) is None:
            raise DocumentGenerationError(
                f"LaTeX compiler '{self.compiler}' not found; install a TeX distribution"
            )

        self.output_dir.mkdir(parents=True, exist_ok=True)
        tex_path = self.output_dir / f"{basename}.tex"
        pdf_path = self.output_dir / f"{basename}.pdf"
        tex_path.write_text(latex, encoding="utf-8")

        try:
            process = await asyncio.create_subprocess_exec(
                self.compiler,
                f"-output-directory={self.output_dir}",
                "-interaction=nonstopmode",
                str(tex_path),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
            returncode = await process.wait()
            if returncode != 0:
                self.logger.warning("LaTeX compiler reported errors", returncode=returncode)

            if not pdf_path.exists():
                log_path = self.output_dir / f"{basename}.log"
                details = []
                if log_path.exists():
                    details = extract_latex_errors(log_path.read_text(encoding="utf-8", errors="replace"))
                raise DocumentGenerationError(
                    "PDF was not generated" + (f": {'; '.join(details)}" if details else "")
                )

            if pdf_path.stat().st_size == 0:
                pdf_path.unlink()
                raise DocumentGenerationError("Generated PDF is empty")
        finally:
            for suffix in AUXILIARY_SUFFIXES:
                self.output_dir.joinpath(f"{basename}{suffix}").unlink(missing_ok=True)
            tex_path.unlink(missing_ok=True)

        return pdf_path

    async def obtain_artifact(self, profile: CandidateProfile, target_name: str) -> Path:
        """
        Generate and compile a resume tailored to ``target_name``.

        Returns:
            Path to the compiled PDF
        """
        latex = await self.generate_latex(profile, target_name)
        basename = f"resume-{slugify(target_name)}"
        pdf_path = await self.compile_pdf(latex, basename)

        self.current_artifact = pdf_path
        self.logger.info(
            "Resume generated",
            target=target_name,
            path=str(pdf_path),
            size_kb=round(pdf_path.stat().st_size / 1024, 2)
        )
        return pdf_path

    def release_artifact(self) -> None:
        """Delete the last generated resume, if any."""
        artifact, self.current_artifact = self.current_artifact, None
        if artifact is None:
            return

        try:
            artifact.unlink(missing_ok=True)
            self.logger.debug("Resume removed", path=str(artifact))
        except OSError as e:
            self.logger.warning("Could not remove resume", path=str(artifact), error=str(e))


def create_resume_generator() -> ResumeGenerator:
    """Factory function to create a resume generator from settings."""
    return ResumeGenerator()
