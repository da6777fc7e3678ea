"""Per-target resume artifacts."""

from ats_automator.documents.generator import ResumeGenerator, create_resume_generator, create_resume_models
from ats_automator.documents.latex import build_resume_prompt, clean_latex

__all__ = [
    "ResumeGenerator",
    "create_resume_generator",
    "create_resume_models",
    "build_resume_prompt",
    "clean_latex",
]
