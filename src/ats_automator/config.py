"""Configuration management for the ATS form automator."""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Browser Configuration
    browser_headless: bool = Field(True, description="Run browser in headless mode")
    browser_viewport_width: int = Field(1366, description="Browser viewport width")
    browser_viewport_height: int = Field(768, description="Browser viewport height")
    navigation_timeout_ms: int = Field(30000, description="Page navigation timeout in ms")
    result_linger_ms: int = Field(2000, description="Pause after a submission before closing the browser")

    # Targets
    base_url: str = Field("http://localhost:3939", description="Base URL hosting the application forms")

    # Wait bounds
    step_transition_timeout_ms: int = Field(3000, description="Hard wait for the next wizard step")
    conditional_field_timeout_ms: int = Field(2000, description="Wait for conditionally shown fields")
    dropdown_timeout_ms: int = Field(3000, description="Best-effort wait for typeahead dropdowns")
    spinner_timeout_ms: int = Field(2000, description="Best-effort wait for the typeahead spinner")
    typeahead_results_timeout_ms: int = Field(5000, description="Hard wait for async typeahead results")
    confirmation_timeout_ms: int = Field(10000, description="Hard wait for the confirmation element")

    # Timing
    human_timing: bool = Field(True, description="Pace actions like a human; False disables all delays")

    # Artifact Configuration
    resume_path: str = Field("fixtures/sample-resume.pdf", description="Static resume used when generation fails")
    artifact_dir: str = Field("fixtures/generated", description="Directory for generated resumes")
    generate_resume: bool = Field(True, description="Generate a tailored resume per target")
    latex_compiler: str = Field("pdflatex", description="LaTeX compiler executable")

    # Model Configuration
    openai_api_key: Optional[str] = Field(None, description="OpenAI API key")
    groq_api_key: Optional[str] = Field(None, description="Groq API key")
    resume_model_openai: str = Field("gpt-4o-mini", description="OpenAI model for resume generation")
    resume_model_groq: str = Field("llama-3.1-70b-versatile", description="Groq model for resume generation")
    resume_fallback_models: List[str] = Field(
        ["llama-3.1-8b-instant"], description="Groq models tried after the primary ones"
    )

    # Application Configuration
    debug: bool = Field(False, description="Enable debug mode")
    log_level: str = Field("INFO", description="Logging level")


def default_targets(config: Optional[Settings] = None) -> List[dict]:
    """Targets served by the local form fixtures."""
    config = config or settings
    base = config.base_url.rstrip("/")
    return [
        {"name": "Acme Corp", "url": f"{base}/acme.html"},
        {"name": "Globex Corporation", "url": f"{base}/globex.html"},
    ]


# Global settings instance
settings = Settings()
