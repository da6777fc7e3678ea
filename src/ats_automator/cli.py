"""Command-line interface for the ATS form automator."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from ats_automator.config import default_targets, settings
from ats_automator.core.models import ApplicationTarget, TargetOutcome
from ats_automator.core.profile import load_profile
from ats_automator.utils.logging import configure_logging, get_logger, log_function_call

app = typer.Typer(
    name="ats-automator",
    help="ATS Form Automator - fills job application forms with human pacing",
    add_completion=False,
)
console = Console()
logger = get_logger(__name__)


def parse_target(value: str) -> ApplicationTarget:
    """Parse a ``NAME=URL`` option value."""
    name, sep, url = value.partition("=")
    if not sep or not name.strip() or not url.strip():
        raise typer.BadParameter(f"Expected NAME=URL, got '{value}'")
    return ApplicationTarget(name=name.strip(), url=url.strip())


def render_outcomes(outcomes: List[TargetOutcome]) -> Table:
    """Summary table of a run."""
    table = Table(title="Application Results")
    table.add_column("Target", style="cyan")
    table.add_column("Status")
    table.add_column("Confirmation", style="green")
    table.add_column("Duration (ms)", justify="right")
    table.add_column("Error", style="red")

    for outcome in outcomes:
        result = outcome.result
        table.add_row(
            outcome.target.name,
            "[green]submitted[/green]" if result.success else "[red]failed[/red]",
            result.confirmation_id or "-",
            str(result.duration_ms),
            result.error or "",
        )
    return table


@app.command()
def run(
    profile_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Candidate profile JSON"),
    target: Optional[List[str]] = typer.Option(
        None, "--target", "-t", help="Target as NAME=URL; repeatable. Defaults to the local forms"
    ),
    headless: bool = typer.Option(settings.browser_headless, "--headless/--headed", help="Hide the browser"),
    generate_resume: bool = typer.Option(
        settings.generate_resume,
        "--generate-resume/--no-generate-resume",
        help="Generate a tailored resume per target",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Apply to every target with the given profile."""
    from ats_automator.orchestrator import create_application_runner

    configure_logging("DEBUG" if verbose else None)

    targets = [parse_target(value) for value in target] if target else [
        ApplicationTarget(**entry) for entry in default_targets()
    ]
    logger.debug(
        "CLI run",
        **log_function_call(
            "run",
            profile_path=str(profile_path),
            targets=[t.url for t in targets],
            headless=headless,
            generate_resume=generate_resume,
        )
    )

    profile = load_profile(profile_path)
    console.print(f"🚀 Applying as {profile.full_name} to {len(targets)} target(s)")

    runner = create_application_runner(generate_resume=generate_resume, headless=headless)
    outcomes = asyncio.run(runner.run(targets, profile))

    console.print(render_outcomes(outcomes))
    for outcome in outcomes:
        marker = "✅" if outcome.result.success else "❌"
        console.print(f"{marker} {outcome.summary()}")

    if not all(outcome.result.success for outcome in outcomes):
        raise typer.Exit(code=1)


@app.command()
def handlers() -> None:
    """List registered handlers in detection order."""
    from ats_automator.platforms.registry import create_platform_registry

    table = Table(title="Registered Handlers")
    table.add_column("#", justify="right")
    table.add_column("Handler", style="cyan")
    table.add_column("Company", style="green")
    table.add_column("URL Marker")
    table.add_column("Title Marker")

    for position, handler in enumerate(create_platform_registry().handlers, start=1):
        table.add_row(str(position), handler.name, handler.company_name, handler.url_marker, handler.title_marker)

    console.print(table)


@app.command()
def config() -> None:
    """Show current configuration."""
    table = Table(title="ATS Form Automator Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    # Show non-sensitive settings
    table.add_row("Base URL", settings.base_url)
    table.add_row("Browser Headless", str(settings.browser_headless))
    table.add_row("Viewport", f"{settings.browser_viewport_width}x{settings.browser_viewport_height}")
    table.add_row("Human Timing", str(settings.human_timing))
    table.add_row("Step Transition Timeout (ms)", str(settings.step_transition_timeout_ms))
    table.add_row("Typeahead Results Timeout (ms)", str(settings.typeahead_results_timeout_ms))
    table.add_row("Confirmation Timeout (ms)", str(settings.confirmation_timeout_ms))
    table.add_row("Generate Resume", str(settings.generate_resume))
    table.add_row("Fallback Resume", settings.resume_path)
    table.add_row("LaTeX Compiler", settings.latex_compiler)
    table.add_row("OpenAI Key", "configured" if settings.openai_api_key else "missing")
    table.add_row("Groq Key", "configured" if settings.groq_api_key else "missing")
    table.add_row("Log Level", settings.log_level)

    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from ats_automator import __version__
    console.print(f"ATS Form Automator v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
