"""Exceptions raised while automating application forms."""

from typing import Iterable


class AutomationError(Exception):
    """Base error for the form automation engine."""


class HandlerNotFoundError(AutomationError):
    """No registered handler claims the current page."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"No handler found for URL: {url}")


class StructuralWaitTimeout(AutomationError):
    """A hard wait expired before the expected page state appeared."""

    def __init__(self, description: str, timeout_ms: int):
        self.description = description
        self.timeout_ms = timeout_ms
        super().__init__(f"Timed out after {timeout_ms}ms waiting for {description}")


class StepTransitionError(AutomationError):
    """The wizard was asked to move in a way its guards forbid."""


class IncompleteFormError(AutomationError):
    """Submit was requested before every form section was visited."""

    def __init__(self, missing: Iterable[str]):
        self.missing = sorted(missing)
        super().__init__(f"Sections not filled before submit: {', '.join(self.missing)}")


class FieldResolutionError(AutomationError):
    """A field value could not be matched to anything the control accepts."""


class DocumentGenerationError(AutomationError):
    """The resume artifact could not be produced."""
