"""Platform-specific form handlers and their registry."""

from ats_automator.platforms.base import PlatformHandler
from ats_automator.platforms.acme import AcmeHandler
from ats_automator.platforms.globex import GlobexHandler
from ats_automator.platforms.registry import PlatformRegistry, create_platform_registry

__all__ = [
    "PlatformHandler",
    "AcmeHandler",
    "GlobexHandler",
    "PlatformRegistry",
    "create_platform_registry",
]
