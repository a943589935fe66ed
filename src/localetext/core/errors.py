"""Core error types shared across the capability probe and services.

Neither error escapes a public classification operation. They exist so that
backend constructors can report failure in one vocabulary and the service
factories can downgrade to the next backend.

Python 3.11+.
"""

from localetext.enums import ServiceKind

__all__ = [
    "CapabilityUnavailableError",
    "LocaleTextError",
    "MalformedLanguageTagError",
]


class LocaleTextError(Exception):
    """Base class for localetext errors."""


class CapabilityUnavailableError(LocaleTextError):
    """Raised when a native backend is absent or cannot serve a request.

    Covers a missing distribution, a version below the supported minimum,
    an unresolvable backend symbol, and a backend that rejects the requested
    locale or transform id. Service factories catch it and select the next
    backend tier.

    Attributes:
        service: Service kind whose backend failed
        reason: Human-readable cause
    """

    def __init__(self, service: ServiceKind, reason: str) -> None:
        """Create error for a service with a reason.

        Args:
            service: Service kind whose backend failed
            reason: Human-readable cause
        """
        super().__init__(f"{service} backend unavailable: {reason}")
        self.service = service
        self.reason = reason


class MalformedLanguageTagError(LocaleTextError, ValueError):
    """Raised when a language tag does not parse into a Locale.

    Language tag services convert it into an absent result.

    Attributes:
        tag: The rejected tag string
    """

    def __init__(self, tag: str) -> None:
        """Create error for the rejected tag.

        Args:
            tag: The rejected tag string
        """
        super().__init__(f"Malformed language tag: {tag!r}")
        self.tag = tag
