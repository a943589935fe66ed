"""Enumerations for localetext type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, eliminating boilerplate __str__ methods.

Python 3.11+.
"""

from enum import StrEnum


class ServiceKind(StrEnum):
    """Classification service whose backend is selected by the capability probe.

    StrEnum provides automatic string conversion: str(ServiceKind.ORDERING) == "ordering"
    """

    ORDERING = "ordering"
    """Locale collation: pairwise comparison and bulk sort."""

    INDEXING = "indexing"
    """Alphabetic bucket labels for list grouping."""

    TRANSLITERATION = "transliteration"
    """Reduction of arbitrary text to a Latin/ASCII approximation."""

    LANGUAGE_TAGS = "language_tags"
    """Locale <-> BCP-47 language tag conversion."""


class CapabilityChoice(StrEnum):
    """Backend tier chosen for a service instance.

    Resolved once when the service is constructed, fixed for its lifetime.
    """

    NATIVE_HIGH_FIDELITY = "native_high_fidelity"
    """Full ICU implementation (PyICU)."""

    NATIVE_BASIC = "native_basic"
    """Library-backed implementation with partial locale data (Babel, Unidecode)."""

    FALLBACK = "fallback"
    """Hand-built implementation with no optional dependencies."""


__all__ = [
    "CapabilityChoice",
    "ServiceKind",
]
