"""Backend compatibility layer for optional native dependencies.

Provides centralized, lazy import infrastructure for the native backends so
that every service resolves them the same way and reports absence with the
same error type.

Design Rationale:
    localetext supports three backend tiers:
    - Fallback: no optional dependency, pure Python tables
    - Native basic: Babel (CLDR locale data) and Unidecode (romanization)
    - Native high fidelity: `pip install localetext[icu]` (PyICU)

    This module ensures that:
    1. Importing localetext never imports PyICU
    2. Missing or too-old backends surface as CapabilityUnavailableError
    3. Backend types are available for TYPE_CHECKING through Protocols,
       without requiring PyICU stubs

Usage Pattern:
    # At function call site (for runtime use):
    from localetext.core.backend_compat import get_icu

    def build(locale: Locale) -> None:
        icu = get_icu(ServiceKind.ORDERING)  # Raises CapabilityUnavailableError
        collator = icu.Collator.createInstance(icu.Locale(str(locale)))
        ...

Python 3.11+.
"""

from __future__ import annotations

import importlib
import logging
from functools import lru_cache
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_metadata_version
from typing import Any, Protocol

from localetext.core.errors import CapabilityUnavailableError
from localetext.enums import ServiceKind

__all__ = [
    "AlphabeticIndexProtocol",
    "CollatorProtocol",
    "IcuModuleProtocol",
    "TransliteratorProtocol",
    "UnidecodeProtocol",
    "clear_backend_cache",
    "distribution_version",
    "get_icu",
    "get_unidecode",
    "resolve_symbol",
]

logger = logging.getLogger(__name__)


# pylint: disable=invalid-name,unnecessary-ellipsis
# Reason: Protocol definitions mirror the ICU C++ API, which uses camelCase
# Ellipsis (...) is the standard Protocol method body per PEP 544
class CollatorProtocol(Protocol):
    """Subset of icu.Collator used by the ordering service."""

    def compare(self, source: str, target: str) -> int:
        """Compare two strings under the collator's locale rules."""
        ...

    def getSortKey(self, source: str) -> bytes:
        """Return the binary sort key for a string."""
        ...


class TransliteratorProtocol(Protocol):
    """Subset of icu.Transliterator used by the transliteration service."""

    def transliterate(self, text: str) -> str:
        """Apply the compound transform to text."""
        ...


class AlphabeticIndexProtocol(Protocol):
    """Subset of icu.AlphabeticIndex.ImmutableIndex used by the indexing service."""

    @property
    def bucketCount(self) -> int:
        """Number of buckets, including underflow/overflow buckets."""
        ...

    def getBucketIndex(self, name: str) -> int:
        """Bucket position for a string, or -1 when no bucket applies."""
        ...

    def getBucket(self, index: int) -> Any:
        """Bucket object at a position (exposes getLabel())."""
        ...


class IcuModuleProtocol(Protocol):
    """Attributes of the PyICU module resolved by the native backends."""

    ICU_VERSION: str
    ICUError: type[Exception]
    Locale: Any
    Collator: Any
    Transliterator: Any
    AlphabeticIndex: Any


class UnidecodeProtocol(Protocol):
    """Callable signature of unidecode.unidecode."""

    def __call__(self, string: str, errors: str = "ignore", replace_str: str = "?") -> str:
        """Romanize text to ASCII."""
        ...
# pylint: enable=invalid-name,unnecessary-ellipsis


def _parse_version(raw: str) -> tuple[int, ...]:
    """Leading numeric release components of a version string ("2.10.2" -> (2, 10, 2))."""
    parts: list[int] = []
    for piece in raw.split("."):
        digits = ""
        for char in piece:
            if not char.isdigit():
                break
            digits += char
        if not digits:
            break
        parts.append(int(digits))
        if len(digits) != len(piece):
            break
    return tuple(parts)


@lru_cache(maxsize=32)
def distribution_version(distribution: str) -> tuple[int, ...] | None:
    """Installed version of a distribution (computed once, cached via lru_cache).

    Reads package metadata only; the distribution is not imported.

    Args:
        distribution: Distribution name on the package index (e.g., "PyICU")

    Returns:
        Release tuple, or None when the distribution is not installed
    """
    try:
        return _parse_version(distribution_metadata_version(distribution))
    except PackageNotFoundError:
        return None


def resolve_symbol(service: ServiceKind, module_name: str, symbol: str) -> object:
    """Import a backend module and resolve one attribute from it.

    Args:
        service: Service kind requesting the backend (for the error)
        module_name: Importable module name (e.g., "icu")
        symbol: Attribute to resolve (e.g., "Collator")

    Returns:
        The resolved attribute

    Raises:
        CapabilityUnavailableError: If the module or attribute cannot be resolved
    """
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise CapabilityUnavailableError(service, f"cannot import {module_name}: {e}") from e
    try:
        return getattr(module, symbol)
    except AttributeError as e:
        raise CapabilityUnavailableError(
            service, f"{module_name} has no attribute {symbol}"
        ) from e


def get_icu(service: ServiceKind) -> IcuModuleProtocol:
    """Get the PyICU module.

    Args:
        service: Service kind requesting PyICU (for the error)

    Returns:
        The icu module (typed via IcuModuleProtocol)

    Raises:
        CapabilityUnavailableError: If PyICU is not installed
    """
    resolve_symbol(service, "icu", "ICU_VERSION")
    import icu  # noqa: PLC0415  # pylint: disable=import-outside-toplevel

    return icu  # type: ignore[no-any-return]


def get_unidecode(service: ServiceKind) -> UnidecodeProtocol:
    """Get the unidecode function.

    Args:
        service: Service kind requesting Unidecode (for the error)

    Returns:
        unidecode.unidecode (typed via UnidecodeProtocol)

    Raises:
        CapabilityUnavailableError: If Unidecode is not installed
    """
    return resolve_symbol(service, "unidecode", "unidecode")  # type: ignore[return-value]


def clear_backend_cache() -> None:
    """Forget cached distribution versions (after installing/removing a backend)."""
    distribution_version.cache_clear()
    logger.debug("Cleared backend distribution version cache")
