"""Capability probe: pick the backend tier for a classification service.

Each service has an ordered list of native backend candidates, highest
fidelity first. probe() walks the list and returns the tier of the first
candidate that passes every gate, or FALLBACK when none does.

Gates, cheapest first:
    1. Configuration: LOCALETEXT_FORCE_FALLBACK names the service (or "all")
    2. Version: installed distribution version meets the backend minimum
       (package metadata only, cached)
    3. Symbol: the backend module imports and exposes the backend class

probe() never raises. Passing the probe does not guarantee that a backend
accepts every locale; service factories still downgrade when construction
fails for a specific locale.

Python 3.11+.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from localetext.constants import (
    FORCE_FALLBACK_ENV,
    MIN_BABEL_VERSION,
    MIN_PYICU_VERSION,
    MIN_UNIDECODE_VERSION,
)
from localetext.core.backend_compat import (
    clear_backend_cache,
    distribution_version,
    resolve_symbol,
)
from localetext.core.errors import CapabilityUnavailableError
from localetext.enums import CapabilityChoice, ServiceKind

__all__ = [
    "BackendCandidate",
    "backend_candidates",
    "clear_probe_cache",
    "downgrade_path",
    "forced_fallbacks",
    "probe",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BackendCandidate:
    """Native backend that may serve a service.

    Attributes:
        choice: Tier reported when this candidate is selected
        distributions: Distribution names on the package index that ship
            the module (binary wheels are sometimes published separately)
        module: Importable module name
        symbol: Attribute that must resolve on the module
        min_version: Minimum distribution release
    """

    choice: CapabilityChoice
    distributions: tuple[str, ...]
    module: str
    symbol: str
    min_version: tuple[int, ...]

    @property
    def name(self) -> str:
        """Primary distribution name (for log messages)."""
        return self.distributions[0]

    def installed_version(self) -> tuple[int, ...] | None:
        """Version of the first installed distribution, or None."""
        for distribution in self.distributions:
            installed = distribution_version(distribution)
            if installed is not None:
                return installed
        return None

    def check(self, service: ServiceKind) -> None:
        """Run the version and symbol gates.

        Raises:
            CapabilityUnavailableError: If either gate fails
        """
        installed = self.installed_version()
        if installed is None:
            raise CapabilityUnavailableError(service, f"{self.name} is not installed")
        if installed < self.min_version:
            raise CapabilityUnavailableError(
                service,
                f"{self.name} {_dotted(installed)} is older than {_dotted(self.min_version)}",
            )
        resolve_symbol(service, self.module, self.symbol)


def _dotted(version: tuple[int, ...]) -> str:
    return ".".join(str(part) for part in version)


_ICU = ("PyICU", "PyICU-binary")
_BABEL = ("Babel",)
_UNIDECODE = ("Unidecode",)

_CANDIDATES: dict[ServiceKind, tuple[BackendCandidate, ...]] = {
    ServiceKind.ORDERING: (
        BackendCandidate(
            CapabilityChoice.NATIVE_HIGH_FIDELITY, _ICU, "icu", "Collator", MIN_PYICU_VERSION
        ),
    ),
    ServiceKind.INDEXING: (
        BackendCandidate(
            CapabilityChoice.NATIVE_HIGH_FIDELITY,
            _ICU,
            "icu",
            "AlphabeticIndex",
            MIN_PYICU_VERSION,
        ),
    ),
    ServiceKind.TRANSLITERATION: (
        BackendCandidate(
            CapabilityChoice.NATIVE_HIGH_FIDELITY,
            _ICU,
            "icu",
            "Transliterator",
            MIN_PYICU_VERSION,
        ),
        BackendCandidate(
            CapabilityChoice.NATIVE_BASIC,
            _UNIDECODE,
            "unidecode",
            "unidecode",
            MIN_UNIDECODE_VERSION,
        ),
    ),
    ServiceKind.LANGUAGE_TAGS: (
        BackendCandidate(
            CapabilityChoice.NATIVE_BASIC, _BABEL, "babel.core", "parse_locale", MIN_BABEL_VERSION
        ),
    ),
}


def backend_candidates(kind: ServiceKind) -> tuple[BackendCandidate, ...]:
    """Native candidates for a service, highest fidelity first."""
    return _CANDIDATES[kind]


def forced_fallbacks() -> frozenset[ServiceKind]:
    """Service kinds forced to FALLBACK by the environment.

    Reads LOCALETEXT_FORCE_FALLBACK on every call. Accepts a comma-separated
    list of service kinds, or "all"/"1"/"true"/"yes" for every service.
    Unknown names are ignored.
    """
    raw = os.environ.get(FORCE_FALLBACK_ENV, "")
    names = {name.strip().lower() for name in raw.split(",") if name.strip()}
    if names & {"all", "1", "true", "yes"}:
        return frozenset(ServiceKind)
    return frozenset(kind for kind in ServiceKind if kind.value in names)


def probe(kind: ServiceKind) -> CapabilityChoice:
    """Select the backend tier for a service.

    Args:
        kind: Service whose backend is requested

    Returns:
        Tier of the first usable native candidate, or FALLBACK

    Example:
        >>> probe(ServiceKind.LANGUAGE_TAGS)
        <CapabilityChoice.NATIVE_BASIC: 'native_basic'>
    """
    if kind in forced_fallbacks():
        logger.debug("%s: fallback forced by %s", kind, FORCE_FALLBACK_ENV)
        return CapabilityChoice.FALLBACK

    for candidate in _CANDIDATES[kind]:
        try:
            candidate.check(kind)
        except CapabilityUnavailableError as e:
            logger.debug("%s: skipping %s (%s)", kind, candidate.name, e.reason)
            continue
        logger.debug("%s: using %s (%s)", kind, candidate.name, candidate.choice)
        return candidate.choice

    logger.debug("%s: using fallback implementation", kind)
    return CapabilityChoice.FALLBACK


def clear_probe_cache() -> None:
    """Forget cached backend versions so the next probe re-reads package metadata."""
    clear_backend_cache()


_TIER_ORDER: tuple[CapabilityChoice, ...] = (
    CapabilityChoice.NATIVE_HIGH_FIDELITY,
    CapabilityChoice.NATIVE_BASIC,
    CapabilityChoice.FALLBACK,
)


def downgrade_path(choice: CapabilityChoice) -> tuple[CapabilityChoice, ...]:
    """Tiers to try, in order, starting from a probed choice.

    Example:
        >>> downgrade_path(CapabilityChoice.NATIVE_BASIC)
        (<CapabilityChoice.NATIVE_BASIC: 'native_basic'>, <CapabilityChoice.FALLBACK: 'fallback'>)
    """
    return _TIER_ORDER[_TIER_ORDER.index(choice) :]
