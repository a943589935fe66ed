"""Locale value type and current-locale resolution.

Centralizes locale format normalization used throughout the codebase and
answers "which locale is active right now" for the service factories.

Resolution order for current_locale():
    1. Context-local override set with use_locale() (thread and asyncio safe)
    2. Application provider registered with set_locale_provider()
    3. System locale (OS locale, then LC_ALL, LC_MESSAGES, LANG)
    4. DEFAULT_LOCALE

The active locale is read afresh on every call; nothing here caches it, so a
locale change is visible to the next service construction.

Python 3.11+.
"""

from __future__ import annotations

import functools
import logging
import os
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

from babel.core import parse_locale

from localetext.constants import DEFAULT_LOCALE, MAX_LOCALE_CACHE_SIZE

if TYPE_CHECKING:
    import babel

__all__ = [
    "Locale",
    "LocaleProvider",
    "clear_locale_cache",
    "current_locale",
    "get_babel_locale",
    "get_system_locale",
    "normalize_locale",
    "set_locale_provider",
    "use_locale",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Locale:
    """Language + optional region (and script) identifying a locale.

    Components are normalized on construction: language lowercased, script
    title-cased, region uppercased. Empty strings are treated as absent.

    Examples:
        >>> Locale("EN", "us")
        Locale(language='en', region='US', script=None)
        >>> str(Locale("sr", "RS", "latn"))
        'sr_Latn_RS'
        >>> Locale.parse("pt-BR")
        Locale(language='pt', region='BR', script=None)
    """

    language: str
    region: str | None = None
    script: str | None = None

    def __post_init__(self) -> None:
        """Normalize component case."""
        object.__setattr__(self, "language", self.language.lower())
        object.__setattr__(self, "region", self.region.upper() if self.region else None)
        object.__setattr__(self, "script", self.script.title() if self.script else None)

    def __str__(self) -> str:
        """POSIX identifier (language[_Script][_REGION])."""
        return "_".join(part for part in (self.language, self.script, self.region) if part)

    @classmethod
    def parse(cls, identifier: str) -> Locale:
        """Parse a POSIX or BCP-47 locale identifier.

        Encoding (".UTF-8") and modifier ("@euro") suffixes are ignored.

        Args:
            identifier: Locale identifier (e.g., "en_US", "en-US", "de_DE.UTF-8")

        Returns:
            Parsed Locale

        Raises:
            ValueError: If the identifier is not well-formed
        """
        language, region, script, *_ = parse_locale(normalize_locale(identifier))
        return cls(language, region, script)

    def to_babel(self) -> babel.Locale:
        """Get the Babel Locale carrying CLDR data for this locale.

        Raises:
            babel.UnknownLocaleError: If CLDR has no data for the locale
            ValueError: If the locale has no language
        """
        return get_babel_locale(str(self))


LocaleProvider = Callable[[], "Locale | str | None"]
"""Application hook reporting the active locale; None means "not available"."""

_active_locale: ContextVar[Locale | None] = ContextVar("localetext_active_locale", default=None)
_locale_provider: LocaleProvider | None = None


def normalize_locale(locale_code: str) -> str:
    """Convert a BCP-47 or POSIX locale code to the POSIX form Babel expects.

    BCP-47 uses hyphens (en-US), while Babel/POSIX uses underscores (en_US).
    Encoding and modifier suffixes are stripped.

    Args:
        locale_code: Locale code (e.g., "en-US", "pt_BR.UTF-8", "de_DE@euro")

    Returns:
        POSIX-formatted locale code (e.g., "en_US", "pt_BR", "de_DE")

    Example:
        >>> normalize_locale("en-US")
        'en_US'
        >>> normalize_locale("de_DE.UTF-8")
        'de_DE'
    """
    code = locale_code.split(".", 1)[0].split("@", 1)[0]
    return code.strip().replace("-", "_")


@functools.lru_cache(maxsize=MAX_LOCALE_CACHE_SIZE)
def get_babel_locale(locale_code: str) -> babel.Locale:
    """Get a Babel Locale object with caching.

    Parses the locale code once and caches the result. Thread-safe via
    lru_cache internal locking.

    Args:
        locale_code: Locale code (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object

    Raises:
        babel.core.UnknownLocaleError: If locale is not recognized
        ValueError: If locale format is invalid
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale as BabelLocale  # noqa: PLC0415

    return BabelLocale.parse(normalize_locale(locale_code))


def clear_locale_cache() -> None:
    """Clear the parsed Babel locale cache."""
    get_babel_locale.cache_clear()


def get_system_locale(*, raise_on_failure: bool = False) -> str:
    """Detect system locale from OS and environment variables.

    Detection order:
    1. Python locale.getlocale() (OS-level locale)
    2. LC_ALL environment variable (overrides all)
    3. LC_MESSAGES environment variable (for message catalogs)
    4. LANG environment variable (default locale)

    Normalizes the result to POSIX format. Filters out "C" and "POSIX"
    pseudo-locales.

    Args:
        raise_on_failure: If True, raise RuntimeError when locale cannot be
            determined. If False (default), return DEFAULT_LOCALE.

    Returns:
        Detected locale code in POSIX format.

    Raises:
        RuntimeError: If raise_on_failure is True and locale cannot be determined.

    Example:
        >>> import os
        >>> os.environ['LANG'] = 'de_DE.UTF-8'
        >>> get_system_locale()
        'de_DE'
    """
    import locale as locale_module  # noqa: PLC0415

    try:
        system_locale, _ = locale_module.getlocale()
        if system_locale and system_locale not in ("C", "POSIX"):
            return normalize_locale(system_locale)
    except (ValueError, AttributeError):
        pass

    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value and value not in ("C", "POSIX", ""):
            code = normalize_locale(value)
            if code and code not in ("C", "POSIX"):
                return code

    if raise_on_failure:
        msg = (
            "Could not determine system locale. "
            "Set LC_ALL, LC_MESSAGES, or LANG environment variable."
        )
        raise RuntimeError(msg)

    return DEFAULT_LOCALE


def set_locale_provider(provider: LocaleProvider | None) -> LocaleProvider | None:
    """Register the application hook that reports the active locale.

    Args:
        provider: Zero-argument callable returning a Locale, a locale code,
            or None when the application context is unavailable. Pass None
            to unregister.

    Returns:
        The previously registered provider
    """
    global _locale_provider  # noqa: PLW0603  # pylint: disable=global-statement
    previous = _locale_provider
    _locale_provider = provider
    return previous


@contextmanager
def use_locale(locale: Locale | str) -> Iterator[Locale]:
    """Make a locale active for the current thread or task.

    Args:
        locale: Locale or locale code

    Yields:
        The active Locale

    Raises:
        ValueError: If a locale code is not well-formed

    Example:
        >>> with use_locale("sv-SE"):
        ...     current_locale()
        Locale(language='sv', region='SE', script=None)
    """
    active = locale if isinstance(locale, Locale) else Locale.parse(locale)
    token = _active_locale.set(active)
    try:
        yield active
    finally:
        _active_locale.reset(token)


def _coerce(value: Locale | str | None, source: str) -> Locale | None:
    if value is None or isinstance(value, Locale):
        return value
    try:
        return Locale.parse(value)
    except ValueError:
        logger.warning("Ignoring malformed %s locale %r", source, value)
        return None


def current_locale() -> Locale:
    """Best-effort read of the active locale.

    Never raises for a failing provider or a malformed provider or system
    value; those are logged and skipped.

    Returns:
        The active Locale, or DEFAULT_LOCALE when nothing else is available
    """
    active = _active_locale.get()
    if active is not None:
        return active

    if _locale_provider is not None:
        try:
            value = _locale_provider()
        except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
            # A failing provider counts as unavailable
            logger.warning("Locale provider failed, using system locale: %s", e)
            value = None
        provided = _coerce(value, "provider")
        if provided is not None:
            return provided

    system = _coerce(get_system_locale(), "system")
    if system is not None:
        return system
    return Locale.parse(DEFAULT_LOCALE)
