"""Shared constants for localetext.

This module provides centralized configuration constants used across the
capability probe and the three classification services. Placing constants
here avoids circular imports and provides a single source of truth.

Constants are grouped by domain:
- Locale defaults: Fallback locale when no context or OS locale is available
- Indexing: Bucket sentinel and recursion bound for the fallback heuristic
- Transliteration: Default transform recipe
- Backend gates: Minimum distribution versions for native backends
- Configuration: Environment variable names

Python 3.11+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Locale defaults
    "DEFAULT_LOCALE",
    "UNDETERMINED_LANGUAGE",
    "MAX_LOCALE_CACHE_SIZE",
    # Indexing
    "FALLBACK_BUCKET_LABEL",
    "MAX_LABEL_PASSES",
    # Transliteration
    "DEFAULT_TRANSLITERATION_ID",
    # Backend gates
    "MIN_PYICU_VERSION",
    "MIN_BABEL_VERSION",
    "MIN_UNIDECODE_VERSION",
    # Configuration
    "FORCE_FALLBACK_ENV",
]

# ============================================================================
# LOCALE DEFAULTS
# ============================================================================

# Used when neither the application context nor the OS reports a locale.
DEFAULT_LOCALE: str = "en_US"

# BCP-47 "undetermined" language subtag, used for locales without a language.
UNDETERMINED_LANGUAGE: str = "und"

# Parsed Babel locales kept by get_babel_locale().
MAX_LOCALE_CACHE_SIZE: int = 128

# ============================================================================
# INDEXING
# ============================================================================

# Generic bucket for digits, symbols and scripts without a letter bucket.
FALLBACK_BUCKET_LABEL: str = "#"

# Upper bound on fallback label passes. A single code point reaches a plain
# ASCII letter (or gives up) in two passes; the rest is headroom for custom
# transliteration recipes that do not converge.
MAX_LABEL_PASSES: int = 4

# ============================================================================
# TRANSLITERATION
# ============================================================================

# ICU compound transform: any script to Latin, Latin decorations to ASCII,
# lowercase, then drop everything outside [ 0-9a-z].
DEFAULT_TRANSLITERATION_ID: str = "Any-Latin; Latin-ASCII; Lower; [^\\ 0-9a-z] Remove"

# ============================================================================
# BACKEND GATES
# ============================================================================

# PyICU 2.0 wraps AlphabeticIndex.ImmutableIndex and compound transliterators.
MIN_PYICU_VERSION: tuple[int, ...] = (2, 0)

# Babel 2.9 ships parse_locale(sep=...) and get_locale_identifier(sep=...).
MIN_BABEL_VERSION: tuple[int, ...] = (2, 9)

MIN_UNIDECODE_VERSION: tuple[int, ...] = (1, 1)

# ============================================================================
# CONFIGURATION
# ============================================================================

# Comma-separated service kinds ("ordering", "indexing", "transliteration",
# "language_tags") or "all" to force the hand-built fallback backends.
FORCE_FALLBACK_ENV: str = "LOCALETEXT_FORCE_FALLBACK"
