"""localetext - locale-aware ordering, bucket labels and transliteration.

Classifies user-visible strings (contact names, titles) consistently with the
active locale, on top of whichever backend the runtime offers: ICU through
PyICU, CLDR data through Babel and Unidecode, or built-in fallbacks.

Public API:
    current_locale - Active locale (context override, app provider, OS)
    use_locale - Context manager making a locale active
    ordering_for - Fresh locale-bound ordering service
    sort_with_locale - Stable locale-aware sort by derived key
    indexing_for - Fresh locale-bound bucket labeling service
    group_by_label - Sort and bucket items for an alphabetical list
    transliteration - Process-wide (or per-recipe) transliteration service
    language_tag_of / locale_for - Locale <-> BCP-47 tag conversion
    probe - Backend tier selected for a service

Exceptions:
    LocaleTextError - Base exception class
    CapabilityUnavailableError - Native backend absent or unusable
    MalformedLanguageTagError - Tag does not parse

Submodules:
    localetext.capabilities - Capability probe and backend candidates
    localetext.ordering - Collation backends and CollationKey
    localetext.indexing - Bucket labeling backends
    localetext.transliteration - Transliteration backends and compound ids
    localetext.language_tags - Language tag backends
    localetext.locale_utils - Locale value type and current-locale lookup
"""

from .capabilities import probe
from .core.errors import CapabilityUnavailableError, LocaleTextError, MalformedLanguageTagError
from .enums import CapabilityChoice, ServiceKind
from .indexing import IndexingService, group_by_label, indexing_for
from .language_tags import language_tag_of, locale_for
from .locale_utils import Locale, current_locale, set_locale_provider, use_locale
from .ordering import (
    CollationKey,
    OrderingService,
    locale_sort_key,
    ordering_for,
    sort_with_current_locale,
    sort_with_locale,
)
from .transliteration import (
    DEFAULT_TRANSLITERATION_ID,
    TransliterationService,
    preload_transliterator,
    transliteration,
)

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError  # noqa: E402
from importlib.metadata import version as _get_version  # noqa: E402

try:
    __version__ = _get_version("localetext")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "DEFAULT_TRANSLITERATION_ID",
    "CapabilityChoice",
    "CapabilityUnavailableError",
    "CollationKey",
    "IndexingService",
    "Locale",
    "LocaleTextError",
    "MalformedLanguageTagError",
    "OrderingService",
    "ServiceKind",
    "TransliterationService",
    "__version__",
    "current_locale",
    "group_by_label",
    "indexing_for",
    "language_tag_of",
    "locale_for",
    "locale_sort_key",
    "ordering_for",
    "preload_transliterator",
    "probe",
    "set_locale_provider",
    "sort_with_current_locale",
    "sort_with_locale",
    "transliteration",
    "use_locale",
]
