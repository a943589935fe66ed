"""Indexing service: single-character bucket labels for alphabetical lists.

Every string maps to exactly one label: an alphabetic character, or "#" when
no letter bucket applies (digits, symbols, unsupported scripts, empty text).

Backends:
    - IcuIndexing (native high fidelity): ICU AlphabeticIndex for the locale
    - FallbackIndexing: ASCII fast path, then recursive reduction of
      Latin-like characters through the process-wide transliteration service

Fallback algorithm, for the first code point c of the text:
    1. empty text           -> "#"
    2. decimal digit        -> "#"
    3. A-Z                  -> c
    4. a-z                  -> uppercase c
    5. Latin-like block     -> repeat on transliterate(c)
    6. anything else        -> "#"

Step 5 narrows to a single code point each pass, so it ends on the next pass
for any recipe that yields ASCII. A pass whose transliteration returns its
input unchanged gives "#", and MAX_LABEL_PASSES bounds recipes that never
converge.

Python 3.11+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Protocol, TypeVar

from localetext.capabilities import downgrade_path, probe
from localetext.constants import FALLBACK_BUCKET_LABEL, MAX_LABEL_PASSES
from localetext.core.backend_compat import get_icu
from localetext.core.errors import CapabilityUnavailableError
from localetext.core.unicode_blocks import is_probably_latin
from localetext.enums import CapabilityChoice, ServiceKind
from localetext.locale_utils import Locale, current_locale
from localetext.ordering import sort_with_locale
from localetext.transliteration import TransliterationService, transliteration

__all__ = [
    "FallbackIndexing",
    "IcuIndexing",
    "IndexingService",
    "group_by_label",
    "indexing_for",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class IndexingService(Protocol):
    """Bucket labeling for one classification batch."""

    choice: CapabilityChoice
    locale: Locale

    def label_for(self, text: str) -> str:
        """Bucket label: one alphabetic character or "#". Never raises."""
        ...  # pylint: disable=unnecessary-ellipsis


class FallbackIndexing:
    """Locale-independent labeling for Latin-script text."""

    choice = CapabilityChoice.FALLBACK

    def __init__(
        self,
        locale: Locale | None = None,
        transliterator: TransliterationService | None = None,
    ) -> None:
        """Create the fallback labeler.

        Args:
            locale: Locale the labels are requested for (informational; the
                heuristic does not depend on it)
            transliterator: Reduction used for Latin-like characters; None
                uses the process-wide transliteration service at call time
        """
        self.locale = locale if locale is not None else current_locale()
        self._transliterator = transliterator
        logger.debug("creating fallback indexing")

    def _reduce(self, char: str) -> str:
        service = self._transliterator if self._transliterator is not None else transliteration()
        return service.transliterate(char)

    def label_for(self, text: str) -> str:
        for _ in range(MAX_LABEL_PASSES):
            if not text:
                return FALLBACK_BUCKET_LABEL
            char = text[0]
            if char.isdecimal():
                return FALLBACK_BUCKET_LABEL
            if "A" <= char <= "Z":
                return char
            if "a" <= char <= "z":
                return char.upper()
            if not is_probably_latin(ord(char)):
                return FALLBACK_BUCKET_LABEL
            reduced = self._reduce(char)
            if reduced == char:
                return FALLBACK_BUCKET_LABEL
            text = reduced
        logger.debug("Label reduction did not converge in %d passes", MAX_LABEL_PASSES)
        return FALLBACK_BUCKET_LABEL


def _single_label(label: str) -> str:
    """Cut an ICU bucket label to a single letter, "#" for non-letter buckets."""
    if not label or not label[0].isalpha():
        return FALLBACK_BUCKET_LABEL
    return label[0]


class IcuIndexing:
    """ICU AlphabeticIndex for a locale."""

    choice = CapabilityChoice.NATIVE_HIGH_FIDELITY

    def __init__(self, locale: Locale) -> None:
        """Build the immutable ICU index.

        Raises:
            CapabilityUnavailableError: If PyICU is missing or cannot index
                the locale
        """
        icu = get_icu(ServiceKind.INDEXING)
        try:
            self._delegate = icu.AlphabeticIndex(icu.Locale(str(locale))).buildImmutableIndex()
        except (icu.ICUError, AttributeError) as e:
            raise CapabilityUnavailableError(
                ServiceKind.INDEXING, f"ICU cannot index {locale}: {e}"
            ) from e
        self.locale = locale
        logger.debug(
            "using ICU indexing for locale %s; buckets: %d",
            locale,
            self._delegate.bucketCount,
        )

    def label_for(self, text: str) -> str:
        if not text:
            return FALLBACK_BUCKET_LABEL
        index = self._delegate.getBucketIndex(text)
        if index < 0:
            return FALLBACK_BUCKET_LABEL
        return _single_label(str(self._delegate.getBucket(index).getLabel()))


def _build(choice: CapabilityChoice, locale: Locale) -> IndexingService:
    if choice is CapabilityChoice.NATIVE_HIGH_FIDELITY:
        return IcuIndexing(locale)
    return FallbackIndexing(locale)


def indexing_for(locale: Locale | None = None) -> IndexingService:
    """Build a fresh indexing service for a locale.

    Starts at the probed tier and moves down when a backend cannot serve the
    locale. The fallback tier always succeeds.

    Args:
        locale: Locale to label for; None reads current_locale()

    Returns:
        Indexing service
    """
    target = current_locale() if locale is None else locale
    for choice in downgrade_path(probe(ServiceKind.INDEXING)):
        try:
            return _build(choice, target)
        except CapabilityUnavailableError as e:
            logger.warning("%s; trying next indexing backend", e)
    return FallbackIndexing(target)


def group_by_label(
    items: Iterable[T],
    key_of: Callable[[T], str],
    locale: Locale | None = None,
) -> dict[str, list[T]]:
    """Sort items for a locale and group them under their bucket labels.

    key_of is called once per item. Letter buckets appear in the order of
    their first sorted member; the "#" bucket comes last.

    Example:
        >>> group_by_label(["bob", "Alice", "7up"], str, Locale("en", "US"))
        {'A': ['Alice'], 'B': ['bob'], '#': ['7up']}
    """
    target = current_locale() if locale is None else locale
    keyed = sort_with_locale(((key_of(item), item) for item in items), _first, target)
    indexing = indexing_for(target)
    buckets: dict[str, list[T]] = {}
    for key, item in keyed:
        buckets.setdefault(indexing.label_for(key), []).append(item)
    if FALLBACK_BUCKET_LABEL in buckets:
        buckets[FALLBACK_BUCKET_LABEL] = buckets.pop(FALLBACK_BUCKET_LABEL)
    return buckets


def _first(pair: tuple[str, object]) -> str:
    return pair[0]
