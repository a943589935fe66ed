"""Ordering service: locale collation and stable bulk sort.

Backends:
    - IcuOrdering (native high fidelity): PyICU Collator sort keys
    - FallbackOrdering: multi-level key over case- and accent-folded text

Both expose the same contract:
    - compare(a, b) -> -1 | 0 | 1, a total order for the instance lifetime
    - collation_key(s) -> CollationKey, opaque and only comparable with keys
      from the same instance
    - sort_by(items, key_of) -> list, stable, key_of called once per item

sort_by computes one raw collation key per item, sorts item positions by key
only, and projects the items back in that order. Computing a collation key is
far more expensive than comparing two keys, so this is O(n) key computations
plus O(n log n) cheap comparisons.

Instances are built per sort/batch by ordering_for(). Collators are not
assumed thread-safe and the active locale may change between batches, so no
instance is cached or shared.

Python 3.11+.
"""

from __future__ import annotations

import functools
import logging
import unicodedata
from collections.abc import Callable, Iterable
from typing import Any, Protocol, TypeVar

from localetext.capabilities import probe
from localetext.core.backend_compat import get_icu
from localetext.core.errors import CapabilityUnavailableError
from localetext.enums import CapabilityChoice, ServiceKind
from localetext.locale_utils import Locale, current_locale

__all__ = [
    "CollationKey",
    "FallbackOrdering",
    "IcuOrdering",
    "OrderingService",
    "locale_sort_key",
    "ordering_for",
    "sort_with_current_locale",
    "sort_with_locale",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


@functools.total_ordering
class CollationKey:
    """Opaque, ordered token for one string under one ordering instance.

    Keys compare and hash by their raw key. Ordering keys produced by two
    different ordering instances raises TypeError; such keys are never equal.
    """

    __slots__ = ("_owner", "_raw", "source")

    def __init__(self, source: str, raw: Any, owner: object) -> None:
        self.source = source
        self._raw = raw
        self._owner = owner

    def _raw_of(self, other: object) -> Any:
        if not isinstance(other, CollationKey):
            return NotImplemented
        if other._owner is not self._owner:
            msg = "Cannot compare collation keys from different ordering instances"
            raise TypeError(msg)
        return other._raw

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CollationKey):
            return NotImplemented
        return other._owner is self._owner and bool(self._raw == other._raw)

    def __lt__(self, other: object) -> bool:
        raw = self._raw_of(other)
        if raw is NotImplemented:
            return NotImplemented
        return bool(self._raw < raw)

    def __hash__(self) -> int:
        return hash((id(self._owner), self._raw))

    def __repr__(self) -> str:
        return f"CollationKey({self.source!r})"


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class _OrderingBase:
    """Shared compare/sort machinery over a raw key function."""

    choice: CapabilityChoice
    locale: Locale

    def _raw_key(self, text: str) -> Any:
        raise NotImplementedError

    def compare(self, a: str, b: str) -> int:
        """Compare two strings: -1, 0 or 1."""
        key_a, key_b = self._raw_key(a), self._raw_key(b)
        return (key_a > key_b) - (key_a < key_b)

    def collation_key(self, text: str) -> CollationKey:
        """Opaque key for a string, comparable with keys from this instance."""
        return CollationKey(text, self._raw_key(text), self)

    def sort_by(self, items: Iterable[T], key_of: Callable[[T], str]) -> list[T]:
        """Stable sort of items by the collation order of key_of(item).

        key_of is called exactly once per item.
        """
        values = list(items)
        keys = [self._raw_key(key_of(item)) for item in values]
        order = sorted(range(len(values)), key=keys.__getitem__)
        return [values[index] for index in order]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(locale={self.locale!s}, choice={self.choice})"


class OrderingService(Protocol):
    """Locale-bound collation for one sort or batch."""

    choice: CapabilityChoice
    locale: Locale

    def compare(self, a: str, b: str) -> int:
        """Compare two strings: -1, 0 or 1."""
        ...  # pylint: disable=unnecessary-ellipsis

    def collation_key(self, text: str) -> CollationKey:
        """Opaque key for a string."""
        ...  # pylint: disable=unnecessary-ellipsis

    def sort_by(self, items: Iterable[T], key_of: Callable[[T], str]) -> list[T]:
        """Stable sort by collation order of key_of(item)."""
        ...  # pylint: disable=unnecessary-ellipsis


class IcuOrdering(_OrderingBase):
    """ICU collator for a locale."""

    choice = CapabilityChoice.NATIVE_HIGH_FIDELITY

    def __init__(self, locale: Locale) -> None:
        """Build an ICU collator.

        Raises:
            CapabilityUnavailableError: If PyICU is missing or cannot build a
                collator for the locale
        """
        icu = get_icu(ServiceKind.ORDERING)
        try:
            self._collator = icu.Collator.createInstance(icu.Locale(str(locale)))
        except icu.ICUError as e:
            raise CapabilityUnavailableError(
                ServiceKind.ORDERING, f"ICU cannot collate {locale}: {e}"
            ) from e
        self.locale = locale

    def _raw_key(self, text: str) -> bytes:
        return bytes(self._collator.getSortKey(text))

    def compare(self, a: str, b: str) -> int:
        return _sign(self._collator.compare(a, b))


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


class FallbackOrdering(_OrderingBase):
    """Locale-independent collation without ICU.

    Strings compare by, in turn: text with accents and case removed, text
    with case removed, case (lowercase first), and finally raw code points.
    Accents and case only break ties between otherwise equal strings, and
    the last level makes the order total.

    Example:
        >>> ordering = FallbackOrdering(Locale("en"))
        >>> ordering.sort_by(["b", "Á", "a", "B"], str)
        ['a', 'Á', 'b', 'B']
    """

    choice = CapabilityChoice.FALLBACK

    def __init__(self, locale: Locale) -> None:
        self.locale = locale

    def _raw_key(self, text: str) -> tuple[str, str, str, str]:
        decomposed = unicodedata.normalize("NFKD", text)
        return (_fold(text), decomposed.casefold(), decomposed.swapcase(), text)


def _build(choice: CapabilityChoice, locale: Locale) -> OrderingService:
    if choice is CapabilityChoice.NATIVE_HIGH_FIDELITY:
        try:
            return IcuOrdering(locale)
        except CapabilityUnavailableError as e:
            logger.warning("%s; using fallback ordering", e)
    return FallbackOrdering(locale)


def ordering_for(locale: Locale | None = None) -> OrderingService:
    """Build a fresh ordering service for a locale.

    Args:
        locale: Locale to collate for; None reads current_locale()

    Returns:
        Ordering service (never fails; falls back to FallbackOrdering)
    """
    target = current_locale() if locale is None else locale
    return _build(probe(ServiceKind.ORDERING), target)


def sort_with_locale(
    items: Iterable[T],
    key_of: Callable[[T], str],
    locale: Locale | None = None,
) -> list[T]:
    """Stable locale-aware sort of items by key_of(item).

    Example:
        >>> sort_with_locale([("b", 1), ("a", 2), ("a", 3)], lambda pair: pair[0])
        [('a', 2), ('a', 3), ('b', 1)]
    """
    return ordering_for(locale).sort_by(items, key_of)


def sort_with_current_locale(items: Iterable[T], key_of: Callable[[T], str]) -> list[T]:
    """Stable sort of items by key_of(item) under current_locale()."""
    return sort_with_locale(items, key_of, current_locale())


def locale_sort_key(locale: Locale | None = None) -> Callable[[str], CollationKey]:
    """Key function for sorted()/list.sort() bound to one fresh ordering instance.

    Example:
        >>> sorted(["b", "a"], key=locale_sort_key(Locale("en", "US")))
        ['a', 'b']
    """
    return ordering_for(locale).collation_key
