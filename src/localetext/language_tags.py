"""Locale <-> BCP-47 language tag conversion.

Two implementations behind one protocol:
    - BabelLanguageTags (native basic): Babel's locale identifier parser
    - FallbackLanguageTags: a regular expression covering
      language[-Script][-REGION]

Conversion from Locale to tag is total. Conversion from tag to Locale is
partial: malformed tags give None rather than an exception.

The selected implementation is process-wide and created on first use.

Python 3.11+.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from localetext.capabilities import probe
from localetext.constants import UNDETERMINED_LANGUAGE
from localetext.core.errors import MalformedLanguageTagError
from localetext.core.process_wide import ProcessWide
from localetext.enums import CapabilityChoice, ServiceKind
from localetext.locale_utils import Locale

__all__ = [
    "BabelLanguageTags",
    "FallbackLanguageTags",
    "LanguageTags",
    "choose_language_tags",
    "language_tag_of",
    "language_tags",
    "locale_for",
    "reset_language_tags",
]

logger = logging.getLogger(__name__)


class LanguageTags(Protocol):
    """Conversion between Locale values and BCP-47 language tags."""

    choice: CapabilityChoice

    def language_tag_of(self, locale: Locale) -> str:
        """Canonical tag for a locale ("und" when the language is empty)."""
        ...  # pylint: disable=unnecessary-ellipsis

    def locale_for(self, language_tag: str) -> Locale | None:
        """Locale for a tag, or None when the tag is malformed."""
        ...  # pylint: disable=unnecessary-ellipsis


def _tag_parts(locale: Locale) -> tuple[str, str | None, str | None]:
    language = locale.language or UNDETERMINED_LANGUAGE
    return language, locale.script, locale.region


def _from_parts(language: str, region: str | None, script: str | None) -> Locale:
    if language.lower() == UNDETERMINED_LANGUAGE:
        language = ""
    return Locale(language, region, script)


class BabelLanguageTags:
    """Language tags backed by Babel's identifier parser."""

    choice = CapabilityChoice.NATIVE_BASIC

    def __init__(self) -> None:
        # Lazy import keeps the fallback usable when Babel is forced off
        from babel.core import get_locale_identifier, parse_locale  # noqa: PLC0415

        self._parse = parse_locale
        self._identifier = get_locale_identifier
        logger.debug("using Babel language tag support")

    def language_tag_of(self, locale: Locale) -> str:
        language, script, region = _tag_parts(locale)
        return self._identifier((language, region, script, None), sep="-")

    def _parse_or_raise(self, language_tag: str) -> Locale:
        # Babel parses POSIX forms and silently drops .encoding and @modifier
        if not language_tag or any(char in language_tag for char in "_.@"):
            raise MalformedLanguageTagError(language_tag)
        try:
            language, region, script, *_ = self._parse(language_tag, sep="-")
        except ValueError as e:
            raise MalformedLanguageTagError(language_tag) from e
        # Babel accepts any alphabetic language; BCP-47 wants 2-8 ASCII letters
        if not (2 <= len(language) <= 8 and language.isascii()):
            raise MalformedLanguageTagError(language_tag)
        return _from_parts(language, region, script)

    def locale_for(self, language_tag: str) -> Locale | None:
        try:
            return self._parse_or_raise(language_tag)
        except MalformedLanguageTagError as e:
            logger.debug("%s", e)
            return None


class FallbackLanguageTags:
    """Language tags for language[-Script][-REGION] without any dependency."""

    choice = CapabilityChoice.FALLBACK

    LANGUAGE_TAG = re.compile(r"([a-zA-Z]{2,8})(?:-([a-zA-Z]{4}))?(?:-([a-zA-Z]{2}|[0-9]{3}))?")

    def __init__(self) -> None:
        logger.debug("using fallback language tag support")

    def language_tag_of(self, locale: Locale) -> str:
        return "-".join(part for part in _tag_parts(locale) if part)

    def locale_for(self, language_tag: str) -> Locale | None:
        match = self.LANGUAGE_TAG.fullmatch(language_tag)
        if match is None:
            logger.debug("%s", MalformedLanguageTagError(language_tag))
            return None
        language, script, region = match.groups()
        return _from_parts(language, region, script)


def choose_language_tags() -> LanguageTags:
    """Build the language tag implementation selected by the capability probe."""
    if probe(ServiceKind.LANGUAGE_TAGS) is CapabilityChoice.NATIVE_BASIC:
        return BabelLanguageTags()
    return FallbackLanguageTags()


_language_tags: ProcessWide[LanguageTags] = ProcessWide("language tags", choose_language_tags)


def language_tags() -> LanguageTags:
    """Process-wide language tag implementation (created on first use)."""
    return _language_tags.get()


def reset_language_tags() -> None:
    """Drop the process-wide implementation so the next use re-probes."""
    _language_tags.reset()


def language_tag_of(locale: Locale) -> str:
    """BCP-47 tag for a locale.

    Example:
        >>> language_tag_of(Locale("en", "US"))
        'en-US'
    """
    return language_tags().language_tag_of(locale)


def locale_for(language_tag: str) -> Locale | None:
    """Locale for a BCP-47 tag, or None when the tag is malformed.

    Example:
        >>> locale_for("pt-BR")
        Locale(language='pt', region='BR', script=None)
        >>> locale_for("not a tag") is None
        True
    """
    return language_tags().locale_for(language_tag)
