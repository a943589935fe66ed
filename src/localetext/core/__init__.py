"""Core utilities shared by the capability probe and the services.

This package provides the foundations every service depends on. By isolating
them here, we maintain a clean dependency graph:

    core <- capabilities <- transliteration <- indexing
                         <- ordering

Exports:
    CapabilityUnavailableError: Native backend absent or unusable
    LocaleTextError: Base exception class
    MalformedLanguageTagError: Language tag does not parse
    ProcessWide: Lazily created, lock-protected process-wide handle
    UnicodeBlock: Latin-like Unicode blocks
    block_of: Block lookup for a code point
    is_probably_latin: Latin-like block membership test

Python 3.11+.
"""

from .errors import CapabilityUnavailableError, LocaleTextError, MalformedLanguageTagError
from .process_wide import ProcessWide
from .unicode_blocks import UnicodeBlock, block_of, is_probably_latin

__all__ = [
    "CapabilityUnavailableError",
    "LocaleTextError",
    "MalformedLanguageTagError",
    "ProcessWide",
    "UnicodeBlock",
    "block_of",
    "is_probably_latin",
]
