"""Unicode block lookup for the Latin-detection heuristic.

The standard library exposes scripts only indirectly (through character
names) and has no block table, so the blocks that the fallback indexing
heuristic needs are listed here with their code point ranges from the
Unicode Character Database (Blocks.txt). Lookup is a bisect over block
start points.

Python 3.11+.
"""

from __future__ import annotations

from bisect import bisect_right
from enum import StrEnum

__all__ = [
    "LATIN_LIKE_BLOCKS",
    "UnicodeBlock",
    "block_of",
    "is_probably_latin",
]


class UnicodeBlock(StrEnum):
    """Unicode blocks whose characters plausibly reduce to a Latin letter."""

    BASIC_LATIN = "Basic Latin"
    LATIN_1_SUPPLEMENT = "Latin-1 Supplement"
    LATIN_EXTENDED_A = "Latin Extended-A"
    LATIN_EXTENDED_B = "Latin Extended-B"
    IPA_EXTENSIONS = "IPA Extensions"
    SPACING_MODIFIER_LETTERS = "Spacing Modifier Letters"
    PHONETIC_EXTENSIONS = "Phonetic Extensions"
    LATIN_EXTENDED_ADDITIONAL = "Latin Extended Additional"
    SUPERSCRIPTS_AND_SUBSCRIPTS = "Superscripts and Subscripts"
    NUMBER_FORMS = "Number Forms"
    ALPHABETIC_PRESENTATION_FORMS = "Alphabetic Presentation Forms"
    HALFWIDTH_AND_FULLWIDTH_FORMS = "Halfwidth and Fullwidth Forms"


# (first, last, block), sorted by first code point, non-overlapping.
_BLOCK_RANGES: tuple[tuple[int, int, UnicodeBlock], ...] = (
    (0x0000, 0x007F, UnicodeBlock.BASIC_LATIN),
    (0x0080, 0x00FF, UnicodeBlock.LATIN_1_SUPPLEMENT),
    (0x0100, 0x017F, UnicodeBlock.LATIN_EXTENDED_A),
    (0x0180, 0x024F, UnicodeBlock.LATIN_EXTENDED_B),
    (0x0250, 0x02AF, UnicodeBlock.IPA_EXTENSIONS),
    (0x02B0, 0x02FF, UnicodeBlock.SPACING_MODIFIER_LETTERS),
    (0x1D00, 0x1D7F, UnicodeBlock.PHONETIC_EXTENSIONS),
    (0x1E00, 0x1EFF, UnicodeBlock.LATIN_EXTENDED_ADDITIONAL),
    (0x2070, 0x209F, UnicodeBlock.SUPERSCRIPTS_AND_SUBSCRIPTS),
    (0x2150, 0x218F, UnicodeBlock.NUMBER_FORMS),
    (0xFB00, 0xFB4F, UnicodeBlock.ALPHABETIC_PRESENTATION_FORMS),
    (0xFF00, 0xFFEF, UnicodeBlock.HALFWIDTH_AND_FULLWIDTH_FORMS),
)

_BLOCK_STARTS: tuple[int, ...] = tuple(first for first, _, _ in _BLOCK_RANGES)

LATIN_LIKE_BLOCKS: frozenset[UnicodeBlock] = frozenset(UnicodeBlock)


def block_of(code_point: int) -> UnicodeBlock | None:
    """Return the block containing a code point, if it is one of the known blocks.

    Args:
        code_point: Unicode scalar value

    Returns:
        The block, or None for code points outside every known block

    Example:
        >>> block_of(ord("é"))
        <UnicodeBlock.LATIN_1_SUPPLEMENT: 'Latin-1 Supplement'>
        >>> block_of(ord("Ж")) is None
        True
    """
    position = bisect_right(_BLOCK_STARTS, code_point) - 1
    if position < 0:
        return None
    first, last, block = _BLOCK_RANGES[position]
    if first <= code_point <= last:
        return block
    return None


def is_probably_latin(code_point: int) -> bool:
    """Check whether a code point lies in a block that reduces to Latin letters."""
    return block_of(code_point) in LATIN_LIKE_BLOCKS
