"""Transliteration service: reduce text to a Latin/ASCII approximation.

The default recipe is the ICU compound transform

    Any-Latin; Latin-ASCII; Lower; [^\\ 0-9a-z] Remove

Backends:
    - IcuTransliteration (native high fidelity): PyICU runs the compound id
    - CompoundTransliteration with Unidecode (native basic): the id is
      interpreted step by step, romanization steps use unidecode
    - CompoundTransliteration with static tables (fallback): same
      interpreter, romanization from Cyrillic/Greek/Latin tables plus
      NFKD mark stripping

Every backend performs a real reduction; none is the identity for the
default recipe.

The default-recipe service is process-wide and created once on first use
(or by preload_transliterator()). A caller-supplied id always builds a fresh
service. Recipe selection is fixed at construction.

Thread Safety:
    Compound transliteration is a pure function of its input. The ICU
    transliterator is not assumed thread-safe and is serialized by a lock.

Python 3.11+.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from collections.abc import Callable
from threading import Lock
from typing import Protocol

from localetext.capabilities import downgrade_path, probe
from localetext.constants import DEFAULT_TRANSLITERATION_ID
from localetext.core.backend_compat import get_icu, get_unidecode
from localetext.core.errors import CapabilityUnavailableError
from localetext.core.process_wide import ProcessWide
from localetext.enums import CapabilityChoice, ServiceKind

__all__ = [
    "DEFAULT_TRANSLITERATION_ID",
    "CompoundTransliteration",
    "IcuTransliteration",
    "Romanizer",
    "TransliterationService",
    "choose_implementation",
    "fallback_romanizer",
    "preload_transliterator",
    "reset_transliteration",
    "transliteration",
    "unidecode_romanizer",
]

logger = logging.getLogger(__name__)

Step = Callable[[str], str]


class TransliterationService(Protocol):
    """Total text transform selected once at construction."""

    choice: CapabilityChoice
    transform_id: str

    def transliterate(self, text: str) -> str:
        """Apply the transform; never raises for any string."""
        ...  # pylint: disable=unnecessary-ellipsis


class IcuTransliteration:
    """PyICU compound transliterator."""

    choice = CapabilityChoice.NATIVE_HIGH_FIDELITY

    def __init__(self, transform_id: str = DEFAULT_TRANSLITERATION_ID) -> None:
        """Build the ICU transliterator for a transform id.

        Raises:
            CapabilityUnavailableError: If PyICU is missing or rejects the id
        """
        icu = get_icu(ServiceKind.TRANSLITERATION)
        try:
            self._delegate = icu.Transliterator.createInstance(transform_id)
        except icu.ICUError as e:
            raise CapabilityUnavailableError(
                ServiceKind.TRANSLITERATION, f"ICU rejected transform {transform_id!r}: {e}"
            ) from e
        self.transform_id = transform_id
        self._lock = Lock()
        logger.debug("using ICU transliteration %r", transform_id)

    def transliterate(self, text: str) -> str:
        with self._lock:
            return str(self._delegate.transliterate(text))


# ============================================================================
# ROMANIZERS
# ============================================================================


class Romanizer(Protocol):
    """Implementation of the two romanization steps of a compound id."""

    def any_latin(self, text: str) -> str:
        """Other scripts to Latin (Latin text unchanged)."""
        ...  # pylint: disable=unnecessary-ellipsis

    def latin_ascii(self, text: str) -> str:
        """Latin decorations to plain ASCII (other scripts unchanged)."""
        ...  # pylint: disable=unnecessary-ellipsis


_CYRILLIC: dict[str, str] = {
    "А": "A", "Б": "B", "В": "V", "Г": "G", "Ґ": "G", "Д": "D", "Е": "E", "Ё": "E",
    "Є": "Ye", "Ж": "Zh", "З": "Z", "И": "I", "І": "I", "Ї": "Yi", "Й": "I",
    "К": "K", "Л": "L", "М": "M", "Н": "N", "О": "O", "П": "P", "Р": "R", "С": "S",
    "Т": "T", "У": "U", "Ў": "U", "Ф": "F", "Х": "Kh", "Ц": "Ts", "Ч": "Ch",
    "Ш": "Sh", "Щ": "Shch", "Ъ": "", "Ы": "Y", "Ь": "", "Э": "E", "Ю": "Yu",
    "Я": "Ya", "Ђ": "Dj", "Ј": "J", "Љ": "Lj", "Њ": "Nj", "Ћ": "C", "Џ": "Dz",
}  # fmt: skip

_GREEK: dict[str, str] = {
    "Α": "A", "Β": "V", "Γ": "G", "Δ": "D", "Ε": "E", "Ζ": "Z", "Η": "I",
    "Θ": "Th", "Ι": "I", "Κ": "K", "Λ": "L", "Μ": "M", "Ν": "N", "Ξ": "X",
    "Ο": "O", "Π": "P", "Ρ": "R", "Σ": "S", "Τ": "T", "Υ": "Y", "Φ": "F",
    "Χ": "Ch", "Ψ": "Ps", "Ω": "O",
}  # fmt: skip

# Latin letters with no canonical decomposition to an ASCII base.
_LATIN_SPECIAL: dict[str, str] = {
    "ß": "ss", "ẞ": "SS", "æ": "ae", "Æ": "AE", "œ": "oe", "Œ": "OE",
    "ø": "o", "Ø": "O", "đ": "d", "Đ": "D", "ð": "d", "Ð": "D",
    "þ": "th", "Þ": "TH", "ł": "l", "Ł": "L", "ŀ": "l", "Ŀ": "L",
    "ħ": "h", "Ħ": "H", "ı": "i", "ĸ": "q", "ŋ": "n", "Ŋ": "N",
    "ŧ": "t", "Ŧ": "T", "ƒ": "f", "ſ": "s", "ŉ": "'n", "ɐ": "a",
    "ɑ": "a", "ɒ": "a", "ɓ": "b", "ɔ": "o", "ɗ": "d", "ə": "e",
    "ɛ": "e", "ɠ": "g", "ɡ": "g", "ɨ": "i", "ɪ": "i", "ɲ": "n",
    "ɵ": "o", "ʀ": "r", "ʃ": "sh", "ʉ": "u", "ʊ": "u", "ʋ": "v",
    "ʏ": "y", "ʒ": "zh", "ʙ": "b", "ʜ": "h", "ʟ": "l", "ɢ": "g",
    "ᴀ": "a", "ᴄ": "c", "ᴅ": "d", "ᴇ": "e", "ᴊ": "j", "ᴋ": "k",
    "ᴍ": "m", "ᴏ": "o", "ᴘ": "p", "ᴛ": "t", "ᴜ": "u", "ᴠ": "v",
    "ᴡ": "w", "ᴢ": "z",
}  # fmt: skip


def _with_lowercase(table: dict[str, str]) -> dict[str, str]:
    merged = dict(table)
    merged.update({upper.lower(): latin.lower() for upper, latin in table.items()})
    return merged


_SCRIPT_TABLE: dict[str, str] = {**_with_lowercase(_CYRILLIC), **_with_lowercase(_GREEK)}
_SCRIPT_TABLE["ς"] = "s"


class _TableRomanizer:
    """Static-table romanization (no dependencies)."""

    def any_latin(self, text: str) -> str:
        output: list[str] = []
        for char in text:
            mapped = _SCRIPT_TABLE.get(char)
            if mapped is None:
                # Accented Greek/Cyrillic: map the base letter, keep the marks
                decomposed = unicodedata.normalize("NFD", char)
                base = _SCRIPT_TABLE.get(decomposed[0])
                mapped = char if base is None else base + decomposed[1:]
            output.append(mapped)
        return "".join(output)

    def latin_ascii(self, text: str) -> str:
        output: list[str] = []
        for char in text:
            if char.isascii():
                output.append(char)
                continue
            special = _LATIN_SPECIAL.get(char)
            if special is not None:
                output.append(special)
                continue
            decomposed = unicodedata.normalize("NFKD", char)
            base = "".join(c for c in decomposed if not unicodedata.combining(c))
            if not base:
                continue
            output.append(base if base.isascii() else char)
        return "".join(output)


class _UnidecodeRomanizer:
    """Romanization through unidecode (one call covers both steps)."""

    def __init__(self) -> None:
        self._unidecode = get_unidecode(ServiceKind.TRANSLITERATION)

    def any_latin(self, text: str) -> str:
        return self._unidecode(text)

    def latin_ascii(self, text: str) -> str:
        return self._unidecode(text)


def fallback_romanizer() -> Romanizer:
    """Dependency-free romanizer."""
    return _TableRomanizer()


def unidecode_romanizer() -> Romanizer:
    """Unidecode-backed romanizer.

    Raises:
        CapabilityUnavailableError: If Unidecode is not installed
    """
    return _UnidecodeRomanizer()


# ============================================================================
# COMPOUND ID INTERPRETER
# ============================================================================

_REMOVE_STEP = re.compile(r"(\[.*\])\s*remove", re.IGNORECASE)

_NORMALIZATION_FORMS = ("NFC", "NFD", "NFKC", "NFKD")


def _normalizer(form: str) -> Step:
    def normalize(text: str) -> str:
        return unicodedata.normalize(form, text)  # type: ignore[arg-type]

    return normalize


def _identity(text: str) -> str:
    return text


def _remover(char_class: str) -> Step | None:
    # ICU property sets ([:Latin:], \p{L}) have no re equivalent
    if "[:" in char_class or "\\p" in char_class or "\\P" in char_class:
        return None
    try:
        pattern = re.compile(char_class)
    except re.error:
        return None

    def remove(text: str) -> str:
        return pattern.sub("", text)

    return remove


def _compile_step(step: str, romanizer: Romanizer) -> Step | None:
    name = step.lower()
    if name.startswith("any-") and name not in ("any-latin",):
        name = name[4:]
    if name == "any-latin":
        return romanizer.any_latin
    if name == "latin-ascii":
        return romanizer.latin_ascii
    if name == "lower":
        return str.lower
    if name == "upper":
        return str.upper
    if name == "null":
        return _identity
    if name.upper() in _NORMALIZATION_FORMS:
        return _normalizer(name.upper())
    remove = _REMOVE_STEP.fullmatch(step)
    if remove is not None:
        return _remover(remove.group(1))
    return None


class CompoundTransliteration:
    """Step-by-step interpreter for ICU-style compound transform ids.

    Supported steps: Any-Latin, Latin-ASCII, Lower/Any-Lower,
    Upper/Any-Upper, NFC/NFD/NFKC/NFKD, Null/Any-Null and "[set] Remove"
    with a regular-expression character class. Unsupported steps are logged
    and skipped.

    Example:
        >>> service = CompoundTransliteration(
        ...     DEFAULT_TRANSLITERATION_ID, fallback_romanizer(), CapabilityChoice.FALLBACK
        ... )
        >>> service.transliterate("Zoë Łukasz")
        'zoe lukasz'
    """

    def __init__(
        self,
        transform_id: str,
        romanizer: Romanizer,
        choice: CapabilityChoice,
    ) -> None:
        self.transform_id = transform_id
        self.choice = choice
        steps: list[Step] = []
        for raw in transform_id.split(";"):
            step = raw.strip()
            if not step:
                continue
            compiled = _compile_step(step, romanizer)
            if compiled is None:
                logger.warning("Skipping unsupported transform step %r in %r", step, transform_id)
                continue
            steps.append(compiled)
        self._steps: tuple[Step, ...] = tuple(steps)
        logger.debug("using %s transliteration %r", choice, transform_id)

    def transliterate(self, text: str) -> str:
        for step in self._steps:
            text = step(text)
        return text


# ============================================================================
# SELECTION
# ============================================================================


def _build(choice: CapabilityChoice, transform_id: str) -> TransliterationService:
    if choice is CapabilityChoice.NATIVE_HIGH_FIDELITY:
        return IcuTransliteration(transform_id)
    if choice is CapabilityChoice.NATIVE_BASIC:
        return CompoundTransliteration(transform_id, unidecode_romanizer(), choice)
    return CompoundTransliteration(transform_id, fallback_romanizer(), choice)


def choose_implementation(transform_id: str = DEFAULT_TRANSLITERATION_ID) -> TransliterationService:
    """Build the best available transliteration service for a transform id.

    Starts at the probed tier and moves down when a backend cannot be built
    (e.g., ICU rejects the id). The fallback tier always succeeds.

    Args:
        transform_id: ICU-style compound transform id

    Returns:
        Transliteration service
    """
    for choice in downgrade_path(probe(ServiceKind.TRANSLITERATION)):
        try:
            return _build(choice, transform_id)
        except CapabilityUnavailableError as e:
            logger.warning("%s; trying next transliteration backend", e)
    # downgrade_path always ends with FALLBACK, which cannot fail
    return _build(CapabilityChoice.FALLBACK, transform_id)


_default_transliteration: ProcessWide[TransliterationService] = ProcessWide(
    "transliteration", choose_implementation
)


def transliteration(transform_id: str | None = None) -> TransliterationService:
    """Get a transliteration service.

    Args:
        transform_id: None for the process-wide default-recipe service, or a
            compound id for a freshly built service

    Returns:
        Transliteration service
    """
    if transform_id is None:
        return _default_transliteration.get()
    return choose_implementation(transform_id)


def preload_transliterator() -> TransliterationService:
    """Create the process-wide default service now instead of on first use."""
    return _default_transliteration.get()


def reset_transliteration() -> None:
    """Drop the process-wide default service; the next use re-probes."""
    _default_transliteration.reset()
