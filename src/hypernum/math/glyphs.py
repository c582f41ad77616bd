"""
Glyphs — таблицы цифр для styled string

Styled string кодирует значение одной строкой:
- subscript цифры  -> измерение d
- обычные цифры    -> целая часть side length
- superscript цифры -> дробная часть side length

Таблицы фиксированные и исчерпывающие; всё, что не является цифрой одной из
трёх таблиц (или ведущим '-'), классифицируется как UNRECOGNIZED.
"""

from enum import Enum
from typing import Final

# =============================================================================
# ТАБЛИЦЫ
# =============================================================================

SUBSCRIPT_DIGITS: Final[str] = "₀₁₂₃₄₅₆₇₈₉"
SUPERSCRIPT_DIGITS: Final[str] = "⁰¹²³⁴⁵⁶⁷⁸⁹"
PLAIN_DIGITS: Final[str] = "0123456789"

_TO_SUBSCRIPT: Final = str.maketrans(PLAIN_DIGITS, SUBSCRIPT_DIGITS)
_TO_SUPERSCRIPT: Final = str.maketrans(PLAIN_DIGITS, SUPERSCRIPT_DIGITS)
_FROM_SUBSCRIPT: Final[dict[str, str]] = dict(zip(SUBSCRIPT_DIGITS, PLAIN_DIGITS))
_FROM_SUPERSCRIPT: Final[dict[str, str]] = dict(zip(SUPERSCRIPT_DIGITS, PLAIN_DIGITS))


class GlyphKind(str, Enum):
    """Класс символа styled string"""

    DIMENSION = "dimension"
    FRACTION = "fraction"
    LITERAL = "literal"
    UNRECOGNIZED = "unrecognized"


# =============================================================================
# КОДИРОВАНИЕ
# =============================================================================


def to_subscript(digits: str) -> str:
    """'12' -> '₁₂'"""
    return digits.translate(_TO_SUBSCRIPT)


def to_superscript(digits: str) -> str:
    """'05' -> '⁰⁵'"""
    return digits.translate(_TO_SUPERSCRIPT)


def classify(char: str) -> tuple[GlyphKind, str]:
    """
    Классификация одного символа styled string.

    Returns:
        (kind, plain): plain — ASCII эквивалент для цифр, сам символ для
        литералов и пустая строка для нераспознанных

    Examples:
        >>> classify("₃")
        (<GlyphKind.DIMENSION: 'dimension'>, '3')
        >>> classify("⁷")
        (<GlyphKind.FRACTION: 'fraction'>, '7')
        >>> classify("-")
        (<GlyphKind.LITERAL: 'literal'>, '-')
    """
    if char in _FROM_SUBSCRIPT:
        return GlyphKind.DIMENSION, _FROM_SUBSCRIPT[char]
    if char in _FROM_SUPERSCRIPT:
        return GlyphKind.FRACTION, _FROM_SUPERSCRIPT[char]
    if char in PLAIN_DIGITS or char == "-":
        return GlyphKind.LITERAL, char
    return GlyphKind.UNRECOGNIZED, ""
