"""
Numerical Safeguards — пороги и безопасные примитивы для NormalizedValue

Модуль собирает численные параметры гиперкуб-представления V = s^d и
примитивы, общие для ядра:
- Пороги линейного окна (d == 1) и dimensional окна (d > 1)
- Epsilon-floor для log10, чтобы ноль не давал -inf
- Валидация float (NaN/Inf запрещены в s)
- Детерминированный fixed-point рендер (round half up по точному
  двоичному значению, без экспоненциальной нотации)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. log10 никогда не вызывается от нуля (используется floor)
2. NaN/Inf никогда не попадают в s
3. Fixed-point рендер не зависит от локали и не переходит в e-нотацию
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Final, Iterable

# =============================================================================
# ПОРОГИ ПРЕДСТАВЛЕНИЯ
# =============================================================================

# Потолок линейного окна: при d == 1 значение ведёт себя как обычный float
LINEAR_CEILING: Final[float] = 1e15

# Нижняя граница fast-path выхода normalize() при d == 1
LINEAR_FLOOR: Final[float] = 1e-10

# Окно side length при d > 1: [DIMENSIONAL_FLOOR, DIMENSIONAL_CEILING)
DIMENSIONAL_FLOOR: Final[float] = 1.1
DIMENSIONAL_CEILING: Final[float] = 100.0

# Разрыв в декадах, после которого слагаемое не влияет на float (~15 значащих цифр)
PRECISION_GAP_DECADES: Final[float] = 15.0

# Верхняя граница log10(s), при которой 10**x ещё представимо в double
MAX_SIDE_LOG: Final[float] = 300.0

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Floor для totalLog: log10(0) заменяется на log10(LOG_FLOOR) = -15
LOG_FLOOR: Final[float] = 1e-15

# Floor для сравнения порядков в линейном fast-path
LINEAR_LOG_FLOOR: Final[float] = 1e-20

# Результат log-space сложения ниже этого порога схлопывается в канонический ноль
ZERO_COLLAPSE_EPS: Final[float] = 1e-18

# Точность контекста Decimal для fixed-point рендера (цифры целой части + запас)
_FIXED_PREC_BASE: Final[int] = 400

# Точность контекста Decimal для точного суммирования float
_EXACT_SUM_PREC: Final[int] = 2000


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное
    """
    return math.isfinite(value)


def validate_finite(value: float, name: str) -> None:
    """
    Валидация, что значение конечное.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Raises:
        ValueError: Если value NaN или Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a finite float (not NaN/Inf), got {value}")


def validate_dimension(value: int, name: str = "d") -> None:
    """
    Валидация измерения гиперкуба: целое число >= 1.

    Raises:
        TypeError: Если value не int (bool тоже отвергается)
        ValueError: Если value < 1
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")

    if value < 1:
        raise ValueError(f"{name} must be a positive integer, got {value}")


# =============================================================================
# ЗНАК И ЛОГАРИФМЫ
# =============================================================================


def sign(value: float) -> float:
    """
    Знак значения; ноль считается положительным.

    Examples:
        >>> sign(-3.0)
        -1.0
        >>> sign(0.0)
        1.0
    """
    return -1.0 if value < 0 else 1.0


def safe_log10(value: float, floor: float = LOG_FLOOR) -> float:
    """
    log10(|value|) с epsilon-floor вместо -inf для нуля.

    Args:
        value: Любое конечное значение
        floor: Подстановка для |value| == 0 (default: LOG_FLOOR)

    Returns:
        log10(|value|), либо log10(floor) если value == 0

    Examples:
        >>> safe_log10(1000.0)
        3.0
        >>> safe_log10(0.0)
        -15.0
        >>> safe_log10(-0.01)
        -2.0
    """
    return math.log10(abs(value) or floor)


# =============================================================================
# FIXED-POINT РЕНДЕР
# =============================================================================


def exact_decimal_sum(values: Iterable[float]) -> Decimal:
    """
    Точная сумма float значений в десятичной арифметике.

    Каждый float переводится в Decimal без потерь (точное двоичное значение),
    контекст достаточно широк, чтобы сложение не округлялось.
    """
    context = Context(prec=_EXACT_SUM_PREC)
    total = Decimal(0)
    for value in values:
        total = context.add(total, Decimal(value))
    return total


def format_fixed(value: float | Decimal, places: int) -> str:
    """
    Fixed-point рендер с ровно `places` знаками после точки.

    Округление half up по точному значению (семантика toFixed), целая часть
    выписывается полностью, экспоненциальная нотация не используется.

    Args:
        value: float или Decimal
        places: Количество знаков после точки (>= 0)

    Returns:
        Строка вида "-123.4500"; при places == 0 без точки

    Raises:
        ValueError: Если places < 0 или value не конечное

    Examples:
        >>> format_fixed(2.5, 0)
        '3'
        >>> format_fixed(1e20, 2)
        '100000000000000000000.00'
        >>> format_fixed(-0.125, 2)
        '-0.13'
    """
    if places < 0:
        raise ValueError(f"places must be non-negative, got {places}")

    exact = value if isinstance(value, Decimal) else Decimal(value)
    if not exact.is_finite():
        raise ValueError(f"value must be finite, got {value}")

    context = Context(prec=_FIXED_PREC_BASE + places, rounding=ROUND_HALF_UP)
    quantized = exact.quantize(Decimal(1).scaleb(-places), context=context)
    return format(quantized, "f")
