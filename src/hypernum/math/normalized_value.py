"""
NormalizedValue — скалярное число как объём гиперкуба V = s^d

Модуль реализует значение, покрывающее диапазон от долей единицы до порядков
далеко за пределами double, не теряя микро-поправок:
- s (side length) держится в читаемом окне, знак s = знак значения
- d (dimension) поглощает порядок величины
- total_log = d * log10(|s|) — O(1) сравнение масштабов
- Слагаемые, слишком малые относительно значения (> 15 декад), уходят в
  ResidualLedger и возвращаются при продвижении, collapse() или точном рендере

ОКНА ПРЕДСТАВЛЕНИЯ:
    d == 1:  |s| < 1e15, арифметика бит-в-бит совпадает с float (fast path)
    d >  1:  |s| ∈ [1.1, 100)
    ноль:    s == 0, d == 1 (канонический)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все сложения проходят через единственный примитив _internal_add
2. normalize() идемпотентен; измерение меняется только лестницей normalize()
   или продвижением ledger
3. Операнды add/sub/get_distance никогда не мутируются
4. add/sub/mul/div/collapse мутируют receiver и возвращают его
"""

import math
from typing import Final, Union

from pydantic import ValidationError

from src.hypernum.domain.snapshot import NormalizedValueSnapshot
from src.hypernum.logging_utils import get_logger
from src.hypernum.math.glyphs import (
    SUBSCRIPT_DIGITS,
    SUPERSCRIPT_DIGITS,
    GlyphKind,
    classify,
    to_subscript,
    to_superscript,
)
from src.hypernum.math.numerical_safeguards import (
    DIMENSIONAL_CEILING,
    DIMENSIONAL_FLOOR,
    LINEAR_CEILING,
    LINEAR_FLOOR,
    LINEAR_LOG_FLOOR,
    MAX_SIDE_LOG,
    PRECISION_GAP_DECADES,
    ZERO_COLLAPSE_EPS,
    exact_decimal_sum,
    format_fixed,
    safe_log10,
    sign,
    validate_dimension,
    validate_finite,
)
from src.hypernum.math.residual_ledger import ResidualLedger

logger = get_logger("hypernum.value")

# =============================================================================
# ПАРАМЕТРЫ ФАБРИК И РЕНДЕРА
# =============================================================================

# from_log: total_log на этом уровне и ниже даёт канонический ноль
FROM_LOG_ZERO_LOG: Final[float] = -15.0

# get_distance: разница total_log меньше порога, значения неразличимы
DISTANCE_IDENTITY_EPS: Final[float] = 1e-15

# to_scientific: значения с total_log ниже порога рендерятся как ноль
SCIENTIFIC_ZERO_LOG: Final[float] = -10.0
SCIENTIFIC_ZERO: Final[str] = "0.00e+0"

# to_full_string: выше этого total_log переход на to_scientific
FULL_STRING_MAX_LOG: Final[float] = 100.0

Numeric = Union[int, float]


# =============================================================================
# EXCEPTIONS
# =============================================================================


class DimensionalDomainViolation(ArithmeticError):
    """
    Операция вне области определения для вещественных чисел.

    Возникает при sqrt() отрицательного значения и при нецелой степени
    отрицательного значения. Внутреннее состояние не изменяется.
    """

    pass


class ValueDecodeError(ValueError):
    """
    Невалидный вход при декодировании.

    Сериализованный снимок, styled string или числовая строка from_any(),
    которые не удаётся разобрать. Молчаливой подстановки нуля нет.
    """

    pass


# =============================================================================
# NORMALIZED VALUE
# =============================================================================


class NormalizedValue:
    """
    Dimensional number: значение V = s^d с ledger суб-точностных остатков.

    Мутирующие операции (add, sub, mul, div, collapse) изменяют receiver и
    возвращают его для chaining. pow, sqrt, get_distance и фабрики
    возвращают новые экземпляры.

    Attributes:
        s: Side length (float, знак = знак значения)
        d: Измерение (int >= 1)

    Examples:
        >>> NormalizedValue(150)
        NormalizedValue(s=150.0, d=1)
        >>> NormalizedValue.from_any(2e15).d > 1
        True
    """

    def __init__(self, s: Numeric = 0.0, d: int = 1) -> None:
        """
        Args:
            s: Side length (конечное число)
            d: Измерение (целое >= 1)

        Raises:
            TypeError: Если s не число (bool тоже отвергается) или d не int
            ValueError: Если s NaN/Inf или d < 1
        """
        if isinstance(s, bool) or not isinstance(s, (int, float)):
            raise TypeError(f"s must be int or float, got {type(s).__name__}")
        validate_dimension(d)

        s = float(s)
        validate_finite(s, "s")

        self.s: float = s
        self.d: int = d
        self._ledger = ResidualLedger()
        self._normalize()

    def __repr__(self) -> str:
        return f"NormalizedValue(s={self.s!r}, d={self.d})"

    def __str__(self) -> str:
        return self.to_string()

    @property
    def total_log(self) -> float:
        """d * log10(|s|); ноль даёт d * log10(1e-15)."""
        return self.d * safe_log10(self.s)

    # -------------------------------------------------------------------------
    # Нормализация
    # -------------------------------------------------------------------------

    def _tier_ceiling(self) -> float:
        return LINEAR_CEILING if self.d == 1 else DIMENSIONAL_CEILING

    def _set_zero(self) -> None:
        self.s = 0.0
        self.d = 1

    def _normalize(self) -> None:
        """
        Восстановление инварианта представления после изменения s/d.

        Лестница измерений: пока |s| не ниже потолка яруса — d растёт, пока
        |s| < 1.1 при d > 1 — d убывает; s пересчитывается из неизменного
        log_v. Подъём стартует с max(d + 1, floor(log_v / 2)): все меньшие
        измерения дают |s| >= 100, итоговое d то же.
        """
        abs_s = abs(self.s)
        if abs_s == 0:
            self._set_zero()
            return

        # Fast path: обычные значения остаются бит-в-бит как float
        if self.d == 1 and LINEAR_FLOOR < abs_s < LINEAR_CEILING:
            return

        direction = sign(self.s)
        log_v = self.d * math.log10(abs_s)

        if abs_s >= self._tier_ceiling():
            self.d = max(self.d + 1, int(log_v // 2))
            self.s = direction * 10.0 ** (log_v / self.d)
            while abs(self.s) >= DIMENSIONAL_CEILING:
                self.d += 1
                self.s = direction * 10.0 ** (log_v / self.d)

        while abs(self.s) < DIMENSIONAL_FLOOR and self.d > 1:
            self.d -= 1
            self.s = direction * 10.0 ** (log_v / self.d)

        if self.s == 0:
            # underflow 10**log_v на d == 1
            self._set_zero()

    @staticmethod
    def _split_log(log_v: float, dim: int) -> tuple[float, int]:
        """
        (|side|, dim) с объёмом 10^log_v; dim поднимается, если 10^(log_v/dim)
        не помещается в double.
        """
        if log_v / dim > MAX_SIDE_LOG:
            dim = math.ceil(log_v / 2)
        return 10.0 ** (log_v / dim), dim

    def _assign_log(self, log_v: float, direction: float) -> None:
        side, self.d = self._split_log(log_v, self.d)
        self.s = direction * side
        self._normalize()

    # -------------------------------------------------------------------------
    # Примитив сложения
    # -------------------------------------------------------------------------

    def _deposit(self, value: float, dim: int) -> None:
        """Зачисление в ledger; продвинутый остаток вливается обратно через _internal_add."""
        overflow = self._ledger.deposit(value, dim)
        if overflow is not None:
            self._internal_add(overflow.amount, overflow.dim)

    def _internal_add(self, amount_s: float, amount_d: int) -> None:
        """
        Единственный примитив сложения: s^d += amount_s^amount_d.

        Linear fast path (оба на d == 1): прямое float сложение, либо deposit
        в bucket 1, если слагаемое на > 15 декад меньше значения.
        Dimensional path: сложение в log-пространстве, либо deposit на
        amount_d при разрыве > 15 декад.
        """
        if amount_s == 0:
            return

        if self.d == 1 and amount_d == 1:
            current_log = safe_log10(self.s, LINEAR_LOG_FLOOR)
            incoming_log = math.log10(abs(amount_s))

            if current_log - incoming_log > PRECISION_GAP_DECADES:
                logger.debug(
                    "addend %.6g is %.1f decades below %.6g, deposit to dim=1",
                    amount_s, current_log - incoming_log, self.s,
                )
                self._deposit(amount_s, 1)
                return

            self.s += amount_s
            if abs(self.s) >= LINEAR_CEILING:
                self._normalize()
            return

        log_v1 = self.total_log
        log_v2 = amount_d * math.log10(abs(amount_s))

        if log_v1 - log_v2 > PRECISION_GAP_DECADES:
            self._deposit(amount_s, amount_d)
            return

        self._log_space_add(amount_s, amount_d)

    def _log_space_add(self, amount_s: float, amount_d: int) -> None:
        """Сложение в log-пространстве без проверки разрыва (используется и collapse)."""
        log_v1 = self.total_log
        log_v2 = amount_d * math.log10(abs(amount_s))
        max_log = max(log_v1, log_v2)

        receiver_term = 0.0 if self.s == 0 else sign(self.s) * 10.0 ** (log_v1 - max_log)
        res_linear = receiver_term + sign(amount_s) * 10.0 ** (log_v2 - max_log)

        if abs(res_linear) < ZERO_COLLAPSE_EPS:
            self._set_zero()
            return

        new_log = max_log + math.log10(abs(res_linear))
        self._assign_log(new_log, sign(res_linear))

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def _merge(self, other: "NormalizedValue", direction: float) -> None:
        # Снимок операнда до мутации: x.add(x) читает исходное состояние
        main_s, main_d = other.s, other.d
        buckets = other._ledger.get_buckets()

        self._internal_add(direction * main_s, main_d)
        for dim in sorted(buckets):
            self._internal_add(direction * buckets[dim], dim)

    def add(self, other: "NormalizedValue") -> "NormalizedValue":
        """
        self += other, включая неслитые остатки ledger операнда.

        Returns:
            self (мутированный receiver)
        """
        self._merge(other, 1.0)
        return self

    def sub(self, other: "NormalizedValue") -> "NormalizedValue":
        """self -= other, включая неслитые остатки ledger операнда."""
        self._merge(other, -1.0)
        return self

    def mul(self, other: "NormalizedValue") -> "NormalizedValue":
        """
        self *= other.

        Основное значение и каждый bucket ledger масштабируются одним и тем же
        множителем 10^(other.total_log) со знаком other.

        Linear fast path: оба на d == 1 и произведение в линейном окне —
        нативное float умножение.

        Returns:
            self (мутированный receiver)
        """
        if other.s == 0:
            self._ledger.clear()
            self._set_zero()
            return self

        factor_log = other.total_log
        factor_sign = sign(other.s)
        buckets = self._ledger.get_buckets()
        self._ledger.clear()

        linear_product = self.s * other.s if self.d == 1 and other.d == 1 else None
        if linear_product is not None and LINEAR_FLOOR < abs(linear_product) < LINEAR_CEILING:
            self.s = linear_product
        elif self.s != 0:
            self._assign_log(self.total_log + factor_log, sign(self.s) * factor_sign)

        for dim in sorted(buckets):
            value = buckets[dim]
            if value == 0:
                continue
            if dim == 1 and other.d == 1 and math.isfinite(value * other.s) and value * other.s != 0:
                self._internal_add(value * other.s, 1)
                continue
            side, side_dim = self._split_log(dim * math.log10(abs(value)) + factor_log, dim)
            self._internal_add(sign(value) * factor_sign * side, side_dim)

        return self

    def div(self, other: "NormalizedValue") -> "NormalizedValue":
        """
        self /= other.

        Деление через вычитание логарифмов; log результата ограничен снизу
        нулём (max(0, ·)) для основного значения и каждого bucket, т.е.
        модуль частного не опускается ниже 1.

        Linear fast path: оба на d == 1 и |частное| ∈ [1, 1e15).

        Returns:
            self (мутированный receiver)

        Raises:
            ZeroDivisionError: Если other.s == 0
        """
        if other.s == 0:
            raise ZeroDivisionError("division by a NormalizedValue with s == 0")

        divisor_log = other.total_log
        divisor_sign = sign(other.s)
        buckets = self._ledger.get_buckets()
        self._ledger.clear()

        linear_quotient = self.s / other.s if self.d == 1 and other.d == 1 else None
        if linear_quotient is not None and 1.0 <= abs(linear_quotient) < LINEAR_CEILING:
            self.s = linear_quotient
        elif self.s != 0:
            self._assign_log(
                max(0.0, self.total_log - divisor_log), sign(self.s) * divisor_sign
            )

        for dim in sorted(buckets):
            value = buckets[dim]
            if value == 0:
                continue
            if dim == 1 and other.d == 1 and abs(value / other.s) >= 1.0:
                self._internal_add(value / other.s, 1)
                continue
            side, side_dim = self._split_log(
                max(0.0, dim * math.log10(abs(value)) - divisor_log), dim
            )
            self._internal_add(sign(value) * divisor_sign * side, side_dim)

        return self

    def pow(self, n: Numeric) -> "NormalizedValue":
        """
        Новое значение self ** n.

        n == 0 даёт 1, n == 1 — независимую копию (через serialize/deserialize).
        Знак результата отрицателен только для отрицательного основания и
        нечётного n.

        Raises:
            DimensionalDomainViolation: Отрицательное основание и нецелое n
        """
        if n == 0:
            return NormalizedValue.from_any(1)
        if n == 1:
            return self.copy()
        if self.s == 0:
            return NormalizedValue()

        integral = float(n).is_integer()
        if self.s < 0 and not integral:
            raise DimensionalDomainViolation(
                f"non-integral power {n} of a negative value {self.s!r} (d={self.d})"
            )

        if self.d == 1 and integral:
            try:
                native = self.s ** int(n)
            except OverflowError:
                native = None
            if native is not None and LINEAR_FLOOR < abs(native) < LINEAR_CEILING:
                return NormalizedValue(native, 1)

        result = NormalizedValue.from_log(n * self.total_log)
        if self.s < 0 and n % 2 != 0 and result.s != 0:
            result.s = -result.s
        return result

    def sqrt(self) -> "NormalizedValue":
        """
        Новое значение sqrt(self).

        Raises:
            DimensionalDomainViolation: Если s < 0
        """
        if self.s < 0:
            raise DimensionalDomainViolation(
                f"square root of a negative value {self.s!r} (d={self.d})"
            )
        if self.s == 0:
            return NormalizedValue()

        if self.d == 1 and self.s < LINEAR_CEILING:
            return NormalizedValue.from_any(math.sqrt(self.s))

        return NormalizedValue.from_log(0.5 * self.total_log)

    @staticmethod
    def get_distance(a: "NormalizedValue", b: "NormalizedValue") -> "NormalizedValue":
        """
        |a - b| как новое значение; ни a, ни b не мутируются.

        - Оба на d == 1: нативная float разность
        - Разница total_log < 1e-15 при одном знаке: канонический ноль
        - Разрыв > 15 декад: копия большего без знака
        - Иначе точная разность (или сумма для разных знаков) в log-пространстве

        Examples:
            >>> NormalizedValue.get_distance(NormalizedValue(5), NormalizedValue(-3))
            NormalizedValue(s=8.0, d=1)
        """
        if a.d == 1 and b.d == 1:
            return NormalizedValue(abs(a.s - b.s), 1)

        log_a, log_b = a.total_log, b.total_log
        opposite = a.s != 0 and b.s != 0 and (a.s < 0) != (b.s < 0)

        if not opposite and abs(log_a - log_b) < DISTANCE_IDENTITY_EPS:
            return NormalizedValue()

        larger = a if log_a >= log_b else b
        max_log, min_log = max(log_a, log_b), min(log_a, log_b)

        if max_log - min_log > PRECISION_GAP_DECADES:
            return NormalizedValue(abs(larger.s), larger.d)

        ratio = 10.0 ** (min_log - max_log)
        diff_linear = 1.0 + ratio if opposite else 1.0 - ratio
        return NormalizedValue.from_log(max_log + math.log10(diff_linear))

    # -------------------------------------------------------------------------
    # Фабрики
    # -------------------------------------------------------------------------

    @classmethod
    def from_log(cls, log_v: float) -> "NormalizedValue":
        """
        Значение с заданным total_log.

        Измерение выбирается как max(1, ceil(log_v / 2)), чтобы s оставалось
        в читаемом окне.

        Examples:
            >>> NormalizedValue.from_log(-20).is_zero()
            True
            >>> NormalizedValue.from_log(1000).d
            501
        """
        validate_finite(log_v, "log_v")
        if log_v <= FROM_LOG_ZERO_LOG:
            return cls()

        target_d = max(1, math.ceil(log_v / 2))
        return cls(10.0 ** (log_v / target_d), target_d)

    @staticmethod
    def _parse_number(text: str) -> Numeric:
        # Целые литералы разбираются точно: "1" + "0" * 400 не превращается в inf
        try:
            return int(text)
        except ValueError:
            pass

        try:
            number = float(text)
        except ValueError as exc:
            raise ValueDecodeError(f"not a decimal number: {text!r}") from exc

        if not math.isfinite(number):
            raise ValueDecodeError(f"not a finite decimal number: {text!r}")
        return number

    @classmethod
    def from_any(cls, value: Union[Numeric, str]) -> "NormalizedValue":
        """
        Значение из числа или десятичной строки.

        |value| < 1e15 остаётся на d == 1 (точность float сохраняется);
        большие значения получают измерение как в from_log. Python int за
        пределами double принимается точно через log10 целого.

        Raises:
            TypeError: Если value не int/float/str (bool тоже отвергается)
            ValueDecodeError: Если строка не разбирается или не конечна
            ValueError: Если float NaN/Inf

        Examples:
            >>> NormalizedValue.from_any("42.5")
            NormalizedValue(s=42.5, d=1)
            >>> round(NormalizedValue.from_any(10 ** 400).total_log, 6)
            400.0
        """
        if isinstance(value, bool):
            raise TypeError("boolean values not supported")

        if isinstance(value, str):
            number = cls._parse_number(value)
        elif isinstance(value, (int, float)):
            number = value
        else:
            raise TypeError(f"unsupported input type: {type(value).__name__}")

        if isinstance(number, float):
            validate_finite(number, "value")

        if number == 0:
            return cls()

        if abs(number) < LINEAR_CEILING:
            return cls(float(number), 1)

        log_v = math.log10(abs(number))
        target_d = max(1, math.ceil(log_v / 2))
        return cls(sign(number) * 10.0 ** (log_v / target_d), target_d)

    def copy(self) -> "NormalizedValue":
        """Независимая копия, включая ledger (round trip через snapshot)."""
        return NormalizedValue.deserialize(self.serialize())

    # -------------------------------------------------------------------------
    # Ledger
    # -------------------------------------------------------------------------

    def is_zero(self) -> bool:
        """True только если s == 0 и в ledger нет ненулевых остатков."""
        return self.s == 0 and self._ledger.is_empty()

    def residual_buckets(self) -> dict[int, float]:
        """Копия остатков ledger (dim -> residual)."""
        return self._ledger.get_buckets()

    def collapse(self) -> "NormalizedValue":
        """
        Принудительное слияние всех остатков ledger в основное значение.

        Bucket обходятся по возрастанию измерения, разрыв в 15 декад
        игнорируется. Bucket 1 при d == 1 прибавляется напрямую к s,
        остальные — log-space сложением. Операция lossy, если разрыв мал:
        её цель — одно конкретное число. Ledger после неё пуст.

        Returns:
            self (мутированный receiver)
        """
        buckets = self._ledger.get_buckets()
        self._ledger.clear()

        for dim in sorted(buckets):
            value = buckets[dim]
            if value == 0:
                continue
            if self.d == 1 and dim == 1:
                self.s += value
            else:
                self._log_space_add(value, dim)

        self._normalize()
        logger.debug("collapsed %d bucket(s) into %r", len(buckets), self)
        return self

    # -------------------------------------------------------------------------
    # Рендер
    # -------------------------------------------------------------------------

    def to_string(self, precision: int = 2) -> str:
        """
        Styled string: subscript d, целая часть |s|, superscript дробная часть.

        Examples:
            >>> NormalizedValue(12.5, 3).to_string()
            '₃12⁵⁰'
            >>> NormalizedValue().to_string(3)
            '₀0⁰⁰⁰'
        """
        if precision < 0:
            raise ValueError(f"precision must be non-negative, got {precision}")

        if self.s == 0:
            return SUBSCRIPT_DIGITS[0] + "0" + SUPERSCRIPT_DIGITS[0] * precision

        integer_digits, _, fraction_digits = format_fixed(abs(self.s), precision).partition(".")
        prefix = "-" if self.s < 0 else ""
        return f"{prefix}{to_subscript(str(self.d))}{integer_digits}{to_superscript(fraction_digits)}"

    @classmethod
    def from_styled_string(cls, text: str) -> "NormalizedValue":
        """
        Обратное преобразование to_string().

        Raises:
            ValueDecodeError: Нераспознанный символ или '-' не в начале
        """
        dimension: list[str] = []
        integer: list[str] = []
        fraction: list[str] = []

        for position, char in enumerate(text):
            kind, plain = classify(char)
            if kind is GlyphKind.DIMENSION:
                dimension.append(plain)
            elif kind is GlyphKind.FRACTION:
                fraction.append(plain)
            elif kind is GlyphKind.LITERAL:
                if plain == "-" and (dimension or integer or fraction):
                    raise ValueDecodeError(
                        f"sign '-' is only allowed as the first glyph, found at {position} in {text!r}"
                    )
                integer.append(plain)
            else:
                raise ValueDecodeError(f"unrecognized glyph {char!r} at {position} in {text!r}")

        d = int("".join(dimension)) if dimension else 1
        integer_part = "".join(integer)
        fraction_part = "".join(fraction)

        if not integer_part.lstrip("-") and not fraction_part:
            s = 0.0
        else:
            s = float(f"{integer_part}.{fraction_part}")

        return cls(s, d or 1)

    def to_scientific(self) -> str:
        """
        Научная нотация "<мантисса 4 знака>e<±порядок>".

        Examples:
            >>> NormalizedValue.from_any(2.77e25).to_scientific()
            '2.7700e+25'
        """
        log_v = self.total_log
        if log_v < SCIENTIFIC_ZERO_LOG:
            return SCIENTIFIC_ZERO

        exponent = math.floor(log_v)
        mantissa = round(10.0 ** (log_v - exponent), 4)
        if mantissa >= 10.0:
            mantissa /= 10.0
            exponent += 1

        prefix = "-" if self.s < 0 else ""
        return f"{prefix}{mantissa:.4f}e{exponent:+d}"

    def to_full_string(self, precision: int = 10) -> str:
        """
        Полная десятичная запись с precision знаками после точки.

        d == 1 — s напрямую (точность fast path). d > 1 — 10^total_log со
        знаком; при total_log > 100 — to_scientific(), чтобы строка не росла
        неограниченно.
        """
        if self.d == 1:
            return format_fixed(self.s, precision)

        log_v = self.total_log
        if log_v > FULL_STRING_MAX_LOG:
            return self.to_scientific()

        return format_fixed(sign(self.s) * 10.0 ** log_v, precision)

    def to_precise_string(self, decimal_places: int = 10) -> str:
        """
        Lossless рендер на d == 1: основное значение плюс все остатки ledger.

        Целая часть, дробная часть s и остатки (объём sign(v) * |v|^dim)
        складываются точно в десятичной арифметике, перенос дробной части в
        целую выполняется автоматически. Экспоненциальной нотации нет.
        При d > 1 делегирует в to_full_string().

        Если объём какого-либо bucket не помещается в double
        (dim * log10|v| >= MAX_SIDE_LOG), рендерится to_full_string() копии
        после collapse(); сам receiver не меняется.

        Examples:
            >>> v = NormalizedValue.from_any(300_000_000_000)
            >>> for _ in range(1000):
            ...     _ = v.add(NormalizedValue.from_any(1e-9))
            >>> v.to_precise_string(8)
            '300000000000.00000100'
        """
        if self.d != 1:
            return self.to_full_string(decimal_places)

        residues = []
        for dim, value in self._ledger.get_buckets().items():
            if value == 0:
                continue
            if dim == 1:
                residues.append(value)
                continue
            if dim * math.log10(abs(value)) >= MAX_SIDE_LOG:
                logger.debug(
                    "bucket dim=%d volume exceeds double range, rendering collapsed copy", dim
                )
                return self.copy().collapse().to_full_string(decimal_places)
            residues.append(math.copysign(abs(value) ** dim, value))

        return format_fixed(exact_decimal_sum([self.s, *residues]), decimal_places)

    # -------------------------------------------------------------------------
    # Сериализация
    # -------------------------------------------------------------------------

    def to_snapshot(self) -> NormalizedValueSnapshot:
        """Структурный снимок {s, d, buckets} с активными bucket по возрастанию dim."""
        buckets = self._ledger.get_buckets()
        return NormalizedValueSnapshot(
            s=self.s,
            d=self.d,
            buckets=[(dim, buckets[dim]) for dim in self._ledger.active_dimensions()],
        )

    def serialize(self) -> str:
        """JSON снимок: {"s": ..., "d": ..., "buckets": [[dim, residual], ...]}."""
        return self.to_snapshot().model_dump_json()

    @classmethod
    def from_snapshot(cls, snapshot: NormalizedValueSnapshot) -> "NormalizedValue":
        """
        Восстановление из снимка.

        Bucket повторно зачисляются через deposit (а не присваиваются), так
        что bucket на пороге продвижения нормализуется как при живой работе.
        """
        instance = cls(snapshot.s, snapshot.d)
        for dim, residual in snapshot.buckets:
            instance._deposit(residual, dim)
        return instance

    @classmethod
    def deserialize(cls, text: Union[str, bytes]) -> "NormalizedValue":
        """
        Восстановление из JSON снимка serialize().

        Raises:
            ValueDecodeError: Невалидный JSON, отсутствуют s/d, нецелое или
                неположительное измерение, NaN/Inf, битые пары bucket
        """
        try:
            snapshot = NormalizedValueSnapshot.model_validate_json(text)
        except ValidationError as exc:
            logger.debug("snapshot decode failed: %s", exc)
            raise ValueDecodeError(
                f"malformed NormalizedValue snapshot ({exc.error_count()} error(s))"
            ) from exc

        return cls.from_snapshot(snapshot)
