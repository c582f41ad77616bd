"""
Precision Audit — отчёты о стабильности и потере точности

Диагностика поверх публичной поверхности NormalizedValue:
- stability_report: дрейф значения относительно эталона в декадах
- loss_analysis: сколько цифр значения реально хранит double
- detailed_loss_analysis: текстовый аудит основного значения и каждого
  активного bucket ledger

ФОРМУЛЫ:
    drift = |value - reference|
    gap = value.total_log - drift.total_log          (декады запаса)
    total_digits = floor(total_log) + 1
    blurred_digits = max(0, total_digits - 15)
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Final, NamedTuple, Optional

from src.hypernum.math.normalized_value import NormalizedValue
from src.hypernum.math.numerical_safeguards import PRECISION_GAP_DECADES

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Значащих цифр, которые double гарантированно хранит
SAFE_DIGITS: Final[int] = 15


class StabilityQuality(str, Enum):
    """Качество значения по запасу декад до дрейфа"""

    PERFECT = "PERFECT"  # дрейф ниже предела float
    EXCELLENT = "EXCELLENT"
    STABLE = "STABLE"
    DRIFTING = "DRIFTING"
    UNSAFE = "UNSAFE"


@dataclass(frozen=True)
class StabilityThresholds:
    """Пороги gap (в декадах) для классов качества; сравнение строгое (>)."""

    perfect: float = PRECISION_GAP_DECADES
    excellent: float = 12.0
    stable: float = 8.0
    drifting: float = 0.0

    def classify(self, gap: float) -> StabilityQuality:
        if gap > self.perfect:
            return StabilityQuality.PERFECT
        if gap > self.excellent:
            return StabilityQuality.EXCELLENT
        if gap > self.stable:
            return StabilityQuality.STABLE
        if gap > self.drifting:
            return StabilityQuality.DRIFTING
        return StabilityQuality.UNSAFE


class StabilityReport(NamedTuple):
    """Результат сравнения значения с эталоном."""

    value_text: str  # styled string значения
    drift_text: str  # styled string |value - reference|
    gap_decades: float  # value.total_log - drift.total_log
    quality: StabilityQuality

    def summary(self) -> str:
        return (
            f"Value: {self.value_text} | Drift: {self.drift_text} | "
            f"Gap: {self.gap_decades:.2f} ({self.quality.value})"
        )


class LossAnalysis(NamedTuple):
    """Теоретическая потеря цифр из-за 64-bit float."""

    total_digits: int
    safe_digits: int
    blurred_digits: int

    @property
    def is_lossless(self) -> bool:
        return self.blurred_digits == 0

    def summary(self) -> str:
        if self.is_lossless:
            return "Precision: 100%. The value fits entirely into 64-bit storage."
        return (
            f"Loss analysis: {self.safe_digits} of {self.total_digits} digits are exact. "
            f"The trailing {self.blurred_digits} digits are blurred (zeros/rounding noise)."
        )


# =============================================================================
# ОТЧЁТЫ
# =============================================================================


def stability_report(
    value: NormalizedValue,
    reference: NormalizedValue,
    thresholds: Optional[StabilityThresholds] = None,
) -> StabilityReport:
    """
    Отчёт о стабильности значения относительно эталона.

    Args:
        value: Проверяемое значение
        reference: Эталон
        thresholds: Пороги классов качества (default: StabilityThresholds())

    Returns:
        StabilityReport; ни value, ни reference не мутируются

    Examples:
        >>> v = NormalizedValue.from_any(1_000_000)
        >>> stability_report(v, NormalizedValue.from_any(1_000_000)).quality
        <StabilityQuality.PERFECT: 'PERFECT'>
    """
    thresholds = thresholds or StabilityThresholds()
    drift = NormalizedValue.get_distance(value, reference)
    gap = value.total_log - drift.total_log

    return StabilityReport(
        value_text=value.to_string(),
        drift_text=drift.to_string(),
        gap_decades=gap,
        quality=thresholds.classify(gap),
    )


def loss_analysis(value: NormalizedValue) -> LossAnalysis:
    """Сколько десятичных цифр значения выходят за ~15 значащих цифр double."""
    total_digits = math.floor(value.total_log) + 1
    return LossAnalysis(
        total_digits=total_digits,
        safe_digits=SAFE_DIGITS,
        blurred_digits=max(0, total_digits - SAFE_DIGITS),
    )


def detailed_loss_analysis(value: NormalizedValue) -> str:
    """
    Многострочный аудит: основное значение, каждый активный bucket с
    расстоянием в декадах до основного значения и итог.

    Bucket с расстоянием > 15 декад помечается SAFE (основное значение его
    не "видит"), иначе RELEVANT (скоро повлияет на основное значение).
    """
    main_log = value.total_log
    main_digits = math.floor(main_log) + 1

    lines = [
        "--- PRECISION AUDIT ---",
        f"Main value: {value.to_string()} ({main_digits} digits)",
    ]

    buckets = {dim: v for dim, v in value.residual_buckets().items() if v != 0}
    if not buckets:
        lines.append("Tracer: no active micro residues.")
    else:
        lines.append("Tracer status:")
        for dim in sorted(buckets):
            residual = buckets[dim]
            distance = main_log - dim * math.log10(abs(residual))
            if distance > PRECISION_GAP_DECADES:
                lines.append(
                    f"  - Dim {dim}: value {residual:.2f} "
                    f"[SAFE] ({distance:.1f} decades below the main value)"
                )
            else:
                lines.append(
                    f"  - Dim {dim}: value {residual:.2f} "
                    f"[RELEVANT] ({distance:.1f} decades, will soon affect the main value)"
                )

    lines.append("")
    if main_digits > SAFE_DIGITS:
        lines.append(
            f"CONCLUSION: the main value carries {main_digits - SAFE_DIGITS} digits of rounding noise."
        )
        lines.append("The tracer keeps micro changes without loss.")
    else:
        lines.append("CONCLUSION: the value is currently stored without loss.")

    return "\n".join(lines)
