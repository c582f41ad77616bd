"""
Тесты для Precision Audit

Проверяет:
1. Классификацию стабильности по запасу декад
2. Подсчёт цифр, которые double хранит точно
3. Текстовый аудит ledger
"""

import pytest

from src.hypernum.math.normalized_value import NormalizedValue
from src.hypernum.math.precision_audit import (
    SAFE_DIGITS,
    StabilityQuality,
    StabilityThresholds,
    detailed_loss_analysis,
    loss_analysis,
    stability_report,
)

# =============================================================================
# ТЕСТЫ STABILITY REPORT
# =============================================================================


class TestStabilityReport:
    """Тесты stability_report"""

    def test_identical_values_perfect(self) -> None:
        """Нулевой дрейф — PERFECT"""
        v = NormalizedValue.from_any(1_000_000)
        report = stability_report(v, NormalizedValue.from_any(1_000_000))

        assert report.quality is StabilityQuality.PERFECT
        assert report.gap_decades > 15
        assert report.drift_text == "₀0⁰⁰"

    @pytest.mark.parametrize(
        "value, reference, expected",
        [
            (1e14, 1e14 + 10, StabilityQuality.EXCELLENT),
            (1e10, 1e10 + 10, StabilityQuality.STABLE),
            (1_000_000, 1_000_001, StabilityQuality.DRIFTING),
            (1, 11, StabilityQuality.UNSAFE),
        ],
    )
    def test_quality_classes(self, value, reference, expected) -> None:
        """Класс определяется gap = total_log значения - total_log дрейфа"""
        report = stability_report(NormalizedValue.from_any(value), NormalizedValue.from_any(reference))
        assert report.quality is expected

    def test_custom_thresholds(self) -> None:
        """Пороги настраиваются"""
        strict = StabilityThresholds(perfect=20.0, excellent=18.0, stable=16.0, drifting=0.0)
        v = NormalizedValue.from_any(1e14)

        assert stability_report(v, NormalizedValue.from_any(1e14), strict).quality is StabilityQuality.PERFECT
        assert (
            stability_report(v, NormalizedValue.from_any(1e14 + 10), strict).quality
            is StabilityQuality.DRIFTING
        )

    def test_threshold_boundaries_are_strict(self) -> None:
        """Граница класса относится к нижнему классу"""
        thresholds = StabilityThresholds()
        assert thresholds.classify(15.0) is StabilityQuality.EXCELLENT
        assert thresholds.classify(0.0) is StabilityQuality.UNSAFE

    def test_summary(self) -> None:
        """Однострочная сводка"""
        report = stability_report(NormalizedValue.from_any(1), NormalizedValue.from_any(11))
        summary = report.summary()

        assert summary.startswith("Value: ₁1⁰⁰ | Drift: ₁10⁰⁰ | Gap: ")
        assert summary.endswith("(UNSAFE)")

    def test_operands_not_mutated(self) -> None:
        """Отчёт не меняет значения"""
        v = NormalizedValue.from_log(40)
        ref = NormalizedValue.from_log(39)
        before = [(v.s, v.d), (ref.s, ref.d)]

        stability_report(v, ref)

        assert [(v.s, v.d), (ref.s, ref.d)] == before


# =============================================================================
# ТЕСТЫ LOSS ANALYSIS
# =============================================================================


class TestLossAnalysis:
    """Тесты loss_analysis"""

    def test_small_value_lossless(self) -> None:
        """5 цифр помещаются в double"""
        analysis = loss_analysis(NormalizedValue(12345.0))

        assert analysis.total_digits == 5
        assert analysis.blurred_digits == 0
        assert analysis.is_lossless
        assert "100%" in analysis.summary()

    def test_large_value_blurred(self) -> None:
        """31 цифра: 16 хвостовых размыты"""
        analysis = loss_analysis(NormalizedValue.from_log(30.5))

        assert analysis.total_digits == 31
        assert analysis.safe_digits == SAFE_DIGITS
        assert analysis.blurred_digits == 16
        assert not analysis.is_lossless
        assert "trailing 16 digits" in analysis.summary()


class TestDetailedLossAnalysis:
    """Тесты detailed_loss_analysis"""

    def test_no_residues(self) -> None:
        """Пустой ledger"""
        report = detailed_loss_analysis(NormalizedValue(150))

        assert report.startswith("--- PRECISION AUDIT ---")
        assert "Tracer: no active micro residues." in report
        assert "stored without loss" in report

    def test_safe_residue(self) -> None:
        """Остаток 1e-9 при 3e11 помечен SAFE"""
        v = NormalizedValue.from_any(3e11)
        v.add(NormalizedValue.from_any(1e-9))
        report = detailed_loss_analysis(v)

        assert "Tracer status:" in report
        assert "Dim 1:" in report
        assert "[SAFE]" in report
        assert "(12 digits)" in report

    def test_relevant_residue(self) -> None:
        """Остаток сравнимого масштаба помечен RELEVANT"""
        v = NormalizedValue.deserialize('{"s": 5.0, "d": 1, "buckets": [[1, 2.0]]}')
        assert "[RELEVANT]" in detailed_loss_analysis(v)

    def test_large_value_conclusion(self) -> None:
        """Для больших значений итог сообщает о шуме округления"""
        v = NormalizedValue.from_log(30.5)
        v.add(NormalizedValue(5.0, 2))
        report = detailed_loss_analysis(v)

        assert "Dim 2:" in report
        assert "16 digits of rounding noise" in report
