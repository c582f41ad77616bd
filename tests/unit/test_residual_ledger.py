"""
Тесты для Residual Ledger (tracer)

Проверяемые инварианты:
1. deposit(0) — no-op
2. dim == 1 накапливает без ограничений и не продвигается
3. dim > 1: хранимое значение строго внутри (-100, 100)
4. Продвижение сохраняет объём: |sum|^dim == promoted^(dim + 1)
5. get_buckets() возвращает копию
"""

import math

import pytest

from src.hypernum.math.residual_ledger import (
    PROMOTION_THRESHOLD,
    LedgerOverflow,
    ResidualLedger,
)


@pytest.fixture
def ledger():
    """Пустой ledger."""
    return ResidualLedger()


# =============================================================================
# ТЕСТЫ: deposit
# =============================================================================


class TestDeposit:
    """Тесты зачисления и продвижения."""

    def test_zero_is_noop(self, ledger):
        """Нулевой остаток не создаёт bucket."""
        assert ledger.deposit(0.0, 3) is None
        assert ledger.get_buckets() == {}

    def test_linear_bucket_accumulates_without_limit(self, ledger):
        """dim == 1 накапливает сколь угодно большие суммы без продвижения."""
        assert ledger.deposit(1e6, 1) is None
        assert ledger.deposit(1e6, 1) is None
        assert ledger.deposit(5e20, 1) is None
        assert ledger.get_buckets() == {1: 1e6 + 1e6 + 5e20}

    def test_dimensional_bucket_below_threshold(self, ledger):
        """Сумма ниже порога просто хранится."""
        assert ledger.deposit(60.0, 2) is None
        assert ledger.deposit(-10.0, 2) is None
        assert ledger.get_buckets() == {2: 50.0}

    def test_overflow_promotes_to_next_dimension(self, ledger):
        """Достижение +100 обнуляет bucket и возвращает продвижение на dim + 1."""
        ledger.deposit(60.0, 2)
        overflow = ledger.deposit(40.0, 2)

        assert isinstance(overflow, LedgerOverflow)
        assert overflow.dim == 3
        assert overflow.amount == pytest.approx(100.0 ** (2 / 3))
        assert ledger.get_buckets() == {2: 0.0}

    def test_negative_overflow_keeps_sign(self, ledger):
        """Достижение -100 продвигает отрицательный остаток."""
        overflow = ledger.deposit(-150.0, 3)

        assert overflow.dim == 4
        assert overflow.amount == pytest.approx(-(150.0 ** 0.75))
        assert ledger.get_buckets()[3] == 0.0

    def test_promotion_preserves_volume(self, ledger):
        """promoted^(dim + 1) == |sum|^dim."""
        overflow = ledger.deposit(250.0, 4)
        assert math.isclose(overflow.amount ** 5, 250.0 ** 4, rel_tol=1e-12)

    def test_dimensional_invariant(self, ledger):
        """После любой серии deposit все bucket dim > 1 внутри (-100, 100)."""
        for value in [30.0, 45.0, 20.0, 99.0, -10.0, 70.0, -180.0, 5.0]:
            ledger.deposit(value, 2)
            for dim, residual in ledger.get_buckets().items():
                if dim > 1:
                    assert -PROMOTION_THRESHOLD < residual < PROMOTION_THRESHOLD

    def test_invalid_dimension_rejected(self, ledger):
        """dim < 1 недопустим."""
        with pytest.raises(ValueError, match="positive integer"):
            ledger.deposit(1.0, 0)


# =============================================================================
# ТЕСТЫ: состояние
# =============================================================================


class TestLedgerState:
    """Тесты is_empty, get_buckets, active_dimensions, clear."""

    def test_new_ledger_is_empty(self, ledger):
        """Новый ledger пуст."""
        assert ledger.is_empty()

    def test_zeroed_buckets_count_as_empty(self, ledger):
        """Bucket, обнулённый продвижением, не делает ledger непустым."""
        ledger.deposit(100.0, 2)
        assert ledger.get_buckets() == {2: 0.0}
        assert ledger.is_empty()

    def test_nonzero_bucket_is_not_empty(self, ledger):
        """Любой ненулевой остаток делает ledger непустым."""
        ledger.deposit(1e-30, 1)
        assert not ledger.is_empty()

    def test_get_buckets_returns_copy(self, ledger):
        """Изменение копии не влияет на ledger."""
        ledger.deposit(5.0, 2)
        buckets = ledger.get_buckets()
        buckets[2] = 99.0
        buckets[7] = 1.0

        assert ledger.get_buckets() == {2: 5.0}

    def test_active_dimensions_sorted_and_nonzero(self, ledger):
        """Только ненулевые bucket, по возрастанию измерения."""
        ledger.deposit(3.0, 3)
        ledger.deposit(1e-9, 1)
        ledger.deposit(100.0, 5)  # обнуляется продвижением
        ledger.deposit(7.0, 2)

        assert ledger.active_dimensions() == [1, 2, 3]

    def test_clear(self, ledger):
        """clear() удаляет все bucket."""
        ledger.deposit(3.0, 3)
        ledger.deposit(1e-9, 1)
        ledger.clear()

        assert ledger.get_buckets() == {}
        assert ledger.is_empty()
