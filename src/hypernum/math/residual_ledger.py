"""
Residual Ledger — накопитель суб-точностных остатков по измерениям

Хранит суммы, которые слишком малы относительно основного значения, чтобы
сложение с ним не округлило их в ноль. Ключ — измерение (dim >= 1), значение —
накопленный остаток в виде side length этого измерения (объём = |v|^dim).

Правила:
- dim == 1: линейный резервуар, накапливает без ограничений; сливается только
  явно (collapse) и читается при точном рендере (to_precise_string)
- dim > 1: при достижении ±PROMOTION_THRESHOLD bucket обнуляется и остаток
  продвигается на dim + 1 с тем же объёмом: |sum|^(dim / (dim + 1))

Ledger не вызывает владельца напрямую: deposit() возвращает LedgerOverflow,
владелец (NormalizedValue) вливает его через собственный add-примитив.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Для dim > 1 хранимое значение строго внутри (-100, 100)
2. get_buckets() всегда возвращает копию
3. Bucket dim == 1 никогда не продвигается автоматически
"""

from typing import Final, NamedTuple

from src.hypernum.logging_utils import get_logger
from src.hypernum.math.numerical_safeguards import sign

logger = get_logger("hypernum.ledger")

# =============================================================================
# ПАРАМЕТРЫ ПРОДВИЖЕНИЯ
# =============================================================================

# Порог продвижения bucket на следующее измерение (только dim > 1)
PROMOTION_THRESHOLD: Final[float] = 100.0


class LedgerOverflow(NamedTuple):
    """Продвинутый остаток, который владелец должен влить на измерении dim."""

    amount: float  # signed side length на новом измерении
    dim: int  # dim исходного bucket + 1


class ResidualLedger:
    """
    Per-instance ledger остатков (tracer).

    Принадлежит ровно одному NormalizedValue и никогда не разделяется:
    операции между экземплярами работают с копией get_buckets().
    """

    def __init__(self) -> None:
        self._buckets: dict[int, float] = {}

    def __repr__(self) -> str:
        return f"ResidualLedger({self._buckets!r})"

    def deposit(self, value: float, dim: int) -> LedgerOverflow | None:
        """
        Зачисление остатка в bucket измерения dim.

        Args:
            value: Signed side length остатка
            dim: Измерение (>= 1)

        Returns:
            LedgerOverflow если bucket dim > 1 достиг порога, иначе None

        Raises:
            ValueError: Если dim < 1

        Examples:
            >>> ledger = ResidualLedger()
            >>> ledger.deposit(60.0, 2) is None
            True
            >>> overflow = ledger.deposit(40.0, 2)  # 100^(2/3) ≈ 21.544
            >>> overflow.dim
            3
            >>> ledger.get_buckets()
            {2: 0.0}
        """
        if dim < 1:
            raise ValueError(f"dim must be a positive integer, got {dim}")

        if value == 0:
            return None

        next_value = self._buckets.get(dim, 0.0) + value

        if dim == 1:
            self._buckets[dim] = next_value
            return None

        if abs(next_value) >= PROMOTION_THRESHOLD:
            promoted = sign(next_value) * abs(next_value) ** (dim / (dim + 1))
            self._buckets[dim] = 0.0
            logger.debug(
                "bucket dim=%d overflow %.6g -> promote %.6g to dim=%d",
                dim, next_value, promoted, dim + 1,
            )
            return LedgerOverflow(amount=promoted, dim=dim + 1)

        self._buckets[dim] = next_value
        return None

    def is_empty(self) -> bool:
        """True если нет ни одного ненулевого bucket."""
        return all(value == 0 for value in self._buckets.values())

    def get_buckets(self) -> dict[int, float]:
        """Копия mapping dim -> остаток (изменения копии не влияют на ledger)."""
        return dict(self._buckets)

    def active_dimensions(self) -> list[int]:
        """Измерения с ненулевым остатком, по возрастанию."""
        return sorted(dim for dim, value in self._buckets.items() if value != 0)

    def clear(self) -> None:
        """Удаление всех bucket (перед пересчётом масштаба в mul/div)."""
        self._buckets.clear()
