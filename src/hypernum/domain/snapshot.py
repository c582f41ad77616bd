"""
NormalizedValueSnapshot — Модель сериализованного NormalizedValue

Immutable Pydantic модель структурного снимка {s, d, buckets}.
Полная совместимость с JSON Schema (hypernum/contracts/schema/normalized_value.json).

Strict режим: d и измерения bucket — только целые числа (2.0 и "2"
отвергаются), s и остатки — только конечные числа.
"""

from pydantic import BaseModel, Field, field_validator


# =============================================================================
# SNAPSHOT MODEL
# =============================================================================


class NormalizedValueSnapshot(BaseModel):
    """
    Структурный снимок NormalizedValue.

    buckets — пары (dimension, residual) активных bucket ledger. Порядок
    восстанавливается повторным deposit и влияет на продвижение, поэтому
    сериализация пишет их по возрастанию измерения.
    """

    s: float = Field(..., description="Side length (знак = знак значения)")
    d: int = Field(..., ge=1, description="Измерение гиперкуба (>= 1)")
    buckets: list[tuple[int, float]] = Field(
        default_factory=list, description="Активные остатки ledger (dimension, residual)"
    )

    model_config = {
        "frozen": True,
        "strict": True,
        "extra": "forbid",
        "allow_inf_nan": False,
    }

    @field_validator("buckets")
    @classmethod
    def validate_buckets(cls, v: list[tuple[int, float]]) -> list[tuple[int, float]]:
        """Измерения bucket >= 1; нулевые остатки эквивалентны отсутствию bucket."""
        for dim, _ in v:
            if dim < 1:
                raise ValueError(f"bucket dimension must be >= 1, got {dim}")
        return [(dim, residual) for dim, residual in v if residual != 0]
