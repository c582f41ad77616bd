"""
Contract Validation Module

Модуль для валидации JSON контрактов hypernum.
"""

from .validators import (
    ContractValidator,
    NormalizedValueSnapshotValidator,
    SchemaLoader,
    validate_normalized_value_snapshot,
    validate_serialized_value,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "NormalizedValueSnapshotValidator",
    # Functions
    "validate_normalized_value_snapshot",
    "validate_serialized_value",
]
