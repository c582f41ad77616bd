"""
Core math modules для hypernum

Гиперкуб-представление V = s^d, ledger остатков и диагностика точности.
"""

# Numerical Safeguards
from src.hypernum.math.numerical_safeguards import (
    # Thresholds
    DIMENSIONAL_CEILING,
    DIMENSIONAL_FLOOR,
    LINEAR_CEILING,
    LINEAR_FLOOR,
    PRECISION_GAP_DECADES,
    # Epsilon constants
    LINEAR_LOG_FLOOR,
    LOG_FLOOR,
    ZERO_COLLAPSE_EPS,
    # Primitives
    exact_decimal_sum,
    format_fixed,
    is_valid_float,
    safe_log10,
    sign,
    validate_dimension,
    validate_finite,
)

# Residual Ledger
from src.hypernum.math.residual_ledger import (
    PROMOTION_THRESHOLD,
    LedgerOverflow,
    ResidualLedger,
)

# Normalized Value
from src.hypernum.math.normalized_value import (
    FULL_STRING_MAX_LOG,
    SCIENTIFIC_ZERO,
    DimensionalDomainViolation,
    NormalizedValue,
    ValueDecodeError,
)

# Precision Audit
from src.hypernum.math.precision_audit import (
    SAFE_DIGITS,
    LossAnalysis,
    StabilityQuality,
    StabilityReport,
    StabilityThresholds,
    detailed_loss_analysis,
    loss_analysis,
    stability_report,
)

__all__ = [
    # Numerical Safeguards — Thresholds
    "DIMENSIONAL_CEILING",
    "DIMENSIONAL_FLOOR",
    "LINEAR_CEILING",
    "LINEAR_FLOOR",
    "PRECISION_GAP_DECADES",
    # Numerical Safeguards — Epsilon constants
    "LINEAR_LOG_FLOOR",
    "LOG_FLOOR",
    "ZERO_COLLAPSE_EPS",
    # Numerical Safeguards — Primitives
    "exact_decimal_sum",
    "format_fixed",
    "is_valid_float",
    "safe_log10",
    "sign",
    "validate_dimension",
    "validate_finite",
    # Residual Ledger
    "PROMOTION_THRESHOLD",
    "LedgerOverflow",
    "ResidualLedger",
    # Normalized Value — Constants
    "FULL_STRING_MAX_LOG",
    "SCIENTIFIC_ZERO",
    # Normalized Value — Exceptions
    "DimensionalDomainViolation",
    "ValueDecodeError",
    # Normalized Value — Types
    "NormalizedValue",
    # Precision Audit — Constants
    "SAFE_DIGITS",
    # Precision Audit — Types
    "LossAnalysis",
    "StabilityQuality",
    "StabilityReport",
    "StabilityThresholds",
    # Precision Audit — Functions
    "detailed_loss_analysis",
    "loss_analysis",
    "stability_report",
]
