"""
Domain models and value objects.

Contains the wire model of a serialized NormalizedValue.
"""

from src.hypernum.domain.snapshot import NormalizedValueSnapshot

__all__ = [
    "NormalizedValueSnapshot",
]
