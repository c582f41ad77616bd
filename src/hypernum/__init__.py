"""
hypernum — dimensional numbers (V = s^d) with a residual ledger.

Core value type, its residual ledger, the serialized snapshot model and the
JSON Schema contract for it. Independent of any display layer.
"""

import logging as _logging

_logging.getLogger("hypernum").addHandler(_logging.NullHandler())
