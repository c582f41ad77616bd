"""
Test suite for hypernum

Contains:
- tests/unit/          : Unit tests for the value type, ledger, rendering,
                         snapshots and precision audit
"""
