"""
Contract Validation Module

JSON Schema контракты для снапшотов и событий ledger.
"""

from .validators import (
    ContractValidator,
    LedgerEventValidator,
    LedgerSnapshotValidator,
    SchemaLoader,
    validate_event_record,
    validate_ledger_snapshot,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "LedgerSnapshotValidator",
    "LedgerEventValidator",
    # Functions
    "validate_ledger_snapshot",
    "validate_event_record",
]
