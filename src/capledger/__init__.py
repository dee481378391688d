"""
capledger — ledger engine для fungible-токена с потолком эмиссии.

Ядро (без привязки к хосту):
- Balance Store / Deny-List / Fee Policy / Supply Controller (book/)
- Access Guard (gatekeeper/)
- Transfer Engine: атомарный settlement с удержанием комиссии (settlement/)
- Ledger: публичная поверхность операций (ledger.py)
"""

from capledger.core.domain import (
    BURN,
    MINT,
    NULL_IDENTITY,
    Holder,
    LedgerConfig,
    LedgerEvent,
    LedgerState,
)
from capledger.core.errors import LedgerError
from capledger.ledger import Ledger, OperationResult

__all__ = [
    "Ledger",
    "OperationResult",
    "LedgerConfig",
    "LedgerState",
    "LedgerEvent",
    "LedgerError",
    "Holder",
    "MINT",
    "BURN",
    "NULL_IDENTITY",
]
