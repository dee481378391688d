"""
Domain models and value objects.

Contains identities/endpoints, ledger events, configuration and the state snapshot.
"""

from capledger.core.domain.config import (
    DEFAULT_CEILING_TOKENS,
    DEFAULT_DECIMALS,
    DEFAULT_INITIAL_SUPPLY_TOKENS,
    DEFAULT_MAX_RATE_BPS,
    LedgerConfig,
)
from capledger.core.domain.events import (
    AddedToBlacklist,
    Approval,
    EventKind,
    FeeCollected,
    LedgerEvent,
    OwnershipTransferred,
    RemovedFromBlacklist,
    TaxRateUpdated,
    TaxRecipientUpdated,
    TaxStatusUpdated,
    Transfer,
)
from capledger.core.domain.identity import (
    BURN,
    MINT,
    NULL_IDENTITY,
    Endpoint,
    Holder,
    Sentinel,
    endpoint_identity,
    is_holder,
    is_null_identity,
    require_identity,
)
from capledger.core.domain.state import FeeState, LedgerState, SupplyState

__all__ = [
    # Identity module
    "NULL_IDENTITY",
    "Holder",
    "Sentinel",
    "Endpoint",
    "MINT",
    "BURN",
    "is_null_identity",
    "require_identity",
    "is_holder",
    "endpoint_identity",
    # Events
    "EventKind",
    "LedgerEvent",
    "Transfer",
    "Approval",
    "FeeCollected",
    "AddedToBlacklist",
    "RemovedFromBlacklist",
    "TaxRateUpdated",
    "TaxRecipientUpdated",
    "TaxStatusUpdated",
    "OwnershipTransferred",
    # Config
    "LedgerConfig",
    "DEFAULT_DECIMALS",
    "DEFAULT_MAX_RATE_BPS",
    "DEFAULT_INITIAL_SUPPLY_TOKENS",
    "DEFAULT_CEILING_TOKENS",
    # State
    "LedgerState",
    "SupplyState",
    "FeeState",
]
