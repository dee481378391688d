"""
Checked integer arithmetic for ledger amounts.

Экспортирует примитивы для uint256 и basis-point расчётов.
"""

from capledger.core.math.checked import (
    AMOUNT_BITS,
    BPS_DENOMINATOR,
    UINT256_MAX,
    bps_of,
    checked_add,
    checked_sub,
    require_amount,
    split_bps,
)

__all__ = [
    "AMOUNT_BITS",
    "BPS_DENOMINATOR",
    "UINT256_MAX",
    "bps_of",
    "checked_add",
    "checked_sub",
    "require_amount",
    "split_bps",
]
