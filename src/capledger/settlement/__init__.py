"""Settlement — Transfer Engine и план атомарного settlement."""

from .engine import Movement, Settlement, SettlementKind, SettlementPlan, TransferEngine

__all__ = [
    "TransferEngine",
    "SettlementPlan",
    "SettlementKind",
    "Settlement",
    "Movement",
]
