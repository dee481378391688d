"""
LedgerEvent — append-only записи об изменениях состояния

Immutable Pydantic модели. Ядро только производит события и возвращает их
рядом с результатом операции; доставка (event bus, логи, on-chain logs)
принадлежит хосту. События никогда не влияют на дальнейшее поведение ядра.

Формат записи (to_record) соответствует contracts/schema/ledger_event.json:
суммы сериализуются десятичными строками (uint256 не помещается в JSON number).
"""

from enum import Enum
from typing import Any, ClassVar, Dict, Literal, Optional, Tuple

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class EventKind(str, Enum):
    """Тип события ledger."""

    TRANSFER = "Transfer"
    APPROVAL = "Approval"
    FEE_COLLECTED = "FeeCollected"
    ADDED_TO_BLACKLIST = "AddedToBlacklist"
    REMOVED_FROM_BLACKLIST = "RemovedFromBlacklist"
    TAX_RATE_UPDATED = "TaxRateUpdated"
    TAX_RECIPIENT_UPDATED = "TaxRecipientUpdated"
    TAX_STATUS_UPDATED = "TaxStatusUpdated"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"


# =============================================================================
# BASE
# =============================================================================


class LedgerEvent(BaseModel):
    """
    Базовая запись события.

    Поля-суммы перечислены в `amount_fields` и в записи становятся строками.
    """

    kind: EventKind

    amount_fields: ClassVar[Tuple[str, ...]] = ()

    model_config = {"frozen": True}

    def to_record(self) -> Dict[str, Any]:
        """JSON-совместимая запись (см. ledger_event.json)."""
        record = self.model_dump(mode="json")
        for name in self.amount_fields:
            record[name] = str(getattr(self, name))
        return record


# =============================================================================
# BALANCE EVENTS
# =============================================================================


class Transfer(LedgerEvent):
    """
    Движение баланса.

    sender=None: эмиссия (mint), recipient=None: сжигание (burn).
    """

    kind: Literal[EventKind.TRANSFER] = EventKind.TRANSFER
    sender: Optional[str] = Field(None, description="Отправитель (None для mint)")
    recipient: Optional[str] = Field(None, description="Получатель (None для burn)")
    amount: int = Field(..., ge=0, description="Сумма в base units")

    amount_fields: ClassVar[Tuple[str, ...]] = ("amount",)


class FeeCollected(LedgerEvent):
    """Комиссия, удержанная с перевода в пользу collector."""

    kind: Literal[EventKind.FEE_COLLECTED] = EventKind.FEE_COLLECTED
    sender: str = Field(..., min_length=1)
    collector: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)

    amount_fields: ClassVar[Tuple[str, ...]] = ("amount",)


class Approval(LedgerEvent):
    kind: Literal[EventKind.APPROVAL] = EventKind.APPROVAL
    owner: str = Field(..., min_length=1)
    spender: str = Field(..., min_length=1)
    amount: int = Field(..., ge=0)

    amount_fields: ClassVar[Tuple[str, ...]] = ("amount",)


# =============================================================================
# ADMIN EVENTS
# =============================================================================


class AddedToBlacklist(LedgerEvent):
    kind: Literal[EventKind.ADDED_TO_BLACKLIST] = EventKind.ADDED_TO_BLACKLIST
    identity: str = Field(..., min_length=1)


class RemovedFromBlacklist(LedgerEvent):
    kind: Literal[EventKind.REMOVED_FROM_BLACKLIST] = EventKind.REMOVED_FROM_BLACKLIST
    identity: str = Field(..., min_length=1)


class TaxRateUpdated(LedgerEvent):
    kind: Literal[EventKind.TAX_RATE_UPDATED] = EventKind.TAX_RATE_UPDATED
    old_rate_bps: int = Field(..., ge=0)
    new_rate_bps: int = Field(..., ge=0)


class TaxRecipientUpdated(LedgerEvent):
    kind: Literal[EventKind.TAX_RECIPIENT_UPDATED] = EventKind.TAX_RECIPIENT_UPDATED
    old_recipient: str = Field(..., min_length=1)
    new_recipient: str = Field(..., min_length=1)


class TaxStatusUpdated(LedgerEvent):
    kind: Literal[EventKind.TAX_STATUS_UPDATED] = EventKind.TAX_STATUS_UPDATED
    enabled: bool


class OwnershipTransferred(LedgerEvent):
    """Смена администратора; previous_owner=None только при создании ledger."""

    kind: Literal[EventKind.OWNERSHIP_TRANSFERRED] = EventKind.OWNERSHIP_TRANSFERRED
    previous_owner: Optional[str] = None
    new_owner: str = Field(..., min_length=1)
