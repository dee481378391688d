"""
LedgerState — снапшот состояния ledger

Immutable Pydantic модель: единая структура со всем состоянием ledger
(балансы, deny-list, fee policy, supply, администратор, allowances).

Используется как persistence hook: хост сохраняет документ
(`to_document`) в своё хранилище и восстанавливает ledger через
`Ledger.from_snapshot(LedgerState.from_document(doc))`.

Формат документа: contracts/schema/ledger_snapshot.json.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field, model_validator

from capledger.core.contracts import validate_ledger_snapshot
from capledger.core.domain.identity import is_null_identity
from capledger.core.math import BPS_DENOMINATOR, UINT256_MAX

SCHEMA_VERSION = "1"


# =============================================================================
# NESTED MODELS
# =============================================================================


class FeeState(BaseModel):
    """Конфигурация комиссии."""

    rate_bps: int = Field(..., ge=0, le=BPS_DENOMINATOR, description="Ставка (bps)")
    max_rate_bps: int = Field(..., ge=0, le=BPS_DENOMINATOR, description="Потолок ставки (bps)")
    recipient: str = Field(..., min_length=1, description="Получатель комиссии")
    enabled: bool = Field(..., description="Комиссия включена")

    model_config = {"frozen": True}


class SupplyState(BaseModel):
    """Эмиссия: total_issued <= ceiling."""

    total_issued: int = Field(..., ge=0, le=UINT256_MAX)
    ceiling: int = Field(..., ge=0, le=UINT256_MAX)

    model_config = {"frozen": True}


# =============================================================================
# LEDGER STATE
# =============================================================================


class LedgerState(BaseModel):
    """
    Полный снапшот ledger.

    Инварианты (проверяются при создании):
    - sum(balances) == supply.total_issued
    - supply.total_issued <= supply.ceiling
    - fee.rate_bps <= fee.max_rate_bps
    - нулевые балансы не хранятся (отсутствие == 0)
    - null identity не может держать баланс или allowance
    """

    schema_version: str = Field(SCHEMA_VERSION, pattern="^1$")

    name: str = Field(..., min_length=1, max_length=64)
    symbol: str = Field(..., min_length=1, max_length=11)
    decimals: int = Field(..., ge=0, le=77)

    admin: str = Field(..., min_length=1, description="Текущий администратор")
    supply: SupplyState
    fee: FeeState

    balances: Dict[str, int] = Field(default_factory=dict)
    blocked: List[str] = Field(default_factory=list)
    allowances: Dict[str, Dict[str, int]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_invariants(self) -> "LedgerState":
        if self.supply.total_issued > self.supply.ceiling:
            raise ValueError(
                f"total_issued {self.supply.total_issued} exceeds ceiling {self.supply.ceiling}"
            )
        if self.fee.rate_bps > self.fee.max_rate_bps:
            raise ValueError(
                f"rate {self.fee.rate_bps} bps exceeds maximum {self.fee.max_rate_bps} bps"
            )
        for holder, amount in self.balances.items():
            if is_null_identity(holder):
                raise ValueError(f"null identity cannot hold a balance: {holder!r}")
            if amount <= 0 or amount > UINT256_MAX:
                raise ValueError(f"balance of {holder} out of range: {amount}")
        for owner, per_owner in self.allowances.items():
            if is_null_identity(owner):
                raise ValueError(f"null identity cannot own an allowance: {owner!r}")
            for spender in per_owner:
                if is_null_identity(spender):
                    raise ValueError(f"null identity cannot be an allowance spender: {spender!r}")
        total = sum(self.balances.values())
        if total != self.supply.total_issued:
            raise ValueError(
                f"balances sum {total} does not match total_issued {self.supply.total_issued}"
            )
        return self

    # -------------------------------------------------------------------------
    # Document (JSON) форма
    # -------------------------------------------------------------------------

    def to_document(self) -> Dict[str, Any]:
        """
        JSON-совместимый документ снапшота.

        Суммы: десятичные строки, ключи отсортированы для детерминизма.
        """
        return {
            "schema_version": self.schema_version,
            "name": self.name,
            "symbol": self.symbol,
            "decimals": self.decimals,
            "admin": self.admin,
            "supply": {
                "total_issued": str(self.supply.total_issued),
                "ceiling": str(self.supply.ceiling),
            },
            "fee": {
                "rate_bps": self.fee.rate_bps,
                "max_rate_bps": self.fee.max_rate_bps,
                "recipient": self.fee.recipient,
                "enabled": self.fee.enabled,
            },
            "balances": {k: str(v) for k, v in sorted(self.balances.items())},
            "blocked": sorted(self.blocked),
            "allowances": {
                owner: {spender: str(v) for spender, v in sorted(per_owner.items())}
                for owner, per_owner in sorted(self.allowances.items())
            },
        }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "LedgerState":
        """
        Восстановление снапшота из документа.

        Raises:
            jsonschema.ValidationError: документ не соответствует схеме
            pydantic.ValidationError: нарушены инварианты ledger
        """
        validate_ledger_snapshot(document)
        return cls(
            schema_version=document["schema_version"],
            name=document["name"],
            symbol=document["symbol"],
            decimals=document["decimals"],
            admin=document["admin"],
            supply=SupplyState(
                total_issued=int(document["supply"]["total_issued"]),
                ceiling=int(document["supply"]["ceiling"]),
            ),
            fee=FeeState(**document["fee"]),
            balances={k: int(v) for k, v in document.get("balances", {}).items()},
            blocked=list(document.get("blocked", [])),
            allowances={
                owner: {spender: int(v) for spender, v in per_owner.items()}
                for owner, per_owner in document.get("allowances", {}).items()
            },
        )
