"""
LedgerConfig — параметры создания ledger

Immutable Pydantic модель. Передаётся в конструктор Ledger явно,
никаких глобальных синглтонов.

Значения по умолчанию повторяют исходный деплой токена:
18 decimals, начальная эмиссия 1 000 000 токенов.
"""

from typing import Final

from pydantic import BaseModel, Field, model_validator

from capledger.core.errors import RateTooHigh, SupplyCeilingExceeded
from capledger.core.math import BPS_DENOMINATOR, UINT256_MAX

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_DECIMALS: Final[int] = 18

# Потолок ставки комиссии: 1000 bps = 10%
DEFAULT_MAX_RATE_BPS: Final[int] = 1_000

DEFAULT_INITIAL_SUPPLY_TOKENS: Final[int] = 1_000_000

DEFAULT_CEILING_TOKENS: Final[int] = 10_000_000

# 10**77 < 2**256 <= 10**78
MAX_DECIMALS: Final[int] = 77


# =============================================================================
# CONFIG MODEL
# =============================================================================


class LedgerConfig(BaseModel):
    """
    Конфигурация ledger.

    Все суммы: в base units (с учётом decimals). Для перевода из целых
    токенов используйте `LedgerConfig.units()` или `from_tokens()`.

    Доменные нарушения поднимают ошибки ledger напрямую:
    - initial_supply > ceiling → SupplyCeilingExceeded
    - initial_rate_bps > max_rate_bps → RateTooHigh
    """

    name: str = Field(..., min_length=1, max_length=64, description="Имя токена")
    symbol: str = Field(..., min_length=1, max_length=11, description="Тикер токена")
    decimals: int = Field(
        DEFAULT_DECIMALS, ge=0, le=MAX_DECIMALS, description="Число знаков после запятой"
    )

    initial_supply: int = Field(
        ..., ge=0, le=UINT256_MAX, description="Начальная эмиссия (base units)"
    )
    ceiling: int = Field(
        ..., ge=0, le=UINT256_MAX, description="Потолок эмиссии (base units), неизменяем"
    )

    max_rate_bps: int = Field(
        DEFAULT_MAX_RATE_BPS, ge=0, le=BPS_DENOMINATOR, description="Потолок ставки (bps)"
    )
    initial_rate_bps: int = Field(0, ge=0, description="Начальная ставка комиссии (bps)")
    fee_enabled: bool = Field(False, description="Комиссия включена при создании")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def check_bounds(self) -> "LedgerConfig":
        if self.initial_supply > self.ceiling:
            raise SupplyCeilingExceeded(
                f"initial supply {self.initial_supply} exceeds ceiling {self.ceiling}"
            )
        if self.initial_rate_bps > self.max_rate_bps:
            raise RateTooHigh(
                f"initial rate {self.initial_rate_bps} bps exceeds maximum {self.max_rate_bps} bps"
            )
        return self

    def units(self, tokens: int) -> int:
        """Целые токены → base units."""
        return tokens * 10 ** self.decimals

    @classmethod
    def from_tokens(
        cls,
        name: str,
        symbol: str,
        initial_supply_tokens: int = DEFAULT_INITIAL_SUPPLY_TOKENS,
        ceiling_tokens: int = DEFAULT_CEILING_TOKENS,
        decimals: int = DEFAULT_DECIMALS,
        **kwargs,
    ) -> "LedgerConfig":
        """
        Конфигурация из сумм в целых токенах.

        Examples:
            >>> cfg = LedgerConfig.from_tokens("Base Token", "BASE")
            >>> cfg.initial_supply == 1_000_000 * 10**18
            True
        """
        scale = 10 ** decimals
        return cls(
            name=name,
            symbol=symbol,
            decimals=decimals,
            initial_supply=initial_supply_tokens * scale,
            ceiling=ceiling_tokens * scale,
            **kwargs,
        )
