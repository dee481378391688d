"""
Fee Policy — ставка комиссии (bps), получатель и флаг включения

compute_fee(amount) = floor(amount * rate_bps / 10000), либо 0 если
комиссия выключена или ставка 0. Только усечение (никакого округления):
principal + fee == amount всегда.

Ставка ограничена сверху max_rate_bps (по умолчанию 1000 bps = 10%).
"""

from dataclasses import dataclass

from capledger.core.domain.events import TaxRateUpdated, TaxRecipientUpdated, TaxStatusUpdated
from capledger.core.domain.identity import Endpoint, is_holder, is_null_identity, require_identity
from capledger.core.errors import InvalidAmount, RateTooHigh
from capledger.core.math import BPS_DENOMINATOR, bps_of, require_amount, split_bps


@dataclass(frozen=True)
class FeeQuote:
    """Результат расчёта комиссии для суммы."""

    amount: int
    fee: int
    principal: int
    rate_bps: int
    applied: bool


class FeePolicy:
    """
    Конфигурация комиссии.

    Инварианты:
    - 0 <= rate_bps <= max_rate_bps <= 10000
    - recipient никогда не null
    """

    def __init__(self, recipient: str, rate_bps: int = 0, max_rate_bps: int = 1_000, enabled: bool = False):
        if max_rate_bps < 0 or max_rate_bps > BPS_DENOMINATOR:
            raise ValueError(f"max_rate_bps must be in [0, {BPS_DENOMINATOR}], got {max_rate_bps}")
        self._max_rate_bps = max_rate_bps
        self._recipient = require_identity(recipient, role="fee recipient")
        self._rate_bps = self._check_rate(rate_bps)
        self._enabled = self._check_enabled(enabled)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    @property
    def rate_bps(self) -> int:
        return self._rate_bps

    @property
    def max_rate_bps(self) -> int:
        return self._max_rate_bps

    @property
    def recipient(self) -> str:
        return self._recipient

    @property
    def enabled(self) -> bool:
        return self._enabled

    # -------------------------------------------------------------------------
    # Mutators (admin-gated в Ledger)
    # -------------------------------------------------------------------------

    def _check_rate(self, rate_bps: int) -> int:
        if isinstance(rate_bps, bool) or not isinstance(rate_bps, int):
            raise InvalidAmount(f"rate must be an integer, got {type(rate_bps).__name__}")
        if rate_bps < 0:
            raise InvalidAmount(f"rate cannot be negative: {rate_bps}")
        if rate_bps > self._max_rate_bps:
            raise RateTooHigh(f"rate {rate_bps} bps exceeds maximum {self._max_rate_bps} bps")
        return rate_bps

    def set_rate(self, new_rate_bps: int) -> TaxRateUpdated:
        """
        Raises:
            RateTooHigh: new_rate_bps > max_rate_bps
        """
        old = self._rate_bps
        self._rate_bps = self._check_rate(new_rate_bps)
        return TaxRateUpdated(old_rate_bps=old, new_rate_bps=new_rate_bps)

    def set_recipient(self, identity: str) -> TaxRecipientUpdated:
        """
        Raises:
            InvalidIdentity: null identity
        """
        require_identity(identity, role="fee recipient")
        old = self._recipient
        self._recipient = identity
        return TaxRecipientUpdated(old_recipient=old, new_recipient=identity)

    @staticmethod
    def _check_enabled(enabled: bool) -> bool:
        if not isinstance(enabled, bool):
            raise InvalidAmount(f"enabled must be a bool, got {type(enabled).__name__}")
        return enabled

    def set_enabled(self, enabled: bool) -> TaxStatusUpdated:
        """
        Raises:
            InvalidAmount: enabled не bool (строки "false"/"0" не приводятся)
        """
        self._enabled = self._check_enabled(enabled)
        return TaxStatusUpdated(enabled=self._enabled)

    # -------------------------------------------------------------------------
    # Pure
    # -------------------------------------------------------------------------

    def compute_fee(self, amount: int) -> int:
        require_amount(amount)
        if not self._enabled or self._rate_bps == 0:
            return 0
        return bps_of(amount, self._rate_bps)

    def applies_to(self, source: Endpoint, dest: Endpoint) -> bool:
        """
        Комиссия берётся только с переводов holder → holder.

        Эмиссия (source=MINT) и сжигание (dest=BURN) обходят комиссию.
        """
        return (
            self._enabled
            and self._rate_bps > 0
            and is_holder(source)
            and is_holder(dest)
            and not is_null_identity(self._recipient)
        )

    def quote(self, source: Endpoint, dest: Endpoint, amount: int) -> FeeQuote:
        require_amount(amount)
        if self.applies_to(source, dest):
            principal, fee = split_bps(amount, self._rate_bps)
        else:
            principal, fee = amount, 0
        return FeeQuote(
            amount=amount,
            fee=fee,
            principal=principal,
            rate_bps=self._rate_bps,
            applied=fee > 0,
        )
