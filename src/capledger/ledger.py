"""
Ledger — публичная поверхность операций

Единая явная структура состояния: все компоненты (Balance Store, Deny-List,
Fee Policy, Supply Controller, Allowance Book, Access Guard) принадлежат
одному экземпляру Ledger. Глобального состояния нет.

Модель исполнения: хост сериализует операции над одним экземпляром.
Каждая операция либо полностью применяется и возвращает OperationResult
с событиями, либо поднимает LedgerError и не меняет ничего.

Admin-операции проходят через AccessGuard; transfer/burn идут напрямую
в TransferEngine.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

from capledger.book import AllowanceBook, BalanceStore, DenyList, FeePolicy, SupplyController
from capledger.core.domain.config import LedgerConfig
from capledger.core.domain.events import LedgerEvent, OwnershipTransferred
from capledger.core.domain.identity import BURN, MINT, Holder, require_identity
from capledger.core.domain.state import FeeState, LedgerState, SupplyState
from capledger.core.errors import LedgerError
from capledger.core.math import require_amount
from capledger.gatekeeper import AccessGuard
from capledger.settlement import SettlementPlan, TransferEngine

logger = logging.getLogger(__name__)


# =============================================================================
# RESULTS
# =============================================================================


@dataclass(frozen=True)
class OperationResult:
    """Результат успешной операции: события для внешних наблюдателей."""

    operation: str
    events: Tuple[LedgerEvent, ...]

    # Детали
    details: str = ""


@dataclass(frozen=True)
class InvariantReport:
    """Аудит инвариантов ledger."""

    conservation_ok: bool
    ceiling_ok: bool
    rate_ok: bool
    admin_ok: bool

    balances_total: int
    total_issued: int
    ceiling: int

    details: str

    @property
    def ok(self) -> bool:
        return self.conservation_ok and self.ceiling_ok and self.rate_ok and self.admin_ok


# =============================================================================
# LEDGER
# =============================================================================


class Ledger:
    """Ledger engine для fungible-токена с потолком эмиссии и комиссией."""

    def __init__(self, config: LedgerConfig, deployer: str):
        """
        Args:
            config: конфигурация (имя, тикер, эмиссия, потолок, комиссия)
            deployer: identity создателя: первый администратор, получатель
                начальной эмиссии и комиссии по умолчанию

        Raises:
            InvalidIdentity: null deployer
        """
        require_identity(deployer, role="deployer")
        balances = BalanceStore()
        self._assemble(
            name=config.name,
            symbol=config.symbol,
            decimals=config.decimals,
            guard=AccessGuard(deployer),
            balances=balances,
            deny_list=DenyList(),
            fee_policy=FeePolicy(
                recipient=deployer,
                rate_bps=config.initial_rate_bps,
                max_rate_bps=config.max_rate_bps,
                enabled=config.fee_enabled,
            ),
            supply=SupplyController(balances, ceiling=config.ceiling),
            allowances=AllowanceBook(),
        )

        # Начальная эмиссия обходит Access Guard (администратора ещё нет),
        # но проходит ту же проверку потолка
        events = [OwnershipTransferred(previous_owner=None, new_owner=deployer)]
        if config.initial_supply:
            settlement = self._engine.settle(MINT, Holder(deployer), config.initial_supply)
            events.extend(settlement.events)
        self._commit("construct", events, f"{config.symbol} deployed by {deployer}")

    @classmethod
    def construct(
        cls,
        name: str,
        symbol: str,
        initial_supply: int,
        ceiling: int,
        *,
        deployer: str,
        **options: Any,
    ) -> "Ledger":
        """
        Raises:
            SupplyCeilingExceeded: initial_supply > ceiling
        """
        config = LedgerConfig(
            name=name,
            symbol=symbol,
            initial_supply=initial_supply,
            ceiling=ceiling,
            **options,
        )
        return cls(config, deployer=deployer)

    def _assemble(
        self,
        *,
        name: str,
        symbol: str,
        decimals: int,
        guard: AccessGuard,
        balances: BalanceStore,
        deny_list: DenyList,
        fee_policy: FeePolicy,
        supply: SupplyController,
        allowances: AllowanceBook,
    ) -> None:
        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self._guard = guard
        self._balances = balances
        self._deny_list = deny_list
        self._fee_policy = fee_policy
        self._supply = supply
        self._allowances = allowances
        self._engine = TransferEngine(balances, deny_list, fee_policy, supply)
        self._journal: list[LedgerEvent] = []

    # -------------------------------------------------------------------------
    # Persistence hooks
    # -------------------------------------------------------------------------

    @classmethod
    def from_snapshot(cls, state: LedgerState) -> "Ledger":
        """Восстановление ledger из снапшота (журнал начинается пустым)."""
        balances = BalanceStore(state.balances)
        ledger = cls.__new__(cls)
        ledger._assemble(
            name=state.name,
            symbol=state.symbol,
            decimals=state.decimals,
            guard=AccessGuard(state.admin),
            balances=balances,
            deny_list=DenyList(state.blocked),
            fee_policy=FeePolicy(
                recipient=state.fee.recipient,
                rate_bps=state.fee.rate_bps,
                max_rate_bps=state.fee.max_rate_bps,
                enabled=state.fee.enabled,
            ),
            supply=SupplyController(
                balances,
                ceiling=state.supply.ceiling,
                total_issued=state.supply.total_issued,
            ),
            allowances=AllowanceBook(state.allowances),
        )
        logger.debug("ledger %s restored from snapshot", state.symbol)
        return ledger

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Ledger":
        return cls.from_snapshot(LedgerState.from_document(document))

    def snapshot(self) -> LedgerState:
        return LedgerState(
            name=self._name,
            symbol=self._symbol,
            decimals=self._decimals,
            admin=self._guard.admin,
            supply=SupplyState(
                total_issued=self._supply.total_issued,
                ceiling=self._supply.ceiling,
            ),
            fee=FeeState(
                rate_bps=self._fee_policy.rate_bps,
                max_rate_bps=self._fee_policy.max_rate_bps,
                recipient=self._fee_policy.recipient,
                enabled=self._fee_policy.enabled,
            ),
            balances=self._balances.holders(),
            blocked=sorted(self._deny_list.members()),
            allowances=self._allowances.as_nested(),
        )

    # -------------------------------------------------------------------------
    # Read-only
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def decimals(self) -> int:
        return self._decimals

    @property
    def owner(self) -> str:
        return self._guard.admin

    @property
    def total_supply(self) -> int:
        return self._supply.total_issued

    @property
    def ceiling(self) -> int:
        return self._supply.ceiling

    @property
    def tax_rate(self) -> int:
        return self._fee_policy.rate_bps

    @property
    def max_tax_rate(self) -> int:
        return self._fee_policy.max_rate_bps

    @property
    def tax_recipient(self) -> str:
        return self._fee_policy.recipient

    @property
    def tax_enabled(self) -> bool:
        return self._fee_policy.enabled

    @property
    def journal(self) -> Tuple[LedgerEvent, ...]:
        """
        Append-only журнал событий этого экземпляра.

        Растёт всё время жизни экземпляра; каждое чтение копирует его.
        Хост, который сохраняет события из OperationResult сам, может
        периодически забирать журнал через drain_journal().
        """
        return tuple(self._journal)

    def drain_journal(self) -> Tuple[LedgerEvent, ...]:
        """Вернуть накопленные события и очистить журнал."""
        drained = tuple(self._journal)
        self._journal.clear()
        logger.debug("%s journal drained: %d events", self._symbol, len(drained))
        return drained

    def balance_of(self, identity: str) -> int:
        return self._balances.balance_of(identity)

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.allowance(owner, spender)

    def is_blacklisted(self, identity: str) -> bool:
        return self._deny_list.is_blocked(identity)

    def calculate_tax(self, amount: int) -> int:
        return self._fee_policy.compute_fee(amount)

    def remaining_mintable(self) -> int:
        return self._supply.remaining()

    def quote_transfer(self, sender: str, to: str, amount: int) -> SettlementPlan:
        """План перевода без применения (те же проверки, что у transfer)."""
        with self._rejections("quote_transfer"):
            return self._engine.plan(Holder(sender), Holder(to), amount)

    # -------------------------------------------------------------------------
    # Transfers
    # -------------------------------------------------------------------------

    def transfer(self, caller: str, to: str, amount: int) -> OperationResult:
        """
        Raises:
            InvalidIdentity: null caller или to (для сжигания есть burn)
            SenderBlocked / RecipientBlocked
            InsufficientBalance
        """
        with self._rejections("transfer"):
            settlement = self._engine.settle(Holder(caller), Holder(to), amount)
            return self._commit("transfer", settlement.events, settlement.plan.details)

    def burn(self, caller: str, amount: int) -> OperationResult:
        with self._rejections("burn"):
            settlement = self._engine.settle(Holder(caller), BURN, amount)
            return self._commit("burn", settlement.events, settlement.plan.details)

    def approve(self, caller: str, spender: str, amount: int) -> OperationResult:
        with self._rejections("approve"):
            event = self._allowances.approve(caller, spender, amount)
            return self._commit("approve", [event], f"{caller} approved {spender} for {amount}")

    def transfer_from(self, caller: str, sender: str, to: str, amount: int) -> OperationResult:
        """
        Перевод от имени sender силами spender (caller) в пределах allowance.

        Комиссия и deny-list применяются так же, как в transfer.

        Raises:
            InsufficientAllowance: allowance(sender, caller) < amount
        """
        with self._rejections("transfer_from"):
            require_identity(caller, role="spender")
            source, dest = Holder(sender), Holder(to)
            require_amount(amount)
            self._allowances.check_spend(sender, caller, amount)
            plan = self._engine.plan(source, dest, amount)
            events = self._engine.execute(plan)
            self._allowances.spend(sender, caller, amount)
            return self._commit("transfer_from", events, f"{plan.details} (spender {caller})")

    def burn_from(self, caller: str, holder: str, amount: int) -> OperationResult:
        with self._rejections("burn_from"):
            require_identity(caller, role="spender")
            source = Holder(holder)
            require_amount(amount)
            self._allowances.check_spend(holder, caller, amount)
            plan = self._engine.plan(source, BURN, amount)
            events = self._engine.execute(plan)
            self._allowances.spend(holder, caller, amount)
            return self._commit("burn_from", events, f"{plan.details} (spender {caller})")

    # -------------------------------------------------------------------------
    # Admin (Access Guard)
    # -------------------------------------------------------------------------

    def mint(self, caller: str, to: str, amount: int) -> OperationResult:
        """
        Raises:
            NotAuthorized
            RecipientBlocked
            SupplyCeilingExceeded: total_supply + amount > ceiling
        """
        with self._rejections("mint"):
            self._guard.require_admin(caller)
            settlement = self._engine.settle(MINT, Holder(to), amount)
            return self._commit("mint", settlement.events, settlement.plan.details)

    def add_to_blacklist(self, caller: str, identity: str) -> OperationResult:
        with self._rejections("add_to_blacklist"):
            self._guard.require_admin(caller)
            event = self._deny_list.add(identity)
            return self._commit("add_to_blacklist", [event], f"{identity} blacklisted")

    def remove_from_blacklist(self, caller: str, identity: str) -> OperationResult:
        with self._rejections("remove_from_blacklist"):
            self._guard.require_admin(caller)
            event = self._deny_list.remove(identity)
            return self._commit("remove_from_blacklist", [event], f"{identity} unblocked")

    def set_tax_rate(self, caller: str, rate_bps: int) -> OperationResult:
        """
        Raises:
            NotAuthorized
            RateTooHigh: rate_bps > max_tax_rate
        """
        with self._rejections("set_tax_rate"):
            self._guard.require_admin(caller)
            event = self._fee_policy.set_rate(rate_bps)
            return self._commit("set_tax_rate", [event], f"tax rate {rate_bps} bps")

    def set_tax_recipient(self, caller: str, identity: str) -> OperationResult:
        with self._rejections("set_tax_recipient"):
            self._guard.require_admin(caller)
            event = self._fee_policy.set_recipient(identity)
            return self._commit("set_tax_recipient", [event], f"tax recipient {identity}")

    def set_tax_enabled(self, caller: str, enabled: bool) -> OperationResult:
        with self._rejections("set_tax_enabled"):
            self._guard.require_admin(caller)
            event = self._fee_policy.set_enabled(enabled)
            return self._commit("set_tax_enabled", [event], f"tax enabled={event.enabled}")

    def transfer_admin(self, caller: str, new_admin: str) -> OperationResult:
        with self._rejections("transfer_admin"):
            event = self._guard.transfer_admin(caller, new_admin)
            return self._commit("transfer_admin", [event], f"administrator {new_admin}")

    # -------------------------------------------------------------------------
    # Audit
    # -------------------------------------------------------------------------

    def check_invariants(self) -> InvariantReport:
        balances_total = self._balances.total()
        total_issued = self._supply.total_issued
        ceiling = self._supply.ceiling

        conservation_ok = balances_total == total_issued
        ceiling_ok = total_issued <= ceiling
        rate_ok = 0 <= self._fee_policy.rate_bps <= self._fee_policy.max_rate_bps
        admin_ok = bool(self._guard.admin)

        problems = []
        if not conservation_ok:
            problems.append(f"balances {balances_total} != issued {total_issued}")
        if not ceiling_ok:
            problems.append(f"issued {total_issued} > ceiling {ceiling}")
        if not rate_ok:
            problems.append(f"rate {self._fee_policy.rate_bps} out of bounds")
        if not admin_ok:
            problems.append("administrator unset")

        return InvariantReport(
            conservation_ok=conservation_ok,
            ceiling_ok=ceiling_ok,
            rate_ok=rate_ok,
            admin_ok=admin_ok,
            balances_total=balances_total,
            total_issued=total_issued,
            ceiling=ceiling,
            details="; ".join(problems) if problems else "PASS",
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @contextmanager
    def _rejections(self, operation: str) -> Iterator[None]:
        try:
            yield
        except LedgerError as e:
            logger.info("%s %s rejected: %s", self._symbol, operation, e)
            raise

    def _commit(self, operation: str, events, details: str) -> OperationResult:
        events = tuple(events)
        self._journal.extend(events)
        logger.debug("%s %s: %s", self._symbol, operation, details)
        return OperationResult(operation=operation, events=events, details=details)
