"""Transfer Engine — атомарный settlement переводов

Алгоритм transfer(source, dest, amount):
1. source заблокирован → SenderBlocked
2. dest заблокирован → RecipientBlocked
3. Комиссия применима (включена, ставка > 0, оба конца: holders,
   получатель задан) и fee > 0:
   - debit source на amount
   - credit fee recipient на fee
   - credit dest на amount - fee
   - события: Transfer(fee), FeeCollected, Transfer(net)
4. Иначе: debit source на amount, credit dest на amount, событие Transfer

Эмиссия (source=MINT) и сжигание (dest=BURN) проходят через тот же путь
и обходят комиссию по построению.

Двухфазная схема:
- plan(): все проверки, без мутаций → SettlementPlan
- execute(): применение плана одним атомарным BalanceStore.apply
  (или issue/retire Supply Controller для MINT/BURN)
Ошибка в любой фазе оставляет состояние без изменений.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from capledger.book.balance_store import BalanceStore
from capledger.book.deny_list import DenyList
from capledger.book.fee_policy import FeePolicy
from capledger.book.supply import SupplyController
from capledger.core.domain.events import FeeCollected, LedgerEvent, Transfer
from capledger.core.domain.identity import (
    BURN,
    MINT,
    Endpoint,
    Holder,
    endpoint_identity,
)
from capledger.core.errors import InvalidIdentity, RecipientBlocked, SenderBlocked
from capledger.core.math import require_amount


# =============================================================================
# PLAN
# =============================================================================


class SettlementKind(str, Enum):
    """Вид settlement."""

    ISSUE = "issue"
    RETIRE = "retire"
    TRANSFER = "transfer"
    FEE_SPLIT = "fee_split"


@dataclass(frozen=True)
class Movement:
    """Одно движение баланса source → dest."""

    source: Endpoint
    dest: Endpoint
    amount: int


@dataclass(frozen=True)
class SettlementPlan:
    """План settlement: что будет применено к ledger.

    Инвариант: principal + fee == amount.
    """

    kind: SettlementKind
    source: Endpoint
    dest: Endpoint
    amount: int
    principal: int
    fee: int
    fee_recipient: Optional[str]
    movements: Tuple[Movement, ...]

    # Детали
    details: str


@dataclass(frozen=True)
class Settlement:
    """Применённый план и порождённые события."""

    plan: SettlementPlan
    events: Tuple[LedgerEvent, ...]


# =============================================================================
# ENGINE
# =============================================================================


class TransferEngine:
    """Transfer Engine: deny-list → fee policy → balance store."""

    def __init__(
        self,
        balances: BalanceStore,
        deny_list: DenyList,
        fee_policy: FeePolicy,
        supply: SupplyController,
    ):
        self.balances = balances
        self.deny_list = deny_list
        self.fee_policy = fee_policy
        self.supply = supply

    def plan(self, source: Endpoint, dest: Endpoint, amount: int) -> SettlementPlan:
        """Проверки и расчёт settlement без мутаций.

        Raises:
            InvalidAmount / Overflow: amount не uint256
            InvalidIdentity: недопустимая пара концов (BURN как source и т.п.)
            SenderBlocked / RecipientBlocked: deny-list
            SupplyCeilingExceeded: эмиссия сверх потолка
        """
        require_amount(amount)
        self._check_endpoints(source, dest)

        # 1-2. Deny-list (sentinels никогда не заблокированы)
        if isinstance(source, Holder) and self.deny_list.is_blocked(source.identity):
            raise SenderBlocked(f"sender {source.identity} is blacklisted")
        if isinstance(dest, Holder) and self.deny_list.is_blocked(dest.identity):
            raise RecipientBlocked(f"recipient {dest.identity} is blacklisted")

        if source is MINT:
            self.supply.check_issue(amount)
            return SettlementPlan(
                kind=SettlementKind.ISSUE,
                source=source,
                dest=dest,
                amount=amount,
                principal=amount,
                fee=0,
                fee_recipient=None,
                movements=(Movement(source, dest, amount),),
                details=f"issue {amount} to {dest}",
            )

        if dest is BURN:
            return SettlementPlan(
                kind=SettlementKind.RETIRE,
                source=source,
                dest=dest,
                amount=amount,
                principal=amount,
                fee=0,
                fee_recipient=None,
                movements=(Movement(source, dest, amount),),
                details=f"retire {amount} from {source}",
            )

        # 3. Комиссия (только holder → holder)
        quote = self.fee_policy.quote(source, dest, amount)
        if quote.applied:
            recipient = self.fee_policy.recipient
            return SettlementPlan(
                kind=SettlementKind.FEE_SPLIT,
                source=source,
                dest=dest,
                amount=amount,
                principal=quote.principal,
                fee=quote.fee,
                fee_recipient=recipient,
                movements=(
                    Movement(source, Holder(recipient), quote.fee),
                    Movement(source, dest, quote.principal),
                ),
                details=(
                    f"transfer {amount} from {source} to {dest}: "
                    f"fee {quote.fee} ({quote.rate_bps} bps) to {recipient}, net {quote.principal}"
                ),
            )

        # 4. Без комиссии (выключена, ставка 0 или fee округлилась в 0)
        return SettlementPlan(
            kind=SettlementKind.TRANSFER,
            source=source,
            dest=dest,
            amount=amount,
            principal=amount,
            fee=0,
            fee_recipient=None,
            movements=(Movement(source, dest, amount),),
            details=f"transfer {amount} from {source} to {dest}",
        )

    def execute(self, plan: SettlementPlan) -> Tuple[LedgerEvent, ...]:
        """Применение плана; все мутации одного плана атомарны."""
        sender = endpoint_identity(plan.source)
        receiver = endpoint_identity(plan.dest)

        if plan.kind == SettlementKind.ISSUE:
            self.supply.issue(receiver, plan.amount)
            return (Transfer(sender=None, recipient=receiver, amount=plan.amount),)

        if plan.kind == SettlementKind.RETIRE:
            self.supply.retire(sender, plan.amount)
            return (Transfer(sender=sender, recipient=None, amount=plan.amount),)

        if plan.kind == SettlementKind.FEE_SPLIT:
            self.balances.apply(
                debits=((sender, plan.amount),),
                credits=((plan.fee_recipient, plan.fee), (receiver, plan.principal)),
            )
            return (
                Transfer(sender=sender, recipient=plan.fee_recipient, amount=plan.fee),
                FeeCollected(sender=sender, collector=plan.fee_recipient, amount=plan.fee),
                Transfer(sender=sender, recipient=receiver, amount=plan.principal),
            )

        self.balances.apply(
            debits=((sender, plan.amount),),
            credits=((receiver, plan.amount),),
        )
        return (Transfer(sender=sender, recipient=receiver, amount=plan.amount),)

    def settle(self, source: Endpoint, dest: Endpoint, amount: int) -> Settlement:
        """plan() + execute()."""
        plan = self.plan(source, dest, amount)
        events = self.execute(plan)
        return Settlement(plan=plan, events=events)

    @staticmethod
    def _check_endpoints(source: Endpoint, dest: Endpoint) -> None:
        if source is BURN:
            raise InvalidIdentity("burn sink cannot be a settlement source")
        if dest is MINT:
            raise InvalidIdentity("mint source cannot be a settlement destination")
        if source is MINT and dest is BURN:
            raise InvalidIdentity("settlement requires at least one holder")
        if not isinstance(source, Holder) and source is not MINT:
            raise InvalidIdentity(f"unsupported settlement source: {source!r}")
        if not isinstance(dest, Holder) and dest is not BURN:
            raise InvalidIdentity(f"unsupported settlement destination: {dest!r}")
