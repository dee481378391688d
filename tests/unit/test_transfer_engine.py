"""Unit тесты для Transfer Engine.

Coverage:
- plan(): deny-list порядок проверок, fee split, эмиссия/сжигание
- execute(): атомарность, события
- недопустимые пары endpoints
"""

import pytest

from capledger.book import BalanceStore, DenyList, FeePolicy, SupplyController
from capledger.core.domain import BURN, MINT, Holder
from capledger.core.domain.events import FeeCollected, Transfer
from capledger.core.errors import (
    InsufficientBalance,
    InvalidIdentity,
    RecipientBlocked,
    SenderBlocked,
    SupplyCeilingExceeded,
)
from capledger.settlement import Movement, SettlementKind, TransferEngine


@pytest.fixture
def engine():
    """Engine: alice=200 из потолка 1000, комиссия 5% включена в пользу treasury."""
    balances = BalanceStore()
    supply = SupplyController(balances, ceiling=1000)
    supply.issue("alice", 200)
    fee_policy = FeePolicy(recipient="treasury", rate_bps=500, max_rate_bps=1000, enabled=True)
    return TransferEngine(balances, DenyList(), fee_policy, supply)


class TestPlan:
    def test_fee_split_plan(self, engine):
        plan = engine.plan(Holder("alice"), Holder("bob"), 200)
        assert plan.kind == SettlementKind.FEE_SPLIT
        assert plan.fee == 10
        assert plan.principal == 190
        assert plan.fee_recipient == "treasury"
        assert plan.movements == (
            Movement(Holder("alice"), Holder("treasury"), 10),
            Movement(Holder("alice"), Holder("bob"), 190),
        )

    def test_plan_does_not_mutate(self, engine):
        engine.plan(Holder("alice"), Holder("bob"), 200)
        assert engine.balances.balance_of("alice") == 200
        assert engine.balances.balance_of("bob") == 0

    def test_fee_rounding_to_zero_falls_through(self, engine):
        plan = engine.plan(Holder("alice"), Holder("bob"), 19)
        assert plan.kind == SettlementKind.TRANSFER
        assert plan.fee == 0
        assert plan.principal == 19

    def test_disabled_fee_plain_transfer(self, engine):
        engine.fee_policy.set_enabled(False)
        plan = engine.plan(Holder("alice"), Holder("bob"), 200)
        assert plan.kind == SettlementKind.TRANSFER

    def test_issue_plan_bypasses_fee(self, engine):
        plan = engine.plan(MINT, Holder("bob"), 100)
        assert plan.kind == SettlementKind.ISSUE
        assert plan.fee == 0

    def test_issue_plan_checks_ceiling(self, engine):
        with pytest.raises(SupplyCeilingExceeded):
            engine.plan(MINT, Holder("bob"), 801)

    def test_retire_plan_bypasses_fee(self, engine):
        plan = engine.plan(Holder("alice"), BURN, 100)
        assert plan.kind == SettlementKind.RETIRE
        assert plan.fee == 0

    def test_sender_checked_before_recipient(self, engine):
        engine.deny_list.add("alice")
        engine.deny_list.add("bob")
        with pytest.raises(SenderBlocked):
            engine.plan(Holder("alice"), Holder("bob"), 1)

    def test_recipient_blocked(self, engine):
        engine.deny_list.add("bob")
        with pytest.raises(RecipientBlocked):
            engine.plan(Holder("alice"), Holder("bob"), 1)

    def test_issue_to_blocked_recipient(self, engine):
        engine.deny_list.add("bob")
        with pytest.raises(RecipientBlocked):
            engine.plan(MINT, Holder("bob"), 1)

    def test_burn_by_blocked_sender(self, engine):
        engine.deny_list.add("alice")
        with pytest.raises(SenderBlocked):
            engine.plan(Holder("alice"), BURN, 1)

    @pytest.mark.parametrize(
        "source,dest",
        [(BURN, Holder("bob")), (Holder("alice"), MINT), (MINT, BURN)],
    )
    def test_invalid_endpoint_pairs(self, engine, source, dest):
        with pytest.raises(InvalidIdentity):
            engine.plan(source, dest, 1)


class TestSettle:
    def test_fee_split_settlement(self, engine):
        settlement = engine.settle(Holder("alice"), Holder("bob"), 200)
        assert engine.balances.balance_of("alice") == 0
        assert engine.balances.balance_of("bob") == 190
        assert engine.balances.balance_of("treasury") == 10
        assert settlement.events == (
            Transfer(sender="alice", recipient="treasury", amount=10),
            FeeCollected(sender="alice", collector="treasury", amount=10),
            Transfer(sender="alice", recipient="bob", amount=190),
        )

    def test_insufficient_balance_no_partial_mutation(self, engine):
        with pytest.raises(InsufficientBalance):
            engine.settle(Holder("alice"), Holder("bob"), 201)
        assert engine.balances.holders() == {"alice": 200}

    def test_issue_settlement(self, engine):
        settlement = engine.settle(MINT, Holder("bob"), 50)
        assert engine.supply.total_issued == 250
        assert settlement.events == (Transfer(sender=None, recipient="bob", amount=50),)

    def test_retire_settlement(self, engine):
        settlement = engine.settle(Holder("alice"), BURN, 50)
        assert engine.supply.total_issued == 150
        assert engine.balances.balance_of("alice") == 150
        assert settlement.events == (Transfer(sender="alice", recipient=None, amount=50),)

    def test_self_transfer_with_fee(self, engine):
        engine.settle(Holder("alice"), Holder("alice"), 200)
        assert engine.balances.balance_of("alice") == 190
        assert engine.balances.balance_of("treasury") == 10

    def test_transfer_to_fee_recipient_still_charged(self, engine):
        engine.settle(Holder("alice"), Holder("treasury"), 200)
        assert engine.balances.balance_of("treasury") == 200
        assert engine.balances.balance_of("alice") == 0

    def test_conservation_after_settlements(self, engine):
        engine.settle(Holder("alice"), Holder("bob"), 137)
        engine.settle(Holder("bob"), Holder("carol"), 51)
        engine.settle(MINT, Holder("dave"), 300)
        engine.settle(Holder("carol"), BURN, 10)
        assert engine.balances.total() == engine.supply.total_issued
