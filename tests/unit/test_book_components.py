"""
Unit тесты для листовых компонентов ledger.

Coverage:
- BalanceStore: credit/debit, нулевые балансы, атомарный apply
- DenyList: add/remove без идемпотентности, null identity
- FeePolicy: потолок ставки, floor-расчёт, применимость
- SupplyController: потолок эмиссии, issue/retire
- AllowanceBook: approve/spend, неограниченный allowance
"""

import pytest

from capledger.book import AllowanceBook, BalanceStore, DenyList, FeePolicy, SupplyController
from capledger.core.domain import BURN, MINT, NULL_IDENTITY, Holder
from capledger.core.domain.events import (
    AddedToBlacklist,
    Approval,
    RemovedFromBlacklist,
    TaxRateUpdated,
    TaxRecipientUpdated,
    TaxStatusUpdated,
)
from capledger.core.errors import (
    AlreadyBlocked,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAmount,
    InvalidIdentity,
    NotBlocked,
    Overflow,
    RateTooHigh,
    SupplyCeilingExceeded,
)
from capledger.core.math import UINT256_MAX


# =============================================================================
# BALANCE STORE
# =============================================================================


class TestBalanceStore:
    def test_unknown_identity_has_zero_balance(self):
        store = BalanceStore()
        assert store.balance_of("nobody") == 0
        assert "nobody" not in store

    def test_credit_creates_entry(self):
        store = BalanceStore()
        store.credit("alice", 100)
        assert store.balance_of("alice") == 100
        assert "alice" in store
        assert len(store) == 1

    def test_debit_to_zero_removes_entry(self):
        store = BalanceStore({"alice": 100})
        store.debit("alice", 100)
        assert store.balance_of("alice") == 0
        assert "alice" not in store
        assert store.holders() == {}

    def test_debit_more_than_balance_fails(self):
        store = BalanceStore({"alice": 10})
        with pytest.raises(InsufficientBalance):
            store.debit("alice", 11)
        assert store.balance_of("alice") == 10

    def test_credit_overflow_fails(self):
        store = BalanceStore({"alice": UINT256_MAX})
        with pytest.raises(Overflow):
            store.credit("alice", 1)
        assert store.balance_of("alice") == UINT256_MAX

    def test_negative_amount_rejected(self):
        store = BalanceStore()
        with pytest.raises(InvalidAmount):
            store.credit("alice", -1)

    def test_zero_balances_not_stored_on_init(self):
        store = BalanceStore({"alice": 0, "bob": 5})
        assert store.holders() == {"bob": 5}

    def test_apply_is_atomic_on_overflow(self):
        """Credit overflow на второй ноге откатывает весь набор."""
        store = BalanceStore({"alice": 10, "bob": UINT256_MAX - 10})
        with pytest.raises(Overflow):
            store.apply(
                debits=(("alice", 10),),
                credits=(("carol", 5), ("bob", 11)),
            )
        assert store.holders() == {"alice": 10, "bob": UINT256_MAX - 10}

    def test_apply_debit_checked_before_credits(self):
        store = BalanceStore({"alice": 5})
        with pytest.raises(InsufficientBalance):
            store.apply(debits=(("alice", 6),), credits=(("bob", 6),))
        assert store.holders() == {"alice": 5}

    def test_apply_same_identity_on_both_sides(self):
        store = BalanceStore({"alice": 5})
        store.apply(debits=(("alice", 5),), credits=(("alice", 5),))
        assert store.balance_of("alice") == 5

    def test_total(self):
        store = BalanceStore({"alice": 5, "bob": 7})
        assert store.total() == 12


# =============================================================================
# DENY LIST
# =============================================================================


class TestDenyList:
    def test_add_and_query(self):
        deny = DenyList()
        event = deny.add("mallory")
        assert isinstance(event, AddedToBlacklist)
        assert event.identity == "mallory"
        assert deny.is_blocked("mallory")
        assert not deny.is_blocked("alice")

    def test_add_twice_fails(self):
        deny = DenyList(["mallory"])
        with pytest.raises(AlreadyBlocked):
            deny.add("mallory")

    def test_remove_absent_fails(self):
        deny = DenyList()
        with pytest.raises(NotBlocked):
            deny.remove("alice")

    def test_remove(self):
        deny = DenyList(["mallory"])
        event = deny.remove("mallory")
        assert isinstance(event, RemovedFromBlacklist)
        assert not deny.is_blocked("mallory")
        assert len(deny) == 0

    def test_add_null_identity_fails(self):
        deny = DenyList()
        with pytest.raises(InvalidIdentity):
            deny.add(NULL_IDENTITY)
        assert len(deny) == 0

    def test_null_is_never_blocked(self):
        assert not DenyList(["alice"]).is_blocked(None)

    def test_members_snapshot(self):
        deny = DenyList(["a", "b"])
        assert deny.members() == frozenset({"a", "b"})


# =============================================================================
# FEE POLICY
# =============================================================================


@pytest.fixture
def fee_policy():
    """5% комиссия, включена."""
    return FeePolicy(recipient="treasury", rate_bps=500, max_rate_bps=1000, enabled=True)


class TestFeePolicy:
    def test_compute_fee_floor(self, fee_policy):
        assert fee_policy.compute_fee(200) == 10
        assert fee_policy.compute_fee(199) == 9
        assert fee_policy.compute_fee(19) == 0

    def test_disabled_fee_is_zero(self, fee_policy):
        fee_policy.set_enabled(False)
        assert fee_policy.compute_fee(10_000) == 0

    def test_zero_rate_fee_is_zero(self, fee_policy):
        fee_policy.set_rate(0)
        assert fee_policy.compute_fee(10_000) == 0

    def test_set_rate_at_max(self, fee_policy):
        event = fee_policy.set_rate(1000)
        assert event == TaxRateUpdated(old_rate_bps=500, new_rate_bps=1000)
        assert fee_policy.rate_bps == 1000

    def test_set_rate_above_max_keeps_old(self, fee_policy):
        with pytest.raises(RateTooHigh):
            fee_policy.set_rate(1001)
        assert fee_policy.rate_bps == 500

    def test_set_negative_rate(self, fee_policy):
        with pytest.raises(InvalidAmount):
            fee_policy.set_rate(-1)

    def test_set_recipient(self, fee_policy):
        event = fee_policy.set_recipient("vault")
        assert event == TaxRecipientUpdated(old_recipient="treasury", new_recipient="vault")
        assert fee_policy.recipient == "vault"

    def test_set_null_recipient_fails(self, fee_policy):
        with pytest.raises(InvalidIdentity):
            fee_policy.set_recipient(NULL_IDENTITY)
        assert fee_policy.recipient == "treasury"

    def test_set_enabled_event(self, fee_policy):
        assert fee_policy.set_enabled(False) == TaxStatusUpdated(enabled=False)
        assert not fee_policy.enabled

    @pytest.mark.parametrize("value", ["false", "0", 0, 1, None])
    def test_set_enabled_rejects_non_bool(self, fee_policy, value):
        fee_policy.set_enabled(False)
        with pytest.raises(InvalidAmount):
            fee_policy.set_enabled(value)
        assert fee_policy.enabled is False

    def test_constructor_rejects_non_bool_enabled(self):
        with pytest.raises(InvalidAmount):
            FeePolicy(recipient="treasury", enabled="false")

    def test_constructor_rejects_rate_above_max(self):
        with pytest.raises(RateTooHigh):
            FeePolicy(recipient="treasury", rate_bps=2000, max_rate_bps=1000)

    def test_constructor_rejects_null_recipient(self):
        with pytest.raises(InvalidIdentity):
            FeePolicy(recipient="")

    def test_applies_only_holder_to_holder(self, fee_policy):
        assert fee_policy.applies_to(Holder("a"), Holder("b"))
        assert not fee_policy.applies_to(MINT, Holder("b"))
        assert not fee_policy.applies_to(Holder("a"), BURN)

    def test_quote(self, fee_policy):
        quote = fee_policy.quote(Holder("a"), Holder("b"), 200)
        assert quote.fee == 10
        assert quote.principal == 190
        assert quote.applied

    def test_quote_for_burn_has_no_fee(self, fee_policy):
        quote = fee_policy.quote(Holder("a"), BURN, 200)
        assert quote.fee == 0
        assert quote.principal == 200
        assert not quote.applied


# =============================================================================
# SUPPLY CONTROLLER
# =============================================================================


class TestSupplyController:
    def test_issue_credits_and_counts(self):
        store = BalanceStore()
        supply = SupplyController(store, ceiling=1000)
        supply.issue("alice", 400)
        assert store.balance_of("alice") == 400
        assert supply.total_issued == 400
        assert supply.remaining() == 600

    def test_issue_up_to_ceiling(self):
        supply = SupplyController(BalanceStore(), ceiling=1000)
        supply.issue("alice", 1000)
        assert supply.remaining() == 0

    def test_issue_above_ceiling_mutates_nothing(self):
        store = BalanceStore()
        supply = SupplyController(store, ceiling=1000)
        supply.issue("alice", 999)
        with pytest.raises(SupplyCeilingExceeded):
            supply.issue("alice", 2)
        assert store.balance_of("alice") == 999
        assert supply.total_issued == 999

    def test_retire_frees_room(self):
        store = BalanceStore()
        supply = SupplyController(store, ceiling=100)
        supply.issue("alice", 100)
        supply.retire("alice", 30)
        assert supply.total_issued == 70
        assert supply.remaining() == 30
        assert store.balance_of("alice") == 70

    def test_retire_insufficient_balance(self):
        store = BalanceStore()
        supply = SupplyController(store, ceiling=100)
        supply.issue("alice", 10)
        with pytest.raises(InsufficientBalance):
            supply.retire("alice", 11)
        assert supply.total_issued == 10

    def test_constructor_checks_ceiling(self):
        with pytest.raises(SupplyCeilingExceeded):
            SupplyController(BalanceStore(), ceiling=10, total_issued=11)


# =============================================================================
# ALLOWANCE BOOK
# =============================================================================


class TestAllowanceBook:
    def test_approve_overwrites(self):
        book = AllowanceBook()
        assert book.approve("alice", "bob", 50) == Approval(owner="alice", spender="bob", amount=50)
        book.approve("alice", "bob", 20)
        assert book.allowance("alice", "bob") == 20

    def test_spend_decrements(self):
        book = AllowanceBook({"alice": {"bob": 50}})
        book.spend("alice", "bob", 20)
        assert book.allowance("alice", "bob") == 30

    def test_spend_more_than_allowed(self):
        book = AllowanceBook({"alice": {"bob": 5}})
        with pytest.raises(InsufficientAllowance):
            book.spend("alice", "bob", 6)
        assert book.allowance("alice", "bob") == 5

    def test_unlimited_allowance_not_decremented(self):
        book = AllowanceBook()
        book.approve("alice", "bob", UINT256_MAX)
        book.spend("alice", "bob", 1_000)
        assert book.allowance("alice", "bob") == UINT256_MAX

    def test_approve_null_spender(self):
        with pytest.raises(InvalidIdentity):
            AllowanceBook().approve("alice", NULL_IDENTITY, 1)

    def test_as_nested_drops_zero(self):
        book = AllowanceBook()
        book.approve("alice", "bob", 3)
        book.approve("alice", "carol", 0)
        assert book.as_nested() == {"alice": {"bob": 3}}
