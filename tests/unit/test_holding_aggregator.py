"""
Unit Tests for HoldingAggregator

✅ Weighted average cost on buy / SIP
✅ Sell at average cost, no overselling
✅ Validation happens before any write
✅ Ledger replay is idempotent
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from fundtracker.domain.exceptions import InsufficientUnits, InvalidAmount, InvalidReference
from fundtracker.domain.models import (
    Holding,
    Transaction,
    TransactionStatus,
    TransactionType,
    quantize_nav,
)
from fundtracker.domain.services.holding_aggregator import (
    HoldingAggregator,
    apply_to_holding,
    fold_transactions,
    validate_transaction,
)


def tx(tx_id, tx_type, amount, nav, fund_id=1, user_id=1, units=None, status=TransactionStatus.COMPLETED):
    return Transaction(
        id=tx_id,
        user_id=user_id,
        fund_id=fund_id,
        type=tx_type,
        amount=Decimal(amount),
        units=Decimal(units) if units is not None else None,
        nav=Decimal(nav),
        status=status,
    )


class CountingHoldingStore:
    """Mock holding store that records writes"""

    def __init__(self):
        self.rows = {}
        self.saves = 0

    async def get(self, user_id, fund_id):
        return self.rows.get((user_id, fund_id))

    async def list_for_user(self, user_id):
        return [h for (u, _), h in self.rows.items() if u == user_id]

    async def list_for_fund(self, fund_id):
        return [h for (_, f), h in self.rows.items() if f == fund_id]

    async def save(self, holding):
        self.saves += 1
        holding = replace(holding, id=holding.id or len(self.rows) + 1)
        self.rows[(holding.user_id, holding.fund_id)] = holding
        return holding

    async def replace_for_user(self, user_id, holdings):
        self.rows = {k: v for k, v in self.rows.items() if k[0] != user_id}
        return [await self.save(h) for h in holdings]


@pytest.fixture
def aggregator(memory_stores):
    return HoldingAggregator(memory_stores.catalog, memory_stores.holdings, memory_stores.ledger)


# ============================================
# Pure aggregation
# ============================================

def test_first_buy_creates_holding():
    """₹10,000 at NAV 50 -> 200 units at 50"""
    holding = apply_to_holding(None, tx(1, TransactionType.BUY, "10000", "50.00"))

    assert holding.units == Decimal("200.0000")
    assert holding.avg_nav == Decimal("50.0000")
    assert holding.total_invested == Decimal("10000.00")


def test_second_buy_uses_weighted_average():
    """₹10,000 at 50 then ₹5,000 at 60"""
    first = apply_to_holding(None, tx(1, TransactionType.BUY, "10000", "50"))
    second = apply_to_holding(first, tx(2, TransactionType.BUY, "5000", "60"))

    assert second.units == Decimal("283.3333")
    assert second.total_invested == Decimal("15000.00")
    assert second.avg_nav == quantize_nav(Decimal("15000") / Decimal("283.3333"))
    assert abs(second.avg_nav - Decimal("52.94")) < Decimal("0.01")


def test_sip_aggregates_like_buy():
    first = apply_to_holding(None, tx(1, TransactionType.SIP, "5000", "50"))
    second = apply_to_holding(first, tx(2, TransactionType.SIP, "5000", "50"))

    assert second.units == Decimal("200.0000")
    assert second.avg_nav == Decimal("50.0000")


def test_explicit_units_override_amount_over_nav():
    holding = apply_to_holding(None, tx(1, TransactionType.BUY, "1000", "50", units="19.5"))

    assert holding.units == Decimal("19.5000")
    assert holding.total_invested == Decimal("1000.00")


def test_sell_reduces_units_and_cost_at_average_cost():
    bought = apply_to_holding(None, tx(1, TransactionType.BUY, "10000", "50"))
    sold = apply_to_holding(bought, tx(2, TransactionType.SELL, "6000", "60", units="50"))

    assert sold.units == Decimal("150.0000")
    assert sold.total_invested == Decimal("7500.00")
    # Selling at average cost leaves avg_nav untouched
    assert sold.avg_nav == bought.avg_nav


def test_sell_with_explicit_unit_buy_removes_cost_at_avg_nav():
    """First buy with explicit units: avg_nav 50 while invested / units is about 51.28"""
    bought = apply_to_holding(None, tx(1, TransactionType.BUY, "1000", "50", units="19.5"))
    assert bought.avg_nav == Decimal("50.0000")

    sold = apply_to_holding(bought, tx(2, TransactionType.SELL, "550", "55", units="10"))

    assert sold.units == Decimal("9.5000")
    assert sold.total_invested == Decimal("500.00")
    assert sold.avg_nav == Decimal("50.0000")


def test_sell_cost_is_floored_at_zero():
    holding = Holding(id=1, user_id=1, fund_id=1, units=Decimal("10"), avg_nav=Decimal("60"),
                      total_invested=Decimal("500.00"))

    sold = apply_to_holding(holding, tx(2, TransactionType.SELL, "540", "60", units="9"))

    assert sold.units == Decimal("1.0000")
    assert sold.total_invested == Decimal("0.00")


def test_sell_everything_zeroes_invested():
    bought = apply_to_holding(None, tx(1, TransactionType.BUY, "10000", "50"))
    sold = apply_to_holding(bought, tx(2, TransactionType.SELL, "12000", "60", units="200"))

    assert sold.units == Decimal("0.0000")
    assert sold.total_invested == Decimal("0.00")
    assert not sold.is_open


def test_oversell_rejected():
    holding = Holding(id=1, user_id=1, fund_id=1, units=Decimal("10"), avg_nav=Decimal("50"),
                      total_invested=Decimal("500"))

    with pytest.raises(InsufficientUnits) as exc:
        validate_transaction(tx(2, TransactionType.SELL, "1000", "50"), fund=object(), holding=holding)

    assert exc.value.requested == Decimal("20.0000")
    assert exc.value.available == Decimal("10")


def test_sell_without_holding_rejected():
    with pytest.raises(InsufficientUnits):
        validate_transaction(tx(1, TransactionType.SELL, "100", "50"), fund=object(), holding=None)


@pytest.mark.parametrize("amount,nav", [("0", "50"), ("-100", "50"), ("100", "0")])
def test_non_positive_amount_or_nav_rejected(amount, nav):
    with pytest.raises(InvalidAmount):
        validate_transaction(tx(1, TransactionType.BUY, amount, nav), fund=object(), holding=None)


def test_dust_amount_rejected():
    """Amount too small to buy a single 0.0001 unit"""
    with pytest.raises(InvalidAmount):
        validate_transaction(tx(1, TransactionType.BUY, "0.001", "100"), fund=object(), holding=None)


def test_unknown_fund_rejected():
    with pytest.raises(InvalidReference):
        validate_transaction(tx(1, TransactionType.BUY, "100", "50", fund_id=99), fund=None, holding=None)


# ============================================
# Ledger replay
# ============================================

def test_fold_skips_duplicate_ids():
    ledger = [
        tx(1, TransactionType.BUY, "10000", "50"),
        tx(2, TransactionType.BUY, "5000", "60"),
    ]
    once = fold_transactions(ledger)
    twice = fold_transactions(ledger + ledger)

    assert once == twice
    assert once[(1, 1)].units == Decimal("283.3333")


def test_fold_ignores_pending_and_failed():
    ledger = [
        tx(1, TransactionType.BUY, "10000", "50"),
        tx(2, TransactionType.BUY, "5000", "60", status=TransactionStatus.PENDING),
        tx(3, TransactionType.BUY, "5000", "60", status=TransactionStatus.FAILED),
    ]
    folded = fold_transactions(ledger)

    assert folded[(1, 1)].units == Decimal("200.0000")


def test_fold_keeps_users_and_funds_apart():
    folded = fold_transactions([
        tx(1, TransactionType.BUY, "1000", "50", fund_id=1, user_id=1),
        tx(2, TransactionType.BUY, "1000", "50", fund_id=2, user_id=1),
        tx(3, TransactionType.BUY, "1000", "50", fund_id=1, user_id=2),
    ])

    assert set(folded) == {(1, 1), (1, 2), (2, 1)}


# ============================================
# Store-backed aggregator
# ============================================

@pytest.mark.asyncio
async def test_apply_transaction_persists_single_holding_per_fund(aggregator, memory_stores):
    await aggregator.apply_transaction(tx(1, TransactionType.BUY, "10000", "50"))
    await aggregator.apply_transaction(tx(2, TransactionType.BUY, "5000", "60"))

    holdings = await memory_stores.holdings.list_for_user(1)
    assert len(holdings) == 1
    assert holdings[0].units == Decimal("283.3333")


@pytest.mark.asyncio
async def test_pending_transaction_does_not_write(memory_stores):
    store = CountingHoldingStore()
    aggregator = HoldingAggregator(memory_stores.catalog, store)

    result = await aggregator.apply_transaction(
        tx(1, TransactionType.BUY, "10000", "50", status=TransactionStatus.PENDING)
    )

    assert result is None
    assert store.saves == 0


@pytest.mark.asyncio
async def test_failed_validation_does_not_write(memory_stores):
    store = CountingHoldingStore()
    aggregator = HoldingAggregator(memory_stores.catalog, store)

    with pytest.raises(InvalidReference):
        await aggregator.apply_transaction(tx(1, TransactionType.BUY, "100", "50", fund_id=99))
    with pytest.raises(InsufficientUnits):
        await aggregator.apply_transaction(tx(2, TransactionType.SELL, "100", "50"))

    assert store.saves == 0


@pytest.mark.asyncio
async def test_get_holdings_joins_funds_and_skips_closed(aggregator):
    await aggregator.apply_transaction(tx(1, TransactionType.BUY, "10000", "50", fund_id=1))
    await aggregator.apply_transaction(tx(2, TransactionType.BUY, "6000", "60", fund_id=2))
    await aggregator.apply_transaction(tx(3, TransactionType.SELL, "6000", "60", fund_id=2, units="100"))

    holdings = await aggregator.get_holdings(1)

    assert [h.fund.id for h in holdings] == [1]
    assert holdings[0].fund.name == "Axis Bluechip Fund"
    assert holdings[0].current_value == Decimal("10000.00")


@pytest.mark.asyncio
async def test_get_holdings_empty_for_unknown_user(aggregator):
    assert await aggregator.get_holdings(42) == []


@pytest.mark.asyncio
async def test_rebuild_matches_incremental_state(aggregator, memory_stores):
    for entry in (
        tx(None, TransactionType.BUY, "10000", "50"),
        tx(None, TransactionType.BUY, "5000", "60"),
        tx(None, TransactionType.SELL, "3000", "60", units="50"),
    ):
        recorded = await memory_stores.ledger.record(entry)
        await aggregator.apply_transaction(recorded)

    before = await memory_stores.holdings.list_for_user(1)
    rebuilt = await aggregator.rebuild_holdings(1)
    again = await aggregator.rebuild_holdings(1)

    assert rebuilt == before
    assert again == before
