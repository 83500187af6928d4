"""
HOLDING AGGREGATOR
Fold ledger transactions into one holding per (user, fund)

RESPONSIBILITIES:
- Validate a transaction before anything is written
- Weighted-average cost basis on buy / SIP
- Reduce units and invested capital at average cost on sell
- Join holdings with the fund catalog for valuation

RULES:
✅ One holding per (user, fund)
✅ avg_nav = total_invested / units after every buy / SIP
✅ Only completed transactions move a holding
❌ No overselling (InsufficientUnits)
❌ No fabricated fund data
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from fundtracker.domain.exceptions import InsufficientUnits, InvalidAmount, InvalidReference
from fundtracker.domain.models import (
    Fund,
    FundHolding,
    Holding,
    Transaction,
    TransactionType,
    quantize_amount,
    quantize_nav,
    quantize_units,
)
from fundtracker.domain.repositories import FundCatalog, HoldingStore, TransactionLedger

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def resolve_units(tx: Transaction) -> Decimal:
    """
    Units moved by a transaction.

    Explicit units win; otherwise units are derived as amount / nav.
    The caller must have validated nav > 0.
    """
    if tx.units is not None and tx.units > ZERO:
        return quantize_units(tx.units)
    return quantize_units(tx.amount / tx.nav)


def validate_transaction(tx: Transaction, fund: Optional[Fund], holding: Optional[Holding]) -> Decimal:
    """
    Check a transaction against the catalog and the current holding.

    Args:
        tx: Transaction to check
        fund: Catalog entry for tx.fund_id (None if unknown)
        holding: Current holding for (tx.user_id, tx.fund_id), if any

    Returns:
        Units the transaction moves

    Raises:
        InvalidReference: fund does not exist
        InvalidAmount: amount, nav or units not positive
        InsufficientUnits: sell larger than the position
    """
    if fund is None:
        raise InvalidReference("Fund", tx.fund_id)
    if not isinstance(tx.type, TransactionType):
        raise InvalidAmount(f"Unsupported transaction type: {tx.type}", field="type")
    if tx.amount is None or tx.amount <= ZERO:
        raise InvalidAmount("Amount must be positive", field="amount")
    if tx.nav is None or tx.nav <= ZERO:
        raise InvalidAmount("NAV must be positive", field="nav")
    if tx.units is not None and tx.units < ZERO:
        raise InvalidAmount("Units cannot be negative", field="units")

    units = resolve_units(tx)
    if units <= ZERO:
        raise InvalidAmount(
            f"Amount {tx.amount} buys less than 0.0001 units at NAV {tx.nav}",
            field="amount",
        )

    if tx.type == TransactionType.SELL:
        available = holding.units if holding is not None else ZERO
        if units > available:
            raise InsufficientUnits(tx.fund_id, units, available)

    return units


def apply_to_holding(holding: Optional[Holding], tx: Transaction) -> Holding:
    """
    Pure aggregation step: return the holding after applying tx.

    Assumes validate_transaction() has passed.
    """
    units = resolve_units(tx)

    if tx.type == TransactionType.SELL:
        return _apply_sell(holding, tx, units)

    amount = quantize_amount(tx.amount)
    if holding is None:
        return Holding(
            id=None,
            user_id=tx.user_id,
            fund_id=tx.fund_id,
            units=units,
            avg_nav=quantize_nav(tx.nav),
            total_invested=amount,
        )

    new_units = holding.units + units
    new_invested = holding.total_invested + amount
    return replace(
        holding,
        units=new_units,
        total_invested=new_invested,
        avg_nav=quantize_nav(new_invested / new_units),
    )


def _apply_sell(holding: Optional[Holding], tx: Transaction, units: Decimal) -> Holding:
    available = holding.units if holding is not None else ZERO
    if holding is None or units > available:
        raise InsufficientUnits(tx.fund_id, units, available)

    remaining = holding.units - units
    if remaining == ZERO:
        invested = Decimal("0.00")
    else:
        # Units leave at average cost; avg_nav stays as it was
        invested = max(
            quantize_amount(holding.total_invested - units * holding.avg_nav),
            Decimal("0.00"),
        )

    cost_removed = holding.total_invested - invested
    logger.info(
        "Sell on fund %s for user %s: %s units, proceeds=%s, cost=%s, realised=%s",
        tx.fund_id,
        tx.user_id,
        units,
        quantize_amount(tx.amount),
        cost_removed,
        quantize_amount(tx.amount) - cost_removed,
    )
    return replace(holding, units=remaining, total_invested=invested)


def fold_transactions(transactions: Iterable[Transaction]) -> Dict[Tuple[int, int], Holding]:
    """
    Replay transactions (oldest first) from an empty state.

    A transaction id is applied at most once, so replaying a ledger that
    contains duplicates of already-applied entries does not double count.

    Returns:
        (user_id, fund_id) -> Holding
    """
    holdings: Dict[Tuple[int, int], Holding] = {}
    seen = set()

    for tx in transactions:
        if tx.id is not None:
            if tx.id in seen:
                continue
            seen.add(tx.id)
        if not tx.is_completed:
            continue
        key = (tx.user_id, tx.fund_id)
        holdings[key] = apply_to_holding(holdings.get(key), tx)

    return holdings


class HoldingAggregator:
    """
    Holding Aggregator
    Sole writer of the holding store
    """

    def __init__(
        self,
        catalog: FundCatalog,
        holdings: HoldingStore,
        ledger: Optional[TransactionLedger] = None,
    ):
        """
        Initialize aggregator

        Args:
            catalog: Fund catalog (read-only here)
            holdings: Holding store owned by this aggregator
            ledger: Transaction ledger, needed only for rebuild_holdings()
        """
        self.catalog = catalog
        self.holdings = holdings
        self.ledger = ledger

    async def validate(self, tx: Transaction) -> Fund:
        """
        Validate a transaction without writing anything

        Returns:
            The referenced fund
        """
        fund = await self.catalog.get_by_id(tx.fund_id)
        holding = await self.holdings.get(tx.user_id, tx.fund_id)
        validate_transaction(tx, fund, holding)
        return fund

    async def apply_transaction(self, tx: Transaction) -> Optional[Holding]:
        """
        Fold one transaction into the user's holding for that fund

        Args:
            tx: Recorded transaction

        Returns:
            The created or updated holding. Pending and failed
            transactions leave the store untouched and return the current
            holding (None if the user has no position).
        """
        fund = await self.catalog.get_by_id(tx.fund_id)
        existing = await self.holdings.get(tx.user_id, tx.fund_id)
        validate_transaction(tx, fund, existing)

        if not tx.is_completed:
            logger.info("Transaction %s is %s; holding unchanged", tx.id, tx.status.value)
            return existing

        updated = apply_to_holding(existing, tx)
        saved = await self.holdings.save(updated)

        logger.info(
            "Holding user=%s fund=%s -> units=%s avg_nav=%s invested=%s",
            saved.user_id,
            saved.fund_id,
            saved.units,
            saved.avg_nav,
            saved.total_invested,
        )
        return saved

    async def get_holdings(self, user_id: int) -> List[FundHolding]:
        """
        Open holdings of a user joined with their funds

        Args:
            user_id: Owner

        Returns:
            FundHolding list (zero-unit positions excluded)
        """
        holdings = [h for h in await self.holdings.list_for_user(user_id) if h.is_open]
        if not holdings:
            return []

        funds = await self.catalog.get_many({h.fund_id for h in holdings})

        result = []
        for holding in holdings:
            fund = funds.get(holding.fund_id)
            if fund is None:
                logger.error("Holding %s references missing fund %s", holding.id, holding.fund_id)
                raise InvalidReference("Fund", holding.fund_id)
            result.append(FundHolding(holding=holding, fund=fund))

        return result

    async def rebuild_holdings(self, user_id: int) -> List[Holding]:
        """
        Re-derive a user's holdings from the full ledger

        Returns:
            Stored holdings after the rebuild
        """
        if self.ledger is None:
            raise RuntimeError("rebuild_holdings() needs a transaction ledger")

        newest_first = await self.ledger.list_for_user(user_id)
        folded = fold_transactions(reversed(newest_first))

        # Keep identities of positions that already exist
        current = {h.fund_id: h for h in await self.holdings.list_for_user(user_id)}
        rebuilt = []
        for (_, fund_id), holding in folded.items():
            previous = current.get(fund_id)
            rebuilt.append(replace(holding, id=previous.id) if previous else holding)

        stored = await self.holdings.replace_for_user(user_id, rebuilt)
        logger.info("Rebuilt %d holdings for user %s from %d transactions", len(stored), user_id, len(newest_first))
        return stored
