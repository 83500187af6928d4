"""
TRANSACTION SERVICE
Validate -> record -> aggregate, one user at a time

FLOW:
1. Resolve fund and execution NAV (defaults to the fund's current NAV)
2. Validate against catalog and current holding (no writes on failure)
3. Append to the ledger
4. Fold into the holding
5. SIP only: create the SIP plan and a sip_due alert
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional

from fundtracker.domain.exceptions import InvalidAmount, InvalidReference
from fundtracker.domain.models import (
    AlertType,
    Holding,
    SipFrequency,
    SipPlan,
    Transaction,
    TransactionStatus,
    TransactionType,
    TransactionWithFund,
    quantize_amount,
    quantize_nav,
)
from fundtracker.domain.repositories import FundCatalog, TransactionLedger, UserStore, no_commit
from fundtracker.domain.services.alert_service import AlertService
from fundtracker.domain.services.holding_aggregator import HoldingAggregator, resolve_units
from fundtracker.domain.services.sip_service import SipPlanService

logger = logging.getLogger(__name__)


class UserLockRegistry:
    """
    One asyncio.Lock per user id

    Entries are weak: a lock lives while some caller holds or waits on it,
    then drops out of the registry.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def for_user(self, user_id: int) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)


# Shared across requests so that concurrent submissions for one user serialise
user_locks = UserLockRegistry()


@dataclass(frozen=True)
class SubmissionResult:
    transaction: Transaction
    holding: Optional[Holding]
    sip_plan: Optional[SipPlan] = None


class TransactionService:
    def __init__(
        self,
        catalog: FundCatalog,
        ledger: TransactionLedger,
        aggregator: HoldingAggregator,
        sip_service: SipPlanService,
        alert_service: AlertService,
        users: Optional[UserStore] = None,
        locks: UserLockRegistry = user_locks,
        commit: Callable[[], Awaitable[None]] = no_commit,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.aggregator = aggregator
        self.sip_service = sip_service
        self.alert_service = alert_service
        self.users = users
        self.locks = locks
        self.commit = commit

    async def submit(
        self,
        user_id: int,
        fund_id: int,
        transaction_type: TransactionType,
        amount: Decimal,
        frequency: Optional[SipFrequency] = None,
        nav: Optional[Decimal] = None,
        units: Optional[Decimal] = None,
        status: TransactionStatus = TransactionStatus.COMPLETED,
    ) -> SubmissionResult:
        """
        Record a buy / sell / SIP and update the holding

        Args:
            user_id: Investor
            fund_id: Catalog fund id
            transaction_type: buy, sell or sip
            amount: Currency amount
            frequency: Required for SIP submissions
            nav: Execution NAV (defaults to the fund's current NAV)
            units: Explicit units (derived from amount / nav when omitted)
            status: Ledger status; only completed entries move holdings

        Returns:
            SubmissionResult with the recorded transaction, the holding
            after aggregation and, for SIPs, the new plan
        """
        if transaction_type == TransactionType.SIP and frequency is None:
            raise InvalidAmount("SIP frequency is required", field="frequency")

        async with self.locks.for_user(user_id):
            if self.users is not None and await self.users.get(user_id) is None:
                raise InvalidReference("User", user_id)

            fund = await self.catalog.get_by_id(fund_id)
            if fund is None:
                raise InvalidReference("Fund", fund_id)

            execution_nav = quantize_nav(nav) if nav is not None else fund.current_nav
            draft = Transaction(
                id=None,
                user_id=user_id,
                fund_id=fund_id,
                type=transaction_type,
                amount=quantize_amount(amount) if amount is not None else amount,
                units=units,
                nav=execution_nav,
                status=status,
            )

            # Validate first: nothing is written if this raises
            await self.aggregator.validate(draft)
            draft = replace(draft, units=resolve_units(draft))

            recorded = await self.ledger.record(draft)
            holding = await self.aggregator.apply_transaction(recorded)

            plan = None
            if transaction_type == TransactionType.SIP and recorded.is_completed:
                plan = await self.sip_service.create_plan(user_id, fund_id, recorded.amount, frequency)
                await self.alert_service.create_alert(
                    user_id,
                    AlertType.SIP_DUE,
                    title="SIP Started Successfully",
                    description=(
                        f"Your SIP for {fund.name} (₹{recorded.amount}/{frequency.value}) has been activated."
                    ),
                )

            # Commit before the next submission for this user reads the holding
            await self.commit()

        logger.info(
            "Transaction %s recorded: user=%s fund=%s %s amount=%s units=%s nav=%s",
            recorded.id,
            user_id,
            fund_id,
            transaction_type.value,
            recorded.amount,
            recorded.units,
            recorded.nav,
        )
        return SubmissionResult(transaction=recorded, holding=holding, sip_plan=plan)

    async def rebuild_holdings(self, user_id: int) -> List[Holding]:
        """Re-derive a user's holdings from the ledger, serialised with submissions"""
        async with self.locks.for_user(user_id):
            holdings = await self.aggregator.rebuild_holdings(user_id)
            await self.commit()
        return holdings

    async def list_transactions(self, user_id: int) -> List[TransactionWithFund]:
        """Ledger entries newest first, joined with their funds"""
        transactions = await self.ledger.list_for_user(user_id)
        funds = await self.catalog.get_many({t.fund_id for t in transactions})

        result = []
        for tx in transactions:
            fund = funds.get(tx.fund_id)
            if fund is None:
                logger.error("Transaction %s references missing fund %s", tx.id, tx.fund_id)
                raise InvalidReference("Fund", tx.fund_id)
            result.append(TransactionWithFund(transaction=tx, fund=fund))
        return result
