"""
Repository protocols for type hints.

The domain services only talk to these interfaces; the in-memory stores and
the SQLAlchemy repositories both satisfy them.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Protocol

from fundtracker.domain.models import Alert, Fund, Holding, SipPlan, Transaction, User


class FundCatalog(Protocol):
    async def get_by_id(self, fund_id: int) -> Optional[Fund]:
        ...

    async def get_many(self, fund_ids: Iterable[int]) -> Dict[int, Fund]:
        ...

    async def list_all(self) -> List[Fund]:
        ...

    async def search(self, query: str) -> List[Fund]:
        ...

    async def upsert(self, fund: Fund) -> Fund:
        ...

    async def update_nav(self, fund_id: int, nav: Decimal) -> Optional[Fund]:
        ...


class TransactionLedger(Protocol):
    async def record(self, transaction: Transaction) -> Transaction:
        ...

    async def list_for_user(self, user_id: int) -> List[Transaction]:
        """Newest first; equal timestamps keep later insertions first."""
        ...


class HoldingStore(Protocol):
    async def get(self, user_id: int, fund_id: int) -> Optional[Holding]:
        ...

    async def list_for_user(self, user_id: int) -> List[Holding]:
        ...

    async def list_for_fund(self, fund_id: int) -> List[Holding]:
        ...

    async def save(self, holding: Holding) -> Holding:
        ...

    async def replace_for_user(self, user_id: int, holdings: Iterable[Holding]) -> List[Holding]:
        ...


class SipPlanStore(Protocol):
    async def create(self, plan: SipPlan) -> SipPlan:
        ...

    async def list_for_user(self, user_id: int) -> List[SipPlan]:
        ...

    async def set_active(self, plan_id: int, is_active: bool) -> Optional[SipPlan]:
        ...


class AlertStore(Protocol):
    async def create(self, alert: Alert) -> Alert:
        ...

    async def list_for_user(self, user_id: int) -> List[Alert]:
        ...

    async def mark_read(self, alert_id: int) -> bool:
        ...


class UserStore(Protocol):
    async def create(self, user: User) -> User:
        ...

    async def get(self, user_id: int) -> Optional[User]:
        ...

    async def get_by_email(self, email: str) -> Optional[User]:
        ...


async def no_commit() -> None:
    """Unit of work for stores that write through immediately"""


@dataclass(frozen=True)
class Stores:
    """One set of repositories sharing a unit of work"""
    catalog: FundCatalog
    ledger: TransactionLedger
    holdings: HoldingStore
    sip_plans: SipPlanStore
    alerts: AlertStore
    users: UserStore
    # Makes the writes so far visible to other sessions
    commit: Callable[[], Awaitable[None]] = no_commit
