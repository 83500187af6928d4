"""
In-memory repositories.

Process-local stores used by the test suite and by STORAGE_BACKEND=memory.
Identities come from an injected generator, timestamps from an injected
clock.
"""

from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from fundtracker.domain.models import Alert, Fund, Holding, SipPlan, Transaction, User
from fundtracker.domain.repositories import Stores
from fundtracker.utils.time import now_ist_naive

Clock = Callable[[], datetime]


class IdGenerator:
    """Monotonic integer identities starting at 1"""

    def __init__(self, start: int = 1):
        self._counter: Iterator[int] = itertools.count(start)

    def next_id(self) -> int:
        return next(self._counter)


class InMemoryFundCatalog:
    def __init__(self, funds: Iterable[Fund] = ()):
        self._funds: Dict[int, Fund] = {f.id: f for f in funds}

    async def get_by_id(self, fund_id: int) -> Optional[Fund]:
        return self._funds.get(fund_id)

    async def get_many(self, fund_ids: Iterable[int]) -> Dict[int, Fund]:
        return {fid: self._funds[fid] for fid in fund_ids if fid in self._funds}

    async def list_all(self) -> List[Fund]:
        return sorted(self._funds.values(), key=lambda f: f.id)

    async def search(self, query: str) -> List[Fund]:
        needle = query.lower()
        return [
            f for f in await self.list_all()
            if needle in f.name.lower() or needle in f.category.lower() or needle in f.amc.lower()
        ]

    async def upsert(self, fund: Fund) -> Fund:
        self._funds[fund.id] = fund
        return fund

    async def update_nav(self, fund_id: int, nav: Decimal) -> Optional[Fund]:
        fund = self._funds.get(fund_id)
        if fund is None:
            return None
        self._funds[fund_id] = replace(fund, current_nav=nav)
        return self._funds[fund_id]


class InMemoryTransactionLedger:
    """Append-only; entries are never updated or removed"""

    def __init__(self, ids: Optional[IdGenerator] = None, clock: Clock = now_ist_naive):
        self._entries: List[Tuple[int, Transaction]] = []
        self._ids = ids or IdGenerator()
        self._clock = clock

    async def record(self, transaction: Transaction) -> Transaction:
        recorded = replace(
            transaction,
            id=self._ids.next_id(),
            created_at=transaction.created_at or self._clock(),
        )
        self._entries.append((len(self._entries), recorded))
        return recorded

    async def list_for_user(self, user_id: int) -> List[Transaction]:
        mine = [(seq, t) for seq, t in self._entries if t.user_id == user_id]
        mine.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        return [t for _, t in mine]


class InMemoryHoldingStore:
    def __init__(self, ids: Optional[IdGenerator] = None):
        self._holdings: Dict[Tuple[int, int], Holding] = {}
        self._ids = ids or IdGenerator()

    async def get(self, user_id: int, fund_id: int) -> Optional[Holding]:
        return self._holdings.get((user_id, fund_id))

    async def list_for_user(self, user_id: int) -> List[Holding]:
        return sorted(
            (h for h in self._holdings.values() if h.user_id == user_id),
            key=lambda h: h.id,
        )

    async def list_for_fund(self, fund_id: int) -> List[Holding]:
        return sorted(
            (h for h in self._holdings.values() if h.fund_id == fund_id),
            key=lambda h: h.id,
        )

    async def save(self, holding: Holding) -> Holding:
        key = (holding.user_id, holding.fund_id)
        existing = self._holdings.get(key)
        if existing is not None:
            holding = replace(holding, id=existing.id)
        elif holding.id is None:
            holding = replace(holding, id=self._ids.next_id())
        self._holdings[key] = holding
        return holding

    async def replace_for_user(self, user_id: int, holdings: Iterable[Holding]) -> List[Holding]:
        for key in [k for k in self._holdings if k[0] == user_id]:
            del self._holdings[key]
        return [await self.save(h) for h in holdings]


class InMemorySipPlanStore:
    def __init__(self, ids: Optional[IdGenerator] = None, clock: Clock = now_ist_naive):
        self._plans: Dict[int, SipPlan] = {}
        self._ids = ids or IdGenerator()
        self._clock = clock

    async def create(self, plan: SipPlan) -> SipPlan:
        created = replace(plan, id=self._ids.next_id(), created_at=plan.created_at or self._clock())
        self._plans[created.id] = created
        return created

    async def list_for_user(self, user_id: int) -> List[SipPlan]:
        return [p for p in self._plans.values() if p.user_id == user_id]

    async def set_active(self, plan_id: int, is_active: bool) -> Optional[SipPlan]:
        plan = self._plans.get(plan_id)
        if plan is None:
            return None
        self._plans[plan_id] = replace(plan, is_active=is_active)
        return self._plans[plan_id]


class InMemoryAlertStore:
    def __init__(self, ids: Optional[IdGenerator] = None, clock: Clock = now_ist_naive):
        self._alerts: Dict[int, Alert] = {}
        self._ids = ids or IdGenerator()
        self._clock = clock

    async def create(self, alert: Alert) -> Alert:
        created = replace(alert, id=self._ids.next_id(), created_at=alert.created_at or self._clock())
        self._alerts[created.id] = created
        return created

    async def list_for_user(self, user_id: int) -> List[Alert]:
        mine = [a for a in self._alerts.values() if a.user_id == user_id]
        return sorted(mine, key=lambda a: (a.created_at, a.id), reverse=True)

    async def mark_read(self, alert_id: int) -> bool:
        alert = self._alerts.get(alert_id)
        if alert is None:
            return False
        self._alerts[alert_id] = replace(alert, is_read=True)
        return True


class InMemoryUserStore:
    def __init__(self, ids: Optional[IdGenerator] = None, clock: Clock = now_ist_naive):
        self._users: Dict[int, User] = {}
        self._ids = ids or IdGenerator()
        self._clock = clock

    async def create(self, user: User) -> User:
        created = replace(user, id=self._ids.next_id(), created_at=user.created_at or self._clock())
        self._users[created.id] = created
        return created

    async def get(self, user_id: int) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        email = email.lower()
        return next((u for u in self._users.values() if u.email.lower() == email), None)


def create_memory_stores(funds: Iterable[Fund] = (), clock: Clock = now_ist_naive) -> Stores:
    """Fresh, empty set of in-memory stores (catalog optionally pre-filled)"""
    return Stores(
        catalog=InMemoryFundCatalog(funds),
        ledger=InMemoryTransactionLedger(clock=clock),
        holdings=InMemoryHoldingStore(),
        sip_plans=InMemorySipPlanStore(clock=clock),
        alerts=InMemoryAlertStore(clock=clock),
        users=InMemoryUserStore(clock=clock),
    )
