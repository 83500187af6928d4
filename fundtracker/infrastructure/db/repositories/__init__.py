"""
SQLAlchemy repositories
"""

from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.repositories import Stores

from .alert_repository import AlertRepository
from .fund_repository import FundRepository
from .holding_repository import HoldingRepository
from .sip_plan_repository import SipPlanRepository
from .transaction_repository import TransactionRepository
from .user_repository import UserRepository


def create_db_stores(session: AsyncSession) -> Stores:
    """All repositories bound to one session (one unit of work)"""
    return Stores(
        catalog=FundRepository(session),
        ledger=TransactionRepository(session),
        holdings=HoldingRepository(session),
        sip_plans=SipPlanRepository(session),
        alerts=AlertRepository(session),
        users=UserRepository(session),
        commit=session.commit,
    )


__all__ = [
    "AlertRepository",
    "FundRepository",
    "HoldingRepository",
    "SipPlanRepository",
    "TransactionRepository",
    "UserRepository",
    "create_db_stores",
]
