"""
FastAPI dependencies
Build repositories and services for one request
"""

from decimal import Decimal
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.config import settings
from fundtracker.domain.repositories import Stores
from fundtracker.domain.services.alert_service import AlertService
from fundtracker.domain.services.analysis import PortfolioAnalyzer
from fundtracker.domain.services.catalog_service import CatalogService
from fundtracker.domain.services.holding_aggregator import HoldingAggregator
from fundtracker.domain.services.portfolio_summarizer import PortfolioSummarizer
from fundtracker.domain.services.sip_service import SipPlanService
from fundtracker.domain.services.transaction_service import TransactionService
from fundtracker.domain.services.user_service import UserService
from fundtracker.infrastructure.db.database import get_db
from fundtracker.infrastructure.db.repositories import create_db_stores


async def get_stores(request: Request, db: Optional[AsyncSession] = Depends(get_db)) -> Stores:
    """
    Repositories for this request

    With the database backend all repositories share the request session.
    Writes under a user lock commit before the lock is released; anything
    left over commits at the end of the request.
    """
    if db is None:
        return request.app.state.memory_stores
    return create_db_stores(db)


def get_aggregator(stores: Stores = Depends(get_stores)) -> HoldingAggregator:
    return HoldingAggregator(stores.catalog, stores.holdings, stores.ledger)


def get_alert_service(stores: Stores = Depends(get_stores)) -> AlertService:
    return AlertService(stores.alerts)


def get_sip_service(stores: Stores = Depends(get_stores)) -> SipPlanService:
    return SipPlanService(stores.sip_plans)


def get_user_service(stores: Stores = Depends(get_stores)) -> UserService:
    return UserService(stores.users)


def get_catalog_service(
    stores: Stores = Depends(get_stores),
    alerts: AlertService = Depends(get_alert_service),
) -> CatalogService:
    return CatalogService(
        stores.catalog,
        stores.holdings,
        alerts,
        nav_alert_threshold_pct=Decimal(str(settings.NAV_ALERT_THRESHOLD_PCT)),
    )


def get_transaction_service(
    stores: Stores = Depends(get_stores),
    aggregator: HoldingAggregator = Depends(get_aggregator),
    sip_service: SipPlanService = Depends(get_sip_service),
    alerts: AlertService = Depends(get_alert_service),
) -> TransactionService:
    return TransactionService(
        catalog=stores.catalog,
        ledger=stores.ledger,
        aggregator=aggregator,
        sip_service=sip_service,
        alert_service=alerts,
        users=stores.users,
        commit=stores.commit,
    )


def get_summarizer(
    stores: Stores = Depends(get_stores),
    aggregator: HoldingAggregator = Depends(get_aggregator),
) -> PortfolioSummarizer:
    return PortfolioSummarizer(aggregator, stores.sip_plans)


def get_analyzer(aggregator: HoldingAggregator = Depends(get_aggregator)) -> PortfolioAnalyzer:
    return PortfolioAnalyzer(aggregator, top_performers_limit=settings.TOP_PERFORMERS_LIMIT)
