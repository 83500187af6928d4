"""
Fund Repository
Catalog reads plus seed upserts and NAV refresh
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.models import Fund, RiskLevel
from fundtracker.infrastructure.db.models import FundModel
from fundtracker.utils.time import now_ist_naive


class FundRepository:
    """Repository for the fund catalog"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def get_by_id(self, fund_id: int) -> Optional[Fund]:
        model = await self.session.get(FundModel, fund_id)
        return self._to_domain(model) if model else None

    async def get_many(self, fund_ids: Iterable[int]) -> Dict[int, Fund]:
        """
        Keyed lookup for a set of funds

        Args:
            fund_ids: Fund ids to load

        Returns:
            fund_id -> Fund (unknown ids are absent)
        """
        ids = list(set(fund_ids))
        if not ids:
            return {}

        result = await self.session.execute(
            select(FundModel).where(FundModel.id.in_(ids))
        )
        return {m.id: self._to_domain(m) for m in result.scalars().all()}

    async def list_all(self) -> List[Fund]:
        result = await self.session.execute(select(FundModel).order_by(FundModel.id))
        return [self._to_domain(m) for m in result.scalars().all()]

    async def search(self, query: str) -> List[Fund]:
        """Case-insensitive match on name, category or AMC"""
        pattern = f"%{query.lower()}%"
        result = await self.session.execute(
            select(FundModel)
            .where(or_(
                func.lower(FundModel.name).like(pattern),
                func.lower(FundModel.category).like(pattern),
                func.lower(FundModel.amc).like(pattern),
            ))
            .order_by(FundModel.id)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def upsert(self, fund: Fund) -> Fund:
        model = await self.session.get(FundModel, fund.id)
        if model is None:
            model = FundModel(id=fund.id)
            self.session.add(model)

        model.name = fund.name
        model.category = fund.category
        model.amc = fund.amc
        model.current_nav = fund.current_nav
        model.expense_ratio = fund.expense_ratio
        model.risk_level = fund.risk_level.value
        model.nav_updated_at = now_ist_naive()

        await self.session.flush()
        return self._to_domain(model)

    async def update_nav(self, fund_id: int, nav: Decimal) -> Optional[Fund]:
        model = await self.session.get(FundModel, fund_id)
        if model is None:
            return None

        model.current_nav = nav
        model.nav_updated_at = now_ist_naive()
        await self.session.flush()
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: FundModel) -> Fund:
        """Convert database model to domain entity"""
        return Fund(
            id=model.id,
            name=model.name,
            category=model.category,
            amc=model.amc,
            current_nav=Decimal(str(model.current_nav)),
            expense_ratio=Decimal(str(model.expense_ratio)) if model.expense_ratio is not None else None,
            risk_level=RiskLevel(model.risk_level),
        )
