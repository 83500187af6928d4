"""
Holding Repository
One row per (user, fund); written only by the holding aggregator
"""

from decimal import Decimal
from typing import Iterable, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.models import Holding
from fundtracker.infrastructure.db.models import HoldingModel


class HoldingRepository:
    """Repository for current holdings"""

    def __init__(self, session: AsyncSession):
        """Initialize with database session"""
        self.session = session

    async def get(self, user_id: int, fund_id: int) -> Optional[Holding]:
        model = await self._get_model(user_id, fund_id)
        return self._to_domain(model) if model else None

    async def list_for_user(self, user_id: int) -> List[Holding]:
        result = await self.session.execute(
            select(HoldingModel)
            .where(HoldingModel.user_id == user_id)
            .order_by(HoldingModel.id)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_for_fund(self, fund_id: int) -> List[Holding]:
        result = await self.session.execute(
            select(HoldingModel)
            .where(HoldingModel.fund_id == fund_id)
            .order_by(HoldingModel.id)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def save(self, holding: Holding) -> Holding:
        """
        Insert or update the row for (user, fund)

        The existing row keeps its id; a new row gets one from the database.
        """
        model = await self._get_model(holding.user_id, holding.fund_id)
        if model is None:
            model = HoldingModel(user_id=holding.user_id, fund_id=holding.fund_id)
            if holding.id is not None:
                model.id = holding.id
            self.session.add(model)

        model.units = holding.units
        model.avg_nav = holding.avg_nav
        model.total_invested = holding.total_invested

        await self.session.flush()
        return self._to_domain(model)

    async def replace_for_user(self, user_id: int, holdings: Iterable[Holding]) -> List[Holding]:
        await self.session.execute(
            delete(HoldingModel).where(HoldingModel.user_id == user_id)
        )
        await self.session.flush()
        return [await self.save(h) for h in holdings]

    async def _get_model(self, user_id: int, fund_id: int) -> Optional[HoldingModel]:
        # Row lock until commit; a no-op on SQLite
        result = await self.session.execute(
            select(HoldingModel)
            .where(
                HoldingModel.user_id == user_id,
                HoldingModel.fund_id == fund_id,
            )
            .with_for_update()
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_domain(model: HoldingModel) -> Holding:
        """Convert database model to domain entity"""
        return Holding(
            id=model.id,
            user_id=model.user_id,
            fund_id=model.fund_id,
            units=Decimal(str(model.units)),
            avg_nav=Decimal(str(model.avg_nav)),
            total_invested=Decimal(str(model.total_invested)),
        )
