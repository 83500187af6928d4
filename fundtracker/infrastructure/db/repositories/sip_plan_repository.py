"""
SIP Plan Repository
"""

from decimal import Decimal
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fundtracker.domain.models import SipFrequency, SipPlan
from fundtracker.infrastructure.db.models import SipFrequencyEnum, SipPlanModel
from fundtracker.utils.time import now_ist_naive


class SipPlanRepository:
    """Repository for SIP plans"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, plan: SipPlan) -> SipPlan:
        model = SipPlanModel(
            user_id=plan.user_id,
            fund_id=plan.fund_id,
            amount=plan.amount,
            frequency=SipFrequencyEnum(plan.frequency.value),
            is_active=plan.is_active,
            next_date=plan.next_date,
            created_at=plan.created_at or now_ist_naive(),
        )
        self.session.add(model)
        await self.session.flush()
        return self._to_domain(model)

    async def list_for_user(self, user_id: int) -> List[SipPlan]:
        result = await self.session.execute(
            select(SipPlanModel)
            .where(SipPlanModel.user_id == user_id)
            .order_by(SipPlanModel.id)
        )
        return [self._to_domain(m) for m in result.scalars().all()]

    async def set_active(self, plan_id: int, is_active: bool) -> Optional[SipPlan]:
        model = await self.session.get(SipPlanModel, plan_id)
        if model is None:
            return None
        model.is_active = is_active
        await self.session.flush()
        return self._to_domain(model)

    @staticmethod
    def _to_domain(model: SipPlanModel) -> SipPlan:
        return SipPlan(
            id=model.id,
            user_id=model.user_id,
            fund_id=model.fund_id,
            amount=Decimal(str(model.amount)),
            frequency=SipFrequency(model.frequency.value),
            next_date=model.next_date,
            is_active=bool(model.is_active),
            created_at=model.created_at,
        )
