"""
SIP plan bookkeeping.

Plans are recorded with their next due date; nothing here executes them.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from fundtracker.domain.exceptions import InvalidAmount, NotFound
from fundtracker.domain.models import SipFrequency, SipPlan, quantize_amount
from fundtracker.domain.repositories import SipPlanStore
from fundtracker.utils.time import add_months, now_ist_naive

logger = logging.getLogger(__name__)


def next_sip_date(start: datetime, frequency: SipFrequency) -> datetime:
    """Due date of the instalment following `start`."""
    if frequency == SipFrequency.WEEKLY:
        return start + timedelta(days=7)
    if frequency == SipFrequency.MONTHLY:
        return add_months(start, 1)
    if frequency == SipFrequency.QUARTERLY:
        return add_months(start, 3)
    raise ValueError(f"Unknown SIP frequency: {frequency}")


class SipPlanService:
    def __init__(self, sip_plans: SipPlanStore):
        self.sip_plans = sip_plans

    async def create_plan(
        self,
        user_id: int,
        fund_id: int,
        amount: Decimal,
        frequency: SipFrequency,
        start: Optional[datetime] = None,
    ) -> SipPlan:
        if amount <= 0:
            raise InvalidAmount("SIP amount must be positive", field="amount")

        start = start or now_ist_naive()
        plan = await self.sip_plans.create(SipPlan(
            id=None,
            user_id=user_id,
            fund_id=fund_id,
            amount=quantize_amount(amount),
            frequency=frequency,
            next_date=next_sip_date(start, frequency),
            is_active=True,
        ))
        logger.info(
            "SIP plan %s created: user=%s fund=%s %s/%s next=%s",
            plan.id, user_id, fund_id, plan.amount, frequency.value, plan.next_date.date(),
        )
        return plan

    async def list_plans(self, user_id: int) -> List[SipPlan]:
        return await self.sip_plans.list_for_user(user_id)

    async def set_active(self, plan_id: int, is_active: bool) -> SipPlan:
        plan = await self.sip_plans.set_active(plan_id, is_active)
        if plan is None:
            raise NotFound("SIP plan", plan_id)
        logger.info("SIP plan %s %s", plan_id, "resumed" if is_active else "paused")
        return plan
