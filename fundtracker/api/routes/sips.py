from typing import List

from fastapi import APIRouter, Depends

from fundtracker.api.dependencies import get_sip_service
from fundtracker.domain.schemas.transaction import SipPlanSchema, SipPlanUpdate
from fundtracker.domain.services.sip_service import SipPlanService

router = APIRouter()


@router.get("/user/{user_id}", response_model=List[SipPlanSchema])
async def list_sip_plans(user_id: int, service: SipPlanService = Depends(get_sip_service)):
    return [SipPlanSchema.from_domain(p) for p in await service.list_plans(user_id)]


@router.patch("/{plan_id}", response_model=SipPlanSchema)
async def update_sip_plan(
    plan_id: int,
    body: SipPlanUpdate,
    service: SipPlanService = Depends(get_sip_service),
):
    """Pause or resume a SIP plan"""
    return SipPlanSchema.from_domain(await service.set_active(plan_id, body.is_active))
