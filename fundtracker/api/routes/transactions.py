"""
Transaction API Routes
Record buy / sell / SIP and browse the ledger
"""

import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends

from fundtracker.api.dependencies import get_transaction_service
from fundtracker.domain.schemas.portfolio import HoldingSchema
from fundtracker.domain.schemas.transaction import (
    SipPlanSchema,
    SubmissionResponse,
    TransactionCreate,
    TransactionSchema,
)
from fundtracker.domain.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=SubmissionResponse, status_code=201)
async def submit_transaction(
    body: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
):
    """
    Record a transaction and update the holding

    - **buy / sip**: units are added at the weighted average cost
    - **sell**: units leave at average cost; overselling returns 400
    - **sip**: also creates a SIP plan (frequency required) and an alert
    """
    result = await service.submit(
        user_id=body.user_id,
        fund_id=body.fund_id,
        transaction_type=body.type,
        amount=Decimal(str(body.amount)),
        frequency=body.frequency,
        nav=Decimal(str(body.nav)) if body.nav is not None else None,
        units=Decimal(str(body.units)) if body.units is not None else None,
        status=body.status,
    )

    return SubmissionResponse(
        transaction=TransactionSchema.from_domain(result.transaction),
        holding=HoldingSchema.from_domain(result.holding) if result.holding else None,
        sip_plan=SipPlanSchema.from_domain(result.sip_plan) if result.sip_plan else None,
    )


@router.get("/user/{user_id}", response_model=List[TransactionSchema])
async def list_transactions(
    user_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    """Ledger of a user, newest first"""
    return [TransactionSchema.with_fund(item) for item in await service.list_transactions(user_id)]
