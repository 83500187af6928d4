from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional

from fundtracker.domain.models import (
    SipFrequency,
    SipPlan,
    Transaction,
    TransactionStatus,
    TransactionType,
    TransactionWithFund,
)
from fundtracker.domain.schemas.portfolio import FundSchema, HoldingSchema


class TransactionCreate(BaseModel):
    user_id: int
    fund_id: int
    type: TransactionType
    amount: float = Field(..., gt=0)
    frequency: Optional[SipFrequency] = None
    nav: Optional[float] = Field(None, gt=0)
    units: Optional[float] = Field(None, gt=0)
    status: TransactionStatus = TransactionStatus.COMPLETED


class TransactionSchema(BaseModel):
    id: int
    user_id: int
    fund_id: int
    type: str
    amount: float
    units: Optional[float]
    nav: Optional[float]
    status: str
    date: Optional[datetime]
    fund: Optional[FundSchema] = None

    @classmethod
    def from_domain(cls, tx: Transaction) -> "TransactionSchema":
        return cls(
            id=tx.id,
            user_id=tx.user_id,
            fund_id=tx.fund_id,
            type=tx.type.value,
            amount=float(tx.amount),
            units=float(tx.units) if tx.units is not None else None,
            nav=float(tx.nav) if tx.nav is not None else None,
            status=tx.status.value,
            date=tx.created_at,
        )

    @classmethod
    def with_fund(cls, item: TransactionWithFund) -> "TransactionSchema":
        schema = cls.from_domain(item.transaction)
        schema.fund = FundSchema.from_domain(item.fund)
        return schema


class SipPlanSchema(BaseModel):
    id: int
    user_id: int
    fund_id: int
    amount: float
    frequency: str
    is_active: bool
    next_date: datetime
    created_at: Optional[datetime]

    @classmethod
    def from_domain(cls, plan: SipPlan) -> "SipPlanSchema":
        return cls(
            id=plan.id,
            user_id=plan.user_id,
            fund_id=plan.fund_id,
            amount=float(plan.amount),
            frequency=plan.frequency.value,
            is_active=plan.is_active,
            next_date=plan.next_date,
            created_at=plan.created_at,
        )


class SipPlanUpdate(BaseModel):
    is_active: bool


class SubmissionResponse(BaseModel):
    transaction: TransactionSchema
    holding: Optional[HoldingSchema]
    sip_plan: Optional[SipPlanSchema] = None
