from pydantic import BaseModel
from typing import List, Optional

from fundtracker.domain.models import (
    CategoryAllocation,
    Fund,
    FundHolding,
    Holding,
    PortfolioAnalysis,
    PortfolioSummary,
)


class FundSchema(BaseModel):
    id: int
    name: str
    category: str
    amc: str
    current_nav: float
    expense_ratio: Optional[float] = None
    risk_level: str

    @classmethod
    def from_domain(cls, fund: Fund) -> "FundSchema":
        return cls(
            id=fund.id,
            name=fund.name,
            category=fund.category,
            amc=fund.amc,
            current_nav=float(fund.current_nav),
            expense_ratio=float(fund.expense_ratio) if fund.expense_ratio is not None else None,
            risk_level=fund.risk_level.value,
        )


class HoldingSchema(BaseModel):
    id: Optional[int]
    user_id: int
    fund_id: int
    units: float
    avg_nav: float
    total_invested: float

    @classmethod
    def from_domain(cls, holding: Holding) -> "HoldingSchema":
        return cls(
            id=holding.id,
            user_id=holding.user_id,
            fund_id=holding.fund_id,
            units=float(holding.units),
            avg_nav=float(holding.avg_nav),
            total_invested=float(holding.total_invested),
        )


class FundHoldingSchema(HoldingSchema):
    fund: FundSchema
    current_value: float
    gains: float
    gains_percentage: float

    @classmethod
    def from_domain(cls, item: FundHolding) -> "FundHoldingSchema":
        base = HoldingSchema.from_domain(item.holding)
        return cls(
            **base.model_dump(),
            fund=FundSchema.from_domain(item.fund),
            current_value=float(item.current_value),
            gains=float(item.gains),
            gains_percentage=float(item.gains_percentage),
        )


class PortfolioSummarySchema(BaseModel):
    total_value: float
    total_invested: float
    total_gains: float
    total_gains_percentage: float
    monthly_sip: float
    active_funds: int

    @classmethod
    def from_domain(cls, summary: PortfolioSummary) -> "PortfolioSummarySchema":
        return cls(
            total_value=float(summary.total_value),
            total_invested=float(summary.total_invested),
            total_gains=float(summary.total_gains),
            total_gains_percentage=float(summary.total_gains_percentage),
            monthly_sip=float(summary.monthly_sip),
            active_funds=summary.active_funds,
        )


class CategoryAllocationSchema(BaseModel):
    category: str
    value: float
    percentage: float

    @classmethod
    def from_domain(cls, allocation: CategoryAllocation) -> "CategoryAllocationSchema":
        return cls(
            category=allocation.category,
            value=float(allocation.value),
            percentage=float(allocation.percentage),
        )


class RiskSchema(BaseModel):
    score: int
    level: str


class PortfolioAnalysisSchema(BaseModel):
    allocation: List[CategoryAllocationSchema]
    category_count: int
    diversification: str
    risk: RiskSchema
    top_performers: List[FundHoldingSchema]

    @classmethod
    def from_domain(cls, analysis: PortfolioAnalysis) -> "PortfolioAnalysisSchema":
        return cls(
            allocation=[CategoryAllocationSchema.from_domain(a) for a in analysis.allocation],
            category_count=analysis.category_count,
            diversification=analysis.diversification,
            risk=RiskSchema(score=analysis.risk.score, level=analysis.risk.level),
            top_performers=[FundHoldingSchema.from_domain(h) for h in analysis.top_performers],
        )
