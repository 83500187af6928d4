"""
Portfolio API Routes
Holdings, summary, allocation and analysis at current NAVs
"""

from typing import List

from fastapi import APIRouter, Depends

from fundtracker.api.dependencies import get_aggregator, get_analyzer, get_summarizer, get_transaction_service
from fundtracker.domain.schemas.portfolio import (
    CategoryAllocationSchema,
    FundHoldingSchema,
    HoldingSchema,
    PortfolioAnalysisSchema,
    PortfolioSummarySchema,
)
from fundtracker.domain.services.analysis import PortfolioAnalyzer
from fundtracker.domain.services.holding_aggregator import HoldingAggregator
from fundtracker.domain.services.portfolio_summarizer import PortfolioSummarizer
from fundtracker.domain.services.transaction_service import TransactionService

router = APIRouter()


@router.get("/{user_id}/holdings", response_model=List[FundHoldingSchema])
async def get_holdings(user_id: int, aggregator: HoldingAggregator = Depends(get_aggregator)):
    """
    Open holdings with current value and gains
    """
    return [FundHoldingSchema.from_domain(h) for h in await aggregator.get_holdings(user_id)]


@router.get("/{user_id}/summary", response_model=PortfolioSummarySchema)
async def get_summary(user_id: int, summarizer: PortfolioSummarizer = Depends(get_summarizer)):
    """
    Total value, invested capital, gains and monthly SIP run-rate
    """
    return PortfolioSummarySchema.from_domain(await summarizer.get_portfolio_summary(user_id))


@router.get("/{user_id}/allocation", response_model=List[CategoryAllocationSchema])
async def get_allocation(user_id: int, analyzer: PortfolioAnalyzer = Depends(get_analyzer)):
    """Category-wise value and share of the portfolio, largest first"""
    return [CategoryAllocationSchema.from_domain(a) for a in await analyzer.get_category_allocation(user_id)]


@router.get("/{user_id}/analysis", response_model=PortfolioAnalysisSchema)
async def get_analysis(user_id: int, analyzer: PortfolioAnalyzer = Depends(get_analyzer)):
    return PortfolioAnalysisSchema.from_domain(await analyzer.get_analysis(user_id))


@router.post("/{user_id}/rebuild", response_model=List[HoldingSchema])
async def rebuild_holdings(user_id: int, service: TransactionService = Depends(get_transaction_service)):
    """Re-derive holdings from the full ledger"""
    return [HoldingSchema.from_domain(h) for h in await service.rebuild_holdings(user_id)]
