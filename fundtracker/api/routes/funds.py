"""
Fund Catalog API Routes
Browse funds and push fresh NAVs
"""

from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query

from fundtracker.api.dependencies import get_catalog_service
from fundtracker.domain.schemas.account import NavUpdate
from fundtracker.domain.schemas.portfolio import FundSchema
from fundtracker.domain.services.catalog_service import CatalogService

router = APIRouter()


@router.get("", response_model=List[FundSchema])
async def list_funds(service: CatalogService = Depends(get_catalog_service)):
    """All funds in the catalog"""
    return [FundSchema.from_domain(f) for f in await service.list_funds()]


@router.get("/search", response_model=List[FundSchema])
async def search_funds(
    q: str = Query(..., min_length=1, description="Matches name, category or AMC"),
    service: CatalogService = Depends(get_catalog_service),
):
    return [FundSchema.from_domain(f) for f in await service.search_funds(q)]


@router.get("/{fund_id}", response_model=FundSchema)
async def get_fund(fund_id: int, service: CatalogService = Depends(get_catalog_service)):
    return FundSchema.from_domain(await service.get_fund(fund_id))


@router.put("/{fund_id}/nav", response_model=FundSchema)
async def refresh_nav(
    fund_id: int,
    body: NavUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    """
    Store an externally sourced NAV

    Holders are alerted when the move crosses NAV_ALERT_THRESHOLD_PCT.
    """
    fund = await service.refresh_nav(fund_id, Decimal(str(body.nav)))
    return FundSchema.from_domain(fund)
