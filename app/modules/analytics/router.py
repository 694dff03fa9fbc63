from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.database import get_db
from app.modules.analytics.schemas import (
    PortfolioSummary, Defaulter, BorrowerContact, ApprovedLoanDetail,
    RegionLoanStats, RegionalBreakdown
)
from app.modules.analytics.services import AnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/portfolio-summary", response_model=PortfolioSummary)
async def portfolio_summary(db: AsyncSession = Depends(get_db)):
    """Loan counts and portfolio size"""
    return await AnalyticsService(db).portfolio_summary()


@router.get("/defaulters", response_model=List[Defaulter])
async def defaulters(db: AsyncSession = Depends(get_db)):
    return await AnalyticsService(db).defaulters()


@router.get("/nested-query", response_model=List[BorrowerContact])
async def borrowers_with_overdue(db: AsyncSession = Depends(get_db)):
    return await AnalyticsService(db).borrowers_with_overdue()


@router.get("/join-query", response_model=List[ApprovedLoanDetail])
async def approved_loan_details(db: AsyncSession = Depends(get_db)):
    return await AnalyticsService(db).approved_loan_details()


@router.get("/aggregate-query", response_model=List[RegionLoanStats])
async def region_loan_stats(db: AsyncSession = Depends(get_db)):
    return await AnalyticsService(db).region_loan_stats()


@router.get("/regional", response_model=List[RegionalBreakdown])
async def regional_breakdown(db: AsyncSession = Depends(get_db)):
    """Per-region borrowers and loans by status"""
    return await AnalyticsService(db).regional_breakdown()
