import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from invoice_analytics.core.access import RoleName
from invoice_analytics.core.security import Principal, require_roles
from invoice_analytics.schemas.analytics import (
    AnalyticsData,
    MonthlyTrends,
    OverdueMonthly,
    StatusDistribution,
    SummaryAnalytics,
    TopCustomers,
    TopVendors,
)
from invoice_analytics.services.analytics_service import AnalyticsService

router = APIRouter()
logger = logging.getLogger(__name__)

analytics_roles = require_roles(RoleName.ADMIN, RoleName.SUPER_ADMIN)


class DateRange:
    """Inclusive issue-date filter taken from ``?from=&to=``."""

    def __init__(
        self,
        date_from: Optional[date] = Query(None, alias="from"),
        date_to: Optional[date] = Query(None, alias="to"),
    ):
        if date_from and date_to and date_from > date_to:
            raise HTTPException(status_code=400, detail="'from' must not be after 'to'")
        self.date_from = date_from
        self.date_to = date_to


@router.get("/summary", response_model=SummaryAnalytics)
async def get_summary(dates: DateRange = Depends(), principal: Principal = Depends(analytics_roles)):
    return await AnalyticsService.get_summary(principal.scope_tenant_id(), dates.date_from, dates.date_to)


@router.get("/status-distribution", response_model=StatusDistribution)
async def get_status_distribution(dates: DateRange = Depends(), principal: Principal = Depends(analytics_roles)):
    return await AnalyticsService.get_status_distribution(principal.scope_tenant_id(), dates.date_from, dates.date_to)


@router.get("/monthly-trends", response_model=MonthlyTrends)
async def get_monthly_trends(dates: DateRange = Depends(), principal: Principal = Depends(analytics_roles)):
    return await AnalyticsService.get_monthly_trends(principal.scope_tenant_id(), dates.date_from, dates.date_to)


@router.get("/top-vendors", response_model=TopVendors)
async def get_top_vendors(dates: DateRange = Depends(), principal: Principal = Depends(analytics_roles)):
    return await AnalyticsService.get_top_vendors(principal.scope_tenant_id(), dates.date_from, dates.date_to)


@router.get("/top-customers", response_model=TopCustomers)
async def get_top_customers(dates: DateRange = Depends(), principal: Principal = Depends(analytics_roles)):
    return await AnalyticsService.get_top_customers(principal.scope_tenant_id(), dates.date_from, dates.date_to)


@router.get("/overdue-monthly", response_model=OverdueMonthly)
async def get_overdue_monthly(principal: Principal = Depends(analytics_roles)):
    return await AnalyticsService.get_overdue_monthly(principal.scope_tenant_id())


@router.get("/dashboard", response_model=AnalyticsData)
async def get_dashboard(dates: DateRange = Depends(), principal: Principal = Depends(analytics_roles)):
    try:
        return await AnalyticsService.get_dashboard(principal.scope_tenant_id(), dates.date_from, dates.date_to)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error building analytics dashboard: {e}")
        raise HTTPException(status_code=500, detail=str(e))
