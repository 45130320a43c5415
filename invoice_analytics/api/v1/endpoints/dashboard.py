import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from invoice_analytics.core.config import settings
from invoice_analytics.core.security import Principal, require_roles
from invoice_analytics.schemas.dashboard import EntityDetails, EntityTotal
from invoice_analytics.services.dashboard_service import DashboardService

router = APIRouter()
logger = logging.getLogger(__name__)

# Any authenticated role
authenticated = require_roles()


def window_days(days: Optional[int] = Query(None, ge=0, description="Trailing window in days")) -> int:
    return settings.DASHBOARD_DEFAULT_DAYS if days is None else days


@router.get("/vendors", response_model=List[EntityTotal])
async def vendor_totals(days: int = Depends(window_days), principal: Principal = Depends(authenticated)):
    return await DashboardService.entity_totals(principal, "vendor", days)


@router.get("/customers", response_model=List[EntityTotal])
async def customer_totals(days: int = Depends(window_days), principal: Principal = Depends(authenticated)):
    return await DashboardService.entity_totals(principal, "customer", days)


@router.get("/vendors/{name:path}/monthly", response_model=EntityDetails)
async def vendor_monthly(name: str, days: int = Depends(window_days), principal: Principal = Depends(authenticated)):
    return await DashboardService.entity_details(principal, "vendor", name, days)


@router.get("/customers/{name:path}/monthly", response_model=EntityDetails)
async def customer_monthly(
    name: str, days: int = Depends(window_days), principal: Principal = Depends(authenticated)
):
    return await DashboardService.entity_details(principal, "customer", name, days)
