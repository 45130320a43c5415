import logging
from typing import List

from invoice_analytics.core.security import Principal
from invoice_analytics.schemas.dashboard import EntityDetails, EntityTotal
from invoice_analytics.services.aggregations import (
    KEY_SELECTORS,
    aggregate_by,
    filter_by_window,
    monthly_breakdown,
)
from invoice_analytics.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)


class DashboardService:
    """Vendor/customer charts and monthly drill-downs over the caller's invoices."""

    @staticmethod
    async def entity_totals(principal: Principal, entity: str, days: int) -> List[EntityTotal]:
        invoices = await InvoiceService.list_for_dashboard(principal)
        in_window = filter_by_window(invoices, days)
        logger.info(f"{len(in_window)} of {len(invoices)} invoices within the last {days} days")
        return aggregate_by(in_window, KEY_SELECTORS[entity])

    @staticmethod
    async def entity_details(principal: Principal, entity: str, name: str, days: int) -> EntityDetails:
        invoices = await InvoiceService.list_for_dashboard(principal)
        in_window = filter_by_window(invoices, days)
        return EntityDetails(
            name=name,
            monthlyBreakdown=monthly_breakdown(in_window, name, KEY_SELECTORS[entity]),
        )
