import logging
from datetime import date
from typing import Optional

import pandas as pd

from invoice_analytics.core.config import settings
from invoice_analytics.repositories.invoice_repository import InvoiceRepository
from invoice_analytics.schemas.analytics import (
    AnalyticsData,
    AnalyticsDtos,
    MonthlyTrends,
    OverdueMonthly,
    StatusDistribution,
    SummaryAnalytics,
    TopCustomers,
    TopVendors,
)
from invoice_analytics.services.analytics_transformer import transform_analytics

logger = logging.getLogger(__name__)

OVERDUE_LOOKBACK_MONTHS = 12


class AnalyticsService:
    """Server-side analytics DTOs. Every figure excludes archived invoices."""

    @staticmethod
    async def get_summary(tenant_id: Optional[str], date_from: date = None, date_to: date = None) -> SummaryAnalytics:
        row = await InvoiceRepository.summary(tenant_id, date_from, date_to)
        return SummaryAnalytics(**row)

    @staticmethod
    async def get_status_distribution(
        tenant_id: Optional[str], date_from: date = None, date_to: date = None
    ) -> StatusDistribution:
        rows = await InvoiceRepository.status_distribution(tenant_id, date_from, date_to)
        return StatusDistribution(distribution=rows)

    @staticmethod
    async def get_monthly_trends(
        tenant_id: Optional[str], date_from: date = None, date_to: date = None
    ) -> MonthlyTrends:
        rows = await InvoiceRepository.monthly_trends(tenant_id, date_from, date_to)
        return MonthlyTrends(trends=rows)

    @staticmethod
    async def get_top_vendors(
        tenant_id: Optional[str], date_from: date = None, date_to: date = None, limit: int = None
    ) -> TopVendors:
        rows = await InvoiceRepository.top_entities(
            "vendor", tenant_id, limit or settings.TOP_ENTITIES_LIMIT, date_from, date_to
        )
        return TopVendors(topVendors=rows)

    @staticmethod
    async def get_top_customers(
        tenant_id: Optional[str], date_from: date = None, date_to: date = None, limit: int = None
    ) -> TopCustomers:
        rows = await InvoiceRepository.top_entities(
            "customer", tenant_id, limit or settings.TOP_ENTITIES_LIMIT, date_from, date_to
        )
        return TopCustomers(topCustomers=rows)

    @staticmethod
    def overdue_since(today: date = None) -> date:
        """First day of the month that opens the trailing overdue window."""
        anchor = pd.Timestamp(today or date.today())
        start = anchor.to_period("M") - (OVERDUE_LOOKBACK_MONTHS - 1)
        return start.to_timestamp().date()

    @staticmethod
    async def get_overdue_monthly(tenant_id: Optional[str], today: date = None) -> OverdueMonthly:
        since = AnalyticsService.overdue_since(today)
        rows = await InvoiceRepository.overdue_monthly(tenant_id, since)
        return OverdueMonthly(statistics=rows)

    @staticmethod
    async def get_dashboard(tenant_id: Optional[str], date_from: date = None, date_to: date = None) -> AnalyticsData:
        dtos = AnalyticsDtos(
            summary=await AnalyticsService.get_summary(tenant_id, date_from, date_to),
            statusDistribution=await AnalyticsService.get_status_distribution(tenant_id, date_from, date_to),
            monthlyTrends=await AnalyticsService.get_monthly_trends(tenant_id, date_from, date_to),
            topVendors=await AnalyticsService.get_top_vendors(tenant_id, date_from, date_to),
            topCustomers=await AnalyticsService.get_top_customers(tenant_id, date_from, date_to),
        )
        logger.info(
            f"Built analytics dashboard for tenant {tenant_id or 'ALL'}: "
            f"{dtos.summary.totalInvoices} invoices, {len(dtos.monthlyTrends.trends)} months"
        )
        return transform_analytics(dtos)
