import logging

from invoice_analytics.schemas.analytics import (
    AnalyticsData,
    AnalyticsDtos,
    AnalyticsSummary,
    MonthlyData,
    StatusShare,
    TopCustomer,
    TopVendor,
)

logger = logging.getLogger(__name__)

MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
UNKNOWN_MONTH = "Unknown"


def month_abbreviation(month: int) -> str:
    if 1 <= month <= 12:
        return MONTH_ABBREVIATIONS[month - 1]
    return UNKNOWN_MONTH


def transform_analytics(dtos: AnalyticsDtos) -> AnalyticsData:
    """
    Turn the raw analytics payloads into the dashboard's presentation shape.

    ``activeInvoices`` is the only derived figure. It is passed through as
    computed, so inconsistent upstream counts show up as a negative number.
    """
    summary = dtos.summary
    active = summary.totalInvoices - summary.paidCount - summary.overdueCount
    if active < 0:
        logger.warning(
            f"Derived activeInvoices is negative ({active}): total={summary.totalInvoices}, "
            f"paid={summary.paidCount}, overdue={summary.overdueCount}"
        )

    distribution = dtos.statusDistribution.distribution
    total_count = sum(item.count for item in distribution)
    status_distribution = [
        StatusShare(
            status=item.status,
            count=item.count,
            percentage=(item.count / total_count * 100) if total_count else 0.0,
            amount=item.totalAmount,
        )
        for item in distribution
    ]

    return AnalyticsData(
        summary=AnalyticsSummary(
            totalInvoices=summary.totalInvoices,
            totalAmount=summary.totalInvoicedAmount,
            activeInvoices=active,
            overdueInvoices=summary.overdueCount,
        ),
        monthlyData=[
            MonthlyData(
                month=month_abbreviation(trend.month),
                year=trend.year,
                amount=trend.totalAmount,
                count=trend.invoiceCount,
            )
            for trend in dtos.monthlyTrends.trends
        ],
        statusDistribution=status_distribution,
        topVendors=[
            TopVendor(vendorName=item.name, totalAmount=item.totalAmount, invoiceCount=item.invoiceCount)
            for item in dtos.topVendors.topVendors
        ],
        topCustomers=[
            TopCustomer(customerName=item.name, totalAmount=item.totalAmount, invoiceCount=item.invoiceCount)
            for item in dtos.topCustomers.topCustomers
        ],
    )
