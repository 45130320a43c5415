import pytest

from invoice_analytics.schemas.analytics import (
    AnalyticsDtos,
    MonthlyTrends,
    StatusDistribution,
    SummaryAnalytics,
    TopCustomers,
    TopVendors,
)
from invoice_analytics.services.analytics_transformer import month_abbreviation, transform_analytics


def make_dtos(summary=None, distribution=(), trends=(), vendors=(), customers=()):
    return AnalyticsDtos(
        summary=SummaryAnalytics(**(summary or {})),
        statusDistribution=StatusDistribution(distribution=list(distribution)),
        monthlyTrends=MonthlyTrends(trends=list(trends)),
        topVendors=TopVendors(topVendors=list(vendors)),
        topCustomers=TopCustomers(topCustomers=list(customers)),
    )


def test_full_transformation():
    dtos = make_dtos(
        summary={"totalInvoices": 10, "totalInvoicedAmount": 1234.5, "paidCount": 4, "overdueCount": 2},
        distribution=[
            {"status": "PAID", "count": 1, "totalAmount": 10.0},
            {"status": "UNPAID", "count": 3, "totalAmount": 30.0},
        ],
        trends=[{"year": 2024, "month": 3, "totalAmount": 99.0, "invoiceCount": 2}],
        vendors=[{"name": "Globex", "totalAmount": 200.0, "invoiceCount": 1}],
        customers=[{"name": "Wayne", "totalAmount": 150.0, "invoiceCount": 2}],
    )
    data = transform_analytics(dtos)

    assert data.summary.totalInvoices == 10
    assert data.summary.totalAmount == 1234.5
    assert data.summary.activeInvoices == 4
    assert data.summary.overdueInvoices == 2
    assert [(s.status, s.percentage, s.amount) for s in data.statusDistribution] == [
        ("PAID", 25.0, 10.0),
        ("UNPAID", 75.0, 30.0),
    ]
    assert data.monthlyData[0].month == "Mar"
    assert data.monthlyData[0].amount == 99.0
    assert data.topVendors[0].vendorName == "Globex"
    assert data.topCustomers[0].customerName == "Wayne"


def test_zero_total_count_gives_zero_percentages():
    dtos = make_dtos(
        distribution=[
            {"status": "PAID", "count": 0, "totalAmount": 0.0},
            {"status": "OVERDUE", "count": 0, "totalAmount": 0.0},
        ]
    )
    assert [share.percentage for share in transform_analytics(dtos).statusDistribution] == [0.0, 0.0]


def test_negative_active_invoices_are_passed_through(caplog):
    dtos = make_dtos(summary={"totalInvoices": 3, "paidCount": 2, "overdueCount": 2})
    with caplog.at_level("WARNING"):
        data = transform_analytics(dtos)
    assert data.summary.activeInvoices == -1
    assert "negative" in caplog.text


def test_top_entities_keep_backend_order():
    vendors = [
        {"name": "Small", "totalAmount": 1.0, "invoiceCount": 1},
        {"name": "Large", "totalAmount": 100.0, "invoiceCount": 1},
    ]
    data = transform_analytics(make_dtos(vendors=vendors))
    assert [vendor.vendorName for vendor in data.topVendors] == ["Small", "Large"]


@pytest.mark.parametrize("month, expected", [(1, "Jan"), (12, "Dec"), (0, "Unknown"), (13, "Unknown")])
def test_month_abbreviation(month, expected):
    assert month_abbreviation(month) == expected
