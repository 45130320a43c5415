import io
from datetime import date, timedelta
from decimal import Decimal

import pandas as pd

from conftest import headers, make_invoice, make_tenant
from invoice_analytics.core.access import RoleName
from invoice_analytics.services.export_service import EXPORT_COLUMNS

SUPER = RoleName.SUPER_ADMIN
ADMIN = RoleName.ADMIN
USER = RoleName.USER


def test_missing_roles_header_is_unauthorized(client):
    assert client.get("/api/v1/invoices").status_code == 401


def test_listing_requires_super_admin(client):
    tenant = make_tenant()
    assert client.get("/api/v1/invoices", headers=headers(ADMIN, tenant_id=tenant)).status_code == 403


def test_list_invoices_paginates_newest_first(client):
    tenant = make_tenant()
    for day in range(1, 6):
        make_invoice(tenant, number=f"INV-{day}", issue_date=date(2024, 1, day))
    make_invoice(tenant, number="INV-archived", issue_date=date(2024, 2, 1), archived=True)

    response = client.get("/api/v1/invoices?page=2&limit=2", headers=headers(SUPER, tenant_id=tenant))
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 5
    assert body["totalPages"] == 3
    assert body["page"] == 2
    assert [item["invoiceNumber"] for item in body["items"]] == ["INV-3", "INV-2"]

    with_archived = client.get(
        "/api/v1/invoices?includeArchived=true", headers=headers(SUPER, tenant_id=tenant)
    ).json()
    assert with_archived["total"] == 6


def test_list_invoices_rejects_oversized_limit(client):
    assert client.get("/api/v1/invoices?limit=101", headers=headers(SUPER)).status_code == 422


def test_super_admin_without_tenant_sees_all_tenants(client):
    make_invoice(make_tenant("A", "a"), number="A-1")
    make_invoice(make_tenant("B", "b"), number="B-1")
    body = client.get("/api/v1/invoices", headers=headers(SUPER)).json()
    assert sorted(item["invoiceNumber"] for item in body["items"]) == ["A-1", "B-1"]


def test_get_invoice_is_tenant_scoped(client):
    tenant_a = make_tenant("A", "a")
    tenant_b = make_tenant("B", "b")
    invoice_id = make_invoice(tenant_a)

    found = client.get(f"/api/v1/invoices/{invoice_id}", headers=headers(SUPER, tenant_id=tenant_a))
    assert found.status_code == 200
    assert found.json()["issueDate"] == "2024-01-05"

    other = client.get(f"/api/v1/invoices/{invoice_id}", headers=headers(SUPER, tenant_id=tenant_b))
    assert other.status_code == 404


def test_create_invoice_computes_totals(client):
    tenant = make_tenant()
    payload = {
        "invoiceNumber": "INV-100",
        "issueDate": "2024-03-01",
        "dueDate": "2024-03-31",
        "vendorName": "Acme",
        "customerName": "Wayne",
        "subtotal": "200.00",
        "discount": "10.00",
        "taxAmount": "15.00",
        "items": [
            {"lineNumber": 1, "description": "Widgets", "quantity": 4, "unitPrice": "25.00"},
            {"lineNumber": 2, "description": "Setup", "quantity": 1, "unitPrice": "100.00", "amount": "100.00"},
        ],
    }
    response = client.post("/api/v1/invoices", json=payload, headers=headers(USER, tenant_id=tenant))
    assert response.status_code == 201
    body = response.json()
    assert Decimal(body["totalAmount"]) == Decimal("205.00")
    assert [Decimal(item["amount"]) for item in body["items"]] == [Decimal("100.00"), Decimal("100.00")]
    assert body["tenantId"] == tenant
    assert body["status"] == "UNPAID"


def test_create_invoice_rejects_due_before_issue(client):
    tenant = make_tenant()
    payload = {
        "invoiceNumber": "INV-101",
        "issueDate": "2024-03-10",
        "dueDate": "2024-03-01",
        "vendorName": "Acme",
        "customerName": "Wayne",
        "subtotal": "1.00",
    }
    response = client.post("/api/v1/invoices", json=payload, headers=headers(ADMIN, tenant_id=tenant))
    assert response.status_code == 400


def test_delete_and_archive(client):
    tenant = make_tenant()
    first = make_invoice(tenant, number="INV-1")
    second = make_invoice(tenant, number="INV-2")
    auth = headers(SUPER, tenant_id=tenant)

    assert client.request("PATCH", "/api/v1/invoices/archive", json={"ids": [first]}, headers=auth).status_code == 204
    assert client.get("/api/v1/invoices", headers=auth).json()["total"] == 1
    assert client.request("PATCH", "/api/v1/invoices/unarchive", json={"ids": [first]}, headers=auth).status_code == 204
    assert client.get("/api/v1/invoices", headers=auth).json()["total"] == 2

    assert client.delete(f"/api/v1/invoices/{second}", headers=auth).status_code == 204
    assert client.delete(f"/api/v1/invoices/{second}", headers=auth).status_code == 404


def test_export_excel(client):
    tenant = make_tenant()
    make_invoice(tenant, number="INV-1", total="12.50")
    make_invoice(tenant, number="INV-2", archived=True)

    response = client.get("/api/v1/invoices/export/excel", headers=headers(SUPER, tenant_id=tenant))
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/vnd.openxmlformats")

    frame = pd.read_excel(io.BytesIO(response.content))
    assert list(frame.columns) == list(EXPORT_COLUMNS)
    assert frame["Invoice Number"].tolist() == ["INV-1"]
    assert frame["Total Amount"].tolist() == [12.5]


def test_dashboard_vendor_chart_and_drilldown(client):
    tenant = make_tenant()
    other = make_tenant("Other", "other")
    today = date.today()
    make_invoice(tenant, number="1", vendor="Acme", total="100", issue_date=today - timedelta(days=3))
    make_invoice(tenant, number="2", vendor="Acme", total="50", issue_date=today - timedelta(days=1))
    make_invoice(tenant, number="3", vendor="Globex", total="200", issue_date=today - timedelta(days=2))
    make_invoice(tenant, number="4", vendor="Globex", total="999", issue_date=today - timedelta(days=90))
    make_invoice(tenant, number="5", vendor="Acme", total="999", archived=True, issue_date=today)
    make_invoice(other, number="6", vendor="Acme", total="999", issue_date=today)

    auth = headers(USER, tenant_id=tenant)
    chart = client.get("/api/v1/dashboard/vendors?days=30", headers=auth).json()
    assert [(row["name"], Decimal(row["totalAmount"])) for row in chart] == [
        ("Globex", Decimal("200")),
        ("Acme", Decimal("150")),
    ]

    details = client.get("/api/v1/dashboard/vendors/Acme/monthly?days=30", headers=auth).json()
    assert details["name"] == "Acme"
    dates = [d for row in details["monthlyBreakdown"] for d in row["invoiceDates"]]
    assert sorted(dates) == sorted([(today - timedelta(days=3)).isoformat(), (today - timedelta(days=1)).isoformat()])


def test_dashboard_customers_default_window(client):
    tenant = make_tenant()
    make_invoice(tenant, customer="Wonka", total="10", issue_date=date.today())
    chart = client.get("/api/v1/dashboard/customers", headers=headers(ADMIN, tenant_id=tenant)).json()
    assert [row["name"] for row in chart] == ["Wonka"]


def test_dashboard_requires_a_tenant_for_regular_users(client):
    assert client.get("/api/v1/dashboard/vendors", headers=headers(USER)).status_code == 403


def test_analytics_endpoints(client):
    tenant = make_tenant()
    other = make_tenant("Other", "other")
    today = date.today()
    make_invoice(tenant, number="1", vendor="Acme", customer="Wayne", total="100", status="PAID",
                 issue_date=date(2024, 1, 10))
    make_invoice(tenant, number="2", vendor="Globex", customer="Wayne", total="50", status="OVERDUE",
                 issue_date=date(2024, 2, 10), due_date=today)
    make_invoice(tenant, number="3", vendor="Acme", customer="Tyrell", total="25", status="UNPAID",
                 issue_date=date(2024, 2, 20))
    make_invoice(tenant, number="4", total="1000", status="PAID", archived=True)
    make_invoice(other, number="5", total="5000", status="PAID")

    auth = headers(ADMIN, tenant_id=tenant)

    summary = client.get("/api/v1/analytics/summary", headers=auth).json()
    assert summary == {
        "totalInvoices": 3,
        "totalInvoicedAmount": 175.0,
        "totalPaidAmount": 100.0,
        "totalOverdueAmount": 50.0,
        "paidCount": 1,
        "overdueCount": 1,
    }

    ranged = client.get("/api/v1/analytics/summary?from=2024-02-01&to=2024-02-29", headers=auth).json()
    assert ranged["totalInvoices"] == 2

    distribution = client.get("/api/v1/analytics/status-distribution", headers=auth).json()["distribution"]
    assert [(row["status"], row["count"]) for row in distribution] == [("OVERDUE", 1), ("PAID", 1), ("UNPAID", 1)]

    trends = client.get("/api/v1/analytics/monthly-trends", headers=auth).json()["trends"]
    assert [(row["year"], row["month"], row["invoiceCount"]) for row in trends] == [(2024, 1, 1), (2024, 2, 2)]

    vendors = client.get("/api/v1/analytics/top-vendors", headers=auth).json()["topVendors"]
    assert [(row["name"], row["totalAmount"]) for row in vendors] == [("Acme", 125.0), ("Globex", 50.0)]

    customers = client.get("/api/v1/analytics/top-customers", headers=auth).json()["topCustomers"]
    assert customers[0]["name"] == "Wayne"

    overdue = client.get("/api/v1/analytics/overdue-monthly", headers=auth).json()["statistics"]
    assert overdue == [{"year": today.year, "month": today.month, "count": 1}]

    dashboard = client.get("/api/v1/analytics/dashboard", headers=auth).json()
    assert dashboard["summary"]["activeInvoices"] == 1
    assert [row["month"] for row in dashboard["monthlyData"]] == ["Jan", "Feb"]
    assert dashboard["topVendors"][0]["vendorName"] == "Acme"


def test_analytics_rejects_plain_users_and_bad_ranges(client):
    tenant = make_tenant()
    assert client.get("/api/v1/analytics/summary", headers=headers(USER, tenant_id=tenant)).status_code == 403
    bad_range = client.get(
        "/api/v1/analytics/summary?from=2024-03-01&to=2024-01-01", headers=headers(ADMIN, tenant_id=tenant)
    )
    assert bad_range.status_code == 400


def test_dashboard_accepts_very_wide_windows(client):
    tenant = make_tenant()
    make_invoice(tenant, vendor="Acme", total="10", issue_date=date(1990, 6, 1))
    response = client.get("/api/v1/dashboard/vendors?days=200000", headers=headers(USER, tenant_id=tenant))
    assert response.status_code == 200
    assert [row["name"] for row in response.json()] == ["Acme"]


def test_dashboard_drilldown_for_names_with_slashes(client):
    tenant = make_tenant()
    make_invoice(tenant, number="1", vendor="A/B Supplies", total="40", issue_date=date.today())
    make_invoice(tenant, number="2", vendor="A", total="99", issue_date=date.today())
    auth = headers(USER, tenant_id=tenant)

    for path in ("/api/v1/dashboard/vendors/A%2FB%20Supplies/monthly", "/api/v1/dashboard/vendors/A/B Supplies/monthly"):
        response = client.get(path, headers=auth)
        assert response.status_code == 200
        details = response.json()
        assert details["name"] == "A/B Supplies"
        assert [Decimal(row["totalAmount"]) for row in details["monthlyBreakdown"]] == [Decimal("40")]
