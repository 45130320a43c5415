from conftest import headers, make_tenant
from invoice_analytics.core.access import RoleName

SUPER = headers(RoleName.SUPER_ADMIN)


def test_tenant_crud(client):
    created = client.post(
        "/api/v1/tenants",
        json={"name": "Northwind", "alias": "north-wind", "billingContact": "billing@northwind.example.com"},
        headers=SUPER,
    )
    assert created.status_code == 201
    tenant = created.json()
    assert tenant["alias"] == "north-wind"

    assert [t["name"] for t in client.get("/api/v1/tenants", headers=SUPER).json()] == ["Northwind"]
    assert client.get(f"/api/v1/tenants/{tenant['id']}", headers=SUPER).json()["name"] == "Northwind"

    updated = client.patch(f"/api/v1/tenants/{tenant['id']}", json={"name": "Northwind Traders"}, headers=SUPER)
    assert updated.json()["name"] == "Northwind Traders"
    assert updated.json()["alias"] == "north-wind"

    unchanged = client.patch(f"/api/v1/tenants/{tenant['id']}", json={}, headers=SUPER)
    assert unchanged.json()["name"] == "Northwind Traders"

    assert client.delete(f"/api/v1/tenants/{tenant['id']}", headers=SUPER).status_code == 204
    assert client.get(f"/api/v1/tenants/{tenant['id']}", headers=SUPER).status_code == 404
    assert client.delete(f"/api/v1/tenants/{tenant['id']}", headers=SUPER).status_code == 404


def test_tenant_alias_must_be_lowercase_hyphenated(client):
    for alias in ["Upper", "trailing-", "two--dashes", "with space", "x" * 51]:
        response = client.post("/api/v1/tenants", json={"name": f"T {alias}", "alias": alias}, headers=SUPER)
        assert response.status_code == 422, alias


def test_duplicate_alias_or_name_is_rejected(client):
    make_tenant("Northwind", "northwind")
    same_alias = client.post("/api/v1/tenants", json={"name": "Other", "alias": "northwind"}, headers=SUPER)
    assert same_alias.status_code == 400
    same_name = client.post("/api/v1/tenants", json={"name": "Northwind", "alias": "other"}, headers=SUPER)
    assert same_name.status_code == 400


def test_tenants_are_super_admin_only(client):
    assert client.get("/api/v1/tenants", headers=headers(RoleName.ADMIN)).status_code == 403


def test_bulk_update_reports_each_item(client):
    first = make_tenant("First", "first")
    second = make_tenant("Second", "second")
    body = {
        "updates": [
            {"id": first, "name": "First Renamed"},
            {"id": second, "alias": "first"},
            {"id": "missing", "name": "Ghost"},
        ]
    }
    result = client.patch("/api/v1/tenants/bulk", json=body, headers=SUPER).json()

    assert result["total"] == 3
    assert result["successCount"] == 1
    assert result["failureCount"] == 2
    assert result["successful"][0]["name"] == "First Renamed"
    assert [failure["id"] for failure in result["failed"]] == [second, "missing"]


def test_bulk_delete_reports_each_item(client):
    first = make_tenant("First", "first")
    result = client.request("DELETE", "/api/v1/tenants/bulk", json={"ids": [first, "missing"]}, headers=SUPER).json()

    assert result == {
        "successful": [first],
        "failed": [{"id": "missing", "error": "Tenant with ID missing not found"}],
        "totalRequested": 2,
        "totalDeleted": 1,
        "totalFailed": 1,
    }
