from conftest import headers, make_tenant, make_user, role_ids
from invoice_analytics.core.access import RoleName

SUPER = RoleName.SUPER_ADMIN
ADMIN = RoleName.ADMIN
USER = RoleName.USER


def test_list_roles(client):
    names = [role["name"] for role in client.get("/api/v1/roles", headers=headers(USER)).json()]
    assert sorted(names) == ["Admin", "Super Admin", "User"]


def test_current_user_and_navigation(client):
    tenant = make_tenant()
    user_id = make_user("admin@northwind.example.com", tenant, roles=(ADMIN,))
    auth = headers(ADMIN, tenant_id=tenant, user_id=user_id)

    me = client.get("/api/v1/users/current", headers=auth).json()
    assert me["email"] == "admin@northwind.example.com"
    assert me["tenant"]["id"] == tenant
    assert [role["name"] for role in me["roles"]] == ["Admin"]

    nav = client.get("/api/v1/users/current/navigation", headers=auth).json()
    assert [item["path"] for item in nav["items"]] == ["/", "/user-management", "/secrets"]

    unknown = client.get("/api/v1/users/current", headers=headers(ADMIN, user_id="nobody"))
    assert unknown.status_code == 404


def test_admin_creates_tenant_user(client):
    tenant = make_tenant()
    roles = role_ids()
    auth = headers(ADMIN, tenant_id=tenant)
    body = {"email": "new@northwind.example.com", "firstName": "New", "roleIds": [roles["User"]]}

    created = client.post("/api/v1/users", json=body, headers=auth)
    assert created.status_code == 201
    assert created.json()["tenant"]["id"] == tenant

    duplicate = client.post("/api/v1/users", json=body, headers=auth)
    assert duplicate.status_code == 409

    escalate = {"email": "boss@northwind.example.com", "firstName": "Boss", "roleIds": [roles["Super Admin"]]}
    assert client.post("/api/v1/users", json=escalate, headers=auth).status_code == 403


def test_only_admins_use_the_admin_create_flow(client):
    tenant = make_tenant()
    body = {"email": "x@northwind.example.com", "firstName": "X", "roleIds": [role_ids()["User"]]}
    assert client.post("/api/v1/users", json=body, headers=headers(SUPER, tenant_id=tenant)).status_code == 403
    assert client.post("/api/v1/users", json=body, headers=headers(USER, tenant_id=tenant)).status_code == 403


def test_super_admin_create_rules(client):
    tenant = make_tenant()
    roles = role_ids()
    auth = headers(SUPER)

    no_tenant_wrong_role = {"email": "a@example.com", "firstName": "A", "roleIds": [roles["Admin"]]}
    assert client.post("/api/v1/users/super", json=no_tenant_wrong_role, headers=auth).status_code == 400

    no_tenant_super = {"email": "b@example.com", "firstName": "B", "roleIds": [roles["Super Admin"]]}
    created = client.post("/api/v1/users/super", json=no_tenant_super, headers=auth)
    assert created.status_code == 201
    assert created.json()["tenant"] is None

    tenant_super = {
        "email": "c@example.com",
        "firstName": "C",
        "roleIds": [roles["Super Admin"]],
        "tenantId": tenant,
    }
    assert client.post("/api/v1/users/super", json=tenant_super, headers=auth).status_code == 403

    bad_role = {"email": "d@example.com", "firstName": "D", "roleIds": ["not-a-role"], "tenantId": tenant}
    assert client.post("/api/v1/users/super", json=bad_role, headers=auth).status_code == 400

    tenant_admin = {"email": "e@example.com", "firstName": "E", "roleIds": [roles["Admin"]], "tenantId": tenant}
    assert client.post("/api/v1/users/super", json=tenant_admin, headers=auth).status_code == 201


def test_list_users_is_tenant_scoped_and_filtered(client):
    tenant_a = make_tenant("A", "a")
    tenant_b = make_tenant("B", "b")
    make_user("alice@a.example.com", tenant_a, roles=(ADMIN,), first_name="Alice")
    make_user("bob@a.example.com", tenant_a, roles=(USER,), first_name="Bob")
    make_user("carol@b.example.com", tenant_b, roles=(USER,), first_name="Carol")

    scoped = client.get("/api/v1/users", headers=headers(ADMIN, tenant_id=tenant_a)).json()
    assert sorted(user["email"] for user in scoped) == ["alice@a.example.com", "bob@a.example.com"]

    by_name = client.get("/api/v1/users?name=ALI", headers=headers(ADMIN, tenant_id=tenant_a)).json()
    assert [user["email"] for user in by_name] == ["alice@a.example.com"]

    by_role = client.get("/api/v1/users?role=User", headers=headers(SUPER)).json()
    assert sorted(user["email"] for user in by_role) == ["bob@a.example.com", "carol@b.example.com"]

    assert client.get("/api/v1/users", headers=headers(USER, tenant_id=tenant_a)).status_code == 403


def test_get_user_hides_other_tenants(client):
    tenant_a = make_tenant("A", "a")
    tenant_b = make_tenant("B", "b")
    carol = make_user("carol@b.example.com", tenant_b)
    assert client.get(f"/api/v1/users/{carol}", headers=headers(ADMIN, tenant_id=tenant_a)).status_code == 404
    assert client.get(f"/api/v1/users/{carol}", headers=headers(SUPER)).status_code == 200


def test_update_user_rules(client):
    tenant_a = make_tenant("A", "a")
    tenant_b = make_tenant("B", "b")
    roles = role_ids()
    bob = make_user("bob@a.example.com", tenant_a)
    carol = make_user("carol@b.example.com", tenant_b)
    admin_a = headers(ADMIN, tenant_id=tenant_a)

    renamed = client.patch(f"/api/v1/users/{bob}", json={"firstName": "Robert"}, headers=admin_a)
    assert renamed.status_code == 200
    assert renamed.json()["firstName"] == "Robert"

    promoted = client.patch(f"/api/v1/users/{bob}", json={"roleIds": [roles["Admin"]]}, headers=admin_a)
    assert [role["name"] for role in promoted.json()["roles"]] == ["Admin"]

    grant_super = client.patch(f"/api/v1/users/{bob}", json={"roleIds": [roles["Super Admin"]]}, headers=admin_a)
    assert grant_super.status_code == 403

    cross_tenant = client.patch(f"/api/v1/users/{carol}", json={"firstName": "C"}, headers=admin_a)
    assert cross_tenant.status_code == 403

    by_super = client.patch(f"/api/v1/users/{carol}", json={"firstName": "Caroline"}, headers=headers(SUPER))
    assert by_super.status_code == 200


def test_delete_user_rules(client):
    tenant_a = make_tenant("A", "a")
    tenant_b = make_tenant("B", "b")
    bob = make_user("bob@a.example.com", tenant_a)
    carol = make_user("carol@b.example.com", tenant_b)
    root = make_user("root@example.com", tenant_a, roles=(SUPER,))
    admin_a = headers(ADMIN, tenant_id=tenant_a)

    assert client.delete(f"/api/v1/users/{carol}", headers=admin_a).status_code == 403
    assert client.delete(f"/api/v1/users/{root}", headers=admin_a).status_code == 403
    assert client.delete(f"/api/v1/users/{bob}", headers=admin_a).status_code == 204
    assert client.delete(f"/api/v1/users/{bob}", headers=admin_a).status_code == 404
    assert client.delete(f"/api/v1/users/{root}", headers=headers(SUPER)).status_code == 204


def test_activate_and_deactivate(client):
    tenant = make_tenant()
    bob = make_user("bob@a.example.com", tenant)
    auth = headers(ADMIN, tenant_id=tenant)

    assert client.patch(f"/api/v1/users/{bob}/deactivate", headers=auth).json()["isActive"] is False
    inactive = client.get("/api/v1/users?status=inactive", headers=auth).json()
    assert [user["id"] for user in inactive] == [bob]
    assert client.patch(f"/api/v1/users/{bob}/activate", headers=auth).json()["isActive"] is True
