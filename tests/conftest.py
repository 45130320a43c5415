import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

# Settings are read at import time, so the database has to be chosen first
_db_dir = tempfile.mkdtemp(prefix="invoice-analytics-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ.pop("DEFAULT_TENANT_ID", None)
os.environ.pop("LLM_API_KEY", None)

from fastapi.testclient import TestClient  # noqa: E402

from invoice_analytics.core.access import RoleName  # noqa: E402
from invoice_analytics.core.database import SessionLocal  # noqa: E402
from invoice_analytics.main import app  # noqa: E402
from invoice_analytics.models import Invoice, InvoiceItem, Role, Tenant, User, user_roles  # noqa: E402


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def clean_database():
    yield
    db = SessionLocal()
    try:
        db.query(InvoiceItem).delete()
        db.query(Invoice).delete()
        db.execute(user_roles.delete())
        db.query(User).delete()
        db.query(Tenant).delete()
        db.commit()
    finally:
        db.close()


def headers(*roles, tenant_id=None, user_id=None):
    values = {"X-User-Roles": ",".join(role.value for role in roles)}
    if tenant_id:
        values["X-Tenant-Id"] = tenant_id
    if user_id:
        values["X-User-Id"] = user_id
    return values


def role_ids():
    db = SessionLocal()
    try:
        return {role.name: role.id for role in db.query(Role).all()}
    finally:
        db.close()


def make_tenant(name="Northwind", alias="northwind"):
    db = SessionLocal()
    try:
        tenant = Tenant(name=name, alias=alias)
        db.add(tenant)
        db.commit()
        return tenant.id
    finally:
        db.close()


def make_user(email, tenant_id=None, roles=(RoleName.USER,), first_name="Test"):
    db = SessionLocal()
    try:
        names = [role.value for role in roles]
        user = User(
            email=email,
            first_name=first_name,
            last_name="User",
            tenant_id=tenant_id,
            roles=db.query(Role).filter(Role.name.in_(names)).all(),
        )
        db.add(user)
        db.commit()
        return user.id
    finally:
        db.close()


def make_invoice(
    tenant_id,
    number="INV-1",
    vendor="Acme",
    customer="Wayne",
    total="100.00",
    issue_date=date(2024, 1, 5),
    due_date=None,
    status="UNPAID",
    archived=False,
):
    db = SessionLocal()
    try:
        amount = Decimal(total)
        invoice = Invoice(
            invoice_number=number,
            issue_date=issue_date,
            due_date=due_date or issue_date,
            vendor_name=vendor,
            customer_name=customer,
            subtotal=amount,
            total_amount=amount,
            status=status,
            is_archived=archived,
            tenant_id=tenant_id,
        )
        db.add(invoice)
        db.commit()
        return invoice.id
    finally:
        db.close()
