#!/usr/bin/env python3
"""
Script to seed the database with demo tenants, users and invoices.
Run with: python3 seed_database.py
"""

from datetime import date, timedelta
from decimal import Decimal

import invoice_analytics.models  # noqa: F401
from invoice_analytics.core.access import RoleName
from invoice_analytics.core.database import Base, SessionLocal, engine
from invoice_analytics.models import Invoice, InvoiceItem, Role, Tenant, User
from invoice_analytics.repositories.role_repository import RoleRepository

# Create tables if they don't exist
Base.metadata.create_all(bind=engine)

# Initialize database session
db = SessionLocal()

TENANTS = [
    ("Northwind Traders", "northwind", "billing@northwind.example.com"),
    ("Contoso Energy", "contoso-energy", "accounts@contoso.example.com"),
]

VENDORS = ["Acme Supplies", "Globex Corporation", "Initech", "Umbrella Logistics", "Stark Components"]
CUSTOMERS = ["Wayne Enterprises", "Wonka Industries", "Tyrell Corp", "Cyberdyne Systems", "Soylent Foods"]
STATUSES = ["PAID", "UNPAID", "OVERDUE"]
CENT = Decimal("0.01")


def clear_database():
    """Clear existing data from all tables"""
    print("Clearing existing data...")
    db.query(InvoiceItem).delete()
    db.query(Invoice).delete()
    for user in db.query(User).all():
        db.delete(user)
    db.query(Tenant).delete()
    db.commit()
    print("Database cleared.")


def seed_tenants():
    print("Seeding tenants...")
    tenants = [Tenant(name=name, alias=alias, billing_contact=contact) for name, alias, contact in TENANTS]
    db.add_all(tenants)
    db.commit()
    print(f"✓ Added {len(tenants)} tenants")
    return tenants


def seed_users(tenants):
    print("Seeding users...")
    roles = {role.name: role for role in db.query(Role).all()}
    users = [
        User(
            email="root@invoice-analytics.example.com",
            first_name="Sam",
            last_name="Root",
            roles=[roles[RoleName.SUPER_ADMIN.value]],
        )
    ]
    for tenant in tenants:
        users.append(
            User(
                email=f"admin@{tenant.alias}.example.com",
                first_name="Alex",
                last_name=tenant.name.split()[0],
                tenant_id=tenant.id,
                roles=[roles[RoleName.ADMIN.value]],
            )
        )
        users.append(
            User(
                email=f"clerk@{tenant.alias}.example.com",
                first_name="Jordan",
                last_name=tenant.name.split()[0],
                tenant_id=tenant.id,
                roles=[roles[RoleName.USER.value]],
            )
        )
    db.add_all(users)
    db.commit()
    print(f"✓ Added {len(users)} users")


def seed_invoices(tenants):
    """Spread invoices over vendors, customers, months and statuses."""
    print("Seeding invoices...")
    today = date.today()
    invoices = []

    for t, tenant in enumerate(tenants):
        for i in range(60):
            issue_date = today - timedelta(days=i * 6 + t)
            due_date = issue_date + timedelta(days=30)
            quantity = 1 + i % 5
            unit_price = (Decimal("150.00") + Decimal(i * 37) + Decimal(t * 11)).quantize(CENT)
            subtotal = (unit_price * quantity).quantize(CENT)
            discount = (subtotal * Decimal("0.05")).quantize(CENT) if i % 7 == 0 else Decimal("0.00")
            tax_rate = Decimal("0.0825")
            tax_amount = ((subtotal - discount) * tax_rate).quantize(CENT)

            status = STATUSES[i % 3]
            if status != "PAID" and due_date < today:
                status = "OVERDUE"

            invoice = Invoice(
                invoice_number=f"INV-{tenant.alias.upper()}-{i + 1:05d}",
                issue_date=issue_date,
                due_date=due_date,
                vendor_name=VENDORS[i % len(VENDORS)],
                vendor_email=f"ar@{VENDORS[i % len(VENDORS)].split()[0].lower()}.example.com",
                customer_name=CUSTOMERS[(i + t) % len(CUSTOMERS)],
                customer_email=f"ap@{CUSTOMERS[(i + t) % len(CUSTOMERS)].split()[0].lower()}.example.com",
                subtotal=subtotal,
                discount=discount,
                tax_rate=tax_rate,
                tax_amount=tax_amount,
                total_amount=subtotal - discount + tax_amount,
                status=status,
                terms="Net 30",
                tenant_id=tenant.id,
            )
            invoice.items = [
                InvoiceItem(
                    line_number=1,
                    description="Consulting hours",
                    quantity=quantity,
                    unit_price=unit_price,
                    amount=subtotal,
                )
            ]
            invoices.append(invoice)

    db.add_all(invoices)
    db.commit()
    print(f"✓ Added {len(invoices)} invoices")


def main():
    """Main function to seed all tables"""
    try:
        print("=" * 50)
        print("Starting database seeding...")
        print("=" * 50)

        clear_database()
        RoleRepository.ensure_defaults()
        tenants = seed_tenants()
        seed_users(tenants)
        seed_invoices(tenants)

        print("=" * 50)
        print("✓ Database seeding completed successfully!")
        print("=" * 50)
    except Exception as e:
        print(f"✗ Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
