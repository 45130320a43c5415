from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import case, extract, func
from sqlalchemy.orm import Session

from invoice_analytics.core.database import SessionLocal
from invoice_analytics.models.invoice import Invoice, InvoiceItem
from invoice_analytics.schemas.invoice import Invoice as InvoiceSchema
from invoice_analytics.schemas.invoice import InvoiceItemSchema

ENTITY_COLUMNS = {
    "vendor": Invoice.vendor_name,
    "customer": Invoice.customer_name,
}


def _scoped(query, tenant_id: Optional[str]):
    # None means the caller may see every tenant
    if tenant_id:
        query = query.filter(Invoice.tenant_id == tenant_id)
    return query


def _date_range(query, date_from: Optional[date], date_to: Optional[date]):
    if date_from:
        query = query.filter(Invoice.issue_date >= date_from)
    if date_to:
        query = query.filter(Invoice.issue_date <= date_to)
    return query


class InvoiceRepository:
    @staticmethod
    def _to_schema(invoice: Invoice) -> InvoiceSchema:
        return InvoiceSchema(
            id=invoice.id,
            invoiceNumber=invoice.invoice_number,
            issueDate=invoice.issue_date.isoformat(),
            dueDate=invoice.due_date.isoformat(),
            vendorName=invoice.vendor_name,
            vendorAddress=invoice.vendor_address or "",
            vendorPhone=invoice.vendor_phone or "",
            vendorEmail=invoice.vendor_email or "",
            customerName=invoice.customer_name,
            customerAddress=invoice.customer_address or "",
            customerPhone=invoice.customer_phone or "",
            customerEmail=invoice.customer_email or "",
            subtotal=invoice.subtotal,
            discount=invoice.discount,
            taxRate=invoice.tax_rate,
            taxAmount=invoice.tax_amount,
            totalAmount=invoice.total_amount,
            status=invoice.status,
            currency=invoice.currency,
            items=[
                InvoiceItemSchema(
                    lineNumber=item.line_number,
                    description=item.description,
                    quantity=item.quantity,
                    unitPrice=item.unit_price,
                    amount=item.amount,
                )
                for item in invoice.items
            ],
            terms=invoice.terms,
            isArchived=invoice.is_archived,
            tenantId=invoice.tenant_id,
        )

    @staticmethod
    async def find_all(
        tenant_id: Optional[str],
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        include_archived: bool = False,
    ) -> Tuple[List[InvoiceSchema], int]:
        db: Session = SessionLocal()
        try:
            query = _scoped(db.query(Invoice), tenant_id)
            if status:
                query = query.filter(Invoice.status == status)
            if not include_archived:
                query = query.filter(Invoice.is_archived.is_(False))
            total = query.count()
            invoices = (
                query.order_by(Invoice.issue_date.desc(), Invoice.invoice_number)
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            return [InvoiceRepository._to_schema(invoice) for invoice in invoices], total
        finally:
            db.close()

    @staticmethod
    async def find_all_unpaginated(tenant_id: Optional[str], include_archived: bool = False) -> List[InvoiceSchema]:
        db: Session = SessionLocal()
        try:
            query = _scoped(db.query(Invoice), tenant_id)
            if not include_archived:
                query = query.filter(Invoice.is_archived.is_(False))
            invoices = query.order_by(Invoice.issue_date.desc(), Invoice.invoice_number).all()
            return [InvoiceRepository._to_schema(invoice) for invoice in invoices]
        finally:
            db.close()

    @staticmethod
    async def find_by_id(invoice_id: str, tenant_id: Optional[str]) -> Optional[InvoiceSchema]:
        db: Session = SessionLocal()
        try:
            invoice = _scoped(db.query(Invoice), tenant_id).filter(Invoice.id == invoice_id).first()
            return InvoiceRepository._to_schema(invoice) if invoice else None
        finally:
            db.close()

    @staticmethod
    async def create(values: Dict[str, Any], items: List[Dict[str, Any]]) -> InvoiceSchema:
        db: Session = SessionLocal()
        try:
            invoice = Invoice(**values)
            invoice.items = [InvoiceItem(**item) for item in items]
            db.add(invoice)
            db.commit()
            db.refresh(invoice)
            return InvoiceRepository._to_schema(invoice)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def delete(invoice_id: str, tenant_id: Optional[str]) -> bool:
        db: Session = SessionLocal()
        try:
            invoice = _scoped(db.query(Invoice), tenant_id).filter(Invoice.id == invoice_id).first()
            if not invoice:
                return False
            db.delete(invoice)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def set_archived(invoice_ids: List[str], tenant_id: Optional[str], archived: bool) -> int:
        db: Session = SessionLocal()
        try:
            if not invoice_ids:
                return 0
            count = (
                _scoped(db.query(Invoice), tenant_id)
                .filter(Invoice.id.in_(invoice_ids))
                .update({Invoice.is_archived: archived}, synchronize_session=False)
            )
            db.commit()
            return count
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # Analytics aggregates. Archived invoices never count.

    @staticmethod
    def _analytics_query(db: Session, columns, tenant_id, date_from, date_to):
        query = db.query(*columns).filter(Invoice.is_archived.is_(False))
        return _date_range(_scoped(query, tenant_id), date_from, date_to)

    @staticmethod
    async def summary(tenant_id: Optional[str], date_from: date = None, date_to: date = None) -> Dict[str, Any]:
        db: Session = SessionLocal()
        try:
            paid = Invoice.status == "PAID"
            overdue = Invoice.status == "OVERDUE"
            zero = Decimal("0")
            row = InvoiceRepository._analytics_query(
                db,
                [
                    func.count(Invoice.id),
                    func.coalesce(func.sum(Invoice.total_amount), zero),
                    func.coalesce(func.sum(case((paid, Invoice.total_amount), else_=zero)), zero),
                    func.coalesce(func.sum(case((overdue, Invoice.total_amount), else_=zero)), zero),
                    func.coalesce(func.sum(case((paid, 1), else_=0)), 0),
                    func.coalesce(func.sum(case((overdue, 1), else_=0)), 0),
                ],
                tenant_id,
                date_from,
                date_to,
            ).one()
            return {
                "totalInvoices": int(row[0] or 0),
                "totalInvoicedAmount": float(row[1] or 0),
                "totalPaidAmount": float(row[2] or 0),
                "totalOverdueAmount": float(row[3] or 0),
                "paidCount": int(row[4] or 0),
                "overdueCount": int(row[5] or 0),
            }
        finally:
            db.close()

    @staticmethod
    async def status_distribution(
        tenant_id: Optional[str], date_from: date = None, date_to: date = None
    ) -> List[Dict[str, Any]]:
        db: Session = SessionLocal()
        try:
            rows = (
                InvoiceRepository._analytics_query(
                    db,
                    [Invoice.status, func.count(Invoice.id), func.sum(Invoice.total_amount)],
                    tenant_id,
                    date_from,
                    date_to,
                )
                .group_by(Invoice.status)
                .order_by(Invoice.status)
                .all()
            )
            return [
                {"status": status, "count": int(count or 0), "totalAmount": float(total or 0)}
                for status, count, total in rows
            ]
        finally:
            db.close()

    @staticmethod
    async def monthly_trends(
        tenant_id: Optional[str], date_from: date = None, date_to: date = None
    ) -> List[Dict[str, Any]]:
        db: Session = SessionLocal()
        try:
            year = extract("year", Invoice.issue_date)
            month = extract("month", Invoice.issue_date)
            rows = (
                InvoiceRepository._analytics_query(
                    db,
                    [year, month, func.sum(Invoice.total_amount), func.count(Invoice.id)],
                    tenant_id,
                    date_from,
                    date_to,
                )
                .group_by(year, month)
                .order_by(year, month)
                .all()
            )
            return [
                {
                    "year": int(row_year),
                    "month": int(row_month),
                    "totalAmount": float(total or 0),
                    "invoiceCount": int(count or 0),
                }
                for row_year, row_month, total, count in rows
            ]
        finally:
            db.close()

    @staticmethod
    async def top_entities(
        entity: str,
        tenant_id: Optional[str],
        limit: int,
        date_from: date = None,
        date_to: date = None,
    ) -> List[Dict[str, Any]]:
        db: Session = SessionLocal()
        try:
            name = ENTITY_COLUMNS[entity]
            total = func.sum(Invoice.total_amount)
            rows = (
                InvoiceRepository._analytics_query(
                    db, [name, total, func.count(Invoice.id)], tenant_id, date_from, date_to
                )
                .group_by(name)
                .order_by(total.desc(), name)
                .limit(limit)
                .all()
            )
            return [
                {"name": row_name, "totalAmount": float(row_total or 0), "invoiceCount": int(count or 0)}
                for row_name, row_total, count in rows
            ]
        finally:
            db.close()

    @staticmethod
    async def overdue_monthly(tenant_id: Optional[str], since: date) -> List[Dict[str, Any]]:
        db: Session = SessionLocal()
        try:
            year = extract("year", Invoice.due_date)
            month = extract("month", Invoice.due_date)
            query = (
                _scoped(db.query(year, month, func.count(Invoice.id)), tenant_id)
                .filter(Invoice.is_archived.is_(False))
                .filter(Invoice.status == "OVERDUE")
                .filter(Invoice.due_date >= since)
            )
            rows = query.group_by(year, month).order_by(year, month).all()
            return [
                {"year": int(row_year), "month": int(row_month), "count": int(count or 0)}
                for row_year, row_month, count in rows
            ]
        finally:
            db.close()
