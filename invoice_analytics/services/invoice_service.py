import logging
import math
from decimal import Decimal
from typing import List, Optional

from fastapi import HTTPException

from invoice_analytics.core.security import Principal
from invoice_analytics.repositories.invoice_repository import InvoiceRepository
from invoice_analytics.repositories.tenant_repository import TenantRepository
from invoice_analytics.schemas.invoice import Invoice, InvoiceCreate, InvoiceResponse

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def compute_total(subtotal: Decimal, discount: Decimal, tax_amount: Decimal) -> Decimal:
    return (subtotal - discount + tax_amount).quantize(CENT)


class InvoiceService:

    @staticmethod
    async def list_invoices(
        principal: Principal,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        include_archived: bool = False,
    ) -> InvoiceResponse:
        items, total = await InvoiceRepository.find_all(
            principal.scope_tenant_id(), page, limit, status, include_archived
        )
        return InvoiceResponse(
            items=items,
            total=total,
            page=page,
            limit=limit,
            totalPages=math.ceil(total / limit) if total else 0,
        )

    @staticmethod
    async def get_invoice(principal: Principal, invoice_id: str) -> Invoice:
        invoice = await InvoiceRepository.find_by_id(invoice_id, principal.scope_tenant_id())
        if not invoice:
            raise HTTPException(status_code=404, detail=f"Invoice with ID {invoice_id} not found")
        return invoice

    @staticmethod
    async def list_for_dashboard(principal: Principal) -> List[Invoice]:
        return await InvoiceRepository.find_all_unpaginated(principal.scope_tenant_id())

    @staticmethod
    async def resolve_tenant(principal: Principal, requested: Optional[str]) -> str:
        if not principal.is_super_admin:
            return principal.scope_tenant_id()
        tenant_id = requested or principal.tenant_id
        if not tenant_id:
            raise HTTPException(status_code=400, detail="tenantId is required")
        if not await TenantRepository.get_by_id(tenant_id):
            raise HTTPException(status_code=400, detail=f"Tenant with ID {tenant_id} not found")
        return tenant_id

    @staticmethod
    async def create_invoice(principal: Principal, data: InvoiceCreate) -> Invoice:
        if data.dueDate < data.issueDate:
            raise HTTPException(status_code=400, detail="dueDate must not be before issueDate")
        tenant_id = await InvoiceService.resolve_tenant(principal, data.tenantId)

        items = [
            {
                "line_number": item.lineNumber,
                "description": item.description,
                "quantity": item.quantity,
                "unit_price": item.unitPrice,
                "amount": item.amount if item.amount is not None else (item.unitPrice * item.quantity).quantize(CENT),
            }
            for item in data.items
        ]
        values = {
            "invoice_number": data.invoiceNumber,
            "issue_date": data.issueDate,
            "due_date": data.dueDate,
            "vendor_name": data.vendorName,
            "vendor_address": data.vendorAddress,
            "vendor_phone": data.vendorPhone,
            "vendor_email": data.vendorEmail,
            "customer_name": data.customerName,
            "customer_address": data.customerAddress,
            "customer_phone": data.customerPhone,
            "customer_email": data.customerEmail,
            "subtotal": data.subtotal,
            "discount": data.discount,
            "tax_rate": data.taxRate,
            "tax_amount": data.taxAmount,
            "total_amount": compute_total(data.subtotal, data.discount, data.taxAmount),
            "status": data.status,
            "currency": data.currency.upper(),
            "terms": data.terms,
            "tenant_id": tenant_id,
        }
        invoice = await InvoiceRepository.create(values, items)
        logger.info(f"Created invoice {invoice.invoiceNumber} ({invoice.id}) for tenant {tenant_id}")
        return invoice

    @staticmethod
    async def delete_invoice(principal: Principal, invoice_id: str) -> None:
        if not await InvoiceRepository.delete(invoice_id, principal.scope_tenant_id()):
            raise HTTPException(status_code=404, detail=f"Invoice with ID {invoice_id} not found")
        logger.info(f"Deleted invoice {invoice_id}")

    @staticmethod
    async def set_archived(principal: Principal, invoice_ids: List[str], archived: bool) -> int:
        count = await InvoiceRepository.set_archived(invoice_ids, principal.scope_tenant_id(), archived)
        logger.info(f"{'Archived' if archived else 'Unarchived'} {count} of {len(invoice_ids)} invoice(s)")
        return count
