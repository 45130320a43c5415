import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile

from invoice_analytics.core.access import RoleName
from invoice_analytics.core.security import Principal, require_roles
from invoice_analytics.repositories.invoice_repository import InvoiceRepository
from invoice_analytics.schemas.invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceIdsRequest,
    InvoiceImportResult,
    InvoiceResponse,
    InvoiceStatus,
)
from invoice_analytics.services.export_service import EXCEL_MEDIA_TYPE, ExportService
from invoice_analytics.services.import_service import ImportService
from invoice_analytics.services.invoice_service import InvoiceService

router = APIRouter()
logger = logging.getLogger(__name__)

super_admin_only = require_roles(RoleName.SUPER_ADMIN)
any_role = require_roles(RoleName.USER, RoleName.ADMIN, RoleName.SUPER_ADMIN)


@router.get("", response_model=InvoiceResponse)
async def read_invoices(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[InvoiceStatus] = Query(None, description="Filter by invoice status"),
    includeArchived: bool = Query(False),
    principal: Principal = Depends(super_admin_only),
):
    try:
        return await InvoiceService.list_invoices(principal, page, limit, status, includeArchived)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing invoices: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/export/excel")
async def export_invoices(
    includeArchived: bool = Query(False),
    principal: Principal = Depends(super_admin_only),
):
    """Download the caller's invoices as an xlsx workbook."""
    try:
        invoices = await InvoiceRepository.find_all_unpaginated(principal.scope_tenant_id(), includeArchived)
        content = ExportService.to_excel(invoices)
        return Response(
            content=content,
            media_type=EXCEL_MEDIA_TYPE,
            headers={"Content-Disposition": 'attachment; filename="invoices.xlsx"'},
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error exporting invoices: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.patch("/archive", status_code=204)
async def archive_invoices(body: InvoiceIdsRequest, principal: Principal = Depends(super_admin_only)):
    await InvoiceService.set_archived(principal, body.ids, True)
    return Response(status_code=204)


@router.patch("/unarchive", status_code=204)
async def unarchive_invoices(body: InvoiceIdsRequest, principal: Principal = Depends(super_admin_only)):
    await InvoiceService.set_archived(principal, body.ids, False)
    return Response(status_code=204)


@router.get("/{invoice_id}", response_model=Invoice)
async def read_invoice(invoice_id: str, principal: Principal = Depends(super_admin_only)):
    return await InvoiceService.get_invoice(principal, invoice_id)


@router.post("", response_model=Invoice, status_code=201)
async def create_invoice(
    body: InvoiceCreate,
    principal: Principal = Depends(any_role),
):
    try:
        return await InvoiceService.create_invoice(principal, body)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating invoice: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/import", response_model=InvoiceImportResult)
async def import_invoices(
    file: UploadFile = File(..., description="CSV or Excel file, one invoice per row"),
    tenantId: Optional[str] = Query(None, description="Target tenant; Super Admins only"),
    principal: Principal = Depends(any_role),
):
    try:
        return await ImportService.import_invoices(principal, file, tenantId)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error importing invoices from {file.filename}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{invoice_id}", status_code=204)
async def delete_invoice(invoice_id: str, principal: Principal = Depends(super_admin_only)):
    await InvoiceService.delete_invoice(principal, invoice_id)
    return Response(status_code=204)
