import logging
from typing import List

from fastapi import APIRouter, Depends, Response

from invoice_analytics.core.access import RoleName
from invoice_analytics.core.security import require_roles
from invoice_analytics.schemas.tenant import (
    BulkDeleteResult,
    BulkDeleteTenantRequest,
    BulkUpdateResult,
    BulkUpdateTenantRequest,
    Tenant,
    TenantCreate,
    TenantUpdate,
)
from invoice_analytics.services.tenant_service import TenantService

# Tenants are managed by Super Admins only
router = APIRouter(dependencies=[Depends(require_roles(RoleName.SUPER_ADMIN))])
logger = logging.getLogger(__name__)


@router.post("", response_model=Tenant, status_code=201)
async def create_tenant(body: TenantCreate):
    return await TenantService.create_tenant(body)


@router.get("", response_model=List[Tenant])
async def list_tenants():
    return await TenantService.list_tenants()


@router.patch("/bulk", response_model=BulkUpdateResult)
async def bulk_update_tenants(body: BulkUpdateTenantRequest):
    result = await TenantService.bulk_update(body.updates)
    logger.info(f"Bulk tenant update: {result.successCount} ok, {result.failureCount} failed")
    return result


@router.delete("/bulk", response_model=BulkDeleteResult)
async def bulk_delete_tenants(body: BulkDeleteTenantRequest):
    result = await TenantService.bulk_delete(body.ids)
    logger.info(f"Bulk tenant delete: {result.totalDeleted} deleted, {result.totalFailed} failed")
    return result


@router.get("/{tenant_id}", response_model=Tenant)
async def get_tenant(tenant_id: str):
    return await TenantService.get_tenant(tenant_id)


@router.patch("/{tenant_id}", response_model=Tenant)
async def update_tenant(tenant_id: str, body: TenantUpdate):
    return await TenantService.update_tenant(tenant_id, body)


@router.delete("/{tenant_id}", status_code=204)
async def delete_tenant(tenant_id: str):
    await TenantService.delete_tenant(tenant_id)
    return Response(status_code=204)
