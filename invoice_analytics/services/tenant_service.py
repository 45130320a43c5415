import logging
from typing import List, Optional

from fastapi import HTTPException

from invoice_analytics.repositories.tenant_repository import TenantRepository
from invoice_analytics.schemas.tenant import (
    BulkError,
    BulkDeleteResult,
    BulkUpdateItem,
    BulkUpdateResult,
    Tenant,
    TenantCreate,
    TenantUpdate,
)

logger = logging.getLogger(__name__)


class TenantService:

    @staticmethod
    async def _ensure_unique(name: Optional[str], alias: Optional[str], exclude_id: str = None) -> None:
        if alias is not None:
            existing = await TenantRepository.get_by_alias(alias)
            if existing and existing.id != exclude_id:
                raise HTTPException(status_code=400, detail=f"Tenant with alias '{alias}' already exists")
        if name is not None:
            existing = await TenantRepository.get_by_name(name)
            if existing and existing.id != exclude_id:
                raise HTTPException(status_code=400, detail=f"Tenant with name '{name}' already exists")

    @staticmethod
    async def create_tenant(data: TenantCreate) -> Tenant:
        await TenantService._ensure_unique(data.name, data.alias)
        tenant = await TenantRepository.create(data)
        logger.info(f"Created tenant {tenant.alias} ({tenant.id})")
        return tenant

    @staticmethod
    async def list_tenants() -> List[Tenant]:
        return await TenantRepository.list_all()

    @staticmethod
    async def get_tenant(tenant_id: str) -> Tenant:
        tenant = await TenantRepository.get_by_id(tenant_id)
        if not tenant:
            raise HTTPException(status_code=404, detail=f"Tenant with ID {tenant_id} not found")
        return tenant

    @staticmethod
    async def update_tenant(tenant_id: str, data: TenantUpdate) -> Tenant:
        current = await TenantService.get_tenant(tenant_id)
        if not data.model_fields_set - {"id"}:
            return current
        await TenantService._ensure_unique(data.name, data.alias, exclude_id=tenant_id)
        tenant = await TenantRepository.update(tenant_id, data)
        if not tenant:
            raise HTTPException(status_code=404, detail=f"Tenant with ID {tenant_id} not found")
        return tenant

    @staticmethod
    async def delete_tenant(tenant_id: str) -> None:
        if not await TenantRepository.delete(tenant_id):
            raise HTTPException(status_code=404, detail=f"Tenant with ID {tenant_id} not found")
        logger.info(f"Deleted tenant {tenant_id}")

    @staticmethod
    async def bulk_update(updates: List[BulkUpdateItem]) -> BulkUpdateResult:
        """Apply each update independently; one failure does not stop the rest."""
        successful, failed = [], []
        for item in updates:
            try:
                successful.append(await TenantService.update_tenant(item.id, item))
            except HTTPException as e:
                failed.append(BulkError(id=item.id, error=str(e.detail)))
            except Exception as e:
                logger.error(f"Bulk update failed for tenant {item.id}: {e}")
                failed.append(BulkError(id=item.id, error=str(e)))

        return BulkUpdateResult(
            successful=successful,
            failed=failed,
            total=len(updates),
            successCount=len(successful),
            failureCount=len(failed),
        )

    @staticmethod
    async def bulk_delete(tenant_ids: List[str]) -> BulkDeleteResult:
        successful, failed = [], []
        for tenant_id in tenant_ids:
            try:
                await TenantService.delete_tenant(tenant_id)
                successful.append(tenant_id)
            except HTTPException as e:
                failed.append(BulkError(id=tenant_id, error=str(e.detail)))
            except Exception as e:
                logger.error(f"Bulk delete failed for tenant {tenant_id}: {e}")
                failed.append(BulkError(id=tenant_id, error=str(e)))

        return BulkDeleteResult(
            successful=successful,
            failed=failed,
            totalRequested=len(tenant_ids),
            totalDeleted=len(successful),
            totalFailed=len(failed),
        )
