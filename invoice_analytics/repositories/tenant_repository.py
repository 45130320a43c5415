from typing import List, Optional

from sqlalchemy.orm import Session

from invoice_analytics.core.database import SessionLocal
from invoice_analytics.models.tenant import Tenant
from invoice_analytics.schemas.tenant import Tenant as TenantSchema
from invoice_analytics.schemas.tenant import TenantCreate, TenantUpdate

FIELD_MAP = {"name": "name", "alias": "alias", "billingContact": "billing_contact"}


class TenantRepository:
    @staticmethod
    def _to_schema(tenant: Tenant) -> TenantSchema:
        return TenantSchema(
            id=tenant.id,
            name=tenant.name,
            alias=tenant.alias,
            billingContact=tenant.billing_contact,
        )

    @staticmethod
    async def create(data: TenantCreate) -> TenantSchema:
        db: Session = SessionLocal()
        try:
            tenant = Tenant(name=data.name, alias=data.alias, billing_contact=data.billingContact)
            db.add(tenant)
            db.commit()
            db.refresh(tenant)
            return TenantRepository._to_schema(tenant)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def list_all() -> List[TenantSchema]:
        db: Session = SessionLocal()
        try:
            tenants = db.query(Tenant).order_by(Tenant.name).all()
            return [TenantRepository._to_schema(tenant) for tenant in tenants]
        finally:
            db.close()

    @staticmethod
    async def get_by_id(tenant_id: str) -> Optional[TenantSchema]:
        db: Session = SessionLocal()
        try:
            tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
            return TenantRepository._to_schema(tenant) if tenant else None
        finally:
            db.close()

    @staticmethod
    async def get_by_alias(alias: str) -> Optional[TenantSchema]:
        db: Session = SessionLocal()
        try:
            tenant = db.query(Tenant).filter(Tenant.alias == alias).first()
            return TenantRepository._to_schema(tenant) if tenant else None
        finally:
            db.close()

    @staticmethod
    async def get_by_name(name: str) -> Optional[TenantSchema]:
        db: Session = SessionLocal()
        try:
            tenant = db.query(Tenant).filter(Tenant.name == name).first()
            return TenantRepository._to_schema(tenant) if tenant else None
        finally:
            db.close()

    @staticmethod
    async def update(tenant_id: str, data: TenantUpdate) -> Optional[TenantSchema]:
        db: Session = SessionLocal()
        try:
            tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
            if not tenant:
                return None
            for field, value in data.model_dump(exclude_unset=True, exclude={"id"}).items():
                setattr(tenant, FIELD_MAP[field], value)
            db.commit()
            db.refresh(tenant)
            return TenantRepository._to_schema(tenant)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def delete(tenant_id: str) -> bool:
        db: Session = SessionLocal()
        try:
            tenant = db.query(Tenant).filter(Tenant.id == tenant_id).first()
            if not tenant:
                return False
            db.delete(tenant)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
