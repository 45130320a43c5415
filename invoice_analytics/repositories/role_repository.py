from typing import List

from sqlalchemy.orm import Session

from invoice_analytics.core.access import RoleName
from invoice_analytics.core.database import SessionLocal
from invoice_analytics.models.role import Role
from invoice_analytics.schemas.user import Role as RoleSchema


class RoleRepository:
    @staticmethod
    def _to_schema(role: Role) -> RoleSchema:
        return RoleSchema(id=role.id, name=role.name)

    @staticmethod
    async def list_all() -> List[RoleSchema]:
        db: Session = SessionLocal()
        try:
            return [RoleRepository._to_schema(role) for role in db.query(Role).order_by(Role.name).all()]
        finally:
            db.close()

    @staticmethod
    async def find_by_ids(role_ids: List[str]) -> List[RoleSchema]:
        db: Session = SessionLocal()
        try:
            if not role_ids:
                return []
            roles = db.query(Role).filter(Role.id.in_(role_ids)).all()
            return [RoleRepository._to_schema(role) for role in roles]
        finally:
            db.close()

    @staticmethod
    def ensure_defaults() -> int:
        """Insert any missing reference roles; returns how many were added."""
        db: Session = SessionLocal()
        try:
            existing = {name for (name,) in db.query(Role.name).all()}
            missing = [Role(name=role.value) for role in RoleName if role.value not in existing]
            if missing:
                db.add_all(missing)
                db.commit()
            return len(missing)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
