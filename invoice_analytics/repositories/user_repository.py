from datetime import datetime, time
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from invoice_analytics.core.database import SessionLocal
from invoice_analytics.models.role import Role
from invoice_analytics.models.user import User
from invoice_analytics.schemas.user import Role as RoleSchema
from invoice_analytics.schemas.user import TenantRef, UserFilter, UserUpdate
from invoice_analytics.schemas.user import User as UserSchema


class UserRepository:
    @staticmethod
    def _to_schema(user: User) -> UserSchema:
        return UserSchema(
            id=user.id,
            email=user.email,
            firstName=user.first_name,
            lastName=user.last_name,
            isActive=user.is_active,
            avatarUrl=user.avatar_url,
            tenant=TenantRef(id=user.tenant.id, name=user.tenant.name) if user.tenant else None,
            roles=[RoleSchema(id=role.id, name=role.name) for role in user.roles],
            createdAt=user.created_at,
            updatedAt=user.updated_at,
        )

    @staticmethod
    async def create(
        email: str,
        first_name: str,
        last_name: Optional[str],
        role_ids: List[str],
        tenant_id: Optional[str],
    ) -> UserSchema:
        db: Session = SessionLocal()
        try:
            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                tenant_id=tenant_id,
                roles=db.query(Role).filter(Role.id.in_(role_ids)).all(),
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            return UserRepository._to_schema(user)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def get_by_id(user_id: str) -> Optional[UserSchema]:
        db: Session = SessionLocal()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            return UserRepository._to_schema(user) if user else None
        finally:
            db.close()

    @staticmethod
    async def get_by_email(email: str) -> Optional[UserSchema]:
        db: Session = SessionLocal()
        try:
            user = db.query(User).filter(func.lower(User.email) == email.lower()).first()
            return UserRepository._to_schema(user) if user else None
        finally:
            db.close()

    @staticmethod
    async def list_users(filters: UserFilter, tenant_id: Optional[str] = None) -> List[UserSchema]:
        db: Session = SessionLocal()
        try:
            query = db.query(User)
            if tenant_id:
                query = query.filter(User.tenant_id == tenant_id)
            if filters.email:
                query = query.filter(func.lower(User.email).contains(filters.email.lower()))
            if filters.name:
                pattern = f"%{filters.name.lower()}%"
                query = query.filter(
                    or_(func.lower(User.first_name).like(pattern), func.lower(User.last_name).like(pattern))
                )
            if filters.role:
                query = query.filter(User.roles.any(Role.name == filters.role))
            if filters.status:
                query = query.filter(User.is_active.is_(filters.status == "active"))
            if filters.createdFrom:
                query = query.filter(User.created_at >= datetime.combine(filters.createdFrom, time.min))
            if filters.createdTo:
                query = query.filter(User.created_at <= datetime.combine(filters.createdTo, time.max))
            users = query.order_by(User.created_at.desc()).all()
            return [UserRepository._to_schema(user) for user in users]
        finally:
            db.close()

    @staticmethod
    async def update(user_id: str, data: UserUpdate) -> Optional[UserSchema]:
        db: Session = SessionLocal()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return None
            if data.firstName is not None:
                user.first_name = data.firstName
            if data.lastName is not None:
                user.last_name = data.lastName
            if data.avatarUrl is not None:
                user.avatar_url = data.avatarUrl
            if data.roleIds is not None:
                user.roles = db.query(Role).filter(Role.id.in_(data.roleIds)).all()
            db.commit()
            db.refresh(user)
            return UserRepository._to_schema(user)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def set_active(user_id: str, is_active: bool) -> Optional[UserSchema]:
        db: Session = SessionLocal()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return None
            user.is_active = is_active
            db.commit()
            db.refresh(user)
            return UserRepository._to_schema(user)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    async def delete(user_id: str) -> bool:
        db: Session = SessionLocal()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return False
            db.delete(user)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
