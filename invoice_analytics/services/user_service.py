import logging
from typing import List, Optional

from fastapi import HTTPException

from invoice_analytics.core.access import NAV_ITEMS, RoleName, filter_nav_items
from invoice_analytics.core.security import Principal
from invoice_analytics.repositories.role_repository import RoleRepository
from invoice_analytics.repositories.tenant_repository import TenantRepository
from invoice_analytics.repositories.user_repository import UserRepository
from invoice_analytics.schemas.user import (
    NavigationEntry,
    NavigationResponse,
    SuperAdminUserCreate,
    User,
    UserCreate,
    UserFilter,
    UserUpdate,
)

logger = logging.getLogger(__name__)

TENANT_ROLES = frozenset({RoleName.USER.value, RoleName.ADMIN.value})


def _tenant_id_of(user: User) -> Optional[str]:
    return user.tenant.id if user.tenant else None


def _role_names(user: User) -> List[str]:
    return [role.name for role in user.roles]


class UserService:

    @staticmethod
    async def _ensure_email_free(email: str) -> None:
        if await UserRepository.get_by_email(email):
            raise HTTPException(status_code=409, detail="Email already exists")

    @staticmethod
    async def _role_names_for(role_ids: List[str]) -> List[str]:
        roles = await RoleRepository.find_by_ids(role_ids)
        if len(roles) != len(set(role_ids)):
            raise HTTPException(status_code=400, detail="One or more specified role IDs are invalid.")
        return [role.name for role in roles]

    @staticmethod
    async def _check_role_assignment(
        principal: Principal, role_ids: Optional[List[str]], target: Optional[User] = None
    ) -> None:
        """Non-super-admins may neither grant Super Admin nor touch a Super Admin's roles."""
        target_is_super = target is not None and RoleName.SUPER_ADMIN.value in _role_names(target)
        if not role_ids:
            if not principal.is_super_admin and target_is_super:
                raise HTTPException(status_code=403, detail="Cannot change roles of a Super Admin.")
            return

        names = await UserService._role_names_for(role_ids)
        if principal.is_super_admin:
            return
        if RoleName.SUPER_ADMIN.value in names:
            raise HTTPException(status_code=403, detail="Cannot assign Super Admin role.")
        if target_is_super:
            raise HTTPException(status_code=403, detail="Cannot change roles of a Super Admin.")

    @staticmethod
    def _check_same_tenant(principal: Principal, user: User, action: str) -> None:
        if principal.is_super_admin:
            return
        if _tenant_id_of(user) != principal.tenant_id:
            logger.warning(
                f"Forbidden attempt to {action} user {user.id} from tenant {principal.tenant_id}; "
                f"user belongs to tenant {_tenant_id_of(user)}"
            )
            raise HTTPException(status_code=403, detail=f"Cannot {action} user from a different tenant.")

    @staticmethod
    async def _get_or_404(user_id: str) -> User:
        user = await UserRepository.get_by_id(user_id)
        if not user:
            raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
        return user

    @staticmethod
    async def get_current_user(principal: Principal) -> User:
        if not principal.user_id:
            raise HTTPException(status_code=404, detail="Current user not found")
        user = await UserRepository.get_by_id(principal.user_id)
        if not user:
            raise HTTPException(status_code=404, detail="Current user not found")
        return user

    @staticmethod
    def get_navigation(principal: Principal) -> NavigationResponse:
        items = filter_nav_items(NAV_ITEMS, principal.roles)
        return NavigationResponse(
            roles=sorted(principal.roles),
            items=[NavigationEntry(label=item.label, path=item.path) for item in items],
        )

    @staticmethod
    async def list_users(principal: Principal, filters: UserFilter) -> List[User]:
        return await UserRepository.list_users(filters, principal.scope_tenant_id())

    @staticmethod
    async def get_user(principal: Principal, user_id: str) -> User:
        user = await UserService._get_or_404(user_id)
        tenant_id = principal.scope_tenant_id()
        if tenant_id and _tenant_id_of(user) != tenant_id:
            raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
        return user

    @staticmethod
    async def create_user(principal: Principal, data: UserCreate) -> User:
        """Admin flow: the new user joins the caller's tenant."""
        tenant_id = principal.scope_tenant_id()
        if not tenant_id:
            raise HTTPException(status_code=403, detail="No tenant associated with this account")
        await UserService._ensure_email_free(data.email)

        names = await UserService._role_names_for(data.roleIds)
        if any(name not in TENANT_ROLES for name in names):
            raise HTTPException(status_code=403, detail="Invalid role assignment.")

        user = await UserRepository.create(data.email, data.firstName, data.lastName, data.roleIds, tenant_id)
        logger.info(f"Created user {user.id} in tenant {tenant_id} with roles {names}")
        return user

    @staticmethod
    async def create_user_by_super_admin(data: SuperAdminUserCreate) -> User:
        await UserService._ensure_email_free(data.email)
        names = await UserService._role_names_for(data.roleIds)

        if data.tenantId is None:
            if names != [RoleName.SUPER_ADMIN.value]:
                raise HTTPException(
                    status_code=400, detail="Users without a tenant must have only the Super Admin role."
                )
        else:
            if not names or any(name not in TENANT_ROLES for name in names):
                raise HTTPException(status_code=403, detail="Invalid role assignment.")
            if not await TenantRepository.get_by_id(data.tenantId):
                raise HTTPException(status_code=400, detail=f"Tenant with ID {data.tenantId} not found")

        user = await UserRepository.create(data.email, data.firstName, data.lastName, data.roleIds, data.tenantId)
        logger.info(f"Created user {user.id} (by Super Admin) in tenant {data.tenantId or 'none'}")
        return user

    @staticmethod
    async def update_user(principal: Principal, user_id: str, data: UserUpdate) -> User:
        user = await UserService._get_or_404(user_id)
        UserService._check_same_tenant(principal, user, "update")
        if data.roleIds is not None:
            await UserService._check_role_assignment(principal, data.roleIds, user)

        updated = await UserRepository.update(user_id, data)
        if not updated:
            raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
        return updated

    @staticmethod
    async def delete_user(principal: Principal, user_id: str) -> None:
        user = await UserService._get_or_404(user_id)
        UserService._check_same_tenant(principal, user, "delete")
        if not principal.is_super_admin and RoleName.SUPER_ADMIN.value in _role_names(user):
            raise HTTPException(status_code=403, detail="Cannot delete a Super Admin.")

        if not await UserRepository.delete(user_id):
            raise HTTPException(status_code=404, detail=f"User with ID {user_id} not found")
        logger.info(f"Deleted user {user_id}")

    @staticmethod
    async def set_active(principal: Principal, user_id: str, is_active: bool) -> User:
        action = "activate" if is_active else "deactivate"
        user = await UserService._get_or_404(user_id)
        UserService._check_same_tenant(principal, user, action)
        updated = await UserRepository.set_active(user_id, is_active)
        logger.info(f"User {user_id} {action}d")
        return updated
