"""
Request identity and tenant context.

Sign-in is handled by the identity provider in front of this service, which
forwards the verified subject as headers. This module turns those headers into
a ``Principal`` and applies the access gate to endpoints.
"""

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from fastapi import Depends, Header, HTTPException

from invoice_analytics.core.access import RoleName, is_authorized
from invoice_analytics.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    user_id: Optional[str]
    tenant_id: Optional[str]
    roles: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_super_admin(self) -> bool:
        return RoleName.SUPER_ADMIN.value in self.roles

    def scope_tenant_id(self) -> Optional[str]:
        """Tenant to filter by, or None when the caller sees every tenant."""
        if self.is_super_admin:
            return self.tenant_id
        if not self.tenant_id:
            raise HTTPException(status_code=403, detail="No tenant associated with this account")
        return self.tenant_id


def _parse_roles(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return frozenset()
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


async def get_current_principal(
    x_user_id: Optional[str] = Header(default=None),
    x_user_roles: Optional[str] = Header(default=None),
    x_tenant_id: Optional[str] = Header(default=None),
) -> Principal:
    roles = _parse_roles(x_user_roles)
    if not roles:
        raise HTTPException(status_code=401, detail="User roles not found")

    tenant_id = settings.DEFAULT_TENANT_ID or x_tenant_id
    return Principal(user_id=x_user_id, tenant_id=tenant_id, roles=roles)


def require_roles(*roles: RoleName):
    """Endpoint dependency; an empty role list admits any authenticated caller."""
    required = frozenset(role.value for role in roles)

    async def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not is_authorized(principal.roles, required):
            logger.warning(
                f"Denied {principal.user_id or 'anonymous'} with roles {sorted(principal.roles)}; "
                f"requires one of {sorted(required)}"
            )
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return principal

    return dependency
