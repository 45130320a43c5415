import re
from typing import List

from fastapi import HTTPException

from invoice_analytics.core.security import Principal
from invoice_analytics.repositories.secret_repository import SecretRepository
from invoice_analytics.schemas.secret import Secret, SecretKey


def secret_name(tenant_id: str, key: SecretKey) -> str:
    """Storage name of a tenant's secret, e.g. ``tenant--<id>--stripe``."""
    safe_key = re.sub(r"[^a-zA-Z0-9-]", "-", key.value)
    return f"tenant--{tenant_id}--{safe_key}"


class SecretService:

    @staticmethod
    def _tenant_id(principal: Principal) -> str:
        tenant_id = principal.scope_tenant_id()
        if not tenant_id:
            raise HTTPException(status_code=400, detail="Secrets require a tenant context")
        return tenant_id

    @staticmethod
    async def get_secret(principal: Principal, key: SecretKey) -> Secret:
        tenant_id = SecretService._tenant_id(principal)
        return Secret(key=key, value=await SecretRepository.get(secret_name(tenant_id, key)))

    @staticmethod
    async def get_all_secrets(principal: Principal) -> List[Secret]:
        """Every known key for the tenant, unset ones with a null value."""
        tenant_id = SecretService._tenant_id(principal)
        names = {key: secret_name(tenant_id, key) for key in SecretKey}
        values = await SecretRepository.get_many(list(names.values()))
        return [Secret(key=key, value=values[name]) for key, name in names.items()]

    @staticmethod
    async def set_secret(principal: Principal, secret: Secret) -> None:
        tenant_id = SecretService._tenant_id(principal)
        await SecretRepository.set(secret_name(tenant_id, secret.key), secret.value)
