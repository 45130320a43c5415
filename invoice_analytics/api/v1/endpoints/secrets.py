from typing import List

from fastapi import APIRouter, Depends, Response

from invoice_analytics.core.access import RoleName
from invoice_analytics.core.security import Principal, require_roles
from invoice_analytics.schemas.secret import Secret, SecretKey
from invoice_analytics.services.secret_service import SecretService

admin_only = require_roles(RoleName.ADMIN)

router = APIRouter()


@router.get("", response_model=List[Secret])
async def read_secrets(principal: Principal = Depends(admin_only)):
    return await SecretService.get_all_secrets(principal)


@router.get("/{key}", response_model=Secret)
async def read_secret(key: SecretKey, principal: Principal = Depends(admin_only)):
    return await SecretService.get_secret(principal, key)


@router.post("", status_code=204)
async def set_secret(body: Secret, principal: Principal = Depends(admin_only)):
    await SecretService.set_secret(principal, body)
    return Response(status_code=204)
