from typing import List

from fastapi import APIRouter, Depends

from invoice_analytics.core.security import get_current_principal
from invoice_analytics.repositories.role_repository import RoleRepository
from invoice_analytics.schemas.user import Role

router = APIRouter(dependencies=[Depends(get_current_principal)])


@router.get("", response_model=List[Role])
async def list_roles():
    return await RoleRepository.list_all()
