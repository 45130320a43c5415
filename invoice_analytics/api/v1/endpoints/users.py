import logging
from datetime import date
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from invoice_analytics.core.access import RoleName
from invoice_analytics.core.security import Principal, get_current_principal, require_roles
from invoice_analytics.schemas.user import (
    NavigationResponse,
    SuperAdminUserCreate,
    User,
    UserCreate,
    UserFilter,
    UserUpdate,
)
from invoice_analytics.services.user_service import UserService

router = APIRouter()
logger = logging.getLogger(__name__)

user_managers = require_roles(RoleName.ADMIN, RoleName.SUPER_ADMIN)


def user_filters(
    email: Optional[str] = Query(None),
    name: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    status: Optional[Literal["active", "inactive"]] = Query(None),
    createdFrom: Optional[date] = Query(None),
    createdTo: Optional[date] = Query(None),
) -> UserFilter:
    return UserFilter(
        email=email,
        name=name,
        role=role,
        status=status,
        createdFrom=createdFrom,
        createdTo=createdTo,
    )


@router.get("/current", response_model=User)
async def get_current_user(principal: Principal = Depends(get_current_principal)):
    return await UserService.get_current_user(principal)


@router.get("/current/navigation", response_model=NavigationResponse)
async def get_navigation(principal: Principal = Depends(get_current_principal)):
    return UserService.get_navigation(principal)


@router.get("", response_model=List[User])
async def list_users(filters: UserFilter = Depends(user_filters), principal: Principal = Depends(user_managers)):
    return await UserService.list_users(principal, filters)


@router.post("", response_model=User, status_code=201)
async def create_user(body: UserCreate, principal: Principal = Depends(require_roles(RoleName.ADMIN))):
    return await UserService.create_user(principal, body)


@router.post("/super", response_model=User, status_code=201)
async def create_user_by_super_admin(
    body: SuperAdminUserCreate, principal: Principal = Depends(require_roles(RoleName.SUPER_ADMIN))
):
    return await UserService.create_user_by_super_admin(body)


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, principal: Principal = Depends(get_current_principal)):
    return await UserService.get_user(principal, user_id)


@router.patch("/{user_id}", response_model=User)
async def update_user(user_id: str, body: UserUpdate, principal: Principal = Depends(get_current_principal)):
    return await UserService.update_user(principal, user_id, body)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: str, principal: Principal = Depends(user_managers)):
    await UserService.delete_user(principal, user_id)


@router.patch("/{user_id}/activate", response_model=User)
async def activate_user(user_id: str, principal: Principal = Depends(user_managers)):
    return await UserService.set_active(principal, user_id, True)


@router.patch("/{user_id}/deactivate", response_model=User)
async def deactivate_user(user_id: str, principal: Principal = Depends(user_managers)):
    return await UserService.set_active(principal, user_id, False)
