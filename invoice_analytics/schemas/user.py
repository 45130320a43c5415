from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field


class Role(BaseModel):
    id: str
    name: str


class TenantRef(BaseModel):
    id: str
    name: str


class User(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: Optional[str] = None
    isActive: bool
    avatarUrl: Optional[str] = None
    tenant: Optional[TenantRef] = None
    roles: List[Role] = []
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None


class UserCreate(BaseModel):
    email: EmailStr
    firstName: str = Field(min_length=1, max_length=100)
    lastName: Optional[str] = Field(default=None, max_length=100)
    roleIds: List[str] = Field(min_length=1)


class SuperAdminUserCreate(UserCreate):
    tenantId: Optional[str] = None


class UserUpdate(BaseModel):
    firstName: Optional[str] = Field(default=None, min_length=1, max_length=100)
    lastName: Optional[str] = Field(default=None, max_length=100)
    avatarUrl: Optional[str] = Field(default=None, max_length=500)
    roleIds: Optional[List[str]] = None


class UserFilter(BaseModel):
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    status: Optional[Literal["active", "inactive"]] = None
    createdFrom: Optional[date] = None
    createdTo: Optional[date] = None


class NavigationEntry(BaseModel):
    label: str
    path: str


class NavigationResponse(BaseModel):
    roles: List[str]
    items: List[NavigationEntry]
