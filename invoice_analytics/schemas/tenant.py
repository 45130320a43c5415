from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

ALIAS_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class Tenant(BaseModel):
    id: str
    name: str
    alias: str
    billingContact: Optional[str] = None


class TenantCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    alias: str = Field(min_length=1, max_length=50, pattern=ALIAS_PATTERN)
    billingContact: Optional[EmailStr] = None


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    alias: Optional[str] = Field(default=None, min_length=1, max_length=50, pattern=ALIAS_PATTERN)
    billingContact: Optional[EmailStr] = None


class BulkUpdateItem(TenantUpdate):
    id: str


class BulkUpdateTenantRequest(BaseModel):
    updates: List[BulkUpdateItem]


class BulkDeleteTenantRequest(BaseModel):
    ids: List[str]


class BulkError(BaseModel):
    id: str
    error: str


class BulkUpdateResult(BaseModel):
    successful: List[Tenant]
    failed: List[BulkError]
    total: int
    successCount: int
    failureCount: int


class BulkDeleteResult(BaseModel):
    successful: List[str]
    failed: List[BulkError]
    totalRequested: int
    totalDeleted: int
    totalFailed: int
