from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

InvoiceStatus = Literal["PAID", "UNPAID", "OVERDUE"]


class InvoiceItemSchema(BaseModel):
    lineNumber: int
    description: str
    quantity: int
    unitPrice: Decimal
    amount: Decimal


class Invoice(BaseModel):
    """Invoice as served by the API and consumed by the aggregation pipeline."""
    id: str
    invoiceNumber: str
    # Raw ISO date string; may be malformed in imported data
    issueDate: str
    dueDate: str
    vendorName: str
    vendorAddress: str = ""
    vendorPhone: str = ""
    vendorEmail: str = ""
    customerName: str
    customerAddress: str = ""
    customerPhone: str = ""
    customerEmail: str = ""
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")
    taxRate: Decimal = Decimal("0")
    taxAmount: Decimal = Decimal("0")
    totalAmount: Decimal
    status: InvoiceStatus = "UNPAID"
    currency: str = "USD"
    items: List[InvoiceItemSchema] = []
    terms: Optional[str] = None
    isArchived: bool = False
    tenantId: Optional[str] = None


class InvoiceItemCreate(BaseModel):
    lineNumber: int = Field(ge=1)
    description: str = Field(min_length=1, max_length=255)
    quantity: int = Field(ge=0)
    unitPrice: Decimal = Field(ge=0)
    amount: Optional[Decimal] = None


class InvoiceCreate(BaseModel):
    invoiceNumber: str = Field(min_length=1, max_length=50)
    issueDate: date
    dueDate: date
    vendorName: str = Field(min_length=1, max_length=255)
    vendorAddress: str = ""
    vendorPhone: str = ""
    vendorEmail: str = ""
    customerName: str = Field(min_length=1, max_length=255)
    customerAddress: str = ""
    customerPhone: str = ""
    customerEmail: str = ""
    subtotal: Decimal = Field(ge=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    taxRate: Decimal = Field(default=Decimal("0"), ge=0)
    taxAmount: Decimal = Field(default=Decimal("0"), ge=0)
    status: InvoiceStatus = "UNPAID"
    currency: str = Field(default="USD", min_length=3, max_length=3)
    terms: Optional[str] = None
    items: List[InvoiceItemCreate] = []
    # Super Admins have no tenant of their own and must name one
    tenantId: Optional[str] = None


class InvoiceResponse(BaseModel):
    items: List[Invoice]
    total: int
    page: int
    limit: int
    totalPages: int


class InvoiceIdsRequest(BaseModel):
    ids: List[str]


class InvoiceImportFailure(BaseModel):
    # Spreadsheet row number, header being row 1
    row: int
    invoiceNumber: Optional[str] = None
    error: str


class InvoiceImportResult(BaseModel):
    imported: List[Invoice]
    failed: List[InvoiceImportFailure]
    total: int
    successCount: int
    failureCount: int
