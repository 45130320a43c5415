from decimal import Decimal
from typing import List

from pydantic import BaseModel


class EntityTotal(BaseModel):
    """One vendor or customer with the sum of its invoice totals."""
    name: str
    totalAmount: Decimal


class MonthlyBreakdown(BaseModel):
    monthLabel: str  # e.g. "March 2024"
    totalAmount: Decimal
    invoiceDates: List[str]


class EntityDetails(BaseModel):
    name: str
    monthlyBreakdown: List[MonthlyBreakdown]
