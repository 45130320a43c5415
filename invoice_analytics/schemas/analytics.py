from typing import List

from pydantic import BaseModel


# Backend DTOs

class SummaryAnalytics(BaseModel):
    totalInvoices: int = 0
    totalInvoicedAmount: float = 0.0
    totalPaidAmount: float = 0.0
    totalOverdueAmount: float = 0.0
    paidCount: int = 0
    overdueCount: int = 0


class StatusDistributionItem(BaseModel):
    status: str
    count: int
    totalAmount: float


class StatusDistribution(BaseModel):
    distribution: List[StatusDistributionItem] = []


class MonthlyTrendItem(BaseModel):
    year: int
    month: int
    totalAmount: float
    invoiceCount: int


class MonthlyTrends(BaseModel):
    trends: List[MonthlyTrendItem] = []


class TopEntityItem(BaseModel):
    name: str
    totalAmount: float
    invoiceCount: int


class TopVendors(BaseModel):
    topVendors: List[TopEntityItem] = []


class TopCustomers(BaseModel):
    topCustomers: List[TopEntityItem] = []


class OverdueMonthlyItem(BaseModel):
    year: int
    month: int
    count: int


class OverdueMonthly(BaseModel):
    statistics: List[OverdueMonthlyItem] = []


class AnalyticsDtos(BaseModel):
    """The five backend payloads the dashboard is built from."""
    summary: SummaryAnalytics
    statusDistribution: StatusDistribution
    monthlyTrends: MonthlyTrends
    topVendors: TopVendors
    topCustomers: TopCustomers


# Presentation shapes

class AnalyticsSummary(BaseModel):
    totalInvoices: int
    totalAmount: float
    activeInvoices: int
    overdueInvoices: int


class MonthlyData(BaseModel):
    month: str
    year: int
    amount: float
    count: int


class StatusShare(BaseModel):
    status: str
    count: int
    percentage: float
    amount: float


class TopVendor(BaseModel):
    vendorName: str
    totalAmount: float
    invoiceCount: int


class TopCustomer(BaseModel):
    customerName: str
    totalAmount: float
    invoiceCount: int


class AnalyticsData(BaseModel):
    summary: AnalyticsSummary
    monthlyData: List[MonthlyData]
    statusDistribution: List[StatusShare]
    topVendors: List[TopVendor]
    topCustomers: List[TopCustomer]
