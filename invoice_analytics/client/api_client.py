"""
Async HTTP client for the invoice analytics API.

Failed requests are retried with exponential backoff: the delay after attempt
``i`` (zero based) is ``min(base * 2**i, ceiling)`` milliseconds. Client errors
(4xx) are never retried.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from invoice_analytics.core.config import settings
from invoice_analytics.schemas.analytics import (
    AnalyticsData,
    AnalyticsDtos,
    MonthlyTrends,
    StatusDistribution,
    SummaryAnalytics,
    TopCustomers,
    TopVendors,
)
from invoice_analytics.schemas.invoice import Invoice, InvoiceResponse
from invoice_analytics.schemas.user import User
from invoice_analytics.services.analytics_transformer import transform_analytics

logger = logging.getLogger(__name__)

PAGE_SIZE = 100


class ApiError(Exception):
    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def retryable(self) -> bool:
        # Network failures carry no status
        return self.status_code is None or self.status_code >= 500


def retry_delay_ms(attempt: int, base_ms: int = None, ceiling_ms: int = None) -> int:
    base_ms = settings.API_RETRY_BASE_MS if base_ms is None else base_ms
    ceiling_ms = settings.API_RETRY_CEILING_MS if ceiling_ms is None else ceiling_ms
    return min(base_ms * 2 ** attempt, ceiling_ms)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("message") or body)
    return str(body)


class InvoiceAnalyticsClient:
    def __init__(
        self,
        base_url: str = None,
        user_id: str = None,
        roles: List[str] = None,
        tenant_id: str = None,
        max_retries: int = None,
        retry_base_ms: int = None,
        retry_ceiling_ms: int = None,
        transport: httpx.AsyncBaseTransport = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        headers = {}
        if user_id:
            headers["X-User-Id"] = user_id
        if roles:
            headers["X-User-Roles"] = ",".join(roles)
        if tenant_id:
            headers["X-Tenant-Id"] = tenant_id

        self.max_retries = settings.API_MAX_RETRIES if max_retries is None else max_retries
        self.retry_base_ms = settings.API_RETRY_BASE_MS if retry_base_ms is None else retry_base_ms
        self.retry_ceiling_ms = settings.API_RETRY_CEILING_MS if retry_ceiling_ms is None else retry_ceiling_ms
        self._sleep = sleep
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            headers=headers,
            timeout=settings.API_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _send_once(self, method: str, path: str, params: Dict[str, Any] = None) -> Any:
        try:
            response = await self._client.request(method, path, params=params)
        except httpx.TransportError as e:
            raise ApiError(None, f"Network error: {e}") from e
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response.json()

    async def _request(self, method: str, path: str, params: Dict[str, Any] = None) -> Any:
        attempt = 0
        while True:
            try:
                return await self._send_once(method, path, params)
            except ApiError as e:
                if not e.retryable or attempt >= self.max_retries:
                    raise
                delay = retry_delay_ms(attempt, self.retry_base_ms, self.retry_ceiling_ms)
                logger.warning(
                    f"{method} {path} failed ({e.status_code or 'network'}: {e.message}); "
                    f"retry {attempt + 1}/{self.max_retries} in {delay}ms"
                )
                await self._sleep(delay / 1000)
                attempt += 1

    @staticmethod
    def _range_params(date_from: date = None, date_to: date = None) -> Dict[str, str]:
        params = {}
        if date_from:
            params["from"] = date_from.isoformat()
        if date_to:
            params["to"] = date_to.isoformat()
        return params

    async def list_invoices(self, page: int = 1, limit: int = 10, status: str = None) -> InvoiceResponse:
        params = {"page": page, "limit": limit}
        if status:
            params["status"] = status
        return InvoiceResponse(**await self._request("GET", "/invoices", params))

    async def fetch_all_invoices(self) -> List[Invoice]:
        """Walk every page of the invoice listing."""
        invoices: List[Invoice] = []
        page = 1
        while True:
            result = await self.list_invoices(page=page, limit=PAGE_SIZE)
            invoices.extend(result.items)
            if page >= result.totalPages or not result.items:
                return invoices
            page += 1

    async def get_summary(self, date_from: date = None, date_to: date = None) -> SummaryAnalytics:
        data = await self._request("GET", "/analytics/summary", self._range_params(date_from, date_to))
        return SummaryAnalytics(**data)

    async def get_status_distribution(self, date_from: date = None, date_to: date = None) -> StatusDistribution:
        data = await self._request("GET", "/analytics/status-distribution", self._range_params(date_from, date_to))
        return StatusDistribution(**data)

    async def get_monthly_trends(self, date_from: date = None, date_to: date = None) -> MonthlyTrends:
        data = await self._request("GET", "/analytics/monthly-trends", self._range_params(date_from, date_to))
        return MonthlyTrends(**data)

    async def get_top_vendors(self, date_from: date = None, date_to: date = None) -> TopVendors:
        data = await self._request("GET", "/analytics/top-vendors", self._range_params(date_from, date_to))
        return TopVendors(**data)

    async def get_top_customers(self, date_from: date = None, date_to: date = None) -> TopCustomers:
        data = await self._request("GET", "/analytics/top-customers", self._range_params(date_from, date_to))
        return TopCustomers(**data)

    async def get_current_user(self) -> User:
        return User(**await self._request("GET", "/users/current"))

    async def get_analytics(self, date_from: date = None, date_to: date = None) -> AnalyticsData:
        summary, distribution, trends, vendors, customers = await asyncio.gather(
            self.get_summary(date_from, date_to),
            self.get_status_distribution(date_from, date_to),
            self.get_monthly_trends(date_from, date_to),
            self.get_top_vendors(date_from, date_to),
            self.get_top_customers(date_from, date_to),
        )
        return transform_analytics(
            AnalyticsDtos(
                summary=summary,
                statusDistribution=distribution,
                monthlyTrends=trends,
                topVendors=vendors,
                topCustomers=customers,
            )
        )
