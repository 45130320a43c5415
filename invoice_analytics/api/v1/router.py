from fastapi import APIRouter

from invoice_analytics.api.v1.endpoints import ai, analytics, dashboard, invoices, roles, secrets, tenants, users

api_router = APIRouter()
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(invoices.router, prefix="/invoices", tags=["invoices"])
api_router.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
api_router.include_router(tenants.router, prefix="/tenants", tags=["tenants"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(secrets.router, prefix="/secrets", tags=["secrets"])
api_router.include_router(ai.router, prefix="/ai", tags=["ai"])
