import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import invoice_analytics.models  # noqa: F401  registers tables on Base
from invoice_analytics.core.config import settings
from invoice_analytics.core.database import Base, engine
from invoice_analytics.core.logging_config import configure_logging
from invoice_analytics.repositories.role_repository import RoleRepository

configure_logging()
logger = logging.getLogger(__name__)

# Create tables
Base.metadata.create_all(bind=engine)
added = RoleRepository.ensure_defaults()
if added:
    logger.info(f"Inserted {added} default role(s)")

app = FastAPI(title="Invoice Analytics")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "statusCode": 500,
            "message": "Internal server error",
            "path": request.url.path,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


from invoice_analytics.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Welcome to Invoice Analytics API"}
