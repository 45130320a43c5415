import logging

from fastapi import APIRouter, Depends, HTTPException

from invoice_analytics.agents.nl2sql_agent import nl2sql_agent
from invoice_analytics.core.access import RoleName
from invoice_analytics.core.config import settings
from invoice_analytics.core.security import require_roles
from invoice_analytics.schemas.ai import AskAboutDataRequest, AskAboutDataResponse

# Generated SQL runs across tenants
router = APIRouter(dependencies=[Depends(require_roles(RoleName.SUPER_ADMIN))])
logger = logging.getLogger(__name__)


@router.post("/ask-about-data", response_model=AskAboutDataResponse)
async def ask_about_data(body: AskAboutDataRequest):
    """Answer a natural-language question about the invoice data."""
    if not settings.LLM_API_KEY:
        raise HTTPException(status_code=503, detail="LLM client not configured. Cannot process request.")
    if not body.query.strip():
        raise HTTPException(status_code=400, detail="Missing query in request body")

    try:
        logger.info(f"Processing query: {body.query!r}")
        result = await nl2sql_agent.process_natural_query(body.query.strip())
        return AskAboutDataResponse(**result)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error in ask-about-data endpoint: {e}")
        raise HTTPException(status_code=500, detail=str(e))
