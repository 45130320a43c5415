from typing import Any, Optional

from pydantic import BaseModel


class AskAboutDataRequest(BaseModel):
    query: str = ""


class AskAboutDataResponse(BaseModel):
    response: str
    sql: Optional[str] = None
    rawResult: Optional[Any] = None
    error: Optional[str] = None
