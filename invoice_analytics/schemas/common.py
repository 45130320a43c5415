from pydantic import BaseModel


class ErrorResponse(BaseModel):
    statusCode: int
    message: str
    path: str
    timestamp: str
