import enum
from typing import Optional

from pydantic import BaseModel


class SecretKey(str, enum.Enum):
    STRIPE = "stripe"


class Secret(BaseModel):
    key: SecretKey
    # None when the secret has not been set
    value: Optional[str] = None
