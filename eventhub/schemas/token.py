# eventhub/schemas/token.py
from typing import Optional

from pydantic import BaseModel


class TokenPayload(BaseModel):
    sub: str  # "sub" is the standard claim for subject (profile id)
    email: Optional[str] = None
    exp: int  # Standard claim for expiration time

    model_config = {"from_attributes": True}
