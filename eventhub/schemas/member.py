# eventhub/schemas/member.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class MatchedBy(str, Enum):
    email = "email"
    name = "name"


class HostVerification(BaseModel):
    is_verified: bool
    cohort: Optional[str] = None
    matched_by: Optional[MatchedBy] = None
