# eventhub/schemas/profile.py
from typing import Optional

from pydantic import BaseModel


class ProfileSummary(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    affiliation: Optional[str] = None

    model_config = {"from_attributes": True}


class CanSubmitResponse(BaseModel):
    canSubmit: bool
    currentCount: int
    maxLimit: int
    # Every submission made today, rejected or expired ones included.
    submittedToday: int = 0
