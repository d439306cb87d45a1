# eventhub/core/actor.py
from dataclasses import dataclass


@dataclass(frozen=True)
class Actor:
    """The signed-in caller, resolved once per request."""

    profile_id: str
    email: str
    is_admin: bool = False
