# eventhub/schemas/event.py
from datetime import datetime
from enum import Enum
from typing import List, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from eventhub.schemas.profile import ProfileSummary
from eventhub.utils.time import to_naive_utc, utcnow


class EventStatus(str, Enum):
    submitted = "submitted"
    published = "published"
    rejected = "rejected"
    expired = "expired"
    completed = "completed"


class LocationType(str, Enum):
    online = "online"
    offline = "offline"
    hybrid = "hybrid"


class EventListType(str, Enum):
    upcoming = "upcoming"
    past = "past"


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class EventCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=5,
        max_length=100,
        json_schema_extra={"example": "Intro to LLMs"},
    )
    description: str = Field(..., min_length=50, max_length=1000)
    event_date: datetime
    location_type: LocationType
    city: Optional[str] = None
    venue_address: Optional[str] = None
    meeting_link: Optional[str] = None
    max_capacity: int = Field(..., ge=5, le=500)
    # Ignored for non-admin hosts.
    price: int = Field(0, ge=0, json_schema_extra={"example": 999})
    image_url: Optional[str] = None

    @field_validator("event_date")
    @classmethod
    def event_date_in_future(cls, value: datetime) -> datetime:
        value = to_naive_utc(value)
        if value <= utcnow():
            raise ValueError("Event date must be in the future")
        return value

    @model_validator(mode="after")
    def check_location_fields(self):
        needs_link = self.location_type in (LocationType.online, LocationType.hybrid)
        needs_city = self.location_type in (LocationType.offline, LocationType.hybrid)
        mode = self.location_type.value

        if needs_link:
            if not self.meeting_link:
                raise ValueError(f"Meeting link is required for {mode} events")
            if not is_valid_url(self.meeting_link):
                raise ValueError("Please enter a valid URL")
        if needs_city and not self.city:
            raise ValueError(f"City is required for {mode} events")
        if self.location_type == LocationType.offline and not self.venue_address:
            raise ValueError("Venue address is required for offline events")
        return self


class EventPublic(BaseModel):
    """Public view of an event. Never carries the meeting link or venue address."""

    id: str
    title: str
    description: str
    event_date: datetime
    location_type: LocationType
    city: Optional[str] = None
    max_capacity: int
    current_registrations: int
    price: int
    image_url: Optional[str] = None
    status: EventStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class EventAttendeeView(EventPublic):
    """What a registered attendee gets to see."""

    venue_address: Optional[str] = None
    meeting_link: Optional[str] = None


class Event(EventAttendeeView):
    host_id: str
    rejection_reason: Optional[str] = None
    submitted_at: datetime
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    expires_at: datetime
    updated_at: datetime


class AdminEvent(Event):
    host: Optional[ProfileSummary] = None


class EventRejectRequest(BaseModel):
    reason: str = Field(..., json_schema_extra={"example": "Description lacks an agenda."})


class ReviewResponse(BaseModel):
    success: bool = True
    event: Event


class AdminStats(BaseModel):
    pending: int
    published: int
    rejected: int
    expired: int
    completed: int
    total_registrations: int
    recent_submissions: List[AdminEvent]
