# eventhub/api/v1/endpoints/registrations.py
from fastapi import APIRouter, BackgroundTasks, Depends, Request, status
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.core.limiter import limiter
from eventhub.schemas.event import EventAttendeeView
from eventhub.schemas.registration import (
    RegisterResponse,
    RegistrationConfirmation,
    RegistrationCreate,
)
from eventhub.schemas.registration import Registration as RegistrationSchema
from eventhub.services.registration import ledger
from eventhub.services.registration.notifications import (
    build_confirmation_email,
    send_confirmation,
)

router = APIRouter(tags=["Registrations"])


@router.post(
    "/events/{event_id}/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit("10/minute")
def register_for_free_event(
    request: Request,
    event_id: str,
    registration_in: RegistrationCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(deps.get_db),
):
    """
    Register for a free event. The response reveals the meeting link.
    """
    registration, event = ledger.register_free(db, event_id, registration_in)
    background_tasks.add_task(
        send_confirmation, build_confirmation_email(registration, event)
    )
    return RegisterResponse(
        registration=RegistrationSchema.model_validate(registration),
        event=EventAttendeeView.model_validate(event),
    )


@router.get(
    "/events/{event_id}/registrations/{registration_id}",
    response_model=RegistrationConfirmation,
)
def get_registration_confirmation(
    event_id: str, registration_id: str, db: Session = Depends(deps.get_db)
):
    """
    Confirmation page data. Knowing the registration id is the credential;
    location details are only included once the registration is settled.
    """
    registration, event = ledger.get_confirmation(db, event_id, registration_id)
    event_view = EventAttendeeView.model_validate(event)
    if not ledger.is_settled(registration):
        event_view = event_view.model_copy(
            update={"meeting_link": None, "venue_address": None}
        )
    return RegistrationConfirmation(
        registration=RegistrationSchema.model_validate(registration), event=event_view
    )
