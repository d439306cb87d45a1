# eventhub/services/members.py
"""
Lookups against the verified community roster.

Admins use these to judge a host before reviewing their event, and to tell
existing members apart from new leads in RSVP exports.
"""
import logging
from typing import List, Sequence, Tuple

from sqlalchemy.orm import Session

from eventhub import crud
from eventhub.core.exceptions import NotFoundError
from eventhub.models.registration import Registration
from eventhub.schemas.member import HostVerification, MatchedBy

logger = logging.getLogger(__name__)


def verify_host(db: Session, host_id: str) -> HostVerification:
    """Match a host by email first, then by full name."""
    host = crud.profile.get(db, id=host_id)
    if host is None:
        raise NotFoundError("Host not found")

    member = crud.verified_member.get_by_email(db, email=host.email)
    matched_by = MatchedBy.email
    if member is None and host.full_name:
        member = crud.verified_member.get_by_name(db, full_name=host.full_name)
        matched_by = MatchedBy.name

    if member is None:
        logger.info("Host %s is not a verified member", host_id)
        return HostVerification(is_verified=False)

    logger.info("Host %s verified as %s by %s", host_id, member.cohort, matched_by.value)
    return HostVerification(is_verified=True, cohort=member.cohort, matched_by=matched_by)


def split_by_membership(
    db: Session, registrations: Sequence[Registration]
) -> Tuple[List[Registration], List[Registration]]:
    """Return (community members, new leads), each in the input order."""
    known = crud.verified_member.filter_known_emails(
        db, emails=[r.attendee_email for r in registrations]
    )
    members, leads = [], []
    for reg in registrations:
        if reg.attendee_email.strip().lower() in known:
            members.append(reg)
        else:
            leads.append(reg)
    return members, leads
