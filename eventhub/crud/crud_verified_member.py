# eventhub/crud/crud_verified_member.py
from typing import Iterable, Optional, Set

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventhub.crud.base import CRUDBase
from eventhub.models.verified_member import VerifiedMember
from eventhub.schemas.member import HostVerification


class CRUDVerifiedMember(CRUDBase[VerifiedMember, HostVerification, HostVerification]):
    def get_by_email(self, db: Session, *, email: str) -> Optional[VerifiedMember]:
        return (
            db.query(self.model)
            .filter(self.model.email == email.strip().lower())
            .first()
        )

    def get_by_name(self, db: Session, *, full_name: str) -> Optional[VerifiedMember]:
        return (
            db.query(self.model)
            .filter(func.lower(self.model.full_name) == full_name.strip().lower())
            .order_by(self.model.created_at.asc())
            .first()
        )

    def filter_known_emails(self, db: Session, *, emails: Iterable[str]) -> Set[str]:
        """The subset of ``emails`` (normalized) that belong to members."""
        normalized = {e.strip().lower() for e in emails}
        if not normalized:
            return set()
        rows = (
            db.query(self.model.email)
            .filter(self.model.email.in_(normalized))
            .all()
        )
        return {email for (email,) in rows}


verified_member = CRUDVerifiedMember(VerifiedMember)
