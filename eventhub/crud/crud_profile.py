# eventhub/crud/crud_profile.py
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from eventhub.crud.base import CRUDBase
from eventhub.models.profile import Profile
from eventhub.schemas.profile import ProfileSummary


class CRUDProfile(CRUDBase[Profile, ProfileSummary, ProfileSummary]):
    def get_for_update(self, db: Session, *, profile_id: str) -> Optional[Profile]:
        """Lock the profile row so one host's submissions are serialized."""
        return (
            db.query(self.model)
            .filter(self.model.id == profile_id)
            .with_for_update()
            .first()
        )

    def submissions_on(self, profile: Profile, day: date) -> int:
        """Submissions recorded on ``day``, including ones later rejected."""
        if profile.submissions_date != day:
            return 0
        return profile.submissions_today

    def record_submission(self, db: Session, *, profile: Profile, day: date) -> Profile:
        if profile.submissions_date != day:
            profile.submissions_date = day
            profile.submissions_today = 0
        profile.submissions_today += 1
        db.add(profile)
        return profile


profile = CRUDProfile(Profile)
