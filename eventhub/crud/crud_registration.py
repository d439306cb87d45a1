# eventhub/crud/crud_registration.py
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from eventhub.crud.base import CRUDBase
from eventhub.models.registration import SETTLED_PAYMENT_STATUSES, Registration
from eventhub.schemas.registration import PaymentStatus, RegistrationCreate
from eventhub.utils.time import utcnow

UNSETTLED_PAYMENT_STATUSES = (PaymentStatus.pending.value, PaymentStatus.failed.value)


class CRUDRegistration(CRUDBase[Registration, RegistrationCreate, RegistrationCreate]):
    def get_for_event(
        self, db: Session, *, event_id: str, registration_id: str
    ) -> Optional[Registration]:
        return (
            db.query(self.model)
            .filter(self.model.id == registration_id, self.model.event_id == event_id)
            .first()
        )

    def get_settled(
        self, db: Session, *, event_id: str, email: str
    ) -> Optional[Registration]:
        return (
            db.query(self.model)
            .filter(
                self.model.event_id == event_id,
                self.model.attendee_email == email.lower(),
                self.model.payment_status.in_(SETTLED_PAYMENT_STATUSES),
            )
            .first()
        )

    def get_by_order_id(self, db: Session, *, order_id: str) -> Optional[Registration]:
        return (
            db.query(self.model).filter(self.model.razorpay_order_id == order_id).first()
        )

    def get_settled_by_event(self, db: Session, *, event_id: str) -> List[Registration]:
        return (
            db.query(self.model)
            .filter(
                self.model.event_id == event_id,
                self.model.payment_status.in_(SETTLED_PAYMENT_STATUSES),
            )
            .order_by(self.model.registered_at.asc())
            .all()
        )

    def count_settled(self, db: Session) -> int:
        return (
            db.query(func.count(self.model.id))
            .filter(self.model.payment_status.in_(SETTLED_PAYMENT_STATUSES))
            .scalar()
        )

    def add_for_event(
        self,
        db: Session,
        *,
        obj_in: RegistrationCreate,
        event_id: str,
        payment_status: PaymentStatus,
        order_id: Optional[str] = None,
        amount: Optional[int] = None,
    ) -> Registration:
        """Stage a new registration row. The caller commits."""
        db_obj = self.model(
            event_id=event_id,
            attendee_name=obj_in.attendee_name,
            attendee_email=obj_in.attendee_email.lower(),
            whatsapp_number=obj_in.whatsapp_number,
            payment_status=payment_status.value,
            razorpay_order_id=order_id,
            amount_paid=amount,
            registered_at=utcnow(),
        )
        db.add(db_obj)
        return db_obj

    def remove_unsettled(self, db: Session, *, event_id: str, email: str) -> int:
        """Drop earlier pending/failed attempts so their orders can never settle."""
        return (
            db.query(self.model)
            .filter(
                self.model.event_id == event_id,
                self.model.attendee_email == email.lower(),
                self.model.payment_status.in_(UNSETTLED_PAYMENT_STATUSES),
            )
            .delete(synchronize_session=False)
        )

    def mark_paid(
        self,
        db: Session,
        *,
        order_id: str,
        payment_id: str,
        event_id: Optional[str] = None,
    ) -> bool:
        """
        Settle the registration for ``order_id``. Returns True only for the
        call whose UPDATE matched; a row that is already paid is left alone.
        """
        query = db.query(self.model).filter(
            self.model.razorpay_order_id == order_id,
            self.model.payment_status != PaymentStatus.paid.value,
        )
        if event_id is not None:
            query = query.filter(self.model.event_id == event_id)
        count = query.update(
            {
                self.model.payment_status: PaymentStatus.paid.value,
                self.model.razorpay_payment_id: payment_id,
            },
            synchronize_session=False,
        )
        return count == 1

    def mark_failed(self, db: Session, *, order_id: str) -> bool:
        """Only a still-pending row can fail."""
        count = (
            db.query(self.model)
            .filter(
                self.model.razorpay_order_id == order_id,
                self.model.payment_status == PaymentStatus.pending.value,
            )
            .update(
                {self.model.payment_status: PaymentStatus.failed.value},
                synchronize_session=False,
            )
        )
        return count == 1


registration = CRUDRegistration(Registration)
