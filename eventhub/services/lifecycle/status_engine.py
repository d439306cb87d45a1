# eventhub/services/lifecycle/status_engine.py
"""
Event status state machine.

    submitted --(admin_review)--> published --(scheduled_sweep)--> completed
        |
        +--(admin_review)--> rejected
        +--(scheduled_sweep)--> expired

``submitted`` is the only initial status. Every other move is illegal; a host
who wants to try again creates a new event.
"""
import logging
from enum import Enum
from typing import Dict, FrozenSet, Tuple

from eventhub.core.exceptions import InvalidTransitionError
from eventhub.schemas.event import EventStatus

logger = logging.getLogger(__name__)


class TransitionTrigger(str, Enum):
    admin_review = "admin_review"
    scheduled_sweep = "scheduled_sweep"


INITIAL_STATUS = EventStatus.submitted

# (from, to) -> the only trigger allowed to make that move
VALID_TRANSITIONS: Dict[Tuple[EventStatus, EventStatus], TransitionTrigger] = {
    (EventStatus.submitted, EventStatus.published): TransitionTrigger.admin_review,
    (EventStatus.submitted, EventStatus.rejected): TransitionTrigger.admin_review,
    (EventStatus.submitted, EventStatus.expired): TransitionTrigger.scheduled_sweep,
    (EventStatus.published, EventStatus.completed): TransitionTrigger.scheduled_sweep,
}

# Visible on the public site.
PUBLIC_STATUSES: FrozenSet[EventStatus] = frozenset(
    {EventStatus.published, EventStatus.completed}
)

# Count against the host's daily submission quota.
ACTIVE_SUBMISSION_STATUSES: FrozenSet[EventStatus] = frozenset(
    {EventStatus.submitted, EventStatus.published}
)

# Verb used in error messages for admin actions.
ACTION_NAMES = {
    EventStatus.published: "approve",
    EventStatus.rejected: "reject",
    EventStatus.expired: "expire",
    EventStatus.completed: "complete",
}


def can_transition(
    current: EventStatus, target: EventStatus, trigger: TransitionTrigger
) -> bool:
    allowed = VALID_TRANSITIONS.get((EventStatus(current), EventStatus(target)))
    return allowed is not None and allowed == trigger


def ensure_transition(
    current: EventStatus, target: EventStatus, trigger: TransitionTrigger
) -> None:
    """
    Raise InvalidTransitionError unless ``trigger`` may move an event from
    ``current`` to ``target``.
    """
    current = EventStatus(current)
    target = EventStatus(target)
    if not can_transition(current, target, trigger):
        logger.warning(
            "Invalid transition: %s -> %s via %s", current.value, target.value, trigger.value
        )
        raise InvalidTransitionError(ACTION_NAMES.get(target, target.value), current.value)


def sweep_source(target: EventStatus) -> EventStatus:
    """The status a scheduled sweep moves into ``target``."""
    target = EventStatus(target)
    for (current, to), trigger in VALID_TRANSITIONS.items():
        if to == target and trigger == TransitionTrigger.scheduled_sweep:
            return current
    raise ValueError(f"No scheduled sweep leads to {target.value}")
