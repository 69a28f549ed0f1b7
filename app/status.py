from enum import Enum
from typing import NamedTuple


class JobStatus(str, Enum):
    # creation/pricing
    PENDING = "pending"                      # request submitted by client
    QUOTED = "quoted"                        # AI or manual quote generated
    PRICED = "priced"                        # admin set the baseline price

    # assignment
    AVAILABLE = "available"                  # released to the landscaper pool
    SCHEDULED = "scheduled"
    ASSIGNED = "assigned"                    # landscaper accepted / admin assigned

    # execution
    ACTIVE = "active"                        # work in progress
    PENDING_REVIEW = "pending_review"
    COMPLETED_PENDING_REVIEW = "completed_pending_review"  # landscaper submitted work
    COMPLETED = "completed"                  # admin approved

    # exception paths
    COMPLETION_FLAGGED = "completion_flagged"
    FLAGGED_REVIEW = "flagged_review"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"                  # terminal
    RESCHEDULED = "rescheduled"


class Actor(str, Enum):
    ADMIN = "admin"
    LANDSCAPER = "landscaper"
    SYSTEM = "system"                        # automated, e.g. GPS geofence
    CLIENT = "client"


class Transition(NamedTuple):
    to: JobStatus
    actor: Actor
    description: str


_S = JobStatus
_A = Actor

ALLOWED_TRANSITIONS: dict[JobStatus, tuple[Transition, ...]] = {
    _S.PENDING: (
        Transition(_S.QUOTED, _A.SYSTEM, "AI or manual quote generated"),
        Transition(_S.PRICED, _A.ADMIN, "Admin sets baseline price"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
        Transition(_S.CANCELLED, _A.CLIENT, "Client cancels request"),
    ),
    _S.QUOTED: (
        Transition(_S.PRICED, _A.ADMIN, "Admin confirms/adjusts price"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
        Transition(_S.CANCELLED, _A.CLIENT, "Client declines quote"),
    ),
    _S.PRICED: (
        Transition(_S.AVAILABLE, _A.ADMIN, "Admin releases to landscaper pool"),
        Transition(_S.ASSIGNED, _A.ADMIN, "Admin directly assigns landscaper"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
    ),
    _S.AVAILABLE: (
        Transition(_S.ASSIGNED, _A.LANDSCAPER, "Landscaper accepts job"),
        Transition(_S.PRICED, _A.ADMIN, "Admin pulls back from pool"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
    ),
    _S.SCHEDULED: (
        Transition(_S.ASSIGNED, _A.LANDSCAPER, "Landscaper accepts scheduled job"),
        Transition(_S.AVAILABLE, _A.ADMIN, "Admin re-releases to pool"),
        Transition(_S.RESCHEDULED, _A.ADMIN, "Admin reschedules"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
    ),
    _S.ASSIGNED: (
        Transition(_S.ACTIVE, _A.LANDSCAPER, "Landscaper starts work"),
        Transition(_S.ACTIVE, _A.SYSTEM, "GPS geofence auto-start"),
        Transition(_S.AVAILABLE, _A.ADMIN, "Admin unassigns landscaper"),
        Transition(_S.BLOCKED, _A.LANDSCAPER, "Landscaper reports unable to complete"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
    ),
    _S.ACTIVE: (
        Transition(_S.COMPLETED_PENDING_REVIEW, _A.LANDSCAPER, "Landscaper submits completed work"),
        Transition(_S.COMPLETED_PENDING_REVIEW, _A.SYSTEM, "GPS geofence auto-complete"),
        Transition(_S.BLOCKED, _A.LANDSCAPER, "Landscaper reports unable to complete"),
        Transition(_S.FLAGGED_REVIEW, _A.ADMIN, "Admin flags for review"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels job"),
    ),
    _S.PENDING_REVIEW: (
        Transition(_S.COMPLETED, _A.ADMIN, "Admin approves completion"),
        Transition(_S.ACTIVE, _A.ADMIN, "Admin rejects, returns to landscaper"),
        Transition(_S.FLAGGED_REVIEW, _A.ADMIN, "Admin flags for deeper review"),
    ),
    _S.COMPLETED_PENDING_REVIEW: (
        Transition(_S.COMPLETED, _A.ADMIN, "Admin approves completion"),
        Transition(_S.ACTIVE, _A.ADMIN, "Admin rejects, returns to landscaper"),
        Transition(_S.COMPLETION_FLAGGED, _A.ADMIN, "Admin flags completion for investigation"),
        Transition(_S.FLAGGED_REVIEW, _A.ADMIN, "Admin flags for deeper review"),
    ),
    _S.COMPLETED: (
        Transition(_S.FLAGGED_REVIEW, _A.ADMIN, "Admin flags completed job for review"),
    ),
    _S.COMPLETION_FLAGGED: (
        Transition(_S.ACTIVE, _A.ADMIN, "Admin resolves, returns to landscaper"),
        Transition(_S.COMPLETED, _A.ADMIN, "Admin resolves, marks complete"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels flagged job"),
    ),
    _S.FLAGGED_REVIEW: (
        Transition(_S.ACTIVE, _A.ADMIN, "Admin resolves, returns to landscaper"),
        Transition(_S.COMPLETED, _A.ADMIN, "Admin resolves, marks complete"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels flagged job"),
    ),
    _S.BLOCKED: (
        Transition(_S.ASSIGNED, _A.ADMIN, "Admin resolves, reassigns"),
        Transition(_S.AVAILABLE, _A.ADMIN, "Admin resolves, re-releases to pool"),
        Transition(_S.RESCHEDULED, _A.ADMIN, "Admin approves reschedule"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels blocked job"),
    ),
    _S.CANCELLED: (),
    _S.RESCHEDULED: (
        Transition(_S.AVAILABLE, _A.ADMIN, "Admin re-releases rescheduled job"),
        Transition(_S.ASSIGNED, _A.ADMIN, "Admin reassigns rescheduled job"),
        Transition(_S.CANCELLED, _A.ADMIN, "Admin cancels rescheduled job"),
    ),
}


def is_valid_job_status(value) -> bool:
    return to_job_status(value) is not None


def to_job_status(value) -> JobStatus | None:
    """Return the matching JobStatus, or None for null/legacy/unknown values."""
    if isinstance(value, JobStatus):
        return value
    if not isinstance(value, str):
        return None
    try:
        return JobStatus(value)
    except ValueError:
        return None


def to_actor(value) -> Actor | None:
    if isinstance(value, Actor):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Actor(value)
    except ValueError:
        return None


def allowed_transitions(from_status, actor=None) -> list[Transition]:
    src = to_job_status(from_status)
    if src is None:
        return []
    entries = ALLOWED_TRANSITIONS.get(src, ())
    if actor is None:
        return list(entries)
    who = to_actor(actor)
    return [t for t in entries if t.actor == who]


def is_transition_allowed(from_status, to_status, actor) -> bool:
    """True iff the table lists (to_status, actor) under from_status. Never raises."""
    dst = to_job_status(to_status)
    who = to_actor(actor)
    if dst is None or who is None:
        return False
    return any(t.to == dst and t.actor == who for t in allowed_transitions(from_status))


def is_terminal(status) -> bool:
    src = to_job_status(status)
    return src is not None and not ALLOWED_TRANSITIONS[src]
