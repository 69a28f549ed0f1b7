# app/utils/lifecycle_utils.py
"""Read-time classification of jobs: admin buckets, client stages and labels.

Every lookup here has a fallback for unrecognised status values so that a
status introduced on the backend ahead of this service degrades to a generated
label or a best-effort bucket instead of failing the request.
"""
from enum import Enum

from app.status import JobStatus, to_job_status

_S = JobStatus


class AdminBucket(str, Enum):
    NEEDS_PRICING = "needs_pricing"
    READY_TO_RELEASE = "ready_to_release"
    ACTIVE = "active"
    PENDING_REVIEW = "pending_review"
    COMPLETED = "completed"
    EXCEPTIONS = "exceptions"
    UNCLASSIFIED = "unclassified"


STATUS_TO_ADMIN_BUCKET: dict[JobStatus, AdminBucket] = {
    _S.PENDING: AdminBucket.NEEDS_PRICING,
    _S.QUOTED: AdminBucket.NEEDS_PRICING,

    _S.PRICED: AdminBucket.READY_TO_RELEASE,
    _S.AVAILABLE: AdminBucket.READY_TO_RELEASE,
    _S.SCHEDULED: AdminBucket.READY_TO_RELEASE,

    _S.ASSIGNED: AdminBucket.ACTIVE,
    _S.ACTIVE: AdminBucket.ACTIVE,

    _S.PENDING_REVIEW: AdminBucket.PENDING_REVIEW,
    _S.COMPLETED_PENDING_REVIEW: AdminBucket.PENDING_REVIEW,

    _S.COMPLETED: AdminBucket.COMPLETED,

    _S.COMPLETION_FLAGGED: AdminBucket.EXCEPTIONS,
    _S.FLAGGED_REVIEW: AdminBucket.EXCEPTIONS,
    _S.BLOCKED: AdminBucket.EXCEPTIONS,
    _S.CANCELLED: AdminBucket.EXCEPTIONS,
    _S.RESCHEDULED: AdminBucket.EXCEPTIONS,
}

ADMIN_BUCKET_CONFIG: dict[AdminBucket, dict[str, str]] = {
    AdminBucket.NEEDS_PRICING: {
        "label": "Needs Pricing",
        "description": "Jobs awaiting admin price decision",
    },
    AdminBucket.READY_TO_RELEASE: {
        "label": "Ready / Available",
        "description": "Priced and available for landscaper assignment",
    },
    AdminBucket.ACTIVE: {
        "label": "Active",
        "description": "Assigned to a landscaper or work in progress",
    },
    AdminBucket.PENDING_REVIEW: {
        "label": "Pending Review",
        "description": "Landscaper submitted, awaiting admin approval",
    },
    AdminBucket.COMPLETED: {
        "label": "Completed",
        "description": "Admin approved, job fully complete",
    },
    AdminBucket.EXCEPTIONS: {
        "label": "Exceptions",
        "description": "Flagged, blocked, cancelled, or rescheduled",
    },
    AdminBucket.UNCLASSIFIED: {
        "label": "Unclassified",
        "description": "Jobs that could not be categorized",
    },
}


def _field(job, name):
    if job is None:
        return None
    if isinstance(job, dict):
        return job.get(name)
    return getattr(job, name, None)


def derive_admin_bucket(job) -> AdminBucket:
    """Status first; for null or legacy statuses fall back to column inspection."""
    status = to_job_status(_field(job, "status"))
    if status is not None:
        return STATUS_TO_ADMIN_BUCKET[status]

    price = _field(job, "price")
    priced_at = _field(job, "priced_at")
    if _field(job, "completed_at") is not None:
        return AdminBucket.COMPLETED
    if _field(job, "assigned_to") is not None or _field(job, "landscaper_id") is not None:
        return AdminBucket.ACTIVE
    if priced_at is not None and price is not None:
        return AdminBucket.READY_TO_RELEASE
    if price is None or priced_at is None:
        return AdminBucket.NEEDS_PRICING
    return AdminBucket.UNCLASSIFIED


# ---------- labels / display ----------

JOB_STATUS_LABELS: dict[JobStatus, str] = {
    _S.PENDING: "Pending",
    _S.QUOTED: "Quoted",
    _S.PRICED: "Priced",
    _S.AVAILABLE: "Available",
    _S.SCHEDULED: "Scheduled",
    _S.ASSIGNED: "Assigned",
    _S.ACTIVE: "Active",
    _S.PENDING_REVIEW: "Pending Review",
    _S.COMPLETED_PENDING_REVIEW: "Completed - Pending Review",
    _S.COMPLETED: "Completed",
    _S.COMPLETION_FLAGGED: "Flagged - Completion",
    _S.FLAGGED_REVIEW: "Flagged for Review",
    _S.BLOCKED: "Blocked",
    _S.CANCELLED: "Cancelled",
    _S.RESCHEDULED: "Rescheduled",
}

CLIENT_STATUS_LABELS: dict[JobStatus, str] = {
    _S.PENDING: "Request Submitted",
    _S.QUOTED: "Quote Ready",
    _S.PRICED: "Priced",
    _S.AVAILABLE: "Finding Landscaper",
    _S.SCHEDULED: "Scheduled",
    _S.ASSIGNED: "Landscaper Assigned",
    _S.ACTIVE: "Work In Progress",
    _S.PENDING_REVIEW: "Work Submitted",
    _S.COMPLETED_PENDING_REVIEW: "Work Submitted",
    _S.COMPLETED: "Completed",
    _S.COMPLETION_FLAGGED: "Under Review",
    _S.FLAGGED_REVIEW: "Under Review",
    _S.BLOCKED: "Paused",
    _S.CANCELLED: "Cancelled",
    _S.RESCHEDULED: "Rescheduled",
}

STATUS_LABELS_BY_ROLE: dict[str, dict[JobStatus, str]] = {
    "admin": JOB_STATUS_LABELS,
    "landscaper": JOB_STATUS_LABELS,
    "client": CLIENT_STATUS_LABELS,
}

_NEUTRAL_COLOR = "gray"

STATUS_COLORS: dict[JobStatus, str] = {
    _S.PENDING: "amber",
    _S.QUOTED: "blue",
    _S.PRICED: "cyan",
    _S.AVAILABLE: "green",
    _S.SCHEDULED: "indigo",
    _S.ASSIGNED: "purple",
    _S.ACTIVE: "yellow",
    _S.PENDING_REVIEW: "orange",
    _S.COMPLETED_PENDING_REVIEW: "orange",
    _S.COMPLETED: "emerald",
    _S.COMPLETION_FLAGGED: "red",
    _S.FLAGGED_REVIEW: "red",
    _S.BLOCKED: "red",
    _S.CANCELLED: _NEUTRAL_COLOR,
    _S.RESCHEDULED: "sky",
}


def fallback_label(status: str) -> str:
    return status.replace("_", " ")


def get_status_label(status, role: str = "admin") -> str:
    labels = STATUS_LABELS_BY_ROLE.get(role, JOB_STATUS_LABELS)
    known = to_job_status(status)
    if known is not None:
        return labels[known]
    if not status or not isinstance(status, str):
        return labels[_S.PENDING]
    return fallback_label(status)


def get_status_display(status) -> dict[str, str]:
    """Label and colour for a status badge.

    Empty status renders as pending; unknown values get the raw status with
    underscores replaced by spaces and a neutral colour.
    """
    if not status:
        status = _S.PENDING
    known = to_job_status(status)
    if known is None:
        text = status if isinstance(status, str) else str(status)
        return {"status": text, "label": fallback_label(text), "color": _NEUTRAL_COLOR}
    return {"status": known.value, "label": JOB_STATUS_LABELS[known], "color": STATUS_COLORS[known]}


# ---------- landscaper dashboard ----------

LANDSCAPER_TAB_STATUSES: dict[str, list[JobStatus]] = {
    "all": list(JobStatus),
    "available": [_S.AVAILABLE, _S.PRICED, _S.SCHEDULED],
    "assigned": [_S.ASSIGNED],
    "active": [_S.ACTIVE],
    "completed": [_S.COMPLETED_PENDING_REVIEW, _S.COMPLETED],
}

LANDSCAPER_ACTIONS: dict[str, frozenset[JobStatus]] = {
    "can_accept": frozenset({_S.AVAILABLE, _S.PRICED, _S.SCHEDULED}),
    "can_start": frozenset({_S.ASSIGNED}),
    "can_complete": frozenset({_S.ACTIVE}),
    "can_message": frozenset({_S.ASSIGNED, _S.ACTIVE, _S.COMPLETED, _S.FLAGGED_REVIEW, _S.BLOCKED}),
}


def can_landscaper(action: str, status) -> bool:
    known = to_job_status(status)
    return known is not None and known in LANDSCAPER_ACTIONS.get(action, frozenset())


# ---------- client dashboard ----------

CLIENT_ACTIVE_STATUSES: list[JobStatus] = [
    _S.PENDING,
    _S.QUOTED,
    _S.PRICED,
    _S.AVAILABLE,
    _S.SCHEDULED,
    _S.ASSIGNED,
    _S.ACTIVE,
    _S.PENDING_REVIEW,
    _S.COMPLETED_PENDING_REVIEW,
]

CLIENT_STAGE_LABELS: dict[str, str] = {
    "under_review": "Under Review",
    "estimate_ready": "Estimate Ready",
    "scheduled": "Scheduled",
    "active": "In Progress",
    "completed": "Completed",
    "cancelled": "Cancelled",
}

CLIENT_STEPPER_STAGES: list[dict[str, str]] = [
    {"stage": "under_review", "label": "Under Review", "description": "Our team is reviewing your request"},
    {"stage": "estimate_ready", "label": "Estimate Ready", "description": "Your estimate is ready for review"},
    {"stage": "scheduled", "label": "Scheduled", "description": "Payment confirmed, service scheduled"},
    {"stage": "active", "label": "In Progress", "description": "Work is being performed"},
    {"stage": "completed", "label": "Completed", "description": "Service complete"},
]

_CLIENT_STAGE: dict[JobStatus, str] = {
    _S.PENDING: "under_review",
    _S.QUOTED: "under_review",
    _S.PRICED: "estimate_ready",
    _S.AVAILABLE: "scheduled",
    _S.SCHEDULED: "scheduled",
    _S.RESCHEDULED: "scheduled",
    _S.ASSIGNED: "scheduled",
    _S.ACTIVE: "active",
    _S.COMPLETED_PENDING_REVIEW: "active",
    _S.PENDING_REVIEW: "active",
    _S.COMPLETED: "completed",
    _S.COMPLETION_FLAGGED: "under_review",
    _S.FLAGGED_REVIEW: "under_review",
    _S.BLOCKED: "under_review",
    _S.CANCELLED: "cancelled",
}


def derive_client_stage(status) -> str:
    # status only; clients never see column-inferred stages
    known = to_job_status(status)
    if known is None:
        return "under_review"
    return _CLIENT_STAGE[known]


def derive_client_step_index(status) -> int:
    stage = derive_client_stage(status)
    if stage == "cancelled":
        return -1
    for idx, step in enumerate(CLIENT_STEPPER_STAGES):
        if step["stage"] == stage:
            return idx
    return 0
