# app/controllers/lifecycle_controller.py
from fastapi import HTTPException
from app.models.job import TransitionCheckRequest
from app.status import JobStatus, allowed_transitions, is_terminal, is_transition_allowed, to_actor
from app.utils import lifecycle_utils


def list_statuses():
    return [
        {
            **lifecycle_utils.get_status_display(status),
            "admin_bucket": lifecycle_utils.STATUS_TO_ADMIN_BUCKET[status].value,
            "client_stage": lifecycle_utils.derive_client_stage(status),
            "terminal": is_terminal(status),
        }
        for status in JobStatus
    ]

def list_transitions(status: str, actor: str | None = None):
    if actor is not None and to_actor(actor) is None:
        raise HTTPException(status_code=400, detail=f"Unknown actor '{actor}'")
    return [
        {"to": t.to.value, "actor": t.actor.value, "description": t.description}
        for t in allowed_transitions(status, actor)
    ]

def check_transition(req: TransitionCheckRequest):
    return {"allowed": is_transition_allowed(req.from_status, req.to_status, req.actor)}

def get_display(status: str, role: str = "admin"):
    display = lifecycle_utils.get_status_display(status)
    display["label"] = lifecycle_utils.get_status_label(status, role)
    return display
