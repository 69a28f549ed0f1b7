from fastapi import APIRouter
from app.controllers import lifecycle_controller
from app.models.job import TransitionCheckRequest

router = APIRouter()

@router.get("/statuses")
def list_statuses():
    return lifecycle_controller.list_statuses()

@router.get("/transitions")
def list_transitions(status: str, actor: str | None = None):
    return lifecycle_controller.list_transitions(status, actor)

@router.post("/check")
def check_transition(req: TransitionCheckRequest):
    return lifecycle_controller.check_transition(req)

@router.get("/display/{status}")
def get_display(status: str, role: str = "admin"):
    return lifecycle_controller.get_display(status, role)
