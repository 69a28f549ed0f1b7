# app/api/endpoints/matching.py
from fastapi import APIRouter
from app.controllers import matching_controller
from app.models.matching import AssignRequest, MatchRequest

router = APIRouter()

@router.post("/jobs/{job_id}/matches")
def find_matches(job_id: str, req: MatchRequest):
    return matching_controller.find_matches(job_id, req)

@router.post("/jobs/{job_id}/assign")
def assign(job_id: str, req: AssignRequest):
    return matching_controller.assign(job_id, req)
