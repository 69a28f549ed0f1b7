# app/controllers/matching_controller.py
from fastapi import HTTPException
from app.services import job_service
from app.models.matching import AssignRequest, MatchRequest


def find_matches(job_id: str, req: MatchRequest):
    if req.limit is not None and req.limit < 0:
        raise HTTPException(status_code=400, detail="limit must be >= 0")
    try:
        matches = job_service.match_job(
            job_id, req.limit, req.proposed_date, req.estimated_duration_hours
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
    if matches is None:
        raise HTTPException(status_code=409, detail="superseded by a newer match request")
    return {"job_id": job_id, "matches": [m.model_dump() for m in matches]}


def assign(job_id: str, req: AssignRequest):
    # failures come back as False, never as exceptions
    success = job_service.auto_assign_job(job_id, req.landscaper_id, req.actor)
    return {"job_id": job_id, "landscaper_id": req.landscaper_id, "success": success}
