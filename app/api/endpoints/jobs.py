from fastapi import APIRouter
from app.controllers import job_controller
from app.models.job import TransitionRequest, CompletionRequest

router = APIRouter()

@router.get("")
def list_jobs(bucket: str | None = None):
    return job_controller.list_jobs(bucket)

@router.get("/buckets")
def bucket_counts():
    return job_controller.bucket_counts()

@router.get("/{job_id}")
def get_job(job_id: str):
    return job_controller.get_job(job_id)

@router.post("/{job_id}/transition")
def transition_job(job_id: str, req: TransitionRequest):
    return job_controller.transition_job(job_id, req.to_status, req.actor, req.reason, req.landscaper_id)

@router.post("/{job_id}/complete")
def complete_job(job_id: str, req: CompletionRequest):
    return job_controller.submit_completion(job_id, req.landscaper_id)
