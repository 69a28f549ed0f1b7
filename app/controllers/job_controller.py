from fastapi import HTTPException
from app.services import job_service


def list_jobs(bucket: str | None = None):
    return job_service.list_jobs(bucket)

def bucket_counts():
    return job_service.bucket_counts()

def get_job(job_id: str):
    return job_service.get_job(job_id)

def transition_job(job_id: str, to_status: str, actor: str, reason: str | None = None,
                   landscaper_id: str | None = None):
    try:
        return job_service.transition_job(job_id, to_status, actor, reason, landscaper_id)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

def submit_completion(job_id: str, landscaper_id: str):
    try:
        return job_service.submit_completion(job_id, landscaper_id)
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
