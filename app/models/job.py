from pydantic import BaseModel
from typing import Optional


class TransitionRequest(BaseModel):
    to_status: str
    actor: str
    reason: Optional[str] = None                # stored in status_history only
    landscaper_id: Optional[str] = None         # required when assigning

class TransitionCheckRequest(BaseModel):
    from_status: Optional[str] = None
    to_status: Optional[str] = None
    actor: Optional[str] = None

class CompletionRequest(BaseModel):
    landscaper_id: str
