# app/config.py
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Mongo ───────────────────────────────────────────────────────────────────
    MONGO_USER: str = ""
    MONGO_PASSWORD: str = ""
    MONGO_HOST: str = "localhost"
    MONGO_PORT: int = 27017
    MONGO_AUTH_SOURCE: str = "admin"
    MONGO_DB_NAME: str = "greenscape"

    # ── Collections ─────────────────────────────────────────────────────────────
    JOBS_COLLECTION: str = "jobs"
    LANDSCAPERS_COLLECTION: str = "landscapers"
    REVIEWS_COLLECTION: str = "reviews"
    USERS_COLLECTION: str = "users"
    ASSIGNMENTS_COLLECTION: str = "job_assignments"

    # ── Matching ────────────────────────────────────────────────────────────────
    MATCH_DEFAULT_LIMIT: int = 5
    MATCH_NEAR_MILES: float = 5.0
    MATCH_MID_MILES: float = 15.0
    MATCH_FAR_MILES: float = 30.0
    MATCH_CONFLICT_PENALTY: int = 20
    MATCH_DEFAULT_RESPONSE_HOURS: float = 24.0
    # jobs without a location are scored as if at (0, 0)
    MATCH_ZERO_LOCATION_FALLBACK: bool = True
    DEFAULT_JOB_DURATION_HOURS: float = 2.0

    LOG_LEVEL: str = "INFO"

    def mongo_uri(self) -> str:
        if self.MONGO_USER:
            return (
                f"mongodb://{self.MONGO_USER}:{self.MONGO_PASSWORD}"
                f"@{self.MONGO_HOST}:{self.MONGO_PORT}/"
                f"?authSource={self.MONGO_AUTH_SOURCE}"
            )
        return f"mongodb://{self.MONGO_HOST}:{self.MONGO_PORT}/"

settings = Settings()
