"""
Operator endpoint - run a scheduled job on demand (diagnostics, missed cron runs)

Protected by a shared secret in the X-Cron-Secret header.
"""
import json
import logging
import secrets

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from budgethub.config import Settings, get_settings
from budgethub.handlers.registry import JOBS
from budgethub.infrastructure.db.session import Database, get_database

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/jobs", tags=["jobs"])


# === Response models ===

class JobListResponse(BaseModel):
    jobs: list[str]


def _verify_cron_secret(provided: str | None, settings: Settings) -> None:
    """Raise 503 when no secret is configured, 403 on mismatch."""
    if not settings.CRON_SECRET:
        raise HTTPException(status_code=503, detail="Manual job triggering is disabled")
    if not provided or not secrets.compare_digest(provided, settings.CRON_SECRET):
        raise HTTPException(status_code=403, detail="Invalid cron secret")


@router.get("/", response_model=JobListResponse)
def list_jobs():
    """Names of the jobs that can be triggered"""
    return JobListResponse(jobs=sorted(JOBS))


@router.post("/{job_name}/run")
def run_job(
    job_name: str,
    x_cron_secret: str | None = Header(default=None),
    database: Database = Depends(get_database),
    settings: Settings = Depends(get_settings),
):
    """Run the job synchronously and return its handler response"""
    _verify_cron_secret(x_cron_secret, settings)

    handler = JOBS.get(job_name)
    if handler is None:
        raise HTTPException(status_code=404, detail=f"Unknown job: {job_name}")

    logger.info("Manual run of job %s", job_name)
    result = handler(database)
    return JSONResponse(status_code=result["statusCode"], content=json.loads(result["body"]))
