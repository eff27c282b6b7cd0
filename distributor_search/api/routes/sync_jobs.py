"""Sync job status routes."""
from fastapi import APIRouter, Depends, HTTPException
from distributor_search.api.dependencies import get_sync_job_runner
from distributor_search.api.schemas import SyncJobResponse
from distributor_search.services.sync_jobs import SyncJobRunner

router = APIRouter(prefix="/api/sync-jobs", tags=["sync"])


@router.get("/{job_id}", response_model=SyncJobResponse)
async def get_sync_job(job_id: str, runner: SyncJobRunner = Depends(get_sync_job_runner)):
    job = runner.get(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Sync job not found")
    return job
