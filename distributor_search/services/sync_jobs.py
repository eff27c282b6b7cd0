"""Background sync jobs the API can hand out ids for."""
import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Set
from distributor_search.services.sync_service import SyncService, sync_service
from distributor_search.analytics.logger import logger


@dataclass
class SyncJob:
    job_id: str
    supplier_id: int
    status: str = "pending"  # pending, running, success, error
    result: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "job_id": self.job_id,
            "supplier_id": self.supplier_id,
            "status": self.status,
            "result": self.result,
            "error": self.error,
            "submitted_at": self.submitted_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
        }


class SyncJobRunner:
    """Runs supplier syncs as asyncio tasks and tracks their outcome in memory."""

    def __init__(self, service: Optional[SyncService] = None, max_jobs: int = 500):
        self.service = service or sync_service
        self.max_jobs = max_jobs
        self._jobs: Dict[str, SyncJob] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._running: Set[int] = set()

    def is_running(self, supplier_id: int) -> bool:
        """True when a job for this supplier was submitted here and has not finished."""
        return supplier_id in self._running

    def submit(self, supplier_id: int) -> str:
        """Schedule a sync and return its job id. Must be called inside a running loop."""
        job = SyncJob(job_id=uuid.uuid4().hex, supplier_id=supplier_id)
        self._prune()
        self._jobs[job.job_id] = job
        self._running.add(supplier_id)
        self._tasks[job.job_id] = asyncio.create_task(self._run(job))
        logger.info(f"Submitted sync job {job.job_id} for supplier {supplier_id}")
        return job.job_id

    async def _run(self, job: SyncJob) -> None:
        job.status = "running"
        try:
            job.result = await self.service.sync_supplier(job.supplier_id)
            job.status = job.result.get("status", "success")
        except Exception as e:
            logger.error(f"Sync job {job.job_id} failed: {e}", exc_info=True)
            job.status = "error"
            job.error = str(e)
        finally:
            job.finished_at = datetime.now(timezone.utc)
            self._running.discard(job.supplier_id)
            self._tasks.pop(job.job_id, None)

    def get(self, job_id: str) -> Optional[Dict[str, Any]]:
        job = self._jobs.get(job_id)
        return job.to_dict() if job else None

    async def wait(self, job_id: str) -> Optional[Dict[str, Any]]:
        """Block until the job is finished; returns its final state."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return self.get(job_id)

    def _prune(self) -> None:
        # Drop the oldest finished jobs once the table is full
        if len(self._jobs) < self.max_jobs:
            return
        finished = [j for j in self._jobs.values() if j.finished_at is not None]
        for job in sorted(finished, key=lambda j: j.finished_at)[: len(self._jobs) - self.max_jobs + 1]:
            del self._jobs[job.job_id]


# Global sync job runner
sync_job_runner = SyncJobRunner()
