"""Tests for background sync job tracking."""
import pytest
from unittest.mock import AsyncMock, MagicMock
from distributor_search.services.sync_jobs import SyncJobRunner
from distributor_search.services.sync_lock import SyncAlreadyRunningError


def make_runner(**sync_kwargs):
    service = MagicMock()
    service.sync_supplier = AsyncMock(**sync_kwargs)
    return SyncJobRunner(service), service


@pytest.mark.asyncio
async def test_submit_returns_immediately_and_completes():
    runner, service = make_runner(return_value={"status": "success", "products_synced": 3})

    job_id = runner.submit(7)

    assert runner.get(job_id)["status"] == "pending"
    assert runner.is_running(7)

    job = await runner.wait(job_id)

    assert job["status"] == "success"
    assert job["result"]["products_synced"] == 3
    assert job["finished_at"] is not None
    assert not runner.is_running(7)
    service.sync_supplier.assert_awaited_once_with(7)


@pytest.mark.asyncio
async def test_sync_error_result_marks_job_error():
    runner, _ = make_runner(return_value={"status": "error", "errors": ["feed down"]})

    job = await runner.wait(runner.submit(1))

    assert job["status"] == "error"
    assert job["error"] is None


@pytest.mark.asyncio
async def test_exception_is_captured_on_job():
    runner, _ = make_runner(side_effect=SyncAlreadyRunningError(1))

    job = await runner.wait(runner.submit(1))

    assert job["status"] == "error"
    assert "already running" in job["error"]
    assert not runner.is_running(1)


def test_unknown_job_is_none():
    runner, _ = make_runner()
    assert runner.get("missing") is None


@pytest.mark.asyncio
async def test_oldest_finished_jobs_are_pruned():
    service = MagicMock()
    service.sync_supplier = AsyncMock(return_value={"status": "success"})
    runner = SyncJobRunner(service, max_jobs=2)

    first = runner.submit(1)
    await runner.wait(first)
    second = runner.submit(2)
    await runner.wait(second)
    third = runner.submit(3)
    await runner.wait(third)

    assert runner.get(first) is None
    assert runner.get(second) is not None
    assert runner.get(third) is not None
