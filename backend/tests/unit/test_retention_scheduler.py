"""
Unit tests for the retention scheduler.

Tests job registration on the APScheduler cron trigger and the scheduled
job body against in-memory stores.
"""

import pytest

import services.retention_scheduler as retention_scheduler
from core.constants import CLEANUP_JOB_ID, POSTS_COLLECTION
from services.retention_scheduler import RetentionScheduler
from tests.conftest import FakeBlobStore, FakeRecordStore


class TestRetentionSchedulerRegistration:
    """Test that the sweep is registered daily at 02:00 UTC."""

    @pytest.mark.asyncio
    async def test_registers_daily_cron_job(self):
        scheduler = RetentionScheduler()
        await scheduler.start_scheduler()
        try:
            job = scheduler.scheduler.get_job(CLEANUP_JOB_ID)
            assert job is not None

            fields = {field.name: str(field) for field in job.trigger.fields}
            assert fields["minute"] == "0"
            assert fields["hour"] == "2"
            assert fields["day"] == "*"
            assert fields["month"] == "*"
            assert fields["day_of_week"] == "*"
            assert str(job.trigger.timezone) == "UTC"

            assert job.next_run_time.hour == 2
            assert job.next_run_time.minute == 0
        finally:
            await scheduler.stop_scheduler()

    @pytest.mark.asyncio
    async def test_start_twice_keeps_single_job(self, caplog):
        scheduler = RetentionScheduler()
        await scheduler.start_scheduler()
        try:
            await scheduler.start_scheduler()
            assert len(scheduler.scheduler.get_jobs()) == 1
            assert "already started" in caplog.text
        finally:
            await scheduler.stop_scheduler()

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self):
        scheduler = RetentionScheduler()
        await scheduler.stop_scheduler()
        assert scheduler._is_started is False

    def test_global_instance_is_reused(self, monkeypatch):
        monkeypatch.setattr(retention_scheduler, "_retention_scheduler", None)

        first = retention_scheduler.get_retention_scheduler()
        second = retention_scheduler.get_retention_scheduler()

        assert first is second


class TestScheduledRun:
    """Test the job body the scheduler fires."""

    @pytest.mark.asyncio
    async def test_runs_sweep_against_process_stores(self, monkeypatch):
        record_store = FakeRecordStore({POSTS_COLLECTION: {"p1": {"timestamp": 1}}})
        blob_store = FakeBlobStore()
        monkeypatch.setattr(retention_scheduler, "get_record_store", lambda: record_store)
        monkeypatch.setattr(retention_scheduler, "get_blob_store", lambda: blob_store)

        result = await RetentionScheduler()._run_cleanup()

        assert result is not None
        assert result.success is True
        assert result.deleted_posts == 1
        assert record_store.delete_calls == [(POSTS_COLLECTION, "p1")]

    @pytest.mark.asyncio
    async def test_store_initialization_failure_is_logged(self, monkeypatch, caplog):
        def _no_credentials():
            raise ValueError("Failed to initialize a certificate credential")

        monkeypatch.setattr(retention_scheduler, "get_record_store", _no_credentials)

        result = await RetentionScheduler()._run_cleanup()

        assert result is None
        assert "Failed to initialize a certificate credential" in caplog.text
