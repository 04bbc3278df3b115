"""
Tests for translation jobs and active job polling.
"""

import asyncio

import pytest

from i18nmate.core.app_config import AppConfig, load_app_config
from i18nmate.core.errors import ApiError, JobMessages
from i18nmate.core.models import JobMode, JobStatus, TranslationJob
from i18nmate.core.utils import generate_id
from i18nmate.jobs import JobPoller


def make_job(status=JobStatus.RUNNING):
    return TranslationJob(
        project_id=generate_id(),
        mode=JobMode.ALL,
        source_locale="en",
        target_locale="fr",
        status=status,
    )


class ScriptedFetch:
    """Returns the given jobs in order, repeating the last one."""

    def __init__(self, *jobs):
        self.jobs = list(jobs)
        self.calls = 0

    async def __call__(self):
        job = self.jobs[min(self.calls, len(self.jobs) - 1)]
        self.calls += 1
        return job


# =============================================================================
# Storage
# =============================================================================


class TestJobStorage:
    @pytest.mark.asyncio
    async def test_create_and_get_active(self, seeded_async):
        s = seeded_async
        job = await s.storage.create_job(s.project.id, s.user_id, "fr", JobMode.ALL)
        assert job.total_keys == 2
        assert job.source_locale == "en"
        assert (await s.storage.get_active_job(s.project.id, s.user_id)).id == job.id

    @pytest.mark.asyncio
    async def test_one_active_job_per_project(self, seeded_async):
        s = seeded_async
        await s.storage.create_job(s.project.id, s.user_id, "fr", JobMode.ALL)
        with pytest.raises(ApiError) as exc:
            await s.storage.create_job(s.project.id, s.user_id, "fr", JobMode.SINGLE, [s.title_key_id])
        assert exc.value.code == 409
        assert exc.value.message == JobMessages.ACTIVE_JOB_EXISTS

    @pytest.mark.asyncio
    async def test_cancelled_job_frees_the_slot(self, seeded_async):
        s = seeded_async
        job = await s.storage.create_job(s.project.id, s.user_id, "fr", JobMode.ALL)
        await s.storage.cancel_job(s.project.id, s.user_id, job.id)
        assert await s.storage.get_active_job(s.project.id, s.user_id) is None
        await s.storage.create_job(s.project.id, s.user_id, "fr", JobMode.ALL)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("locale,mode,key_ids,message", [
        ("en", JobMode.ALL, None, JobMessages.TARGET_LOCALE_IS_DEFAULT),
        ("de", JobMode.ALL, None, JobMessages.TARGET_LOCALE_NOT_FOUND),
        ("fr", JobMode.ALL, ["k"], JobMessages.ALL_MODE_NO_KEYS),
        ("fr", JobMode.SELECTED, [], JobMessages.SELECTED_MODE_REQUIRES_KEYS),
        ("fr", JobMode.SINGLE, ["a", "b"], JobMessages.SINGLE_MODE_ONE_KEY),
    ])
    async def test_invalid_jobs(self, seeded_async, locale, mode, key_ids, message):
        s = seeded_async
        with pytest.raises(ApiError) as exc:
            await s.storage.create_job(s.project.id, s.user_id, locale, mode, key_ids)
        assert exc.value.code == 400
        assert exc.value.message == message

    @pytest.mark.asyncio
    async def test_cancel_unknown_job(self, seeded_async):
        s = seeded_async
        with pytest.raises(ApiError) as exc:
            await s.storage.cancel_job(s.project.id, s.user_id, generate_id())
        assert exc.value.code == 404


class TestJobModel:
    def test_progress(self):
        job = make_job()
        job.total_keys = 4
        job.completed_keys = 2
        job.failed_keys = 1
        assert job.progress == 0.75

    def test_progress_without_keys(self):
        assert make_job().progress == 0.0

    def test_status_helpers(self):
        assert JobStatus.PENDING.is_active
        assert JobStatus.COMPLETED.is_finished
        assert JobStatus.CANCELLED.is_finished


# =============================================================================
# Polling
# =============================================================================


class TestJobPoller:
    def test_interval_schedule_repeats_last(self):
        poller = JobPoller(ScriptedFetch(None), intervals=[2, 2, 3, 5, 5])
        assert [poller.interval_for(n) for n in range(7)] == [2, 2, 3, 5, 5, 5, 5]

    def test_defaults_from_settings(self):
        poller = JobPoller(ScriptedFetch(None))
        assert poller.intervals == [2.0, 2.0, 3.0, 5.0, 5.0]
        assert poller.max_attempts == 180

    @pytest.mark.asyncio
    async def test_stops_when_no_active_job(self):
        fetch = ScriptedFetch(None)
        poller = JobPoller(fetch, intervals=[0])
        assert await poller.run() is None
        assert fetch.calls == 1

    @pytest.mark.asyncio
    async def test_stops_when_job_finishes(self):
        updates = []
        fetch = ScriptedFetch(make_job(), make_job(), make_job(JobStatus.COMPLETED))
        poller = JobPoller(fetch, on_update=updates.append, intervals=[0])

        job = await poller.run()
        assert job.status == JobStatus.COMPLETED
        assert fetch.calls == 3
        assert [u.status for u in updates] == [JobStatus.RUNNING, JobStatus.RUNNING, JobStatus.COMPLETED]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        fetch = ScriptedFetch(make_job())
        poller = JobPoller(fetch, intervals=[0], max_attempts=4)
        job = await poller.run()
        assert job.is_active
        assert fetch.calls == 4

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        fetch = ScriptedFetch(make_job())
        poller = JobPoller(fetch, intervals=[60])
        task = poller.start()
        assert poller.start() is task

        poller.stop()
        assert not poller.is_running
        with pytest.raises(asyncio.CancelledError):
            await task


# =============================================================================
# App config
# =============================================================================


class TestAppConfig:
    @pytest.mark.asyncio
    async def test_values(self):
        async def fetch():
            return {"registration_enabled": "true", "email_verification_required": "false"}

        config = await load_app_config(fetch)
        assert config == AppConfig(registration_enabled=True, email_verification_required=False)

    @pytest.mark.asyncio
    async def test_missing_values_stay_closed(self):
        async def fetch():
            return {}

        assert await load_app_config(fetch) == AppConfig.fail_closed()

    @pytest.mark.asyncio
    async def test_lookup_failure_fails_closed(self):
        async def fetch():
            raise ConnectionError("database unavailable")

        config = await load_app_config(fetch)
        assert config.registration_enabled is False
        assert config.email_verification_required is True
