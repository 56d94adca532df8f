"""
Unit Tests for the internship completion sweep
"""
import asyncio
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from app.models.certificate import Certificate
from app.models.email import EmailLog
from app.models.internship import Internship, InternshipState
from app.models.user import InternshipStatus
from app.services.internship_completion import InternshipCompletionService


@pytest.fixture
def service(session_factory):
    return InternshipCompletionService(session_factory=session_factory, interval_minutes=60, notice_days=7)


class TestCompleteOverdue:

    async def test_overdue_internship_is_completed_and_certified(
        self, service, db_session, internship, intern_user
    ):
        internship.end_date = datetime.utcnow() - timedelta(days=1)
        await db_session.commit()

        completed = await service.check_and_complete_internships()

        assert completed == [internship.id]

        await db_session.refresh(internship)
        await db_session.refresh(intern_user)
        assert internship.status == InternshipState.COMPLETED
        assert internship.certificate_ref is not None
        assert intern_user.internship_status == InternshipStatus.COMPLETED

        certificate = await db_session.get(Certificate, internship.certificate_ref)
        assert certificate.internship_id == internship.id

    async def test_future_end_date_untouched(self, service, db_session, internship):
        internship.end_date = datetime.utcnow() + timedelta(days=30)
        await db_session.commit()

        assert await service.check_and_complete_internships() == []

        await db_session.refresh(internship)
        assert internship.status == InternshipState.IN_PROGRESS

    async def test_no_end_date_untouched(self, service, internship):
        assert await service.check_and_complete_internships() == []

    async def test_second_run_is_noop(self, service, db_session, internship):
        internship.end_date = datetime.utcnow() - timedelta(hours=1)
        await db_session.commit()

        assert len(await service.check_and_complete_internships()) == 1
        assert await service.check_and_complete_internships() == []

        result = await db_session.execute(
            select(Certificate).where(Certificate.internship_id == internship.id)
        )
        assert len(result.scalars().all()) == 1


class TestNearingCompletion:

    async def test_reminder_sent_once(self, service, db_session, internship, intern_user):
        internship.end_date = datetime.utcnow() + timedelta(days=3, hours=1)
        await db_session.commit()

        first = await service.check_internships_nearing_completion()
        second = await service.check_internships_nearing_completion()

        assert len(first) == 1
        assert first[0]["internship_id"] == internship.id
        assert first[0]["days_left"] == 4
        assert len(second) == 1

        result = await db_session.execute(
            select(EmailLog).where(
                EmailLog.recipient == intern_user.email,
                EmailLog.template_key == "internship_reminder",
            )
        )
        logs = result.scalars().all()
        assert len(logs) == 1
        # SMTP is not configured in tests
        assert logs[0].status == "skipped"

    async def test_partial_day_counts_as_one(self, service, db_session, internship):
        internship.end_date = datetime.utcnow() + timedelta(hours=12)
        await db_session.commit()

        reminders = await service.check_internships_nearing_completion()

        assert reminders[0]["days_left"] == 1

    async def test_outside_window_ignored(self, service, db_session, internship):
        internship.end_date = datetime.utcnow() + timedelta(days=20)
        await db_session.commit()

        assert await service.check_internships_nearing_completion() == []


class TestLifecycle:

    async def test_run_checks_updates_stats(self, service, internship):
        results = await service.run_checks()

        assert results == {"completed": 0, "certificates_backfilled": 0, "nearing_completion": 0}
        stats = service.get_stats()
        assert stats["runs"] == 1
        assert stats["last_run"] is not None
        assert stats["running"] is False

    async def test_run_checks_backfills_missing_certificate(self, service, db_session, internship):
        internship.status = InternshipState.COMPLETED
        internship.end_date = datetime.utcnow() - timedelta(days=1)
        await db_session.commit()

        results = await service.run_checks()

        assert results["completed"] == 0
        assert results["certificates_backfilled"] == 1
        assert service.get_stats()["certificates_backfilled"] == 1

        await db_session.refresh(internship)
        certificate = await db_session.get(Certificate, internship.certificate_ref)
        assert certificate.internship_id == internship.id

        assert (await service.run_checks())["certificates_backfilled"] == 0

    async def test_start_and_stop(self, service):
        with patch.object(service, "run_checks", AsyncMock(return_value={"completed": 0, "nearing_completion": 0})):
            await service.start()
            await asyncio.sleep(0)
            assert service.running is True

            await service.stop()

        assert service.running is False
        assert service._task is None

    async def test_loop_survives_errors(self, service):
        calls = []

        async def failing_run():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("database unavailable")
            service.running = False
            return {"completed": 0, "nearing_completion": 0}

        service.interval = timedelta(seconds=0)
        service.running = True
        with patch.object(service, "run_checks", failing_run):
            await asyncio.wait_for(service._check_loop(), timeout=5)

        assert len(calls) == 2
