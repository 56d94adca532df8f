"""
Internship Completion Service - background sweep

Every COMPLETION_CHECK_INTERVAL_MINUTES (and once at startup):
- internships past their end date are marked completed and certified
- completed internships still missing a certificate get one issued
- interns whose internship ends within COMPLETION_NOTICE_DAYS get a reminder
"""

import asyncio
import math
import time
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging_config import logger
from app.models.internship import Internship, InternshipState
from app.models.user import User, InternshipStatus
from app.services.certificate_service import certificate_service
from app.services.email_service import email_service


class InternshipCompletionService:
    """
    Periodic completion checks for internships.

    The session factory is injected so tests can point the sweep at
    their own database.
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        interval_minutes: int = 60,
        notice_days: int = 7,
    ):
        self.session_factory = session_factory
        self.interval = timedelta(minutes=interval_minutes)
        self.notice_days = notice_days

        self.running = False
        self._task: Optional[asyncio.Task] = None

        self.stats = {
            "runs": 0,
            "completed": 0,
            "certificates_backfilled": 0,
            "reminders": 0,
            "last_run": None,
        }

    def _get_session_factory(self) -> Callable[[], AsyncSession]:
        if self.session_factory is None:
            from app.core.database import get_session_local
            self.session_factory = get_session_local()
        return self.session_factory

    async def start(self):
        """Start the background completion loop"""
        if self.running:
            logger.warning("[Completion] Service already running")
            return

        self.running = True
        self._task = asyncio.create_task(self._check_loop())
        logger.info(f"[Completion] Started - Interval: {self.interval}, Notice: {self.notice_days} days")

    async def stop(self):
        """Stop the completion loop"""
        self.running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("[Completion] Stopped")

    async def _check_loop(self):
        """Main loop: runs immediately, then on every interval"""
        while self.running:
            try:
                await self.run_checks()
            except Exception as e:
                logger.error(f"[Completion] Error in check loop: {e}", exc_info=True)

            await asyncio.sleep(self.interval.total_seconds())

    async def run_checks(self) -> Dict[str, int]:
        """
        One pass of the sweep: complete overdue internships, issue any
        certificate a completion did not get, then send reminders.
        """
        started = time.perf_counter()
        completed = await self.check_and_complete_internships()
        backfilled = await certificate_service.check_and_generate_certificates(self._get_session_factory())
        nearing = await self.check_internships_nearing_completion()
        logger.log_completion_sweep(len(completed), len(nearing), (time.perf_counter() - started) * 1000)

        self.stats["runs"] += 1
        self.stats["completed"] += len(completed)
        self.stats["certificates_backfilled"] += backfilled
        self.stats["reminders"] += len(nearing)
        self.stats["last_run"] = datetime.utcnow().isoformat()

        return {
            "completed": len(completed),
            "certificates_backfilled": backfilled,
            "nearing_completion": len(nearing),
        }

    async def check_and_complete_internships(self) -> List[str]:
        """
        Complete every in-progress internship whose end date has passed.

        Returns the ids of internships that were completed by this run.
        """
        session_factory = self._get_session_factory()
        now = datetime.utcnow()

        async with session_factory() as db:
            result = await db.execute(
                select(Internship.id).where(
                    Internship.status == InternshipState.IN_PROGRESS,
                    Internship.end_date.is_not(None),
                    Internship.end_date <= now,
                    Internship.certificate_ref.is_(None),
                )
            )
            due_ids = list(result.scalars().all())

        if due_ids:
            logger.info(f"[Completion] Found {len(due_ids)} internships to complete")

        completed = []
        for internship_id in due_ids:
            async with session_factory() as db:
                # Conditional update so a concurrent admin completion is not repeated
                result = await db.execute(
                    update(Internship)
                    .where(
                        Internship.id == internship_id,
                        Internship.status == InternshipState.IN_PROGRESS,
                    )
                    .values(status=InternshipState.COMPLETED, updated_at=datetime.utcnow())
                )
                if result.rowcount == 0:
                    await db.rollback()
                    continue

                internship = await db.get(Internship, internship_id)
                await db.execute(
                    update(User)
                    .where(User.id == internship.intern_id)
                    .values(internship_status=InternshipStatus.COMPLETED)
                )
                await db.commit()

                certificate = await certificate_service.issue_certificate(db, internship_id)
                if certificate is None:
                    logger.warning(f"[Completion] Internship {internship_id} completed without certificate")
                else:
                    logger.info(f"[Completion] Internship {internship_id} completed, certificate {certificate.certificate_id}")
                completed.append(internship_id)

        return completed

    async def check_internships_nearing_completion(self) -> List[Dict]:
        """
        Find in-progress internships ending within the notice window and
        remind their interns.
        """
        session_factory = self._get_session_factory()
        now = datetime.utcnow()
        horizon = now + timedelta(days=self.notice_days)

        async with session_factory() as db:
            result = await db.execute(
                select(Internship, User)
                .join(User, User.id == Internship.intern_id)
                .where(
                    Internship.status == InternshipState.IN_PROGRESS,
                    Internship.end_date.is_not(None),
                    Internship.end_date > now,
                    Internship.end_date <= horizon,
                )
            )
            rows = result.all()

            nearing = []
            for internship, intern in rows:
                # Partial days count as a whole day left
                days_left = max(0, math.ceil((internship.end_date - now).total_seconds() / 86400))
                logger.info(
                    f"[Completion] {intern.display_name} - {internship.internship_title} ends in {days_left} days"
                )
                if internship.completion_notice_sent_at is None:
                    await email_service.send_template(
                        db,
                        "internship_reminder",
                        intern.email,
                        {
                            "name": intern.display_name,
                            "internship_title": internship.internship_title,
                            "end_date": internship.end_date.date().isoformat(),
                            "days_left": days_left,
                        },
                    )
                    internship.completion_notice_sent_at = now
                nearing.append({
                    "internship_id": internship.id,
                    "intern_email": intern.email,
                    "days_left": days_left,
                })

            await db.commit()

        return nearing

    def get_stats(self) -> Dict:
        return {**self.stats, "running": self.running}


# Singleton instance
internship_completion_service = InternshipCompletionService(
    interval_minutes=settings.COMPLETION_CHECK_INTERVAL_MINUTES,
    notice_days=settings.COMPLETION_NOTICE_DAYS,
)
