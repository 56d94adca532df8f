"""
Unit Tests for EmailService
"""
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select

from app.models.email import EmailTemplate
from app.services.email_service import EmailService, render_template, DEFAULT_TEMPLATES


@pytest.fixture
def service():
    return EmailService()


@pytest.fixture
def smtp_service(service):
    service.smtp_user = "mailer@nexbyte.in"
    service.smtp_password = "app-password"
    return service


class TestRenderTemplate:

    def test_replaces_placeholders(self):
        assert render_template("Hi {name}, role {role}", {"name": "Asha", "role": "Intern"}) == "Hi Asha, role Intern"

    def test_unknown_placeholder_left(self):
        assert render_template("Hi {name} {missing}", {"name": "Asha"}) == "Hi Asha {missing}"

    def test_none_renders_empty(self):
        assert render_template("[{value}]", {"value": None}) == "[]"


class TestSendTemplate:

    async def test_skipped_when_smtp_missing(self, service, db_session):
        log = await service.send_template(db_session, "welcome", "new@nexbyte.in", {"name": "Asha"})

        assert log.status == "skipped"
        assert log.error == "SMTP not configured"
        assert log.subject == "Welcome to NexByte"
        assert log.template_key == "welcome"

    async def test_sent_via_smtp(self, smtp_service, db_session):
        with patch("app.services.email_service.aiosmtplib.send", AsyncMock()) as send:
            log = await smtp_service.send_template(
                db_session, "application_approved", "asha@example.com", {"name": "Asha", "role": "Backend"}
            )

        send.assert_awaited_once()
        message = send.call_args.args[0]
        assert message["To"] == "asha@example.com"
        assert log.status == "sent"
        assert log.error is None

    async def test_smtp_failure_logged(self, smtp_service, db_session):
        with patch(
            "app.services.email_service.aiosmtplib.send",
            AsyncMock(side_effect=OSError("connection refused")),
        ):
            log = await smtp_service.send_template(db_session, "welcome", "a@b.in", {"name": "A"})

        assert log.status == "failed"
        assert log.error == "SMTP delivery failed"

    async def test_stored_template_overrides_default(self, service, db_session):
        db_session.add(EmailTemplate(key="welcome", subject="Hello {name}", body="Custom body"))
        await db_session.commit()

        log = await service.send_template(db_session, "welcome", "a@b.in", {"name": "Ravi"})

        assert log.subject == "Hello Ravi"

    async def test_disabled_template_skipped(self, smtp_service, db_session):
        db_session.add(EmailTemplate(key="welcome", subject="Hi", body="Body", is_enabled=False))
        await db_session.commit()

        with patch("app.services.email_service.aiosmtplib.send", AsyncMock()) as send:
            log = await smtp_service.send_template(db_session, "welcome", "a@b.in", {})

        send.assert_not_awaited()
        assert log.status == "skipped"
        assert log.error == "Template disabled"

    async def test_unknown_key(self, service, db_session):
        with pytest.raises(KeyError):
            await service.send_template(db_session, "no_such_template", "a@b.in", {})


class TestDefaultTemplates:

    async def test_seeds_missing_templates(self, service, db_session):
        created = await service.ensure_default_templates(db_session)

        assert created == len(DEFAULT_TEMPLATES)
        result = await db_session.execute(select(EmailTemplate.key))
        assert set(result.scalars().all()) == set(DEFAULT_TEMPLATES)

    async def test_seeding_is_idempotent(self, service, db_session):
        await service.ensure_default_templates(db_session)

        assert await service.ensure_default_templates(db_session) == 0
