"""
Unit Tests for CertificateService
"""
import asyncio
import re
import uuid
from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select, func

from app.core.config import settings
from app.core.exceptions import CertificateUploadError, CertificateRenderError
from app.models.certificate import Certificate
from app.models.internship import Internship, InternshipState
from app.models.user import InternshipStatus
from app.services.certificate_service import certificate_service, to_base36
from app.services.storage_service import storage_service


CERTIFICATE_ID_PATTERN = re.compile(r"^NEX-[0-9a-z]+-[0-9A-F]{6}$")


async def _certificate_count(db, internship_id) -> int:
    result = await db.execute(
        select(func.count(Certificate.id)).where(Certificate.internship_id == internship_id)
    )
    return result.scalar()


class TestCertificateId:

    def test_format(self):
        for _ in range(50):
            assert CERTIFICATE_ID_PATTERN.match(certificate_service.generate_certificate_id())

    def test_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"
        assert to_base36(36 ** 3) == "1000"
        assert to_base36(36 ** 3 - 1) == "zzz"


class TestIssueCertificate:

    async def test_issues_one_certificate(self, db_session, internship, intern_user):
        certificate = await certificate_service.issue_certificate(db_session, internship.id)

        assert certificate is not None
        assert CERTIFICATE_ID_PATTERN.match(certificate.certificate_id)
        assert certificate.intern_id == intern_user.id
        assert certificate.internship_id == internship.id
        assert await _certificate_count(db_session, internship.id) == 1

        await db_session.refresh(internship)
        await db_session.refresh(intern_user)
        assert internship.certificate_ref == certificate.id
        assert intern_user.internship_status == InternshipStatus.COMPLETED

    async def test_payload_decrypts(self, db_session, internship, intern_user):
        certificate = await certificate_service.issue_certificate(db_session, internship.id)

        data = certificate_service.decrypt(certificate)

        assert data["internName"] == intern_user.display_name
        assert data["internshipTitle"] == "Web Development"
        assert data["certificateId"] == certificate.certificate_id
        assert data["company"] == settings.CERT_COMPANY_NAME
        # No end date on the internship: the issue time stands in
        assert data["endDate"] == data["issuedDate"]

    async def test_reissue_returns_existing(self, db_session, internship):
        first = await certificate_service.issue_certificate(db_session, internship.id)
        second = await certificate_service.issue_certificate(db_session, internship.id)

        assert first.certificate_id == second.certificate_id
        assert await _certificate_count(db_session, internship.id) == 1

    async def test_unknown_internship(self, db_session):
        assert await certificate_service.issue_certificate(db_session, str(uuid.uuid4())) is None

    async def test_missing_intern(self, db_session):
        orphan = Internship(
            intern_id=str(uuid.uuid4()),
            internship_title="Data Science",
            status=InternshipState.COMPLETED,
        )
        db_session.add(orphan)
        await db_session.commit()

        assert await certificate_service.issue_certificate(db_session, orphan.id) is None

    async def test_rendering_disabled_uses_page_url(self, db_session, internship):
        certificate = await certificate_service.issue_certificate(db_session, internship.id)

        assert certificate.cloudinary_url is None
        assert certificate.certificate_url == settings.get_certificate_page_url(certificate.certificate_id)

    async def test_upload_failure_falls_back(self, db_session, internship, monkeypatch):
        monkeypatch.setattr(settings, "CERT_RENDER_ENABLED", True)

        with patch(
            "app.services.certificate_service.render_certificate_png",
            AsyncMock(return_value=b"\x89PNG"),
        ), patch.object(
            storage_service, "upload_certificate_image",
            AsyncMock(side_effect=CertificateUploadError("nexbyte/certificates/x", "timeout")),
        ):
            certificate = await certificate_service.issue_certificate(db_session, internship.id)

        assert certificate is not None
        assert certificate.cloudinary_url is None
        assert certificate.certificate_url == settings.get_certificate_page_url(certificate.certificate_id)
        assert certificate_service.decrypt(certificate)["certificateId"] == certificate.certificate_id

    async def test_render_failure_falls_back(self, db_session, internship, monkeypatch):
        monkeypatch.setattr(settings, "CERT_RENDER_ENABLED", True)

        with patch(
            "app.services.certificate_service.render_certificate_png",
            AsyncMock(side_effect=CertificateRenderError("chromium missing")),
        ):
            certificate = await certificate_service.issue_certificate(db_session, internship.id)

        assert certificate is not None
        assert certificate.certificate_url.endswith(f"/certificate/{certificate.certificate_id}")

    async def test_uploaded_image_url_is_used(self, db_session, internship, monkeypatch):
        monkeypatch.setattr(settings, "CERT_RENDER_ENABLED", True)
        url = "https://res.cloudinary.com/demo/image/upload/nexbyte/certificates/cert.png"

        with patch(
            "app.services.certificate_service.render_certificate_png",
            AsyncMock(return_value=b"\x89PNG"),
        ), patch.object(
            storage_service, "upload_certificate_image",
            AsyncMock(return_value=url),
        ):
            certificate = await certificate_service.issue_certificate(db_session, internship.id)

        assert certificate.certificate_url == url
        assert certificate.cloudinary_url == url

    async def test_concurrent_issue_leaves_one_certificate(self, session_factory, internship):
        async def issue():
            async with session_factory() as db:
                certificate = await certificate_service.issue_certificate(db, internship.id)
                return certificate.certificate_id if certificate else None

        results = await asyncio.gather(issue(), issue())

        async with session_factory() as db:
            assert await _certificate_count(db, internship.id) == 1
            stored = await certificate_service.find_existing(db, internship.intern_id, internship.id)

        issued = {r for r in results if r is not None}
        assert issued == {stored.certificate_id}


class TestBackfill:

    async def test_completed_without_certificate(self, db_session, session_factory, internship):
        internship.status = InternshipState.COMPLETED
        internship.end_date = datetime.utcnow() - timedelta(days=1)
        await db_session.commit()

        issued = await certificate_service.check_and_generate_certificates(session_factory)

        assert issued == 1
        assert await _certificate_count(db_session, internship.id) == 1

        # Second pass finds nothing to do
        assert await certificate_service.check_and_generate_certificates(session_factory) == 0


class TestVerification:

    async def test_verify_known(self, db_session, internship, intern_user):
        certificate = await certificate_service.issue_certificate(db_session, internship.id)

        verified = await certificate_service.verify_certificate(db_session, certificate.certificate_id)

        assert verified["certificate_id"] == certificate.certificate_id
        assert verified["intern_name"] == intern_user.display_name
        assert verified["internship_title"] == "Web Development"
        assert verified["verification_url"] == settings.get_verification_url(certificate.certificate_id)

    async def test_verify_unknown(self, db_session):
        assert await certificate_service.verify_certificate(db_session, "NEX-unknown-000000") is None

    async def test_verify_falls_back_to_records(self, db_session, internship, intern_user):
        certificate = await certificate_service.issue_certificate(db_session, internship.id)
        certificate.encrypted_data = "corrupted"
        await db_session.commit()

        verified = await certificate_service.verify_certificate(db_session, certificate.certificate_id)

        assert verified["intern_name"] == intern_user.display_name
        assert verified["internship_title"] == "Web Development"
