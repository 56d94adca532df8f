"""
Certificate Service - Issue completion certificates for finished internships

Pipeline for one internship (strictly sequential, no retries):
    1. certificate id        NEX-<base36 epoch ms>-<6 hex>
    2. payload               intern, internship, dates, company
    3-5. image               HTML -> PNG (Playwright) -> Cloudinary
    6. encryption            AES-GCM, AES-CBC fallback
    7. persistence           certificate row + internship link + intern status

Image failures never block issuance; the certificate URL then points at
the public certificate page instead of the image.
"""

import secrets
import time
from datetime import datetime
from typing import Dict, Any, Optional, Callable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.certificate_crypto import encrypt_certificate_data, decrypt_certificate_data
from app.core.config import settings
from app.core.exceptions import CertificateError, CertificateUploadError
from app.core.logging_config import logger
from app.core.types import generate_uuid
from app.models.certificate import Certificate
from app.models.internship import Internship, InternshipState
from app.models.user import User, InternshipStatus
from app.services.certificate_renderer import render_certificate_png
from app.services.storage_service import storage_service


_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class CertificateService:
    """Issue, look up and decrypt internship completion certificates"""

    def generate_certificate_id(self) -> str:
        """Generate a public certificate ID, e.g. NEX-lq2k3j4a-9F0A1B"""
        timestamp = to_base36(int(time.time() * 1000))
        unique_part = secrets.token_hex(3).upper()
        return f"NEX-{timestamp}-{unique_part}"

    def build_payload(
        self,
        intern: User,
        internship: Internship,
        certificate_id: str,
        issued_at: datetime,
    ) -> Dict[str, Any]:
        """Plaintext certificate payload; this is what gets encrypted"""
        return {
            "internName": intern.display_name,
            "internshipTitle": internship.internship_title,
            "startDate": _iso(internship.start_date),
            "endDate": _iso(internship.end_date or issued_at),
            "issuedDate": _iso(issued_at),
            "certificateId": certificate_id,
            "company": settings.CERT_COMPANY_NAME,
        }

    async def produce_image(self, certificate_id: str, payload: Dict[str, Any]) -> Optional[str]:
        """
        Render and upload the certificate image.

        Returns the image URL, or None if rendering is disabled or any step failed.
        """
        if not settings.CERT_RENDER_ENABLED:
            return None

        try:
            image = await render_certificate_png(payload)
            url = await storage_service.upload_certificate_image(certificate_id, image)
            logger.log_certificate_event(certificate_id, "image uploaded", url=url)
            return url
        except (CertificateError, CertificateUploadError) as e:
            logger.log_certificate_event(
                certificate_id, f"image skipped: {e.message}", success=False
            )
            return None

    async def find_existing(
        self, db: AsyncSession, intern_id: str, internship_id: str
    ) -> Optional[Certificate]:
        result = await db.execute(
            select(Certificate).where(
                Certificate.intern_id == intern_id,
                Certificate.internship_id == internship_id,
            )
        )
        return result.scalar_one_or_none()

    async def issue_certificate(self, db: AsyncSession, internship_id: str) -> Optional[Certificate]:
        """
        Issue the certificate for an internship, or return the one that exists.

        Commits the session. Returns None when the internship or its intern
        cannot be found, or when the payload cannot be encrypted.
        """
        internship = await db.get(Internship, internship_id)
        if internship is None:
            logger.warning(f"[Certificate] Internship not found: {internship_id}")
            return None

        intern = await db.get(User, internship.intern_id)
        if intern is None:
            logger.warning(f"[Certificate] Intern not found for internship {internship_id}")
            return None

        existing = await self.find_existing(db, intern.id, internship.id)
        if existing is not None:
            logger.info(f"[Certificate] Already issued for internship {internship_id}: {existing.certificate_id}")
            return existing

        intern_pk, internship_pk = intern.id, internship.id
        certificate_id = self.generate_certificate_id()
        issued_at = datetime.utcnow()
        payload = self.build_payload(intern, internship, certificate_id, issued_at)

        image_url = await self.produce_image(certificate_id, payload)

        try:
            encrypted = encrypt_certificate_data(payload)
        except CertificateError as e:
            logger.log_certificate_event(certificate_id, f"encryption failed: {e.message}", success=False)
            return None

        certificate = Certificate(
            id=generate_uuid(),
            certificate_id=certificate_id,
            intern_id=intern.id,
            internship_id=internship.id,
            certificate_url=image_url or settings.get_certificate_page_url(certificate_id),
            cloudinary_url=image_url,
            encrypted_data=encrypted,
            issued_at=issued_at,
        )
        db.add(certificate)
        internship.certificate_ref = certificate.id
        intern.internship_status = InternshipStatus.COMPLETED

        try:
            await db.commit()
        except IntegrityError:
            # Another trigger issued it first; theirs wins
            await db.rollback()
            winner = await self.find_existing(db, intern_pk, internship_pk)
            logger.info(f"[Certificate] Concurrent issue for internship {internship_id}, keeping existing")
            return winner

        await db.refresh(certificate)
        logger.log_certificate_event(
            certificate_id, "issued",
            internship_id=str(internship_id),
            has_image=image_url is not None,
        )
        return certificate

    async def check_and_generate_certificates(
        self, session_factory: Callable[[], AsyncSession]
    ) -> int:
        """
        Issue certificates for completed internships that have none.

        Returns the number of certificates issued.
        """
        async with session_factory() as db:
            result = await db.execute(
                select(Internship.id).where(
                    Internship.status == InternshipState.COMPLETED,
                    Internship.certificate_ref.is_(None),
                )
            )
            internship_ids = list(result.scalars().all())

        if internship_ids:
            logger.info(f"[Certificate] Found {len(internship_ids)} completed internships without certificates")

        issued = 0
        for internship_id in internship_ids:
            async with session_factory() as db:
                if await self.issue_certificate(db, internship_id) is not None:
                    issued += 1
        return issued

    async def get_by_certificate_id(self, db: AsyncSession, certificate_id: str) -> Optional[Certificate]:
        result = await db.execute(
            select(Certificate).where(Certificate.certificate_id == certificate_id)
        )
        return result.scalar_one_or_none()

    async def get_latest_for_intern(self, db: AsyncSession, intern_id: str) -> Optional[Certificate]:
        result = await db.execute(
            select(Certificate)
            .where(Certificate.intern_id == intern_id)
            .order_by(Certificate.issued_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    def decrypt(self, certificate: Certificate) -> Dict[str, Any]:
        """Decrypted payload; raises CertificateDecryptionError"""
        return decrypt_certificate_data(certificate.encrypted_data)

    async def verify_certificate(self, db: AsyncSession, certificate_id: str) -> Optional[Dict[str, Any]]:
        """
        Public verification view of a certificate, or None if unknown.

        Intern details come from the decrypted payload when possible, and
        from the live records otherwise.
        """
        certificate = await self.get_by_certificate_id(db, certificate_id)
        if certificate is None:
            return None

        try:
            data = self.decrypt(certificate)
        except CertificateError:
            data = {}

        if not data:
            intern = await db.get(User, certificate.intern_id)
            internship = await db.get(Internship, certificate.internship_id)
            data = {
                "internName": intern.display_name if intern else "",
                "internshipTitle": internship.internship_title if internship else "",
                "startDate": _iso(internship.start_date) if internship else None,
                "endDate": _iso(internship.end_date) if internship else None,
            }

        return {
            "certificate_id": certificate.certificate_id,
            "intern_name": data.get("internName", ""),
            "internship_title": data.get("internshipTitle", ""),
            "start_date": data.get("startDate"),
            "end_date": data.get("endDate"),
            "issued_at": certificate.issued_at,
            "verification_url": settings.get_verification_url(certificate.certificate_id),
        }


# Singleton instance
certificate_service = CertificateService()
