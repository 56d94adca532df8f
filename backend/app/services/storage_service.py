"""
Storage Service - Certificate images on Cloudinary

The Cloudinary SDK is synchronous, so uploads run in a worker thread.
Public ids are derived from the certificate id, so re-uploading the
same certificate overwrites the previous image.
"""

import asyncio
import io
from typing import Optional

import cloudinary
import cloudinary.uploader

from app.core.config import settings
from app.core.exceptions import CertificateUploadError
from app.core.logging_config import logger


# Requested on upload: cap width, keep aspect ratio, let Cloudinary pick quality
CERTIFICATE_TRANSFORMATION = [
    {"width": 1200, "crop": "limit", "quality": "auto", "fetch_format": "auto"},
]


class StorageService:
    """Upload rendered certificate images to Cloudinary"""

    def __init__(self):
        self._configured = False

    @property
    def is_configured(self) -> bool:
        return settings.cloudinary_configured

    def _ensure_config(self):
        """Lazy SDK configuration from settings"""
        if not self._configured:
            cloudinary.config(
                cloud_name=settings.CLOUDINARY_CLOUD_NAME,
                api_key=settings.CLOUDINARY_API_KEY,
                api_secret=settings.CLOUDINARY_API_SECRET,
                secure=True,
            )
            self._configured = True

    def _upload_sync(self, image: bytes, public_id: str) -> dict:
        self._ensure_config()
        return cloudinary.uploader.upload(
            io.BytesIO(image),
            public_id=public_id,
            overwrite=True,
            resource_type="image",
            transformation=CERTIFICATE_TRANSFORMATION,
        )

    async def upload_certificate_image(self, certificate_id: str, image: bytes) -> str:
        """
        Upload a PNG for `certificate_id`.

        Returns:
            The secure URL of the uploaded image

        Raises:
            CertificateUploadError: not configured, or the upload failed
        """
        public_id: Optional[str] = settings.get_cloudinary_public_id(certificate_id)
        if not public_id:
            raise CertificateUploadError("", "Missing certificate id")

        if not self.is_configured:
            raise CertificateUploadError(public_id, "Cloudinary is not configured")

        try:
            result = await asyncio.to_thread(self._upload_sync, image, public_id)
        except Exception as e:
            logger.error(f"[Cloudinary] Upload failed for {public_id}: {e}")
            raise CertificateUploadError(public_id, str(e)) from e

        url = result.get("secure_url") or result.get("url")
        if not url:
            raise CertificateUploadError(public_id, "No URL in upload response")

        logger.info(f"[Cloudinary] Uploaded {public_id} ({len(image)} bytes)")
        return url


storage_service = StorageService()
