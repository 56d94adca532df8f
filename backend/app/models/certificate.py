from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Certificate(Base):
    """
    Completion certificate issued for an internship.

    `encrypted_data` holds the tagged ciphertext of the certificate payload
    (see app.core.certificate_crypto). One certificate per (intern, internship).
    """
    __tablename__ = "certificates"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    certificate_id = Column(String(64), unique=True, index=True, nullable=False)

    intern_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    internship_id = Column(GUID, ForeignKey("internships.id", ondelete="CASCADE"), nullable=False)

    certificate_url = Column(String(1000), nullable=False)
    cloudinary_url = Column(String(1000), nullable=True)
    encrypted_data = Column(Text, nullable=False)

    issued_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("intern_id", "internship_id", name="uq_certificates_intern_internship"),
    )

    def __repr__(self):
        return f"<Certificate {self.certificate_id}>"
