from sqlalchemy import Column, String, DateTime, Text, Float
from datetime import datetime

from app.core.database import Base
from app.core.types import GUID, generate_uuid


class Client(Base):
    """A customer company and the project it commissioned"""
    __tablename__ = "clients"

    id = Column(GUID, primary_key=True, default=generate_uuid)

    # Company / contact
    client_name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    company_address = Column(Text, nullable=True)

    # Project
    project_name = Column(String(255), nullable=False)
    project_type = Column(String(100), nullable=True)
    project_requirements = Column(Text, nullable=True)
    project_deadline = Column(DateTime, nullable=True)
    total_budget = Column(Float, nullable=True)

    # Billing
    billing_address = Column(Text, nullable=True)
    gst_number = Column(String(50), nullable=True)
    payment_terms = Column(String(255), nullable=True)
    payment_method = Column(String(100), nullable=True)

    # Technical details
    domain_registrar_login = Column(Text, nullable=True)
    web_hosting_login = Column(Text, nullable=True)
    logo_and_branding_files = Column(Text, nullable=True)
    content = Column(Text, nullable=True)

    srs_document = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Client {self.client_name}>"
