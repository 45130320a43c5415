import uuid

from sqlalchemy import Column, String

from invoice_analytics.core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), unique=True, nullable=False)
    alias = Column(String(50), unique=True, nullable=False, index=True)
    billing_contact = Column(String(255), nullable=True)
