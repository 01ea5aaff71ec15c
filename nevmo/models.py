from sqlalchemy import JSON, Column, DateTime, Float, String

from nevmo.database import Base


class Transfer(Base):
    __tablename__ = "transfers"

    reference_id = Column(String(64), primary_key=True)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)
    recipient_party = Column(String(32), nullable=False, index=True)
    message = Column(String, nullable=False)
    kind = Column(String(16), nullable=True)
    status = Column(String(32), nullable=False, default="INITIATED", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    provider_response = Column(JSON, nullable=True)
    provider_error = Column(JSON, nullable=True)
    status_details = Column(JSON, nullable=True)
