"""
Visit model
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from clinic_api.database import Base

class Visit(Base):
    """A single clinic visit; created_by always matches the parent patient's owner"""
    __tablename__ = "visits"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    patient_id = Column(String(36), ForeignKey("patients.uuid", ondelete="CASCADE"), index=True, nullable=False)
    visit_date = Column(Date, nullable=False)
    diagnosis = Column(Text, nullable=False)
    prescribed_medications = Column(Text, nullable=False)
    notes = Column(Text, nullable=True)
    created_by = Column(String(36), ForeignKey("users.uuid"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    patient = relationship("Patient", back_populates="visits")

    def __repr__(self):
        return f"<Visit(id={self.id}, uuid='{self.uuid}', patient_id='{self.patient_id}')>"
