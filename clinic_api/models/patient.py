"""
Patient model
"""

from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from clinic_api.database import Base

class Patient(Base):
    """Patient record, owned by the clinician who created it"""
    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    id_number = Column(String(50), unique=True, nullable=True)
    gender = Column(String(20), nullable=False)
    contact = Column(String(50), nullable=True)
    date_of_birth = Column(Date, nullable=False)
    created_by = Column(String(36), ForeignKey("users.uuid"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    visits = relationship("Visit", back_populates="patient", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Patient(id={self.id}, uuid='{self.uuid}', name='{self.name}')>"
