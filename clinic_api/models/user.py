"""
User model: the credential store for clinicians
"""

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from clinic_api.database import Base

class User(Base):
    """Registered clinician; sole source of truth for who may log in"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    salt = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, uuid='{self.uuid}', email='{self.email}')>"
