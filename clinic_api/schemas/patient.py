"""
Pydantic schemas for patient operations
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime


class PatientCreate(BaseModel):
    """Schema for registering a new patient; every field is required"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    id_number: str = Field(..., min_length=1, max_length=50, alias="idNumber")
    date_of_birth: date
    gender: str = Field(..., min_length=1, max_length=20)
    contact: str = Field(..., min_length=1, max_length=50)


class PatientUpdate(BaseModel):
    """Schema for replacing a patient's details; idNumber and contact are cleared when omitted"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    gender: str = Field(..., min_length=1, max_length=20)
    date_of_birth: date
    id_number: Optional[str] = Field(None, max_length=50, alias="idNumber")
    contact: Optional[str] = Field(None, max_length=50)


class PatientResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: str
    name: str
    id_number: Optional[str]
    date_of_birth: date
    gender: str
    contact: Optional[str]
    created_at: Optional[datetime] = None
    created_by: str


class PatientListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    key: int
    id: int
    uuid: str
    name: str
    id_number: Optional[str] = Field(None, alias="idNumber")
    gender: str
    contact: Optional[str]


class PatientListResponse(BaseModel):
    """Paginated patient list"""
    items: list[PatientListItem]
    total: int
    page: int
    limit: int
    total_pages: int


class PatientVisit(BaseModel):
    """Visit as it appears inside a patient's history"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    uuid: str
    visit_date: date = Field(..., alias="date")
    diagnosis: str
    prescribed_medications: str
    notes: Optional[str] = None


class PatientDetailResponse(BaseModel):
    uuid: str
    name: str
    id_number: Optional[str]
    gender: str
    contact: Optional[str]
    date_of_birth: date
    visits: list[PatientVisit]


class PatientCreatedResponse(BaseModel):
    message: str
    patient: PatientResponse


class PatientUpdatedResponse(BaseModel):
    message: str
    patient: PatientResponse
