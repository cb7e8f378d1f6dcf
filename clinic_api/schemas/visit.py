"""
Pydantic schemas for visit operations
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date, datetime


class VisitCreate(BaseModel):
    """Schema for adding a visit under a patient"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    visit_date: date = Field(..., alias="date", description="Date of the visit (YYYY-MM-DD)")
    diagnosis: str = Field(..., min_length=1)
    prescribed_medications: str = Field(..., min_length=1)
    notes: Optional[str] = None


class VisitUpdate(BaseModel):
    """Schema for replacing a visit's clinical details"""
    model_config = ConfigDict(str_strip_whitespace=True)

    visit_date: date
    diagnosis: str = Field(..., min_length=1)
    prescribed_medications: str = Field(..., min_length=1)
    notes: Optional[str] = None


class VisitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    uuid: str
    patient_id: str
    visit_date: date
    diagnosis: str
    prescribed_medications: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    created_by: str


class VisitListItem(BaseModel):
    key: int
    id: int
    uuid: str
    visit_date: date
    diagnosis: str
    prescribed_medications: str
    patient_id: str
    patient_name: Optional[str] = None
    patient_id_number: Optional[str] = None


class VisitListResponse(BaseModel):
    """Paginated visit list"""
    items: list[VisitListItem]
    total: int
    page: int
    limit: int
    total_pages: int


class VisitDetailResponse(BaseModel):
    uuid: str
    visit_date: date
    diagnosis: str
    prescribed_medications: str
    notes: Optional[str] = None
    patient_id: str
    patient_name: Optional[str] = None
    patient_id_number: Optional[str] = None


class VisitCreatedResponse(BaseModel):
    message: str
    visit: VisitResponse


class VisitUpdatedResponse(BaseModel):
    message: str
    visit: VisitResponse
