"""
Pydantic schemas for the dashboard summary
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date


class RecentVisit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    visit_uuid: str = Field(..., alias="visitUuid")
    patient_uuid: str = Field(..., alias="patientUuid")
    name: str
    visit_date: date
    diagnosis: str
    prescribed_medications: str
    notes: Optional[str] = None


class WeeklyVisits(BaseModel):
    week: str = Field(..., description="ISO week, e.g. 2025-W03")
    visits: int


class DashboardResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_patients: int = Field(..., alias="totalPatients")
    total_visits: int = Field(..., alias="totalVisits")
    recent_visits: list[RecentVisit] = Field(..., alias="recentVisits")
    visits_per_week: list[WeeklyVisits] = Field(..., alias="visitsPerWeek")
