"""
Visit management endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
import logging

from clinic_api.database import get_db
from clinic_api.schemas.user import TokenClaims
from clinic_api.schemas.visit import (
    VisitUpdate, VisitResponse, VisitListItem, VisitListResponse, VisitDetailResponse, VisitUpdatedResponse,
)
from clinic_api.services.visit_service import VisitService
from clinic_api.services.pagination import total_pages
from clinic_api.auth.auth_handler import get_current_user
from clinic_api.utils.error_handler import ClinicAPIError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=VisitListResponse)
def get_visits(
    page: int = Query(1, description="Page number"),
    limit: int = Query(10, description="Items per page"),
    search: Optional[str] = Query(None, description="Search by patient name, ID number, diagnosis or medication"),
    start_date: Optional[date] = Query(None, alias="startDate", description="Earliest visit date (inclusive)"),
    end_date: Optional[date] = Query(None, alias="endDate", description="Latest visit date (inclusive)"),
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a paginated list of the caller's visits"""
    try:
        rows, total = VisitService(db, current_user).list_visits(page, limit, search, start_date, end_date)

        return VisitListResponse(
            items=[
                VisitListItem(
                    key=visit.id,
                    id=visit.id,
                    uuid=visit.uuid,
                    visit_date=visit.visit_date,
                    diagnosis=visit.diagnosis,
                    prescribed_medications=visit.prescribed_medications,
                    patient_id=visit.patient_id,
                    patient_name=patient_name,
                    patient_id_number=patient_id_number,
                )
                for visit, patient_name, patient_id_number in rows
            ],
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to get visits: {e}")
        raise InternalError("We encountered an error. Please retry")

@router.get("/{visit_uuid}", response_model=VisitDetailResponse)
def get_visit(
    visit_uuid: str,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a single visit with its patient's name and ID number"""
    try:
        visit, patient_name, patient_id_number = VisitService(db, current_user).get_visit(visit_uuid)

        return VisitDetailResponse(
            uuid=visit.uuid,
            visit_date=visit.visit_date,
            diagnosis=visit.diagnosis,
            prescribed_medications=visit.prescribed_medications,
            notes=visit.notes,
            patient_id=visit.patient_id,
            patient_name=patient_name,
            patient_id_number=patient_id_number,
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to get visit {visit_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")

@router.put("/{visit_uuid}", response_model=VisitUpdatedResponse)
def update_visit(
    visit_uuid: str,
    visit_update: VisitUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a visit's date, diagnosis, medications and notes"""
    try:
        visit = VisitService(db, current_user).update_visit(visit_uuid, visit_update)
        return VisitUpdatedResponse(
            message="Visit updated successfully",
            visit=VisitResponse.model_validate(visit),
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to update visit {visit_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")

@router.delete("/{visit_uuid}")
def delete_visit(
    visit_uuid: str,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a visit"""
    try:
        VisitService(db, current_user).delete_visit(visit_uuid)
        return {"message": "Visit deleted successfully"}

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete visit {visit_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")
