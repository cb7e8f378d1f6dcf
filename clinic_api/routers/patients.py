"""
Patient management endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
import logging

from clinic_api.database import get_db
from clinic_api.schemas.patient import (
    PatientCreate, PatientUpdate, PatientResponse, PatientListItem, PatientListResponse,
    PatientVisit, PatientDetailResponse, PatientCreatedResponse, PatientUpdatedResponse,
)
from clinic_api.schemas.user import TokenClaims
from clinic_api.schemas.visit import VisitCreate, VisitResponse, VisitCreatedResponse
from clinic_api.services.patient_service import PatientService
from clinic_api.services.pagination import total_pages
from clinic_api.auth.auth_handler import get_current_user
from clinic_api.utils.error_handler import ClinicAPIError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/new-patient", response_model=PatientCreatedResponse, status_code=201)
def create_patient(
    patient: PatientCreate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Register a new patient"""
    try:
        db_patient = PatientService(db, current_user).create_patient(patient)
        return PatientCreatedResponse(
            message="Patient registered.",
            patient=PatientResponse.model_validate(db_patient),
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to create patient: {e}")
        raise InternalError("We encountered a problem. Please retry")

@router.get("", response_model=PatientListResponse)
def get_patients(
    page: int = Query(1, description="Page number"),
    limit: int = Query(10, description="Items per page"),
    search: Optional[str] = Query(None, description="Search by patient name or ID number"),
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a paginated list of the caller's patients"""
    try:
        patients, total = PatientService(db, current_user).list_patients(page, limit, search)

        return PatientListResponse(
            items=[
                PatientListItem(
                    key=p.id,
                    id=p.id,
                    uuid=p.uuid,
                    name=p.name,
                    id_number=p.id_number,
                    gender=p.gender,
                    contact=p.contact,
                )
                for p in patients
            ],
            total=total,
            page=page,
            limit=limit,
            total_pages=total_pages(total, limit),
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to get patients: {e}")
        raise InternalError("We encountered an error. Please retry")

@router.get("/{patient_uuid}", response_model=PatientDetailResponse)
def get_patient(
    patient_uuid: str,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a patient and their visit history"""
    try:
        patient, visits = PatientService(db, current_user).get_patient(patient_uuid)

        return PatientDetailResponse(
            uuid=patient.uuid,
            name=patient.name,
            id_number=patient.id_number,
            gender=patient.gender,
            contact=patient.contact,
            date_of_birth=patient.date_of_birth,
            visits=[
                PatientVisit(
                    uuid=v.uuid,
                    visit_date=v.visit_date,
                    diagnosis=v.diagnosis,
                    prescribed_medications=v.prescribed_medications,
                    notes=v.notes,
                )
                for v in visits
            ],
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to get patient {patient_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")

@router.put("/{patient_uuid}", response_model=PatientUpdatedResponse)
def update_patient(
    patient_uuid: str,
    patient_update: PatientUpdate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update patient details"""
    try:
        patient = PatientService(db, current_user).update_patient(patient_uuid, patient_update)
        return PatientUpdatedResponse(
            message="Patient details updated",
            patient=PatientResponse.model_validate(patient),
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to update patient {patient_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")

@router.delete("/{patient_uuid}")
def delete_patient(
    patient_uuid: str,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a patient and their visits"""
    try:
        PatientService(db, current_user).delete_patient(patient_uuid)
        return {"message": "Patient deleted successfully"}

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to delete patient {patient_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")

@router.post("/{patient_uuid}/visits", response_model=VisitCreatedResponse, status_code=201)
def add_visit(
    patient_uuid: str,
    visit: VisitCreate,
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Add a new visit for a patient"""
    try:
        db_visit = PatientService(db, current_user).add_visit(patient_uuid, visit)
        return VisitCreatedResponse(message="Visit added", visit=VisitResponse.model_validate(db_visit))

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to add visit to patient {patient_uuid}: {e}")
        raise InternalError("We encountered an error. Please try again")
