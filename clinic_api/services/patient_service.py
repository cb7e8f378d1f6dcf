"""
Patient service
Every query is scoped to the patients owned by the calling clinician
"""

from sqlalchemy.orm import Session, Query
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy import or_
from typing import Optional
from uuid import uuid4
import logging

from clinic_api.models.patient import Patient
from clinic_api.models.visit import Visit
from clinic_api.schemas.patient import PatientCreate, PatientUpdate
from clinic_api.schemas.user import TokenClaims
from clinic_api.schemas.visit import VisitCreate
from clinic_api.services.pagination import paginate, search_pattern
from clinic_api.utils.error_handler import (
    ConflictError, DatabaseError, NotFoundError, is_unique_violation,
)

logger = logging.getLogger(__name__)

DUPLICATE_PATIENT_MESSAGE = "Patient with this ID number already exists. Retry using a different one"


class PatientService:
    """Ownership-scoped access to patients and their nested visits"""

    def __init__(self, db: Session, current_user: TokenClaims):
        self.db = db
        self.owner = current_user.uuid

    def _owned(self) -> Query:
        return self.db.query(Patient).filter(Patient.created_by == self.owner)

    def _get_owned_for_update(self, patient_uuid: str) -> Patient:
        """Lock the caller's patient row for the rest of the transaction"""
        patient = self._owned().filter(Patient.uuid == patient_uuid).with_for_update().first()
        if not patient:
            raise NotFoundError("Patient not found")
        return patient

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                raise ConflictError(DUPLICATE_PATIENT_MESSAGE)
            logger.error(f"Integrity error while trying to {action}: {e}")
            raise DatabaseError(f"Failed to {action}", e)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise DatabaseError(f"Failed to {action}", e)

    def list_patients(self, page: int = 1, limit: int = 10, search: Optional[str] = None) -> tuple[list[Patient], int]:
        """Paginated patients, newest first, optionally filtered by name or ID number"""
        query = self._owned()
        if search:
            pattern = search_pattern(search)
            query = query.filter(or_(Patient.name.ilike(pattern), Patient.id_number.ilike(pattern)))

        return paginate(query, page, limit, Patient.id.desc())

    def get_patient(self, patient_uuid: str) -> tuple[Patient, list[Visit]]:
        """A patient with its visit history, latest visit first"""
        patient = self._owned().filter(Patient.uuid == patient_uuid).first()
        if not patient:
            raise NotFoundError("Patient not found")

        visits = (
            self.db.query(Visit)
            .filter(
                Visit.patient_id == patient.uuid,
                Visit.created_by == patient.created_by,
            )
            .order_by(Visit.visit_date.desc(), Visit.id.desc())
            .all()
        )
        return patient, visits

    def create_patient(self, patient_data: PatientCreate) -> Patient:
        db_patient = Patient(
            uuid=str(uuid4()),
            name=patient_data.name,
            id_number=patient_data.id_number,
            date_of_birth=patient_data.date_of_birth,
            gender=patient_data.gender,
            contact=patient_data.contact,
            created_by=self.owner,
        )
        self.db.add(db_patient)
        self._commit("create patient")
        self.db.refresh(db_patient)

        logger.info(f"Created patient {db_patient.uuid} for user {self.owner}")
        return db_patient

    def update_patient(self, patient_uuid: str, patient_data: PatientUpdate) -> Patient:
        patient = self._get_owned_for_update(patient_uuid)

        patient.name = patient_data.name
        patient.id_number = patient_data.id_number or None
        patient.date_of_birth = patient_data.date_of_birth
        patient.gender = patient_data.gender
        patient.contact = patient_data.contact or None
        self._commit("update patient")
        self.db.refresh(patient)

        logger.info(f"Updated patient {patient_uuid} for user {self.owner}")
        return patient

    def delete_patient(self, patient_uuid: str) -> None:
        """Delete a patient together with its visits"""
        patient = self._get_owned_for_update(patient_uuid)

        self.db.delete(patient)
        self._commit("delete patient")

        logger.info(f"Deleted patient {patient_uuid} for user {self.owner}")

    def add_visit(self, patient_uuid: str, visit_data: VisitCreate) -> Visit:
        """Record a visit under one of the caller's patients"""
        patient = self._get_owned_for_update(patient_uuid)

        db_visit = Visit(
            uuid=str(uuid4()),
            patient_id=patient.uuid,
            visit_date=visit_data.visit_date,
            diagnosis=visit_data.diagnosis,
            prescribed_medications=visit_data.prescribed_medications,
            notes=visit_data.notes or None,
            created_by=self.owner,
        )
        self.db.add(db_visit)
        self._commit("add visit")
        self.db.refresh(db_visit)

        logger.info(f"Added visit {db_visit.uuid} to patient {patient_uuid}")
        return db_visit
