"""
Visit service
Every query is scoped to the visits owned by the calling clinician
"""

from sqlalchemy.orm import Session, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy import and_, or_
from datetime import date
from typing import Optional
import logging

from clinic_api.models.patient import Patient
from clinic_api.models.visit import Visit
from clinic_api.schemas.user import TokenClaims
from clinic_api.schemas.visit import VisitUpdate
from clinic_api.services.pagination import paginate, search_pattern
from clinic_api.utils.error_handler import DatabaseError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# A visit and its patient always share an owner
PATIENT_JOIN = and_(Patient.uuid == Visit.patient_id, Patient.created_by == Visit.created_by)


class VisitService:
    """Ownership-scoped access to visits"""

    def __init__(self, db: Session, current_user: TokenClaims):
        self.db = db
        self.owner = current_user.uuid

    def _owned(self) -> Query:
        return self.db.query(Visit).filter(Visit.created_by == self.owner)

    def _owned_with_patient(self) -> Query:
        return (
            self.db.query(Visit, Patient.name, Patient.id_number)
            .outerjoin(Patient, PATIENT_JOIN)
            .filter(Visit.created_by == self.owner)
        )

    def _get_owned_for_update(self, visit_uuid: str) -> Visit:
        visit = self._owned().filter(Visit.uuid == visit_uuid).with_for_update().first()
        if not visit:
            raise NotFoundError("Visit not found")
        return visit

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise DatabaseError(f"Failed to {action}", e)

    def list_visits(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> tuple[list, int]:
        """Paginated visits joined with patient name and ID number, newest first"""
        if start_date and end_date and start_date > end_date:
            raise ValidationError("startDate must not be after endDate")

        query = self._owned_with_patient()
        if search:
            pattern = search_pattern(search)
            query = query.filter(
                or_(
                    Patient.name.ilike(pattern),
                    Patient.id_number.ilike(pattern),
                    Visit.diagnosis.ilike(pattern),
                    Visit.prescribed_medications.ilike(pattern),
                )
            )
        if start_date:
            query = query.filter(Visit.visit_date >= start_date)
        if end_date:
            query = query.filter(Visit.visit_date <= end_date)

        return paginate(query, page, limit, Visit.id.desc())

    def get_visit(self, visit_uuid: str):
        """(visit, patient_name, patient_id_number) for one of the caller's visits"""
        row = self._owned_with_patient().filter(Visit.uuid == visit_uuid).first()
        if not row:
            raise NotFoundError("Visit not found")
        return row

    def update_visit(self, visit_uuid: str, visit_data: VisitUpdate) -> Visit:
        visit = self._get_owned_for_update(visit_uuid)

        visit.visit_date = visit_data.visit_date
        visit.diagnosis = visit_data.diagnosis
        visit.prescribed_medications = visit_data.prescribed_medications
        visit.notes = visit_data.notes or None
        self._commit("update visit")
        self.db.refresh(visit)

        logger.info(f"Updated visit {visit_uuid} for user {self.owner}")
        return visit

    def delete_visit(self, visit_uuid: str) -> None:
        visit = self._get_owned_for_update(visit_uuid)

        self.db.delete(visit)
        self._commit("delete visit")

        logger.info(f"Deleted visit {visit_uuid} for user {self.owner}")
