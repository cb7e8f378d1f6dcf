"""
Dashboard aggregation for the calling clinician
"""

from collections import Counter
from datetime import date

from sqlalchemy import and_, func
from sqlalchemy.orm import Session

from clinic_api.models.patient import Patient
from clinic_api.models.visit import Visit
from clinic_api.schemas.dashboard import DashboardResponse, RecentVisit, WeeklyVisits
from clinic_api.schemas.user import TokenClaims

RECENT_VISITS_LIMIT = 5
WEEKS_SHOWN = 10


def iso_week_label(day: date) -> str:
    """ISO-8601 week label, e.g. 2025-W03"""
    year, week, _ = day.isocalendar()
    return f"{year}-W{week:02d}"


class DashboardService:

    def __init__(self, db: Session, current_user: TokenClaims):
        self.db = db
        self.owner = current_user.uuid

    def total_patients(self) -> int:
        return self.db.query(func.count(Patient.id)).filter(Patient.created_by == self.owner).scalar() or 0

    def total_visits(self) -> int:
        return self.db.query(func.count(Visit.id)).filter(Visit.created_by == self.owner).scalar() or 0

    def recent_visits(self, limit: int = RECENT_VISITS_LIMIT) -> list[RecentVisit]:
        rows = (
            self.db.query(Visit, Patient.name)
            .join(Patient, and_(Patient.uuid == Visit.patient_id, Patient.created_by == Visit.created_by))
            .filter(Visit.created_by == self.owner)
            .order_by(Visit.visit_date.desc(), Visit.id.desc())
            .limit(limit)
            .all()
        )
        return [
            RecentVisit(
                visit_uuid=visit.uuid,
                patient_uuid=visit.patient_id,
                name=name,
                visit_date=visit.visit_date,
                diagnosis=visit.diagnosis,
                prescribed_medications=visit.prescribed_medications,
                notes=visit.notes,
            )
            for visit, name in rows
        ]

    def visits_per_week(self, weeks: int = WEEKS_SHOWN) -> list[WeeklyVisits]:
        """Visit counts for the most recent weeks that have visits, oldest first"""
        per_day = (
            self.db.query(Visit.visit_date, func.count(Visit.id))
            .filter(Visit.created_by == self.owner)
            .group_by(Visit.visit_date)
            .order_by(Visit.visit_date.desc())
            .all()
        )

        counts = Counter()
        for visit_date, visits in per_day:
            label = iso_week_label(visit_date)
            # Days are newest first, so an unseen week past the cap ends the scan
            if label not in counts and len(counts) == weeks:
                break
            counts[label] += visits

        # Labels sort chronologically since years and weeks are zero-padded
        return [WeeklyVisits(week=label, visits=counts[label]) for label in sorted(counts)]

    def summary(self) -> DashboardResponse:
        return DashboardResponse(
            total_patients=self.total_patients(),
            total_visits=self.total_visits(),
            recent_visits=self.recent_visits(),
            visits_per_week=self.visits_per_week(),
        )
