"""
Dashboard statistics endpoint
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from clinic_api.database import get_db
from clinic_api.schemas.dashboard import DashboardResponse
from clinic_api.schemas.user import TokenClaims
from clinic_api.services.dashboard_service import DashboardService
from clinic_api.auth.auth_handler import get_current_user
from clinic_api.utils.error_handler import ClinicAPIError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=DashboardResponse)
def get_dashboard(
    current_user: TokenClaims = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Patient and visit totals, recent visits and visits per ISO week"""
    try:
        return DashboardService(db, current_user).summary()

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Failed to build dashboard for user {current_user.uuid}: {e}")
        raise InternalError("Internal Server Error")
