"""
Authentication endpoints: registration, login, logout and session check
"""

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
import logging

from clinic_api.database import get_db
from clinic_api.schemas.user import (
    UserCreate, UserLogin, UserResponse, RegisterResponse, LoginResponse, SessionResponse, TokenClaims,
)
from clinic_api.services.user_service import UserService
from clinic_api.auth.auth_handler import (
    ACCESS_TOKEN_EXPIRE_MINUTES, AuthHandler, get_auth_handler, get_current_user,
    set_session_cookie, clear_session_cookie,
)
from clinic_api.utils.error_handler import ClinicAPIError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter()


def _cookie_secure(request: Request) -> bool:
    return request.app.state.settings.cookie_secure


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db),
    auth_handler: AuthHandler = Depends(get_auth_handler),
):
    """Register a new clinician account"""
    try:
        new_user = UserService(db, auth_handler).create_user(user_data)
        return RegisterResponse(message="User Registered", user=UserResponse.from_user(new_user))

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Registration failed: {e}")
        raise InternalError()


@router.post("/login", response_model=LoginResponse)
def login(
    request: Request,
    response: Response,
    login_data: UserLogin,
    db: Session = Depends(get_db),
    auth_handler: AuthHandler = Depends(get_auth_handler),
):
    """Check credentials and hand out the session cookie"""
    try:
        user = UserService(db, auth_handler).authenticate_user(login_data)

        claims = TokenClaims(
            uuid=user.uuid,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
        )
        token = auth_handler.create_access_token(data=claims.to_token_data())
        set_session_cookie(response, token, secure=_cookie_secure(request))

        return LoginResponse(
            message="Login successful",
            expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.from_user(user),
        )

    except ClinicAPIError:
        raise
    except Exception as e:
        logger.error(f"Login failed: {e}")
        raise InternalError()


@router.get("/logout")
def logout(request: Request, response: Response):
    """Clear the session cookie; the token itself simply expires"""
    clear_session_cookie(response, secure=_cookie_secure(request))
    return {"message": "Logout successful"}


@router.get("/check-token", response_model=SessionResponse)
def check_token(current_user: TokenClaims = Depends(get_current_user)):
    """Confirm the session cookie is still valid"""
    return SessionResponse(
        message="Token is valid",
        user=UserResponse(
            uuid=current_user.uuid,
            first_name=current_user.first_name,
            last_name=current_user.last_name,
            email=current_user.email,
        ),
        expires_at=current_user.expires_at,
    )
