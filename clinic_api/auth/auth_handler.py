"""
Authentication and authorization handler for the clinic API
Password hashing, session tokens and the cookie auth gate
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import calendar
import logging

import bcrypt
from fastapi import Depends, Request, Response
from fastapi.security import APIKeyCookie
from passlib.context import CryptContext
from jose import JWTError, jwt
from pydantic import ValidationError as ClaimsError

from clinic_api.schemas.user import TokenClaims
from clinic_api.utils.error_handler import AuthError

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60
BCRYPT_ROUNDS = 10
COOKIE_NAME = "authorizationToken"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
cookie_scheme = APIKeyCookie(
    name=COOKIE_NAME,
    auto_error=False,
    description="Signed session token issued by /api/user/login",
)


class TokenVerificationError(Exception):
    """Token is malformed, forged or expired; callers are not told which"""


class AuthHandler:
    """Handles password hashing and session token issue/verification"""

    def __init__(self, secret_key: str):
        self.secret_key = secret_key
        self.pwd_context = pwd_context

    def generate_salt(self) -> str:
        """Fresh bcrypt salt in modular crypt form, e.g. $2b$10$<22 chars>"""
        return bcrypt.gensalt(rounds=BCRYPT_ROUNDS).decode("ascii")

    def get_password_hash(self, password: str, salt: Optional[str] = None) -> str:
        """Hash a password with the given salt (or a fresh one)"""
        if salt is None:
            return self.pwd_context.hash(password)
        rounds = int(salt.split("$")[2])
        handler = self.pwd_context.handler("bcrypt")
        return handler.using(salt=salt[-22:], rounds=rounds).hash(password)

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash; never raises on bad input"""
        try:
            return self.pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    def create_access_token(
        self,
        data: dict,
        expires_delta: Optional[timedelta] = None,
        now: Optional[datetime] = None,
    ) -> str:
        """Create a signed JWT carrying the caller identity"""
        issued_at = now or datetime.now(timezone.utc)
        expire = issued_at + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

        to_encode = data.copy()
        to_encode.update({"iat": issued_at, "exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=ALGORITHM)

    def verify_token(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        """Verify signature and expiry in one step and decode the claims"""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[ALGORITHM])
        except JWTError as e:
            raise TokenVerificationError(str(e)) from e

        current = now or datetime.now(timezone.utc)
        expires_at = payload.get("exp")
        # Expired as soon as now reaches exp, not one second later
        if not isinstance(expires_at, (int, float)) or calendar.timegm(current.utctimetuple()) >= expires_at:
            raise TokenVerificationError("Token has expired")

        if not payload.get("uuid"):
            raise TokenVerificationError("Token carries no identity")

        try:
            return TokenClaims.model_validate(payload)
        except ClaimsError as e:
            raise TokenVerificationError("Token claims are malformed") from e


def get_auth_handler(request: Request) -> AuthHandler:
    return request.app.state.auth_handler


def get_current_user(
    token: Optional[str] = Depends(cookie_scheme),
    auth_handler: AuthHandler = Depends(get_auth_handler),
) -> TokenClaims:
    """Dependency resolving the session cookie into the caller's identity"""
    if not token:
        raise AuthError("You cannot access this resource", status_code=403)

    try:
        return auth_handler.verify_token(token)
    except TokenVerificationError as e:
        logger.warning(f"Rejected session token: {e}")
        raise AuthError("Provide valid authentication credentials.", status_code=401)


def set_session_cookie(response: Response, token: str, secure: bool = True) -> None:
    response.set_cookie(
        key=COOKIE_NAME,
        value=token,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )


def clear_session_cookie(response: Response, secure: bool = True) -> None:
    response.delete_cookie(
        key=COOKIE_NAME,
        path="/",
        httponly=True,
        secure=secure,
        samesite="lax",
    )
