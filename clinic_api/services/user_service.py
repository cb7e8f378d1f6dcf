"""
User service for registration and authentication
Handles all user-related business logic
"""

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from uuid import uuid4
import logging

from clinic_api.models.user import User
from clinic_api.schemas.user import UserCreate, UserLogin
from clinic_api.auth.auth_handler import AuthHandler
from clinic_api.utils.error_handler import (
    AuthError, ConflictError, DatabaseError, NotFoundError, is_unique_violation,
)

logger = logging.getLogger(__name__)

class UserService:
    """Service for user management operations"""

    def __init__(self, db: Session, auth_handler: AuthHandler):
        self.db = db
        self.auth_handler = auth_handler

    def create_user(self, user_data: UserCreate) -> User:
        """Create a new user account with a freshly salted password hash"""
        salt = self.auth_handler.generate_salt()
        db_user = User(
            uuid=str(uuid4()),
            first_name=user_data.first_name,
            last_name=user_data.last_name,
            email=user_data.email,
            password_hash=self.auth_handler.get_password_hash(user_data.password, salt),
            salt=salt,
        )

        try:
            self.db.add(db_user)
            self.db.commit()
            self.db.refresh(db_user)
        except IntegrityError as e:
            self.db.rollback()
            if is_unique_violation(e):
                logger.info(f"Registration rejected, email already in use: {user_data.email}")
                raise ConflictError("User with this email already exists. Retry using a different one")
            raise DatabaseError("Failed to create user account", e)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create user: {e}")
            raise DatabaseError("Failed to create user account", e)

        logger.info(f"Created new user: {db_user.uuid} ({db_user.email})")
        return db_user

    def authenticate_user(self, login_data: UserLogin) -> User:
        """Return the user for valid credentials, raise otherwise"""
        user = self.get_user_by_email(login_data.email)

        if not user:
            logger.warning(f"Login attempt with non-existent user: {login_data.email}")
            raise NotFoundError("User not found")

        if not self.auth_handler.verify_password(login_data.password, user.password_hash):
            logger.warning(f"Failed login attempt for user: {user.uuid}")
            raise AuthError("Invalid credentials.", status_code=403)

        logger.info(f"Successful login for user: {user.uuid}")
        return user

    def get_user_by_email(self, email: str):
        try:
            return self.db.query(User).filter(User.email == email.lower()).first()
        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by email {email}: {e}")
            raise DatabaseError("Failed to look up user", e)
