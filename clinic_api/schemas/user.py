"""
Pydantic schemas for user registration, login and session claims
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator
from typing import Optional


class UserCreate(BaseModel):
    """Schema for registering a clinician"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field("", max_length=100, alias="firstName")
    last_name: str = Field("", max_length=100, alias="lastName")
    email: EmailStr = Field(..., description="Valid email address")
    password: str = Field(..., min_length=1, max_length=72, description="Password")
    repeat_password: Optional[str] = Field(None, alias="repeatPassword")

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v):
        return v.strip()

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v):
        return v.lower()

    @model_validator(mode="after")
    def passwords_match(self):
        if self.repeat_password is not None and self.repeat_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    """Schema for user login"""
    email: str = Field(..., min_length=1, description="Registered email address")
    password: str = Field(..., min_length=1, description="Password")

    @field_validator("email")
    @classmethod
    def normalise_email(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError("Email is required")
        return v


class TokenClaims(BaseModel):
    """Identity decoded from a verified session token"""
    model_config = ConfigDict(populate_by_name=True)

    uuid: str
    first_name: str = Field("", alias="firstName")
    last_name: str = Field("", alias="lastName")
    email: str = ""
    issued_at: Optional[int] = Field(None, alias="iat")
    expires_at: Optional[int] = Field(None, alias="exp")

    def to_token_data(self) -> dict:
        return {
            "uuid": self.uuid,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
        }


class UserResponse(BaseModel):
    """Public view of a user (no password material)"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    uuid: str
    first_name: str = Field(..., alias="firstName")
    last_name: str = Field(..., alias="lastName")
    email: str

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(uuid=user.uuid, first_name=user.first_name, last_name=user.last_name, email=user.email)


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    message: str
    expires_in: int
    user: UserResponse


class SessionResponse(BaseModel):
    message: str
    user: UserResponse
    expires_at: Optional[int] = None
