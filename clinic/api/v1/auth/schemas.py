"""
Auth API Schemas

Pydantic models for registration, login and profile responses.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional
from datetime import datetime, date
import uuid
from clinic.domain.accounts.models import UserRole, Gender


class UserCreate(BaseModel):
    """Schema for creating a user and its profile"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole = UserRole.PATIENT

    # Patient profile
    date_of_birth: Optional[date] = None
    gender: Optional[Gender] = None
    contact_number: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    medical_history: Optional[str] = None

    # Doctor profile
    specialization: Optional[str] = Field(None, max_length=200)
    license_number: Optional[str] = Field(None, max_length=100)


class RegisterRequest(UserCreate):
    """Self-registration is open to patients and doctors only"""

    @field_validator("role")
    @classmethod
    def validate_role(cls, v: UserRole) -> UserRole:
        if v not in (UserRole.PATIENT, UserRole.DOCTOR):
            raise ValueError("Only patient and doctor accounts can self-register")
        return v


class LoginRequest(BaseModel):
    """Schema for login request"""
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Schema for token response"""
    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """Schema for user response data"""
    id: uuid.UUID
    email: EmailStr
    full_name: str
    role: UserRole
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PatientProfileResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    full_name: str
    date_of_birth: date
    gender: Gender
    contact_number: str
    address: str
    medical_history: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class DoctorProfileResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    full_name: str
    specialization: str
    license_number: str

    model_config = ConfigDict(from_attributes=True)


class ProfileResponse(BaseModel):
    """Current user with its role-specific profile"""
    user: UserResponse
    patient: Optional[PatientProfileResponse] = None
    doctor: Optional[DoctorProfileResponse] = None
