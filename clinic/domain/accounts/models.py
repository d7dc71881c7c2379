"""
Accounts Domain Models

Implements the database models for:
- User accounts (identity, credentials and role)
- Patient profiles
- Doctor profiles
"""

from datetime import datetime, timezone
from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Text, Enum, Uuid
from clinic.infrastructure.database import Base
import uuid
import enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def enum_values(enum_cls) -> list:
    """Persist enum values ("Credit Card") rather than member names ("CREDIT_CARD")"""
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    """User roles in the clinic"""
    PATIENT = "patient"
    DOCTOR = "doctor"
    RECEPTIONIST = "receptionist"
    ADMIN = "admin"


class Gender(str, enum.Enum):
    """Gender enumeration"""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class User(Base):
    """User account; the role is fixed at registration"""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(200), nullable=False)
    role = Column(
        Enum(UserRole, name="user_role", values_callable=enum_values),
        nullable=False,
        default=UserRole.PATIENT
    )

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def verify_password(self, password: str) -> bool:
        """Verify password"""
        from clinic.core.security import verify_password
        return verify_password(password, self.password_hash)


class Patient(Base):
    """Patient profile, 1:1 with a user of role patient"""
    __tablename__ = "patients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    full_name = Column(String(200), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(Enum(Gender, name="gender", values_callable=enum_values), nullable=False, default=Gender.OTHER)
    contact_number = Column(String(50), nullable=False)
    address = Column(Text, nullable=False)
    medical_history = Column(Text)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Doctor(Base):
    """Doctor profile, 1:1 with a user of role doctor"""
    __tablename__ = "doctors"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    full_name = Column(String(200), nullable=False)
    specialization = Column(String(200), nullable=False)
    license_number = Column(String(100), unique=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
