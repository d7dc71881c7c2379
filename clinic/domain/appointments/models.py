"""
Appointments Domain Models

Implements the database model for patient-doctor appointments and the
status lifecycle scheduled -> completed | cancelled.
"""

from sqlalchemy import Column, Date, DateTime, ForeignKey, Time, Text, Enum, Uuid
from sqlalchemy.orm import relationship
from clinic.infrastructure.database import Base
from clinic.domain.accounts.models import Patient, Doctor, enum_values, utcnow
import uuid
import enum


class AppointmentStatus(str, enum.Enum):
    """Appointment status enumeration"""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Appointment(Base):
    """Appointment model for patient-doctor appointments"""
    __tablename__ = "appointments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Patient and doctor
    patient_id = Column(Uuid(as_uuid=True), ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Uuid(as_uuid=True), ForeignKey("doctors.id"), nullable=False, index=True)

    # Scheduling
    appointment_date = Column(Date, nullable=False, index=True)
    appointment_time = Column(Time, nullable=False)

    status = Column(
        Enum(AppointmentStatus, name="appointment_status", values_callable=enum_values),
        nullable=False,
        default=AppointmentStatus.SCHEDULED
    )

    # Visit details
    reason = Column(Text, nullable=False)
    notes = Column(Text)

    # Audit
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    patient = relationship(Patient, foreign_keys=[patient_id])
    doctor = relationship(Doctor, foreign_keys=[doctor_id])
