"""
Appointments API Schemas

Pydantic models for appointment and payment requests and responses.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime, date, time
from decimal import Decimal
import uuid

from clinic.api.v1.profiles.schemas import DoctorSummary, PatientSummary
from clinic.domain.appointments.models import AppointmentStatus
from clinic.domain.payments.models import PaymentMethod, PaymentStatus


# ==================== Appointment Schemas ====================

class AppointmentCreate(BaseModel):
    """Schema for booking an appointment"""
    doctor_id: uuid.UUID
    patient_id: Optional[uuid.UUID] = Field(
        None, description="Required for front desk bookings; ignored for patients"
    )
    appointment_date: date
    appointment_time: time
    reason: str = Field(..., min_length=1, max_length=2000)
    notes: Optional[str] = Field(None, max_length=2000)


class AppointmentStatusUpdate(BaseModel):
    """Schema for an appointment status transition"""
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""
    id: uuid.UUID
    patient_id: uuid.UUID
    doctor_id: uuid.UUID
    appointment_date: date
    appointment_time: time
    status: AppointmentStatus
    reason: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    patient: Optional[PatientSummary] = None
    doctor: Optional[DoctorSummary] = None

    model_config = ConfigDict(from_attributes=True)


class DashboardResponse(BaseModel):
    """Appointment statistics for the current user"""
    total: int
    upcoming: int
    completed: int
    upcoming_appointments: List[AppointmentResponse]


# ==================== Payment Schemas ====================

class PaymentUpdate(BaseModel):
    """Schema for recording a payment against an appointment"""
    payment_status: PaymentStatus
    amount_paid: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)
    payment_method: PaymentMethod = PaymentMethod.CASH


class PaymentResponse(BaseModel):
    """Schema for payment response"""
    id: uuid.UUID
    appointment_id: uuid.UUID
    patient_id: uuid.UUID
    amount_paid: float
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    transaction_date: datetime
    processed_by: Optional[uuid.UUID] = None

    model_config = ConfigDict(from_attributes=True)
