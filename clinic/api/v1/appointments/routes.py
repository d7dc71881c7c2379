"""
Appointments API Routes

API endpoints for booking, the appointment status lifecycle and payments.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List, Optional
import uuid

from clinic.api.deps import require_action
from clinic.api.v1.appointments.schemas import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    DashboardResponse,
    PaymentResponse,
    PaymentUpdate,
)
from clinic.core.permissions import Action
from clinic.domain.accounts.models import User
from clinic.domain.appointments.models import AppointmentStatus
from clinic.domain.appointments.service import AppointmentService, AppointmentLifecycleService
from clinic.infrastructure.database import get_db

router = APIRouter()


@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_APPOINTMENTS))
):
    """Appointments visible to the current user"""
    return await AppointmentService(db).list_appointments(current_user, status_filter)


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    appointment_data: AppointmentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.BOOK_APPOINTMENT))
):
    """Book a new appointment"""
    return await AppointmentService(db).book_appointment(
        booked_by=current_user,
        doctor_id=appointment_data.doctor_id,
        patient_id=appointment_data.patient_id,
        appointment_date=appointment_data.appointment_date,
        appointment_time=appointment_data.appointment_time,
        reason=appointment_data.reason,
        notes=appointment_data.notes
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_DASHBOARD))
):
    """Appointment statistics and upcoming visits"""
    return await AppointmentService(db).get_dashboard(current_user)


@router.get("/payments", response_model=Dict[uuid.UUID, PaymentResponse])
async def list_payments(
    appointment_id: Optional[List[uuid.UUID]] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_PAYMENTS))
):
    """Payments keyed by appointment ID"""
    return await AppointmentLifecycleService(db).list_payments(current_user, appointment_id)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.VIEW_APPOINTMENTS))
):
    """Get a single appointment"""
    return await AppointmentService(db).get_appointment(appointment_id, current_user)


@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: uuid.UUID,
    status_update: AppointmentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPDATE_APPOINTMENT_STATUS))
):
    """Change appointment status; completing opens a pending payment if none exists"""
    return await AppointmentLifecycleService(db).set_appointment_status(
        appointment_id, status_update.status, current_user
    )


@router.put("/{appointment_id}/payment", response_model=PaymentResponse)
async def update_payment(
    appointment_id: uuid.UUID,
    payment_data: PaymentUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.UPDATE_PAYMENT))
):
    """Create or overwrite the payment of an appointment"""
    return await AppointmentLifecycleService(db).set_payment_status(
        appointment_id,
        status=payment_data.payment_status,
        amount=payment_data.amount_paid,
        method=payment_data.payment_method,
        acting_user=current_user
    )
