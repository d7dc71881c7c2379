"""
Appointments Service Layer

Business logic for appointment booking, listing, the status lifecycle and the
payment ledger attached to it.
"""

from typing import Optional, List, Dict, Any, Iterable, Union
from datetime import date, time
from decimal import Decimal
import uuid

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.core.exceptions import NotFoundError, ValidationError, handle_database_error
from clinic.domain.accounts.models import User, UserRole, utcnow
from clinic.domain.accounts.repository import ProfileRepository
from clinic.domain.accounts.service import AccountService
from clinic.domain.appointments.models import Appointment, AppointmentStatus
from clinic.domain.appointments.repository import AppointmentRepository
from clinic.domain.payments.models import Payment, PaymentMethod, PaymentStatus
from clinic.domain.payments.repository import PaymentRepository

PAYMENT_UPDATE_FIELDS = ["payment_status", "amount_paid", "payment_method", "transaction_date"]


def _coerce(enum_cls, value, field: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(
            message=f"Invalid {field}: {value}",
            details={"field": field, "allowed": [member.value for member in enum_cls]}
        )


class AppointmentService:
    """Service layer for appointment booking and listing"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.appointment_repo = AppointmentRepository(db)
        self.profile_repo = ProfileRepository(db)
        self.account_service = AccountService(db)

    async def resolve_scope(self, user: User) -> Dict[str, uuid.UUID]:
        """Filters limiting ``user`` to the appointments it may see.

        Patients see their own, doctors see theirs, front desk sees all.
        """
        if user.role == UserRole.PATIENT:
            patient = await self.account_service.get_patient_profile(user)
            return {"patient_id": patient.id}
        if user.role == UserRole.DOCTOR:
            doctor = await self.account_service.get_doctor_profile(user)
            return {"doctor_id": doctor.id}
        return {}

    async def book_appointment(
        self,
        booked_by: User,
        doctor_id: uuid.UUID,
        appointment_date: date,
        appointment_time: time,
        reason: str,
        patient_id: Optional[uuid.UUID] = None,
        notes: Optional[str] = None
    ) -> Appointment:
        """Create a new appointment in the scheduled state"""
        if booked_by.role == UserRole.PATIENT:
            # Patients always book for themselves
            patient_id = (await self.account_service.get_patient_profile(booked_by)).id
        elif patient_id is None:
            raise ValidationError(
                message="patient_id is required",
                details={"field": "patient_id"}
            )
        elif not await self.profile_repo.get_patient(patient_id):
            raise NotFoundError(message="Patient not found")

        if not await self.profile_repo.get_doctor(doctor_id):
            raise NotFoundError(message="Doctor not found")

        appointment = await self.appointment_repo.add({
            "patient_id": patient_id,
            "doctor_id": doctor_id,
            "appointment_date": appointment_date,
            "appointment_time": appointment_time,
            "reason": reason,
            "notes": notes,
            "status": AppointmentStatus.SCHEDULED
        })
        await self.db.commit()

        logger.info(f"Appointment {appointment.id} booked by {booked_by.id}")
        return await self.appointment_repo.get_by_id(appointment.id)

    async def get_appointment(self, appointment_id: uuid.UUID, user: Optional[User] = None) -> Appointment:
        """Get appointment by ID, optionally checking it is visible to ``user``"""
        appointment = await self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundError(message="Appointment not found")

        if user is not None:
            scope = await self.resolve_scope(user)
            if any(getattr(appointment, key) != value for key, value in scope.items()):
                raise NotFoundError(message="Appointment not found")

        return appointment

    async def list_appointments(
        self,
        user: User,
        status: Optional[AppointmentStatus] = None
    ) -> List[Appointment]:
        """Appointments visible to ``user``, earliest first"""
        scope = await self.resolve_scope(user)
        return await self.appointment_repo.get_all(status=status, **scope)

    async def get_dashboard(self, user: User) -> Dict[str, Any]:
        """Appointment counts and upcoming visits within the user's scope"""
        scope = await self.resolve_scope(user)
        return {
            "total": await self.appointment_repo.count(**scope),
            "upcoming": await self.appointment_repo.count(status=AppointmentStatus.SCHEDULED, **scope),
            "completed": await self.appointment_repo.count(status=AppointmentStatus.COMPLETED, **scope),
            "upcoming_appointments": await self.appointment_repo.get_all(
                status=AppointmentStatus.SCHEDULED, **scope
            ),
        }


class AppointmentLifecycleService:
    """Status transitions of appointments and the payments they imply"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.appointment_repo = AppointmentRepository(db)
        self.payment_repo = PaymentRepository(db)
        self.appointment_service = AppointmentService(db)

    async def set_appointment_status(
        self,
        appointment_id: uuid.UUID,
        new_status: Union[AppointmentStatus, str],
        acting_user: User
    ) -> Appointment:
        """
        Persist a new appointment status.

        Completing an appointment that has no payment yet records a pending
        cash payment of zero. An existing payment is never touched, including
        when a completed appointment is moved back to another status. The
        status write and the payment insert commit together.
        """
        new_status = _coerce(AppointmentStatus, new_status, "status")
        appointment = await self.appointment_service.get_appointment(appointment_id)

        payment_created = False
        try:
            await self.appointment_repo.set_status(appointment_id, new_status)
            if new_status == AppointmentStatus.COMPLETED:
                payment_created = await self.payment_repo.insert_if_absent({
                    "appointment_id": appointment_id,
                    "patient_id": appointment.patient_id,
                    "amount_paid": Decimal("0"),
                    "payment_method": PaymentMethod.CASH,
                    "payment_status": PaymentStatus.PENDING,
                    "transaction_date": utcnow(),
                    "processed_by": acting_user.id
                })
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise handle_database_error(e, "set appointment status") from e

        logger.info(f"Appointment {appointment_id} marked {new_status.value} by {acting_user.id}")
        if payment_created:
            logger.info(f"Pending payment opened for appointment {appointment_id}")

        return await self.appointment_repo.get_by_id(appointment_id)

    async def set_payment_status(
        self,
        appointment_id: uuid.UUID,
        status: Union[PaymentStatus, str],
        amount: Union[Decimal, float, int],
        method: Union[PaymentMethod, str],
        acting_user: User
    ) -> Payment:
        """
        Record a payment for an appointment.

        Overwrites status, amount, method and transaction date of the existing
        payment, or creates one with these values. Status changes are not
        ordered: any status may follow any other.
        """
        status = _coerce(PaymentStatus, status, "payment_status")
        method = _coerce(PaymentMethod, method, "payment_method")
        appointment = await self.appointment_service.get_appointment(appointment_id)

        try:
            payment = await self.payment_repo.upsert(
                {
                    "appointment_id": appointment_id,
                    "patient_id": appointment.patient_id,
                    "amount_paid": Decimal(str(amount)),
                    "payment_method": method,
                    "payment_status": status,
                    "transaction_date": utcnow(),
                    "processed_by": acting_user.id
                },
                PAYMENT_UPDATE_FIELDS
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise handle_database_error(e, "set payment status") from e

        logger.info(f"Payment for appointment {appointment_id} set to {status.value} by {acting_user.id}")
        return payment

    async def list_payments(
        self,
        user: User,
        appointment_ids: Optional[Iterable[uuid.UUID]] = None
    ) -> Dict[uuid.UUID, Payment]:
        """Payments of the appointments visible to ``user``, keyed by appointment"""
        scope = await self.appointment_service.resolve_scope(user)
        visible = await self.appointment_repo.get_ids(**scope)
        if appointment_ids is not None:
            wanted = set(appointment_ids)
            visible = [appointment_id for appointment_id in visible if appointment_id in wanted]

        payments = await self.payment_repo.list_for_appointments(visible)
        return {payment.appointment_id: payment for payment in payments}
