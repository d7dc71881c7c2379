import pytest
import uuid
from datetime import date, time, timedelta
from decimal import Decimal
from httpx import AsyncClient
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.core.exceptions import NotFoundError, ValidationError
from clinic.domain.accounts.models import User
from clinic.domain.appointments.models import Appointment, AppointmentStatus
from clinic.domain.appointments.service import AppointmentService, AppointmentLifecycleService
from clinic.domain.payments.models import Payment, PaymentMethod, PaymentStatus
from clinic.domain.payments.repository import PaymentRepository


@pytest.mark.payments
@pytest.mark.unit
@pytest.mark.asyncio
class TestPaymentLedger:
    """Recording payments against appointments."""

    async def test_set_payment_creates_record(
        self,
        db_session: AsyncSession,
        scheduled_appointment: Appointment,
        receptionist_user: User
    ) -> None:
        payment = await AppointmentLifecycleService(db_session).set_payment_status(
            scheduled_appointment.id, "Completed", 150, "Credit Card", receptionist_user
        )

        assert payment.appointment_id == scheduled_appointment.id
        assert payment.patient_id == scheduled_appointment.patient_id
        assert payment.payment_status == PaymentStatus.COMPLETED
        assert payment.payment_method == PaymentMethod.CREDIT_CARD
        assert payment.amount_paid == Decimal("150.00")
        assert payment.processed_by == receptionist_user.id

    async def test_set_payment_overwrites_pending_record(
        self,
        db_session: AsyncSession,
        scheduled_appointment: Appointment,
        receptionist_user: User,
        admin_user: User
    ) -> None:
        lifecycle = AppointmentLifecycleService(db_session)
        await lifecycle.set_appointment_status(
            scheduled_appointment.id, AppointmentStatus.COMPLETED, receptionist_user
        )
        opened = await lifecycle.payment_repo.get_by_appointment(scheduled_appointment.id)
        opened_id = opened.id

        payment = await lifecycle.set_payment_status(
            scheduled_appointment.id, PaymentStatus.COMPLETED, Decimal("150.00"),
            PaymentMethod.CREDIT_CARD, admin_user
        )

        assert payment.id == opened_id
        assert payment.payment_status == PaymentStatus.COMPLETED
        assert payment.payment_method == PaymentMethod.CREDIT_CARD
        assert payment.amount_paid == Decimal("150.00")
        assert payment.processed_by == receptionist_user.id

        result = await db_session.execute(select(func.count(Payment.id)))
        assert result.scalar_one() == 1

    async def test_status_changes_are_unordered(
        self,
        db_session: AsyncSession,
        scheduled_appointment: Appointment,
        receptionist_user: User
    ) -> None:
        lifecycle = AppointmentLifecycleService(db_session)
        await lifecycle.set_payment_status(
            scheduled_appointment.id, PaymentStatus.COMPLETED, 40, PaymentMethod.CASH, receptionist_user
        )

        payment = await lifecycle.set_payment_status(
            scheduled_appointment.id, PaymentStatus.PENDING, 40, PaymentMethod.CASH, receptionist_user
        )

        assert payment.payment_status == PaymentStatus.PENDING

    async def test_invalid_method(
        self,
        db_session: AsyncSession,
        scheduled_appointment: Appointment,
        receptionist_user: User
    ) -> None:
        with pytest.raises(ValidationError):
            await AppointmentLifecycleService(db_session).set_payment_status(
                scheduled_appointment.id, "Completed", 10, "Bitcoin", receptionist_user
            )

    async def test_unknown_appointment(self, db_session: AsyncSession, receptionist_user: User) -> None:
        with pytest.raises(NotFoundError):
            await AppointmentLifecycleService(db_session).set_payment_status(
                uuid.uuid4(), "Completed", 10, "Cash", receptionist_user
            )

    async def test_list_payments_scoped(
        self,
        db_session: AsyncSession,
        scheduled_appointment: Appointment,
        patient_user: User,
        other_patient_user: User,
        doctor_user: User,
        receptionist_user: User
    ) -> None:
        service = AppointmentService(db_session)
        doctor = await service.account_service.get_doctor_profile(doctor_user)
        other_appointment = await service.book_appointment(
            booked_by=other_patient_user,
            doctor_id=doctor.id,
            appointment_date=date.today() + timedelta(days=4),
            appointment_time=time(13, 0),
            reason="Rash"
        )
        lifecycle = AppointmentLifecycleService(db_session)
        for appointment_id in (scheduled_appointment.id, other_appointment.id):
            await lifecycle.set_appointment_status(appointment_id, AppointmentStatus.COMPLETED, receptionist_user)

        own = await lifecycle.list_payments(patient_user)
        everything = await lifecycle.list_payments(receptionist_user)
        filtered = await lifecycle.list_payments(receptionist_user, [other_appointment.id])

        assert set(own) == {scheduled_appointment.id}
        assert set(everything) == {scheduled_appointment.id, other_appointment.id}
        assert set(filtered) == {other_appointment.id}

    async def test_list_for_no_appointments(self, db_session: AsyncSession) -> None:
        assert await PaymentRepository(db_session).list_for_appointments([]) == []


@pytest.mark.payments
@pytest.mark.integration
@pytest.mark.asyncio
class TestPaymentsAPI:
    """Payment endpoints."""

    async def test_record_payment(
        self,
        client: AsyncClient,
        scheduled_appointment: Appointment,
        receptionist_headers
    ) -> None:
        response = await client.put(
            f"/api/v1/appointments/{scheduled_appointment.id}/payment",
            headers=receptionist_headers,
            json={"payment_status": "Completed", "amount_paid": "150.00", "payment_method": "Credit Card"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["payment_status"] == "Completed"
        assert data["payment_method"] == "Credit Card"
        assert data["amount_paid"] == 150.0
        assert data["appointment_id"] == str(scheduled_appointment.id)

    async def test_negative_amount_rejected(
        self,
        client: AsyncClient,
        scheduled_appointment: Appointment,
        receptionist_headers
    ) -> None:
        response = await client.put(
            f"/api/v1/appointments/{scheduled_appointment.id}/payment",
            headers=receptionist_headers,
            json={"payment_status": "Completed", "amount_paid": -5, "payment_method": "Cash"}
        )

        assert response.status_code == 422

    async def test_patient_cannot_record_payment(
        self,
        client: AsyncClient,
        scheduled_appointment: Appointment,
        patient_headers
    ) -> None:
        response = await client.put(
            f"/api/v1/appointments/{scheduled_appointment.id}/payment",
            headers=patient_headers,
            json={"payment_status": "Completed", "amount_paid": 10, "payment_method": "Cash"}
        )

        assert response.status_code == 403

    async def test_doctor_cannot_view_payments(self, client: AsyncClient, doctor_headers) -> None:
        response = await client.get("/api/v1/appointments/payments", headers=doctor_headers)

        assert response.status_code == 403

    async def test_patient_views_own_payments(
        self,
        client: AsyncClient,
        scheduled_appointment: Appointment,
        patient_headers,
        receptionist_headers
    ) -> None:
        await client.patch(
            f"/api/v1/appointments/{scheduled_appointment.id}/status",
            headers=receptionist_headers,
            json={"status": "completed"}
        )

        response = await client.get(
            "/api/v1/appointments/payments",
            headers=patient_headers,
            params={"appointment_id": str(scheduled_appointment.id)}
        )

        assert response.status_code == 200
        assert list(response.json()) == [str(scheduled_appointment.id)]
