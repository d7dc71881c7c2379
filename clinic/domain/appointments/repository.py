"""
Appointments Repository Layer

Provides data access operations for appointments. Writes are flushed, not
committed; the calling service owns the transaction.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from sqlalchemy.orm import joinedload
import uuid

from clinic.domain.accounts.models import utcnow
from clinic.domain.appointments.models import Appointment, AppointmentStatus


class AppointmentRepository:
    """Repository for appointment data access operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _filtered(
        self,
        query,
        patient_id: Optional[uuid.UUID] = None,
        doctor_id: Optional[uuid.UUID] = None,
        status: Optional[AppointmentStatus] = None
    ):
        if patient_id:
            query = query.where(Appointment.patient_id == patient_id)
        if doctor_id:
            query = query.where(Appointment.doctor_id == doctor_id)
        if status:
            query = query.where(Appointment.status == status)
        return query

    async def add(self, appointment_data: dict) -> Appointment:
        """Stage a new appointment and assign its primary key"""
        appointment = Appointment(**appointment_data)
        self.db.add(appointment)
        await self.db.flush()
        return appointment

    async def get_by_id(self, appointment_id: uuid.UUID) -> Optional[Appointment]:
        """Get appointment by ID with patient and doctor"""
        result = await self.db.execute(
            select(Appointment)
            .options(
                joinedload(Appointment.patient),
                joinedload(Appointment.doctor)
            )
            .where(Appointment.id == appointment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_all(
        self,
        patient_id: Optional[uuid.UUID] = None,
        doctor_id: Optional[uuid.UUID] = None,
        status: Optional[AppointmentStatus] = None
    ) -> List[Appointment]:
        """Get appointments with filtering, earliest first"""
        query = select(Appointment).options(
            joinedload(Appointment.patient),
            joinedload(Appointment.doctor)
        )
        query = self._filtered(query, patient_id, doctor_id, status)
        result = await self.db.execute(
            query.order_by(
                Appointment.appointment_date,
                Appointment.appointment_time
            ).execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def get_ids(
        self,
        patient_id: Optional[uuid.UUID] = None,
        doctor_id: Optional[uuid.UUID] = None
    ) -> List[uuid.UUID]:
        """Get the IDs of matching appointments"""
        query = self._filtered(select(Appointment.id), patient_id, doctor_id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count(
        self,
        patient_id: Optional[uuid.UUID] = None,
        doctor_id: Optional[uuid.UUID] = None,
        status: Optional[AppointmentStatus] = None
    ) -> int:
        """Count appointments with filters"""
        query = self._filtered(select(func.count(Appointment.id)), patient_id, doctor_id, status)
        result = await self.db.execute(query)
        return result.scalar_one()

    async def set_status(self, appointment_id: uuid.UUID, status: AppointmentStatus) -> bool:
        """Write a new status; returns False if the appointment does not exist"""
        result = await self.db.execute(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .values(status=status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0
