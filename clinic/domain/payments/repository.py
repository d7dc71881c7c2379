"""
Payments Repository Layer

Data access for the payment ledger. Inserts go through ON CONFLICT on the
unique ``appointment_id`` so concurrent writers can never create a second
payment for the same appointment. Nothing here commits.
"""

from typing import Optional, List, Iterable
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from clinic.infrastructure.database import dialect_insert
from clinic.domain.accounts.models import utcnow
from clinic.domain.payments.models import Payment


class PaymentRepository:
    """Repository for payment data access operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_appointment(self, appointment_id: uuid.UUID) -> Optional[Payment]:
        """Get the payment recorded for an appointment, if any"""
        result = await self.db.execute(
            select(Payment)
            .where(Payment.appointment_id == appointment_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_for_appointments(self, appointment_ids: Iterable[uuid.UUID]) -> List[Payment]:
        """Get payments for a set of appointments"""
        appointment_ids = list(appointment_ids)
        if not appointment_ids:
            return []
        result = await self.db.execute(
            select(Payment)
            .where(Payment.appointment_id.in_(appointment_ids))
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def insert_if_absent(self, payment_data: dict) -> bool:
        """Insert a payment unless the appointment already has one.

        Returns True when a row was inserted.
        """
        stmt = dialect_insert(self.db, Payment.__table__).values(**payment_data)
        stmt = stmt.on_conflict_do_nothing(index_elements=["appointment_id"])
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def upsert(self, payment_data: dict, update_fields: List[str]) -> Payment:
        """Insert a payment, or overwrite ``update_fields`` on the existing one"""
        stmt = dialect_insert(self.db, Payment.__table__).values(**payment_data)
        set_ = {field: getattr(stmt.excluded, field) for field in update_fields}
        set_["updated_at"] = utcnow()
        stmt = stmt.on_conflict_do_update(index_elements=["appointment_id"], set_=set_)
        await self.db.execute(stmt)
        return await self.get_by_appointment(payment_data["appointment_id"])
