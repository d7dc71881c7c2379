"""
Payments Domain Models

One payment ledger entry per appointment; the unique constraint on
``appointment_id`` is what keeps it that way.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, Enum, Uuid, UniqueConstraint
from clinic.infrastructure.database import Base
from clinic.domain.accounts.models import enum_values, utcnow
import uuid
import enum


class PaymentMethod(str, enum.Enum):
    """Accepted payment methods"""
    CASH = "Cash"
    CREDIT_CARD = "Credit Card"
    INSURANCE = "Insurance"
    ONLINE_PAYMENT = "Online Payment"


class PaymentStatus(str, enum.Enum):
    """Payment status; any value may follow any other"""
    PENDING = "Pending"
    COMPLETED = "Completed"
    REFUNDED = "Refunded"
    FAILED = "Failed"


class Payment(Base):
    """Payment ledger entry for an appointment"""
    __tablename__ = "payments"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False
    )
    patient_id = Column(Uuid(as_uuid=True), ForeignKey("patients.id"), nullable=False, index=True)

    amount_paid = Column(Numeric(10, 2), nullable=False, default=0)
    payment_method = Column(
        Enum(PaymentMethod, name="payment_method", values_callable=enum_values),
        nullable=False,
        default=PaymentMethod.CASH
    )
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", values_callable=enum_values),
        nullable=False,
        default=PaymentStatus.PENDING
    )
    transaction_date = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    processed_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"))

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint('appointment_id', name='uq_payments_appointment_id'),
    )
