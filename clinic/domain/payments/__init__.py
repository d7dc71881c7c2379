# Payments domain module
from clinic.domain.payments.models import (
    Payment,
    PaymentMethod,
    PaymentStatus,
)

__all__ = [
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
]
