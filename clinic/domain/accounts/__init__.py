# Accounts domain module
from clinic.domain.accounts.models import (
    User,
    UserRole,
    Patient,
    Doctor,
    Gender,
)

__all__ = [
    "User",
    "UserRole",
    "Patient",
    "Doctor",
    "Gender",
]
