# Appointments domain module
from clinic.domain.appointments.models import (
    Appointment,
    AppointmentStatus,
)

__all__ = [
    "Appointment",
    "AppointmentStatus",
]
