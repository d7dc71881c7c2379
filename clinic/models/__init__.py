from clinic.domain.accounts.models import User, Patient, Doctor
from clinic.domain.appointments.models import Appointment
from clinic.domain.payments.models import Payment
