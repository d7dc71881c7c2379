import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-clinic-suite")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from datetime import date, time, timedelta
from typing import AsyncGenerator, Dict
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import clinic.models  # noqa: F401
from clinic.main import app
from clinic.infrastructure.database import get_db, Base
from clinic.core.security import create_access_token
from clinic.domain.accounts.models import User, UserRole
from clinic.domain.accounts.service import AccountService
from clinic.domain.appointments.models import Appointment
from clinic.domain.appointments.service import AppointmentService


# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
async def engine():
    """In-memory database shared by every connection of one test."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test."""
    TestSessionLocal = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    async with TestSessionLocal() as session:
        yield session


@pytest.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database dependency override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _register(db_session: AsyncSession, email: str, full_name: str, role: UserRole, **profile) -> User:
    return await AccountService(db_session).register(
        email=email,
        password=TEST_PASSWORD,
        full_name=full_name,
        role=role,
        **profile
    )


@pytest.fixture(scope="function")
async def patient_user(db_session: AsyncSession) -> User:
    """Patient account with its profile."""
    return await _register(
        db_session, "jane.patient@northclinic.com", "Jane Patient", UserRole.PATIENT,
        date_of_birth=date(1990, 1, 1), contact_number="+1234567890", address="12 Elm Street"
    )


@pytest.fixture(scope="function")
async def other_patient_user(db_session: AsyncSession) -> User:
    return await _register(db_session, "omar.patient@northclinic.com", "Omar Patient", UserRole.PATIENT)


@pytest.fixture(scope="function")
async def doctor_user(db_session: AsyncSession) -> User:
    """Doctor account with its profile."""
    return await _register(
        db_session, "dr.house@northclinic.com", "Gregory House", UserRole.DOCTOR,
        specialization="Diagnostics", license_number="LIC-1001"
    )


@pytest.fixture(scope="function")
async def other_doctor_user(db_session: AsyncSession) -> User:
    return await _register(
        db_session, "dr.grey@northclinic.com", "Meredith Grey", UserRole.DOCTOR,
        specialization="Surgery", license_number="LIC-2002"
    )


@pytest.fixture(scope="function")
async def receptionist_user(db_session: AsyncSession) -> User:
    return await _register(db_session, "desk@northclinic.com", "Front Desk", UserRole.RECEPTIONIST)


@pytest.fixture(scope="function")
async def admin_user(db_session: AsyncSession) -> User:
    return await _register(db_session, "admin@northclinic.com", "Clinic Admin", UserRole.ADMIN)


def auth_headers(user: User) -> Dict[str, str]:
    """Bearer header for ``user``."""
    token = create_access_token(str(user.id), {"email": user.email, "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def headers_for():
    """Factory for bearer headers of arbitrary users."""
    return auth_headers


@pytest.fixture(scope="function")
def patient_headers(patient_user: User) -> Dict[str, str]:
    return auth_headers(patient_user)


@pytest.fixture(scope="function")
def doctor_headers(doctor_user: User) -> Dict[str, str]:
    return auth_headers(doctor_user)


@pytest.fixture(scope="function")
def receptionist_headers(receptionist_user: User) -> Dict[str, str]:
    return auth_headers(receptionist_user)


@pytest.fixture(scope="function")
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture(scope="function")
async def scheduled_appointment(
    db_session: AsyncSession,
    patient_user: User,
    doctor_user: User,
    receptionist_user: User
) -> Appointment:
    """A scheduled appointment for the patient with the doctor, booked by the front desk."""
    service = AppointmentService(db_session)
    patient = await service.account_service.get_patient_profile(patient_user)
    doctor = await service.account_service.get_doctor_profile(doctor_user)
    return await service.book_appointment(
        booked_by=receptionist_user,
        doctor_id=doctor.id,
        patient_id=patient.id,
        appointment_date=date.today() + timedelta(days=3),
        appointment_time=time(10, 30),
        reason="Persistent cough"
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without HTTP")
    config.addinivalue_line("markers", "integration: tests through the HTTP API")
    config.addinivalue_line("markers", "auth: registration, login and tokens")
    config.addinivalue_line("markers", "appointments: booking and the status lifecycle")
    config.addinivalue_line("markers", "payments: the payment ledger")
