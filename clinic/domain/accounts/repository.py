"""
Accounts Repository Layer

Provides data access operations for users and their patient/doctor profiles.
Writes are flushed, not committed; the calling service owns the transaction.
"""

from typing import Optional, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import uuid

from clinic.domain.accounts.models import User, Patient, Doctor


class UserRepository:
    """Repository for user data access operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, user_data: dict) -> User:
        """Stage a new user and assign its primary key"""
        user = User(**user_data)
        self.db.add(user)
        await self.db.flush()
        return user

    async def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        """Get user by ID"""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class ProfileRepository:
    """Repository for patient and doctor profiles"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_patient(self, patient_data: dict) -> Patient:
        patient = Patient(**patient_data)
        self.db.add(patient)
        await self.db.flush()
        return patient

    async def add_doctor(self, doctor_data: dict) -> Doctor:
        doctor = Doctor(**doctor_data)
        self.db.add(doctor)
        await self.db.flush()
        return doctor

    async def get_patient(self, patient_id: uuid.UUID) -> Optional[Patient]:
        result = await self.db.execute(select(Patient).where(Patient.id == patient_id))
        return result.scalar_one_or_none()

    async def get_doctor(self, doctor_id: uuid.UUID) -> Optional[Doctor]:
        result = await self.db.execute(select(Doctor).where(Doctor.id == doctor_id))
        return result.scalar_one_or_none()

    async def get_patient_by_user_id(self, user_id: uuid.UUID) -> Optional[Patient]:
        result = await self.db.execute(select(Patient).where(Patient.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_doctor_by_user_id(self, user_id: uuid.UUID) -> Optional[Doctor]:
        result = await self.db.execute(select(Doctor).where(Doctor.user_id == user_id))
        return result.scalar_one_or_none()

    async def list_patients(self) -> List[Patient]:
        """All patients ordered by name"""
        result = await self.db.execute(select(Patient).order_by(Patient.full_name))
        return list(result.scalars().all())

    async def list_doctors(self) -> List[Doctor]:
        """All doctors ordered by name"""
        result = await self.db.execute(select(Doctor).order_by(Doctor.full_name))
        return list(result.scalars().all())
