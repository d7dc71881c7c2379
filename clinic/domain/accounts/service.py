"""
Accounts Service Layer

Registration, authentication and role-conditional profile lookup.
"""

from typing import Optional, List, Dict, Any
from datetime import date
import secrets

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.core.exceptions import AuthenticationError, ConflictError, NotFoundError
from clinic.core.security import create_access_token, get_password_hash
from clinic.domain.accounts.models import User, UserRole, Patient, Doctor, Gender
from clinic.domain.accounts.repository import UserRepository, ProfileRepository

NOT_PROVIDED = "Not provided"


def temporary_license_number() -> str:
    """Placeholder license number for doctors who registered without one"""
    return f"TMP{secrets.token_hex(4).upper()}"


class AccountService:
    """Service layer for user accounts and profiles"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)
        self.profile_repo = ProfileRepository(db)

    async def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: UserRole,
        date_of_birth: Optional[date] = None,
        gender: Optional[Gender] = None,
        contact_number: Optional[str] = None,
        address: Optional[str] = None,
        medical_history: Optional[str] = None,
        specialization: Optional[str] = None,
        license_number: Optional[str] = None
    ) -> User:
        """
        Create a user and, for patients and doctors, its profile.

        Both rows are written in one transaction. If the profile cannot be
        stored the user row is rolled back with it, so a failed registration
        never leaves an account without its profile.
        """
        if await self.user_repo.get_by_email(email):
            raise ConflictError(message="Email already registered")

        try:
            user = await self.user_repo.add({
                "email": email,
                "password_hash": get_password_hash(password),
                "full_name": full_name,
                "role": role
            })

            if role == UserRole.PATIENT:
                await self.profile_repo.add_patient({
                    "user_id": user.id,
                    "full_name": full_name,
                    "date_of_birth": date_of_birth or date.today(),
                    "gender": gender or Gender.OTHER,
                    "contact_number": contact_number or NOT_PROVIDED,
                    "address": address or NOT_PROVIDED,
                    "medical_history": medical_history
                })
            elif role == UserRole.DOCTOR:
                await self.profile_repo.add_doctor({
                    "user_id": user.id,
                    "full_name": full_name,
                    "specialization": specialization or NOT_PROVIDED,
                    "license_number": license_number or temporary_license_number()
                })

            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(f"Registration of {email} rolled back: {e.orig}")
            raise ConflictError(
                message="Account could not be created",
                details={"original_error": str(e.orig)}
            ) from e

        logger.info(f"Registered {role.value} account {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        """Check credentials and issue a bearer access token"""
        user = await self.user_repo.get_by_email(email)
        if not user or not user.verify_password(password):
            raise AuthenticationError(message="Invalid email or password")

        access_token = create_access_token(str(user.id), {
            "email": user.email,
            "role": user.role.value
        })
        return {"access_token": access_token, "token_type": "bearer"}

    async def get_patient_profile(self, user: User) -> Patient:
        patient = await self.profile_repo.get_patient_by_user_id(user.id)
        if not patient:
            raise NotFoundError(message="Patient profile not found")
        return patient

    async def get_doctor_profile(self, user: User) -> Doctor:
        doctor = await self.profile_repo.get_doctor_by_user_id(user.id)
        if not doctor:
            raise NotFoundError(message="Doctor profile not found")
        return doctor

    async def get_profile(self, user: User) -> Dict[str, Any]:
        """Return the user with its patient or doctor profile, depending on role"""
        profile = {"user": user, "patient": None, "doctor": None}
        if user.role == UserRole.PATIENT:
            profile["patient"] = await self.get_patient_profile(user)
        elif user.role == UserRole.DOCTOR:
            profile["doctor"] = await self.get_doctor_profile(user)
        return profile

    async def list_doctors(self) -> List[Doctor]:
        return await self.profile_repo.list_doctors()

    async def list_patients(self) -> List[Patient]:
        return await self.profile_repo.list_patients()
