from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.api.deps import require_action
from clinic.api.v1.profiles.schemas import DoctorSummary, PatientSummary
from clinic.core.permissions import Action
from clinic.domain.accounts.models import User
from clinic.domain.accounts.service import AccountService
from clinic.infrastructure.database import get_db

router = APIRouter()


@router.get("/doctors", response_model=List[DoctorSummary])
async def list_doctors(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_DOCTORS))
):
    """Doctors available for booking"""
    return await AccountService(db).list_doctors()


@router.get("/patients", response_model=List[PatientSummary])
async def list_patients(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.LIST_PATIENTS))
):
    """Patients the front desk can book for"""
    return await AccountService(db).list_patients()
