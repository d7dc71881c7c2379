from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.api.deps import get_current_user, require_action
from clinic.api.v1.auth.schemas import (
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    TokenResponse,
    UserCreate,
    UserResponse,
)
from clinic.core.permissions import Action
from clinic.domain.accounts.models import User
from clinic.domain.accounts.service import AccountService
from clinic.infrastructure.database import get_db

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: RegisterRequest,
    db: AsyncSession = Depends(get_db)
):
    """Register a patient or doctor account"""
    return await AccountService(db).register(**user_data.model_dump())


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(require_action(Action.CREATE_USER))
):
    """Create an account of any role (admin only)"""
    return await AccountService(db).register(**user_data.model_dump())


@router.post("/login", response_model=TokenResponse, status_code=status.HTTP_200_OK)
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
):
    """Authenticate user and return an access token"""
    return await AccountService(db).authenticate(login_data.email, login_data.password)


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Current user with its patient or doctor profile"""
    return await AccountService(db).get_profile(current_user)
