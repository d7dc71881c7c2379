import uuid
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from clinic.core.exceptions import AuthenticationError
from clinic.core.permissions import Action, authorize
from clinic.core.security import verify_token
from clinic.domain.accounts.models import User
from clinic.domain.accounts.repository import UserRepository
from clinic.infrastructure.database import get_db

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)
) -> User:
    if credentials is None:
        raise AuthenticationError(message="Authentication required")

    payload = verify_token(credentials.credentials, "access")
    if not payload:
        raise AuthenticationError(message="Invalid or expired token")

    try:
        user_id = uuid.UUID(payload.get("sub", ""))
    except ValueError:
        raise AuthenticationError(message="Invalid or expired token")

    user = await UserRepository(db).get_by_id(user_id)
    if not user:
        raise AuthenticationError(message="User no longer exists")
    return user


def require_action(action: Action):
    """Dependency that resolves the caller and checks the authorization policy once"""
    async def action_checker(current_user: User = Depends(get_current_user)) -> User:
        authorize(current_user.role, action)
        return current_user

    return action_checker
