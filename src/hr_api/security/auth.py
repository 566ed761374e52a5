"""Bearer token sessions."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from hr_api.config import Settings
from hr_api.database import get_db
from hr_api.exceptions import UnauthenticatedError
from hr_api.models.domain.session import SessionContext
from hr_api.models.orm.user_account import UserAccountORM
from hr_api.repositories.user_account_repository import UserAccountRepository

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """Get the settings the running application was created with."""
    return request.app.state.settings


def create_access_token(account: UserAccountORM, settings: Settings) -> str:
    """Create a JWT access token for a login account.

    Only the account ID is authoritative; role and employee link are
    re-read from the database on every request.

    Args:
        account: Login account
        settings: Application settings

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(account.id),
        "email": account.email,
        "exp": now + timedelta(hours=settings.jwt_expiration_hours),
        "iat": now,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str, settings: Settings) -> dict:
    """Decode and verify a JWT token.

    Args:
        token: JWT token string
        settings: Application settings

    Returns:
        Token payload

    Raises:
        UnauthenticatedError: If token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise UnauthenticatedError("Invalid or expired token") from e


async def get_session_context(
    db: Annotated[AsyncSession, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(HTTPBearer(auto_error=False))] = None,
) -> SessionContext:
    """Resolve the caller's session from the bearer token.

    Args:
        db: Database session
        settings: Application settings
        credentials: HTTP Bearer credentials

    Returns:
        SessionContext built from the stored account

    Raises:
        UnauthenticatedError: If the token is missing, invalid or stale
    """
    if credentials is None:
        raise UnauthenticatedError()

    payload = decode_token(credentials.credentials, settings)
    try:
        account_id = UUID(payload["sub"])
    except (KeyError, TypeError, ValueError) as e:
        raise UnauthenticatedError("Invalid or expired token") from e

    account = await UserAccountRepository(db).get_by_id(account_id)
    if account is None:
        logger.warning(f"Token presented for unknown account {account_id}")
        raise UnauthenticatedError("Invalid or expired token")

    return SessionContext(
        account_id=account.id,
        role=account.role,
        employee_id=account.employee_id,
    )
