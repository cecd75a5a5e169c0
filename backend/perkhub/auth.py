"""
PerkHub — Bearer Token Authentication
=======================================

What:  FastAPI dependency guarding the authenticated perk routes.
How:   Reads `Authorization: Bearer <token>` with fastapi.security.HTTPBearer
       and resolves the token against users.api_token.
Who:   Injected into every /api/perks route except GET /api/perks/all.

A missing header, a non-bearer scheme and an unknown token all raise
AuthenticationError, which main.py turns into 401 with
`WWW-Authenticate: Bearer`.
"""

import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from perkhub.database import get_db_session
from perkhub.exceptions import AuthenticationError
from perkhub.models import User

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches our own 401 handler instead of
# FastAPI's 403 default
bearer_scheme = HTTPBearer(auto_error=False)


async def require_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """Return the user owning the presented bearer token."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    result = await db.execute(select(User).where(User.api_token == credentials.credentials))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("Rejected request with unknown API token")
        raise AuthenticationError(message="Invalid or expired token")
    return user
