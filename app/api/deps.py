"""FastAPI dependencies for authentication and principal resolution."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.services.principals import Principal, resolve_principal

# auto_error=False: a missing header must produce the same 401 as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


async def get_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> Principal:
    """Resolve the bearer credential to the calling Principal.

    Unauthenticated / NotProvisioned propagate to the exception handlers
    registered in ``app.main``.
    """
    token = credentials.credentials if credentials is not None else None
    return await resolve_principal(session, token)


# Typed shorthand for use in route signatures
CurrentPrincipal = Annotated[Principal, Depends(get_principal)]
Session = Annotated[AsyncSession, Depends(get_session)]
