from typing import AsyncGenerator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio.session import AsyncSession

from ..db.database import async_session

# only documents the bearer scheme, the token itself is verified by the middleware
security = HTTPBearer(auto_error=False)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session() as session:
        yield session


async def get_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[dict]:
    # claims of the verified token, set by the middleware; None for anonymous requests
    return getattr(request.state, "user", None)

