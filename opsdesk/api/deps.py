from typing import Generator

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from opsdesk.db.session import SessionLocal
from opsdesk.core.errors import UnauthenticatedError
from opsdesk.core.rbac import Principal
from opsdesk.core.security import decode_principal

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_db() -> Generator:
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_principal(token: str = Depends(oauth2_scheme)) -> Principal:
    """Get the authenticated principal from the bearer token."""
    if token:
        principal = decode_principal(token)
        if principal is not None:
            return principal

    raise UnauthenticatedError("Could not validate credentials")
