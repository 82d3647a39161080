from datetime import datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from opsdesk.core.config import get_settings
from opsdesk.core.logger import get_logger
from opsdesk.core.rbac import Principal, UserRole

settings = get_settings()
logger = get_logger(__name__)


def create_access_token(principal: Principal, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT carrying the principal's id, role and department."""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode = {
        "sub": str(principal.id),
        "role": principal.role.value,
        "department_id": principal.department_id,
        "department_name": principal.department_name,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_principal(token: str) -> Optional[Principal]:
    """Decode and validate a JWT. Returns the principal if valid."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None

    user_id = payload.get("sub")
    role = payload.get("role")
    if user_id is None or role is None:
        return None

    try:
        return Principal(
            id=int(user_id),
            role=UserRole(role),
            department_id=payload.get("department_id"),
            department_name=payload.get("department_name"),
        )
    except ValueError:
        logger.warning("Rejected token with malformed claims (sub=%r, role=%r)", user_id, role)
        return None
