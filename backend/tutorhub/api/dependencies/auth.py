# backend/tutorhub/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Access tokens are issued by the identity service; this package only
verifies them. A token is an HS256 JWT whose ``sub`` claim is the caller id
and whose ``role`` claim is one of tutor, student or admin.
"""

from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError

from ...core.config import settings
from ...core.enums import RoleName

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller."""

    id: str
    role: RoleName


def decode_access_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry of an access token and return its claims."""
    payload = jwt.decode(
        token,
        settings.secret_key.get_secret_value(),
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload)


def get_current_principal(token: Optional[str] = Depends(oauth2_scheme_optional)) -> Principal:
    """
    Dependency resolving the caller from the bearer token.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    not_authenticated = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise not_authenticated

    try:
        payload = decode_access_token(token)
    except PyJWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise not_authenticated

    subject = payload.get("sub")
    try:
        role = RoleName(str(payload.get("role", "")).lower())
    except ValueError:
        raise not_authenticated
    if not subject:
        raise not_authenticated

    return Principal(id=str(subject), role=role)


def require_role(*roles: RoleName) -> Callable[..., Principal]:
    """
    Dependency factory restricting a route to the given roles.

    Usage:
        principal: Principal = Depends(require_role(RoleName.TUTOR))
    """
    allowed = frozenset(roles)

    def checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {', '.join(sorted(r.value for r in allowed))}",
            )
        return principal

    return checker


require_tutor = require_role(RoleName.TUTOR)
require_student = require_role(RoleName.STUDENT)
require_admin = require_role(RoleName.ADMIN)
