"""
Identity provider session verification
The provider signs a JWT for the signed-in learner; the backend trusts its claims as given.
"""

from typing import List, Optional

from fastapi import Depends, Header
from jose import JWTError, jwt

from inspira import config
from inspira.errors import AuthorizationError, ForbiddenError, InspiraError


class Identity:
    """
    Contains the verified claims of the current session
    """
    def __init__(self, claims: dict):
        self.user_id = claims.get("sub")
        self.full_name = claims.get("name")
        self.email = claims.get("email")
        self.image_url = claims.get("picture")
        self.roles = _roles_from_claims(claims)
        self.claims = claims

    @property
    def is_admin(self) -> bool:
        return config.ADMIN_ROLE in self.roles


def _roles_from_claims(claims: dict) -> List[str]:
    roles = claims.get("roles") or []
    if isinstance(roles, str):
        roles = [roles]
    role = claims.get("role")
    if role:
        roles = [*roles, role]
    return list(roles)


def decode_token(token: str) -> dict:
    if not config.JWT_SECRET_KEY:
        raise InspiraError("Authentication system not initialized")

    options = {"verify_aud": bool(config.JWT_AUDIENCE)}
    try:
        return jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_AUDIENCE,
            options=options,
        )
    except JWTError:
        raise AuthorizationError("Invalid or Expired Token")


def verify_session_token(authorization: Optional[str] = Header(None)) -> dict:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthorizationError("Unauthorized")

    token = authorization.split(" ", 1)[1].strip()
    return decode_token(token)


async def get_current_identity(claims: dict = Depends(verify_session_token)) -> Identity:
    """
    Dependency: returns the learner identity for the current session

    Raises:
        401: Token missing, invalid, or without a subject
    """
    identity = Identity(claims)
    if not identity.user_id:
        raise AuthorizationError("Invalid token: missing subject")
    return identity


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """
    Dependency: blocks callers without the admin role claim

    Raises:
        403: Caller is not an administrator
    """
    if not identity.is_admin:
        raise ForbiddenError("Admin access required")
    return identity
