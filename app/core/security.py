from typing import Callable, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError

from app.models.user import Role
from app.schemas.auth import TokenPayload
from app.services.auth_service import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def is_authorized(claims: Optional[TokenPayload], required_role: Optional[Role] = None) -> bool:
    """Allow/deny decision for already-validated token claims."""
    if claims is None:
        return False
    if required_role is None:
        return True
    return claims.role == required_role


def get_current_claims(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> TokenPayload:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token provided", headers={"WWW-Authenticate": "Bearer"})
    try:
        return TokenPayload(**decode_access_token(credentials.credentials))
    except (jwt.PyJWTError, PydanticValidationError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token", headers={"WWW-Authenticate": "Bearer"}) from exc


def require_role(role: Role) -> Callable:
    def role_checker(claims: TokenPayload = Depends(get_current_claims)) -> TokenPayload:
        if not is_authorized(claims, role):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Operation not permitted")
        return claims

    return role_checker
