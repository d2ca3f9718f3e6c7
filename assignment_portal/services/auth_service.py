from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import ValidationError

from assignment_portal.core.config import settings
from assignment_portal.core.errors import Unauthenticated
from assignment_portal.schemas.context import UserContext

bearer_scheme = HTTPBearer(auto_error=False)

credentials_exception = HTTPException(
    status_code=Unauthenticated.status_code,
    detail=Unauthenticated().to_dict(),
    headers={"WWW-Authenticate": "Bearer"},
)


class AuthService:
    """
    Confine di autenticazione: il token è emesso altrove, qui viene solo
    verificato e tradotto in un UserContext (id + ruolo).
    """

    @staticmethod
    def decode_token(token: str) -> UserContext:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
        user_id = payload.get("id") or payload.get("sub")
        if not user_id:
            raise JWTError("Token senza identità")
        return UserContext(user_id=str(user_id), role=payload.get("role"))

    @staticmethod
    def get_current_user(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> UserContext:
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise credentials_exception
        try:
            return AuthService.decode_token(credentials.credentials)
        except (JWTError, ValidationError):
            raise credentials_exception
