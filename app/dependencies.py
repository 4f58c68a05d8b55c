from dataclasses import dataclass
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from .database import get_db
from .core.security import decode_access_token
from . import crud, models

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionContext:
    """who is calling, resolved once per request"""
    user: Optional[models.User] = None
    is_admin: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


ANONYMOUS = SessionContext()


def get_session_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> SessionContext:
    if not credentials:
        return ANONYMOUS

    username = decode_access_token(credentials.credentials)
    if username is None:
        return ANONYMOUS  # invalid token, treat as anonymous

    user = crud.get_user_by_username(db, username=username)
    if user is None or not user.is_active:
        return ANONYMOUS

    return SessionContext(user=user, is_admin=user.is_admin)


def get_current_user(session: SessionContext = Depends(get_session_context)) -> models.User:
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session.user


def get_current_admin(
    session: SessionContext = Depends(get_session_context),
    current_user: models.User = Depends(get_current_user)
) -> models.User:
    if not session.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="The user doesn't have enough privileges")
    return current_user
