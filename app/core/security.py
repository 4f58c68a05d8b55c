from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from jose import JWTError, jwt
from app.core.config import settings
import logging
import uuid

logger = logging.getLogger("app.audit")


def create_access_token(data: dict) -> Tuple[str, str, datetime]:
    """create access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    jti = str(uuid.uuid4())
    to_encode.update({"exp": expire, "token_type": "access", "jti": jti})
    token = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return token, jti, expire


def create_refresh_token(data: dict, expires_delta: Optional[timedelta] = None) -> Tuple[str, str, datetime]:
    """create refresh token"""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    jti = str(uuid.uuid4())
    to_encode.update({"exp": expire, "token_type": "refresh", "jti": jti})
    encoded_jwt = jwt.encode(to_encode, settings.REFRESH_TOKEN_SECRET_KEY, algorithm=settings.REFRESH_TOKEN_ALGORITHM)
    return encoded_jwt, jti, expire


def decode_access_token(token: str) -> Optional[str]:
    """return the subject of a valid access token, None otherwise"""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    if payload.get("token_type") != "access":
        return None
    return payload.get("sub")


def audit_log(message: str):
    logger.info(f"[AUDIT] {datetime.now(timezone.utc).isoformat()} - {message}")


def decode_refresh_token(token: str) -> Optional[str]:
    """return the subject of a valid refresh token, None otherwise"""
    try:
        payload = jwt.decode(token, settings.REFRESH_TOKEN_SECRET_KEY, algorithms=[settings.REFRESH_TOKEN_ALGORITHM])
    except JWTError:
        return None
    if payload.get("token_type") != "refresh":
        return None
    return payload.get("sub")
