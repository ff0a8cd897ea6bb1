from __future__ import annotations
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Literal
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError
from app.core.config import settings
from app.core.logging import auth_logger

# -----------------------------------------------------------------------------
# 1) Password hashing
# -----------------------------------------------------------------------------

_pwd_ctx = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

def hash_password(plain: str) -> str:
    return _pwd_ctx.hash(plain)

def verify_password(plain: str, hashed: str) -> bool:
    return _pwd_ctx.verify(plain, hashed)

# -----------------------------------------------------------------------------
# 2) Token claims
# -----------------------------------------------------------------------------

tokenType = Literal["access"]

class AccessClaims(BaseModel):
    sub: str
    type: tokenType
    exp: int

# -----------------------------------------------------------------------------
# 3) JWT encode/decode
# -----------------------------------------------------------------------------

_ALG = settings.JWT_ALGORITHM
bearer_scheme = HTTPBearer(auto_error=True)

def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)

def _exp_in(minutes: int) -> int:
    return int((_utcnow() + timedelta(minutes=minutes)).timestamp())

def _encode(payload: Dict[str, Any], secret: str) -> str:
    return jwt.encode(payload, secret, algorithm=_ALG)

def _decode(token: str, secret: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, secret, algorithms=[_ALG])
    except JWTError:
        auth_logger.warning("Rejected bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token.",
        )

# -----------------------------------------------------------------------------
# 4) Issuing and validating access tokens
# -----------------------------------------------------------------------------

def create_access_token(*, user_id: str) -> str:
    claims = AccessClaims(
        sub=user_id,
        type="access",
        exp=_exp_in(settings.ACCESS_TOKEN_MINUTES),
    )
    return _encode(claims.model_dump(), settings.JWT_SECRET)

def decode_access_token(token: str) -> AccessClaims:
    data = _decode(token, settings.JWT_SECRET)
    try:
        return AccessClaims(**data)
    except ValidationError:
        raise HTTPException(status_code=401, detail="Invalid access token.")

# -----------------------------------------------------------------------------
# 5) FastAPI dependency: every sales endpoint only needs an authenticated caller
# -----------------------------------------------------------------------------

def get_current_access(creds: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> AccessClaims:
    return decode_access_token(creds.credentials)
