"""Authentication endpoints used by the dashboard frontend."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr

from app.core.config import settings
from app.core.logging import auth_logger
from app.core.security import AccessClaims, create_access_token, get_current_access
from app.domain.users import DemoUser, get_demo_user_by_email, get_demo_user_by_id


router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserOut(BaseModel):
    id: str
    email: EmailStr
    name: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int
    user: UserOut


def _ensure_credentials(email: str, password: str) -> DemoUser:
    user = get_demo_user_by_email(email)
    if not user or not user.check_password(password):
        auth_logger.warning("Login failed", email=email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials.",
        )
    return user


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest) -> LoginResponse:
    user = _ensure_credentials(payload.email, payload.password)
    auth_logger.info("Login succeeded", user_id=user.id)

    return LoginResponse(
        access_token=create_access_token(user_id=user.id),
        expires_in=settings.ACCESS_TOKEN_MINUTES * 60,
        user=UserOut(id=user.id, email=user.email, name=user.name),
    )


@router.get("/me", response_model=UserOut)
def me(claims: AccessClaims = Depends(get_current_access)) -> UserOut:
    user = get_demo_user_by_id(claims.sub)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return UserOut(id=user.id, email=user.email, name=user.name)
