# snapshare/auth/router.py
import logging

from fastapi import APIRouter, Depends
from pymongo.errors import PyMongoError

from snapshare.auth import errors, service
from snapshare.auth.schemas import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    ResetPasswordResponse,
    TokenResponse,
)
from snapshare.core.exceptions import DatabaseError
from snapshare.users.repository import UserRepository, get_user_repository
from snapshare.users.schemas import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["auth"])

@router.post("/register", response_model=TokenResponse)
async def register(
    data: RegisterRequest,
    repo: UserRepository = Depends(get_user_repository)
):
    """Create an account and sign it in"""
    try:
        return {"token": await service.register_user(repo, data)}
    except PyMongoError as e:
        logger.error(f"Error registering {data.username}: {e}")
        raise DatabaseError("Error registering user", error=str(e), err_code=errors.AUTH001)

@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    repo: UserRepository = Depends(get_user_repository)
):
    """Sign in with a username or email"""
    try:
        return {"token": await service.login_user(repo, data)}
    except PyMongoError as e:
        logger.error(f"Error logging in {data.username_or_email}: {e}")
        raise DatabaseError("Error logging in", error=str(e), err_code=errors.AUTH002)

@router.post("/forgot-password", response_model=MessageResponse)
async def forgot_password(
    data: ForgotPasswordRequest,
    repo: UserRepository = Depends(get_user_repository)
):
    try:
        return {"message": await service.forgot_password(repo, data.email)}
    except PyMongoError as e:
        logger.error(f"Error issuing reset token: {e}")
        raise DatabaseError("Error issuing password reset", error=str(e), err_code=errors.AUTH003)

@router.put("/reset-password/{reset_token}", response_model=ResetPasswordResponse)
async def reset_password(
    reset_token: str,
    data: ResetPasswordRequest,
    repo: UserRepository = Depends(get_user_repository)
):
    try:
        token = await service.reset_password(repo, reset_token, data.password)
    except PyMongoError as e:
        logger.error(f"Error resetting password: {e}")
        raise DatabaseError("Error resetting password", error=str(e), err_code=errors.AUTH004)
    return {"message": "Password reset successful", "token": token}
