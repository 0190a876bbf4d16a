# snapshare/auth/service.py
from datetime import datetime, timedelta, timezone
from typing import Dict, List
import logging

from fastapi import status
from pymongo.errors import DuplicateKeyError

from snapshare.auth import security
from snapshare.auth.schemas import LoginRequest, RegisterRequest
from snapshare.core.config import settings
from snapshare.core.exceptions import APIError, UserNotFoundError
from snapshare.users.repository import UserRepository

logger = logging.getLogger(__name__)


class DuplicateUserError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "User already exists"


class InvalidCredentialsError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid credentials"


class InvalidResetTokenError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid or expired reset token"


async def register_user(repo: UserRepository, data: RegisterRequest) -> str:
    """Create a user and return an access token for it"""
    email = data.email.lower()
    errors: List[Dict[str, str]] = []
    if await repo.username_exists(data.username):
        errors.append({"field": "username", "msg": "Username is already taken"})
    if await repo.email_exists(email):
        errors.append({"field": "email", "msg": "Email is already registered"})
    if errors:
        raise DuplicateUserError(errors=errors)

    now = datetime.now(timezone.utc)
    try:
        user_id = await repo.create_user({
            "username": data.username,
            "email": email,
            "password": security.hash_password(data.password),
            "images": [],
            "followers": [],
            "following": [],
            "created_at": now,
            "updated_at": now,
        })
    except DuplicateKeyError:
        # Lost a race against a concurrent registration
        raise DuplicateUserError(errors=[{"field": "username", "msg": "Username or email is already taken"}])

    logger.info(f"Registered user {data.username} ({user_id})")
    return security.create_access_token(user_id)


async def login_user(repo: UserRepository, data: LoginRequest) -> str:
    user = await repo.get_by_username_or_email(data.username_or_email)
    if not user:
        raise InvalidCredentialsError(errors=[{"field": "usernameOrEmail", "msg": "Unknown username or email"}])

    verified, updated_hash = security.verify_password(data.password, user["password"])
    if not verified:
        logger.info(f"Failed login for {data.username_or_email}")
        raise InvalidCredentialsError(errors=[{"field": "password", "msg": "Incorrect password"}])

    if updated_hash is not None:
        await repo.update_password(user["_id"], updated_hash)

    return security.create_access_token(user["_id"])


async def forgot_password(repo: UserRepository, email: str) -> str:
    """
    Issue a reset token for the account behind `email`.

    Only the sha256 of the token is stored. The raw token is handed to the
    mail pipeline through the log; delivery happens outside this service.
    """
    user = await repo.get_by_email(email)
    if not user:
        raise UserNotFoundError("No account registered with this email")

    raw, token_hash = security.generate_reset_token()
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    await repo.set_reset_token(user["_id"], token_hash, expires_at)

    reset_url = f"{settings.FRONTEND_URL}/passwordreset/{raw}"
    logger.info(f"Password reset requested for user {user['_id']}: {reset_url}")
    return "Password reset email sent"


async def reset_password(repo: UserRepository, reset_token: str, password: str) -> str:
    """Set a new password using a reset token; returns a fresh access token"""
    user = await repo.get_by_reset_token(security.hash_reset_token(reset_token), datetime.now(timezone.utc))
    if not user:
        raise InvalidResetTokenError()

    await repo.update_password(user["_id"], security.hash_password(password), clear_reset_token=True)
    logger.info(f"Password reset for user {user['_id']}")
    return security.create_access_token(user["_id"])
