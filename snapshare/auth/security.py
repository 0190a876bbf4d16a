# snapshare/auth/security.py
import hashlib
import secrets
from typing import Any, Dict, Optional, Tuple

from fastapi_users.jwt import decode_jwt, generate_jwt
from fastapi_users.password import PasswordHelper

from snapshare.core.config import settings

JWT_ALGORITHM = "HS256"

password_helper = PasswordHelper()

def hash_password(password: str) -> str:
    return password_helper.hash(password)

def verify_password(password: str, hashed: str) -> Tuple[bool, Optional[str]]:
    """Returns (verified, new_hash); new_hash is set when the stored hash should be upgraded"""
    return password_helper.verify_and_update(password, hashed)

def create_access_token(user_id: str) -> str:
    return generate_jwt(
        {"sub": user_id, "aud": [settings.JWT_AUDIENCE]},
        settings.JWT_SECRET,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        algorithm=JWT_ALGORITHM,
    )

def decode_access_token(token: str) -> Dict[str, Any]:
    """Raises jwt.PyJWTError if the token is invalid or expired"""
    return decode_jwt(
        token,
        settings.JWT_SECRET,
        audience=[settings.JWT_AUDIENCE],
        algorithms=[JWT_ALGORITHM],
    )

def generate_reset_token() -> Tuple[str, str]:
    """Returns (raw token for the user, sha256 hex to store)"""
    raw = secrets.token_hex(20)
    return raw, hash_reset_token(raw)

def hash_reset_token(raw: str) -> str:
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()
