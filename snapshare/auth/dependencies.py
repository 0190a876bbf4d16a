# snapshare/auth/dependencies.py
from typing import Any, Dict, Optional
import logging

import jwt
from fastapi import Depends, Header, Request

from snapshare.auth.security import decode_access_token
from snapshare.core.exceptions import ForbiddenError, UnauthorizedError, UserNotFoundError
from snapshare.users.repository import UserRepository, get_user_repository

logger = logging.getLogger(__name__)

async def current_user(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    repo: UserRepository = Depends(get_user_repository),
) -> Dict[str, Any]:
    """Resolve the bearer token to a user and attach it to the request"""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError()

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise UnauthorizedError()

    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info(f"Rejected token: {e}")
        raise UnauthorizedError()

    user = await repo.get_by_id(payload.get("sub"))
    if not user:
        raise UserNotFoundError()

    request.state.user = user
    return user

def ensure_acting_user(user: Dict[str, Any], acting_user_id: str) -> None:
    """Only the token's owner may act as `acting_user_id`"""
    if user["_id"] != acting_user_id:
        raise ForbiddenError()
