# snapshare/users/service.py
from typing import Any, Dict, List, Optional
import logging

from snapshare.core.config import settings
from snapshare.core.exceptions import UserNotFoundError
from snapshare.users.documents import USER_PROJECTION
from snapshare.users.repository import UserRepository

logger = logging.getLogger(__name__)

async def list_users(repo: UserRepository, username: Optional[str] = None) -> List[Dict[str, Any]]:
    """All users, or those whose username matches exactly"""
    query: Dict[str, Any] = {}
    if username:
        query["username"] = username
    return await repo.find_users(query, USER_PROJECTION)

async def suggest_users(repo: UserRepository, username: str) -> List[Dict[str, Any]]:
    """Autocomplete usernames; only the username field is returned"""
    suggestions = await repo.suggest_usernames(username, settings.USER_SUGGESTION_LIMIT)
    logger.debug(f"{len(suggestions)} suggestions for '{username}'")
    return suggestions

async def get_user(repo: UserRepository, user_id: str) -> Dict[str, Any]:
    user = await repo.get_by_id(user_id, USER_PROJECTION)
    if not user:
        raise UserNotFoundError("User not found")
    return user
