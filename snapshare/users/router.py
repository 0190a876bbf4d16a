# snapshare/users/router.py
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends, Query
from pymongo.errors import PyMongoError

from snapshare.auth.dependencies import current_user, ensure_acting_user
from snapshare.core.exceptions import DatabaseError
from snapshare.follow import service as follow_service
from snapshare.follow.schemas import UserEdit
from snapshare.users import errors, service
from snapshare.users.repository import UserRepository, get_user_repository
from snapshare.users.schemas import MessageResponse, UserListResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

@router.get("", response_model=UserListResponse)
async def get_all_users(
    username: Optional[str] = Query(default=None),
    exact: Optional[str] = Query(default=None),
    repo: UserRepository = Depends(get_user_repository)
):
    """
    List users, optionally filtered by username.

    With exact=true (or no exact parameter) the filter is an exact match and
    full public profiles are returned. Any other value of exact switches to
    autocomplete suggestions, which carry only the username.
    """
    if exact is None or exact == "true":
        try:
            users = await service.list_users(repo, username)
        except PyMongoError as e:
            logger.error(f"Error listing users: {e}")
            raise DatabaseError("Error getting all users from MongoDB", error=str(e), err_code=errors.USER001)
        return {"message": "Successfully retrieved all users", "data": users}

    if not username:
        return {"message": "No username specified", "data": []}

    try:
        suggestions = await service.suggest_users(repo, username)
    except PyMongoError as e:
        logger.error(f"Error suggesting users for '{username}': {e}")
        raise DatabaseError("Error getting suggested users from MongoDB", error=str(e), err_code=errors.USER003)
    return {"message": "Successfully retrieved suggested users from MongoDB", "data": suggestions}

@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    repo: UserRepository = Depends(get_user_repository)
):
    try:
        user = await service.get_user(repo, user_id)
    except PyMongoError as e:
        logger.error(f"Error fetching user {user_id}: {e}")
        raise DatabaseError("Error getting user from MongoDB", error=str(e), err_code=errors.USER002)
    return {"message": "Successfully retrieved user", "data": user}

@router.put("/{user_id}", response_model=MessageResponse)
async def edit_user(
    user_id: str,
    edit: UserEdit,
    user: Dict[str, Any] = Depends(current_user),
    repo: UserRepository = Depends(get_user_repository)
):
    """Follow or unfollow `user_id` on behalf of the user named in the body"""
    ensure_acting_user(user, edit.id)
    try:
        message = await follow_service.apply_edit(repo, user_id, edit)
    except PyMongoError as e:
        logger.error(f"Error editing user {user_id}: {e}")
        raise DatabaseError("Error updating users in MongoDB", error=str(e))
    return {"message": message}
