# snapshare/follow/service.py
from typing import Any, Dict, Tuple
import logging

from fastapi import status

from snapshare.core.exceptions import APIError, UserNotFoundError
from snapshare.follow.schemas import FollowEdit, UnfollowEdit
from snapshare.users.repository import UserRepository

logger = logging.getLogger(__name__)


class SelfFollowError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You can't follow yourself"


class SelfUnfollowError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You can't unfollow yourself"


class AlreadyFollowingError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You already follow this user"


class NotFollowingError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You don't follow this user"


async def _load_pair(
    repo: UserRepository,
    target_id: str,
    actor_id: str
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    target = await repo.get_by_id(target_id)
    if not target:
        raise UserNotFoundError("User to edit not found")
    actor = await repo.get_by_id(actor_id)
    if not actor:
        raise UserNotFoundError("Acting user not found")
    return target, actor


def _is_follower(target: Dict[str, Any], actor_id: str) -> bool:
    return any(edge["id"] == actor_id for edge in target.get("followers", []))


async def _write_edge(write, user_id: str, field: str, value) -> None:
    """Run one side of an edge update; the user may have vanished since it was read"""
    if not await write(user_id, field, value):
        logger.warning(f"User {user_id} disappeared while updating its {field} list")
        raise UserNotFoundError(f"User {user_id} no longer exists")


async def follow_user(repo: UserRepository, target_id: str, actor_id: str) -> str:
    """
    Make actor follow target.

    Self checks run on the stored ids, so differently spelled forms of the
    same ObjectId count as the same user. Writes the target-side edge first,
    then the actor-side edge. The two updates are independent; a failure in
    between leaves a one-sided edge.
    """
    target, actor = await _load_pair(repo, target_id, actor_id)
    target_id, actor_id = target["_id"], actor["_id"]

    if target_id == actor_id:
        raise SelfFollowError(error={"userToBeFollowedId": target_id})
    if _is_follower(target, actor_id):
        raise AlreadyFollowingError()

    await _write_edge(repo.push_follow_edge, target_id, "followers", {"id": actor_id, "username": actor["username"]})
    await _write_edge(repo.push_follow_edge, actor_id, "following", {"id": target_id, "username": target["username"]})

    logger.info(f"User {actor_id} followed {target_id}")
    return "user has been followed"


async def unfollow_user(repo: UserRepository, target_id: str, actor_id: str) -> str:
    """Remove the actor -> target edge from both documents."""
    target, actor = await _load_pair(repo, target_id, actor_id)
    target_id, actor_id = target["_id"], actor["_id"]

    if target_id == actor_id:
        raise SelfUnfollowError(error={"userToBeUnfollowedId": target_id})
    if not _is_follower(target, actor_id):
        raise NotFollowingError()

    await _write_edge(repo.pull_follow_edge, target_id, "followers", actor_id)
    await _write_edge(repo.pull_follow_edge, actor_id, "following", target_id)

    logger.info(f"User {actor_id} unfollowed {target_id}")
    return "user has been unfollowed"


async def apply_edit(repo: UserRepository, target_id: str, edit) -> str:
    """Dispatch a follow/unfollow edit against the user `target_id`."""
    if isinstance(edit, FollowEdit):
        return await follow_user(repo, target_id, edit.id)
    if isinstance(edit, UnfollowEdit):
        return await unfollow_user(repo, target_id, edit.id)
    raise TypeError(f"Unsupported user edit: {type(edit).__name__}")
