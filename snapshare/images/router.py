# snapshare/images/router.py
from typing import Any, Dict, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pymongo.errors import PyMongoError

from snapshare.auth.dependencies import current_user, ensure_acting_user
from snapshare.core.exceptions import DatabaseError
from snapshare.images import service
from snapshare.images.errors import IMAGE001, POST001, POST002
from snapshare.images.schemas import ImageListResponse, UploadResponse
from snapshare.images.storage import ObjectStorage, get_object_storage
from snapshare.users.repository import UserRepository, get_user_repository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])

@router.post("/{user_id}/images", response_model=UploadResponse, response_model_exclude_none=True)
async def upload_image(
    user_id: str,
    file: Optional[UploadFile] = File(default=None),
    description: str = Form(default=""),
    user: Dict[str, Any] = Depends(current_user),
    repo: UserRepository = Depends(get_user_repository),
    storage: ObjectStorage = Depends(get_object_storage)
):
    """Upload one image for `user_id`"""
    ensure_acting_user(user, user_id)
    try:
        return await service.upload_image(repo, storage, user_id, file, description)
    except PyMongoError as e:
        logger.error(f"Error saving image for user {user_id}: {e}")
        raise DatabaseError("Error saving image", error=str(e), err_code=IMAGE001)

@router.put("/posts/{post_id}/likes/{user_id}", response_model=ImageListResponse)
async def like_post(
    post_id: str,
    user_id: str,
    user: Dict[str, Any] = Depends(current_user),
    repo: UserRepository = Depends(get_user_repository)
):
    ensure_acting_user(user, user_id)
    try:
        images = await service.like_post(repo, post_id, user_id)
    except PyMongoError as e:
        logger.error(f"Error liking post {post_id}: {e}")
        raise DatabaseError("Error liking post", error=str(e), err_code=POST001)
    return {"message": "Successfully liked post", "data": images}

@router.delete("/posts/{post_id}/likes/{user_id}", response_model=ImageListResponse)
async def unlike_post(
    post_id: str,
    user_id: str,
    user: Dict[str, Any] = Depends(current_user),
    repo: UserRepository = Depends(get_user_repository)
):
    ensure_acting_user(user, user_id)
    try:
        images = await service.unlike_post(repo, post_id, user_id)
    except PyMongoError as e:
        logger.error(f"Error unliking post {post_id}: {e}")
        raise DatabaseError("Error unliking post", error=str(e), err_code=POST002)
    return {"message": "Successfully unliked post", "data": images}
