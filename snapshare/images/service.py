# snapshare/images/service.py
import uuid
from typing import Any, Dict, List, Optional
import logging

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile, status
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from snapshare.core.exceptions import APIError, UserNotFoundError
from snapshare.images.storage import ObjectStorage, make_image_key
from snapshare.users.documents import ImageDocument
from snapshare.users.repository import UserRepository

logger = logging.getLogger(__name__)


class MissingFileError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Please upload a file!"


class StorageError(APIError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Could not upload the file"


class PostNotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Post not found"


async def _discard_object(storage: ObjectStorage, key: str) -> None:
    """Remove an object whose image record could not be written"""
    try:
        await run_in_threadpool(storage.delete, key=key)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Could not remove orphaned object {key}: {e}")
    else:
        logger.info(f"Removed orphaned object {key}")


async def upload_image(
    repo: UserRepository,
    storage: ObjectStorage,
    user_id: str,
    file: Optional[UploadFile],
    description: str = ""
) -> Dict[str, Any]:
    """
    Store `file` and attach a new image record to the user.

    Returns {"message", "image"} and, when the object could not be made
    public, a "warning" describing the ACL failure. The upload itself still
    counts as successful in that case. If the image record cannot be
    written, the stored object is deleted again before the error propagates.
    """
    if file is None or not file.filename:
        raise MissingFileError()

    owner = await repo.get_by_id(user_id, {"_id": True})
    if not owner:
        raise UserNotFoundError()

    image_id = str(uuid.uuid4())
    key = make_image_key(user_id=owner["_id"], image_id=image_id, file_name=file.filename)

    try:
        await run_in_threadpool(storage.upload, key=key, fileobj=file.file, content_type=file.content_type)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Upload of {file.filename} for user {user_id} failed: {e}")
        raise StorageError(f"Could not upload the file: {file.filename}. {e}")

    image: ImageDocument = {
        "id": image_id,
        "url": storage.public_url(key=key),
        "description": description,
        "likes": [],
    }
    try:
        recorded = await repo.push_image(owner["_id"], image)
    except PyMongoError:
        await _discard_object(storage, key)
        raise
    if not recorded:
        await _discard_object(storage, key)
        raise UserNotFoundError()
    logger.info(f"User {owner['_id']} uploaded image {image_id} -> {key}")

    result: Dict[str, Any] = {
        "message": f"Uploaded the file successfully: {file.filename}",
        "image": image,
    }
    try:
        await run_in_threadpool(storage.make_public, key=key)
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"Could not make {key} public: {e}")
        result["message"] = f"Uploaded the file successfully: {file.filename}, but public access is denied!"
        result["warning"] = str(e)
    return result


async def like_post(repo: UserRepository, post_id: str, user_id: str) -> List[ImageDocument]:
    images = await repo.add_like(post_id, user_id)
    if images is None:
        raise PostNotFoundError()
    return images


async def unlike_post(repo: UserRepository, post_id: str, user_id: str) -> List[ImageDocument]:
    images = await repo.remove_like(post_id, user_id)
    if images is None:
        raise PostNotFoundError()
    return images
