# snapshare/users/repository.py
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import logging

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument

from snapshare.core.config import settings
from snapshare.db.mongodb import USERS_COLLECTION, get_mongodb
from snapshare.db.mongodb_helpers import ensure_object_id, stringify_object_id, stringify_object_ids
from snapshare.users.documents import FollowEdgeDocument, ImageDocument

logger = logging.getLogger(__name__)

FOLLOW_FIELDS = ("followers", "following")


class UserRepository:
    """
    All reads and writes against the users collection.

    Documents come back with `_id` as a string, so callers never handle
    ObjectId. Every method is a single MongoDB operation; anything that
    spans two documents is composed by the caller.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.collection: AsyncIOMotorCollection = db[USERS_COLLECTION]

    async def get_by_id(
        self,
        user_id: str,
        projection: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        oid = ensure_object_id(user_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid}, projection)
        return stringify_object_id(doc) if doc else None

    async def find_users(
        self,
        query: Dict[str, Any],
        projection: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        cursor = self.collection.find(query, projection)
        return stringify_object_ids(await cursor.to_list(length=None))

    async def suggest_usernames(self, prefix: str, limit: int) -> List[Dict[str, Any]]:
        """Atlas Search autocomplete over the username field"""
        pipeline = [
            {
                "$search": {
                    "index": settings.USER_SEARCH_INDEX,
                    "autocomplete": {
                        "path": "username",
                        "query": prefix,
                    }
                }
            },
            {"$limit": limit},
            {"$project": {"_id": 0, "username": 1}},
        ]
        cursor = self.collection.aggregate(pipeline)
        return await cursor.to_list(length=limit)

    async def get_by_username_or_email(self, value: str) -> Optional[Dict[str, Any]]:
        doc = await self.collection.find_one(
            {"$or": [{"username": value}, {"email": value.lower()}]}
        )
        return stringify_object_id(doc) if doc else None

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        doc = await self.collection.find_one({"email": email.lower()})
        return stringify_object_id(doc) if doc else None

    async def username_exists(self, username: str) -> bool:
        return await self.collection.count_documents({"username": username}, limit=1) > 0

    async def email_exists(self, email: str) -> bool:
        return await self.collection.count_documents({"email": email.lower()}, limit=1) > 0

    async def create_user(self, doc: Dict[str, Any]) -> str:
        result = await self.collection.insert_one(doc)
        return str(result.inserted_id)

    async def push_follow_edge(self, user_id: str, field: str, edge: FollowEdgeDocument) -> bool:
        if field not in FOLLOW_FIELDS:
            raise ValueError(f"Unknown follow list: {field}")
        result = await self.collection.update_one(
            {"_id": ensure_object_id(user_id)},
            {"$push": {field: edge}, "$set": {"updated_at": datetime.now(timezone.utc)}}
        )
        return result.matched_count > 0

    async def pull_follow_edge(self, user_id: str, field: str, edge_id: str) -> bool:
        if field not in FOLLOW_FIELDS:
            raise ValueError(f"Unknown follow list: {field}")
        result = await self.collection.update_one(
            {"_id": ensure_object_id(user_id)},
            {"$pull": {field: {"id": edge_id}}, "$set": {"updated_at": datetime.now(timezone.utc)}}
        )
        return result.matched_count > 0

    async def push_image(self, user_id: str, image: ImageDocument) -> bool:
        result = await self.collection.update_one(
            {"_id": ensure_object_id(user_id)},
            {"$push": {"images": image}, "$set": {"updated_at": datetime.now(timezone.utc)}}
        )
        return result.matched_count > 0

    async def add_like(self, post_id: str, user_id: str) -> Optional[List[ImageDocument]]:
        """Add user_id to the likers of image post_id; returns the owner's images"""
        return await self._update_likes(post_id, {"$addToSet": {"images.$[image].likes": user_id}})

    async def remove_like(self, post_id: str, user_id: str) -> Optional[List[ImageDocument]]:
        """Remove user_id from the likers of image post_id; returns the owner's images"""
        return await self._update_likes(post_id, {"$pull": {"images.$[image].likes": user_id}})

    async def _update_likes(self, post_id: str, update: Dict[str, Any]) -> Optional[List[ImageDocument]]:
        doc = await self.collection.find_one_and_update(
            {"images.id": post_id},
            update,
            array_filters=[{"image.id": post_id}],
            projection={"images": True},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        return doc.get("images", [])

    async def set_reset_token(self, user_id: str, token_hash: str, expires_at: datetime) -> None:
        await self.collection.update_one(
            {"_id": ensure_object_id(user_id)},
            {"$set": {
                "reset_password_token": token_hash,
                "reset_password_expire": expires_at,
            }}
        )

    async def get_by_reset_token(self, token_hash: str, now: datetime) -> Optional[Dict[str, Any]]:
        doc = await self.collection.find_one({
            "reset_password_token": token_hash,
            "reset_password_expire": {"$gt": now},
        })
        return stringify_object_id(doc) if doc else None

    async def update_password(self, user_id: str, password_hash: str, clear_reset_token: bool = False) -> None:
        update: Dict[str, Any] = {
            "$set": {"password": password_hash, "updated_at": datetime.now(timezone.utc)}
        }
        if clear_reset_token:
            update["$unset"] = {"reset_password_token": "", "reset_password_expire": ""}
        await self.collection.update_one({"_id": ensure_object_id(user_id)}, update)


def get_user_repository() -> UserRepository:
    """FastAPI dependency for the users collection."""
    return UserRepository(get_mongodb())
