# tests/conftest.py
import copy
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from snapshare.auth.security import create_access_token
from snapshare.db.mongodb_helpers import ensure_object_id
from snapshare.images.storage import ObjectStorage, get_object_storage
from snapshare.main import app
from snapshare.users.repository import get_user_repository


class FakeUserRepository:
    """In-memory stand-in for UserRepository with the same async surface."""

    def __init__(self):
        self.users: Dict[str, Dict[str, Any]] = {}

    def add_user(self, username: str, email: Optional[str] = None, password: str = "not-a-hash") -> str:
        user_id = str(ObjectId())
        now = datetime.now(timezone.utc)
        self.users[user_id] = {
            "_id": user_id,
            "username": username,
            "email": (email or f"{username}@example.com").lower(),
            "password": password,
            "images": [],
            "followers": [],
            "following": [],
            "created_at": now,
            "updated_at": now,
        }
        return user_id

    def add_image(self, user_id: str, image_id: str, likes: Optional[List[str]] = None) -> None:
        self.users[user_id]["images"].append({
            "id": image_id,
            "url": f"https://img.example.com/{image_id}",
            "description": "",
            "likes": list(likes or []),
        })

    @staticmethod
    def _project(doc: Dict[str, Any], projection: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        doc = copy.deepcopy(doc)
        if not projection:
            return doc
        if any(projection.values()):
            return {k: v for k, v in doc.items() if k == "_id" or projection.get(k)}
        return {k: v for k, v in doc.items() if k not in projection}

    def _lookup(self, user_id):
        # Same id parsing as the real repository: any spelling of an ObjectId matches
        oid = ensure_object_id(user_id)
        return self.users.get(str(oid)) if oid else None

    async def get_by_id(self, user_id, projection=None):
        doc = self._lookup(user_id)
        return self._project(doc, projection) if doc else None

    async def find_users(self, query, projection=None):
        return [
            self._project(doc, projection)
            for doc in self.users.values()
            if all(doc.get(k) == v for k, v in query.items())
        ]

    async def suggest_usernames(self, prefix, limit):
        matches = [
            {"username": doc["username"]}
            for doc in self.users.values()
            if doc["username"].lower().startswith(prefix.lower())
        ]
        return matches[:limit]

    async def get_by_username_or_email(self, value):
        for doc in self.users.values():
            if doc["username"] == value or doc["email"] == value.lower():
                return copy.deepcopy(doc)
        return None

    async def get_by_email(self, email):
        for doc in self.users.values():
            if doc["email"] == email.lower():
                return copy.deepcopy(doc)
        return None

    async def username_exists(self, username):
        return any(doc["username"] == username for doc in self.users.values())

    async def email_exists(self, email):
        return any(doc["email"] == email.lower() for doc in self.users.values())

    async def create_user(self, doc):
        user_id = str(ObjectId())
        self.users[user_id] = {"_id": user_id, **copy.deepcopy(doc)}
        return user_id

    async def push_follow_edge(self, user_id, field, edge):
        if user_id not in self.users:
            return False
        self.users[user_id][field].append(dict(edge))
        return True

    async def pull_follow_edge(self, user_id, field, edge_id):
        if user_id not in self.users:
            return False
        doc = self.users[user_id]
        doc[field] = [edge for edge in doc[field] if edge["id"] != edge_id]
        return True

    async def push_image(self, user_id, image):
        if user_id not in self.users:
            return False
        self.users[user_id]["images"].append(copy.deepcopy(image))
        return True

    def _owner_of(self, post_id):
        for doc in self.users.values():
            for image in doc["images"]:
                if image["id"] == post_id:
                    return doc, image
        return None, None

    async def add_like(self, post_id, user_id):
        owner, image = self._owner_of(post_id)
        if owner is None:
            return None
        if user_id not in image["likes"]:
            image["likes"].append(user_id)
        return copy.deepcopy(owner["images"])

    async def remove_like(self, post_id, user_id):
        owner, image = self._owner_of(post_id)
        if owner is None:
            return None
        image["likes"] = [liker for liker in image["likes"] if liker != user_id]
        return copy.deepcopy(owner["images"])

    async def set_reset_token(self, user_id, token_hash, expires_at):
        self.users[user_id]["reset_password_token"] = token_hash
        self.users[user_id]["reset_password_expire"] = expires_at

    async def get_by_reset_token(self, token_hash, now):
        for doc in self.users.values():
            expire = doc.get("reset_password_expire")
            if doc.get("reset_password_token") == token_hash and expire and expire > now:
                return copy.deepcopy(doc)
        return None

    async def update_password(self, user_id, password_hash, clear_reset_token=False):
        doc = self.users[user_id]
        doc["password"] = password_hash
        if clear_reset_token:
            doc.pop("reset_password_token", None)
            doc.pop("reset_password_expire", None)


@pytest.fixture
def repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def storage(s3_client) -> ObjectStorage:
    return ObjectStorage(s3_client, "test-bucket", "https://cdn.example.com")


@pytest.fixture
def client(repo, storage):
    app.dependency_overrides[get_user_repository] = lambda: repo
    app.dependency_overrides[get_object_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user_id: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _headers
