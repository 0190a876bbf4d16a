from typing import TypedDict, Union, Optional, List
from datetime import datetime
from bson import ObjectId

class FollowEdgeDocument(TypedDict):

    id: str
    username: str  # snapshot taken when the edge was written

class ImageDocument(TypedDict):

    id: str  # uuid4, generated at upload
    url: str
    description: str
    likes: List[str]  # user ids, set semantics

class UserDocument(TypedDict):

    _id: Union[ObjectId, str]
    username: str
    email: str
    password: str  # hash, never returned to clients
    images: List[ImageDocument]
    followers: List[FollowEdgeDocument]
    following: List[FollowEdgeDocument]
    reset_password_token: Optional[str]
    reset_password_expire: Optional[datetime]
    created_at: datetime
    updated_at: datetime

# Fields that are never sent to clients
USER_PROJECTION = {
    "password": False,
    "email": False,
    "created_at": False,
    "updated_at": False,
    "reset_password_token": False,
    "reset_password_expire": False,
}
