from typing import List, Union
from pydantic import BaseModel, ConfigDict, Field

class FollowEdge(BaseModel):
    """One side of a follow relationship"""
    id: str
    username: str

class Image(BaseModel):
    id: str
    url: str
    description: str = ""
    likes: List[str] = []

class UserRead(BaseModel):
    """Public view of a user; sensitive fields are projected out upstream"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str
    images: List[Image] = []
    followers: List[FollowEdge] = []
    following: List[FollowEdge] = []

class UsernameSuggestion(BaseModel):
    username: str

class UserListResponse(BaseModel):
    message: str
    data: Union[List[UserRead], List[UsernameSuggestion]]

class UserResponse(BaseModel):
    message: str
    data: UserRead

class MessageResponse(BaseModel):
    message: str
