from typing import List, Optional
from pydantic import BaseModel

from snapshare.users.schemas import Image

class UploadResponse(BaseModel):
    message: str
    image: Image
    warning: Optional[str] = None

class ImageListResponse(BaseModel):
    """Like/unlike return every image of the post's owner, not just the post"""
    message: str
    data: List[Image]
