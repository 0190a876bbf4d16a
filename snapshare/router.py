# snapshare/router.py (Main Router)
from fastapi import APIRouter

from snapshare.auth.router import router as auth_router
from snapshare.users.router import router as users_router
from snapshare.images.router import router as images_router

api_router = APIRouter()

# Include all sub-routers WITHOUT the /api prefix (it's added in main.py)
api_router.include_router(auth_router)      # Will be at /api/users/register, /login, ...
api_router.include_router(users_router)     # Will be at /api/users/...
api_router.include_router(images_router)    # Will be at /api/{userid}/images, /api/posts/...
