from fastapi import APIRouter

from .base import router as crud_router
from .media import router as media_router

router = APIRouter(tags=["Listings"])
router.include_router(
    crud_router,
)
router.include_router(
    media_router,
)
