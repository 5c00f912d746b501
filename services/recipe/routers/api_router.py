"""Recipe API router entrypoint."""

from fastapi import APIRouter

from services.recipe.routers.detail_router import router as detail_router
from services.recipe.routers.favorite_router import router as favorite_router
from services.recipe.routers.match_router import router as match_router
from services.recipe.routers.rating_router import router as rating_router

router = APIRouter(prefix="/api/recipes", tags=["Recipe"])

router.include_router(match_router)
router.include_router(favorite_router)
router.include_router(rating_router)
router.include_router(detail_router)
