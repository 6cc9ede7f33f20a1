from fastapi import APIRouter
from hackorsnooze.api.v0.auth.main import router as auth_router
from hackorsnooze.api.v0.user.main import router as user_router
from hackorsnooze.api.v0.story.main import router as story_router

router = APIRouter(prefix="/api")
router.include_router(auth_router)
router.include_router(user_router)
router.include_router(story_router)
