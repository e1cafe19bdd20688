from fastapi import APIRouter

from starter.config import get_settings

router = APIRouter()


@router.get("/api/ping")
async def ping():
    return {"status": "ok"}


@router.get("/api/about")
async def about():
    settings = get_settings()
    return {
        "name": settings.app_name,
        "url": settings.app_url,
        "env": settings.app_env,
    }
