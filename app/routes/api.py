from fastapi import APIRouter

from app.core.config import settings
from app.routes.health import SERVICE_NAME, SERVICE_VERSION, get_git_sha

router = APIRouter()


@router.get("/version")
async def get_version():
    """Service version, git sha and the active extraction limits."""
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "git_sha": get_git_sha(),
        "fetch": {
            "timeout_seconds": settings.note_fetch_timeout,
            "max_attempts": settings.note_fetch_max_retries,
        },
    }
