from fastapi import APIRouter

from .deps import SettingsServiceDep

router = APIRouter(prefix="/api/v1/settings", tags=["settings"])


@router.get("/public")
async def public_settings(settings: SettingsServiceDep) -> dict[str, str]:
    """App title, logo and AI disclaimer; no login required."""
    return await settings.public_settings()
