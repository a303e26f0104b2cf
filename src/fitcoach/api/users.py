from fastapi import APIRouter

from fitcoach.core.profile.models import ProfileUpdate, UserProfile

from .deps import CurrentUserDep, ProfileServiceDep

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/me")
async def get_me(user: CurrentUserDep) -> UserProfile:
    return user


@router.put("/me")
async def update_me(
    body: ProfileUpdate, user: CurrentUserDep, profiles: ProfileServiceDep
) -> UserProfile:
    return await profiles.update_profile(user.id, body)
