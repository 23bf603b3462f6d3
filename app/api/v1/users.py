import logging

from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_user, get_user_repository
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.user import ProfileResponse, ProfileUpdate, PasswordChange, UserRead, UserStats
from app.services.auth_service import auth_service, sanitize_username

router = APIRouter(tags=["users"])
logger = logging.getLogger(__name__)


def build_profile(user: User) -> ProfileResponse:
    return ProfileResponse(
        **UserRead.model_validate(user).model_dump(),
        stats=UserStats(
            total_workouts=user.total_workouts or 0,
            avg_calories=user.avg_calories or 0,
            last_workout_date=user.last_workout_date,
        ),
    )


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return build_profile(current_user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    profile_update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    changes = profile_update.model_dump(exclude_unset=True)

    if "username" in changes:
        username = sanitize_username(changes.pop("username"))
        if not username:
            raise HTTPException(status_code=400, detail="Username cannot be empty")
        if await repo.username_taken(username, exclude_user_id=current_user.id):
            raise HTTPException(status_code=400, detail="Username is already taken")
        current_user.set_username(username)

    for field, value in changes.items():
        if value is None:
            continue
        setattr(current_user, field, value.strip() if isinstance(value, str) else value)

    user = await repo.save(current_user)
    logger.info("User %s updated profile fields %s", user.id, sorted(profile_update.model_fields_set))
    return build_profile(user)


@router.put("/change-password")
async def change_password(
    data: PasswordChange,
    current_user: User = Depends(get_current_user),
    repo: UserRepository = Depends(get_user_repository),
):
    if not auth_service.verify_password(data.current_password, current_user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Current password is incorrect")

    current_user.password = auth_service.hash_password(data.new_password)
    await repo.save(current_user)
    return {"message": "Password updated successfully"}
