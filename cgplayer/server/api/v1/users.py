"""
User Management Endpoints.

Account listing and administration: profile edits, role sets, voice profile
assignment, statistics and soft deletion. Listing and editing are open to
ADMIN and DIRECTOR; role changes, statistics and deletion to ADMIN only.
"""

import math
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from cgplayer.core.database.entities.users import User
from cgplayer.core.database.repositories.locations import LocationRepository
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import UserRole, VoiceType
from cgplayer.core.models.io.common import MessageResponse
from cgplayer.core.models.io.users import (
    CityListResponse,
    Pagination,
    RolesUpdate,
    UserListResponse,
    UserResponse,
    UserStats,
    UserUpdate,
    VoiceProfileCreate,
    VoiceTypesUpdate,
)
from cgplayer.core.security import hash_password
from cgplayer.server.services.deps import AdminDep, CurrentUserDep, ManagerDep, SessionDep, SettingsDep
from cgplayer.server.services.presenters import present_user, present_users

logger = get_logger(__name__)

router = APIRouter()


async def _get_user_or_404(repo: UserRepository, user_id: str) -> User:
    user = await repo.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get(
    "/",
    response_model=UserListResponse,
    summary="List Users",
    description="Paginated user listing with text, city, voice type, role and status filters.",
)
async def list_users(
    _: ManagerDep,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    search: Optional[str] = Query(None, description="Matches names, email and username"),
    location: Optional[str] = Query(None, description="City of the user's location"),
    voice_type: Optional[VoiceType] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = None,
) -> UserListResponse:
    users, total = await UserRepository(session).search(
        page=page,
        limit=limit,
        search=search,
        city=location,
        voice_type=voice_type.value if voice_type else None,
        role=role.value if role else None,
        is_active=is_active,
    )
    return UserListResponse(
        users=await present_users(session, users),
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


@router.get("/stats", response_model=UserStats, summary="User Statistics")
async def user_stats(_: AdminDep, session: SessionDep) -> UserStats:
    repo = UserRepository(session)
    total = await repo.count()
    active = await repo.count({"is_active": True})
    return UserStats(
        total_users=total,
        active_users=active,
        inactive_users=total - active,
        by_location=await repo.count_by_location(),
        by_voice_type=await repo.count_by_voice_type(),
        by_role=await repo.count_by_role(),
    )


@router.get("/profile", response_model=UserResponse, summary="Own Profile")
async def profile(current: CurrentUserDep, session: SessionDep) -> UserResponse:
    return UserResponse(user=await present_user(session, current.user))


@router.get("/data/locations", response_model=CityListResponse, summary="User Cities")
async def user_cities(_: ManagerDep, session: SessionDep) -> CityListResponse:
    """Distinct cities of the locations users belong to, for listing filters."""
    return CityListResponse(locations=await UserRepository(session).distinct_cities())


@router.get("/{user_id}", response_model=UserResponse, summary="Get User", responses={404: {"description": "User not found"}})
async def get_user(user_id: str, _: ManagerDep, session: SessionDep) -> UserResponse:
    user = await _get_user_or_404(UserRepository(session), user_id)
    return UserResponse(user=await present_user(session, user))


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update User",
    responses={400: {"description": "Duplicate email or username"}, 404: {"description": "User not found"}},
)
async def update_user(
    user_id: str, payload: UserUpdate, current: ManagerDep, session: SessionDep, settings: SettingsDep
) -> UserResponse:
    """
    Update account fields.

    Only the fields present in the body change. A new password is hashed
    before it is stored.
    """
    repo = UserRepository(session)
    user = await _get_user_or_404(repo, user_id)
    changes = payload.model_dump(exclude_unset=True)

    if changes.get("email") and await repo.email_taken(changes["email"], exclude_id=user.id):
        raise HTTPException(status_code=400, detail="Email already registered")
    if changes.get("username") and await repo.username_taken(changes["username"], exclude_id=user.id):
        raise HTTPException(status_code=400, detail="Username already taken")
    if changes.get("location_id") and await LocationRepository(session).get_by_id(changes["location_id"]) is None:
        raise HTTPException(status_code=400, detail="Location not found")

    if "email" in changes and changes["email"]:
        changes["email"] = changes["email"].lower()
    password = changes.pop("password", None)
    if password:
        changes["password_hash"] = hash_password(password, settings.jwt.bcrypt_rounds)

    user = await repo.update(user, changes)
    logger.info(f"User {user.id} updated by {current.id}: {sorted(changes)}")
    return UserResponse(user=await present_user(session, user))


@router.put("/{user_id}/voices", response_model=UserResponse, summary="Replace Voice Types")
async def replace_voices(user_id: str, payload: VoiceTypesUpdate, current: ManagerDep, session: SessionDep) -> UserResponse:
    repo = UserRepository(session)
    user = await _get_user_or_404(repo, user_id)
    await repo.set_voice_types(user.id, [voice.value for voice in payload.voice_types], assigned_by=current.id)
    await session.commit()
    logger.info(f"Voice types of user {user.id} set to {[voice.value for voice in payload.voice_types]}")
    return UserResponse(user=await present_user(session, user))


@router.put("/{user_id}/roles", response_model=UserResponse, summary="Replace Roles")
async def replace_roles(user_id: str, payload: RolesUpdate, current: AdminDep, session: SessionDep) -> UserResponse:
    repo = UserRepository(session)
    user = await _get_user_or_404(repo, user_id)
    roles = await repo.set_roles(user.id, [role.value for role in payload.roles])
    await session.commit()
    logger.info(f"Roles of user {user.id} set to {roles} by {current.id}")
    return UserResponse(user=await present_user(session, user))


@router.post(
    "/{user_id}/voice-profiles",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Voice Profile",
)
async def add_voice_profile(
    user_id: str, payload: VoiceProfileCreate, current: ManagerDep, session: SessionDep
) -> UserResponse:
    """Assign one voice type; assigning an existing one is a no-op."""
    repo = UserRepository(session)
    user = await _get_user_or_404(repo, user_id)
    await repo.upsert_voice_profile(user.id, payload.voice_type.value, assigned_by=current.id)
    await session.commit()
    return UserResponse(user=await present_user(session, user))


@router.delete(
    "/{user_id}/voice-profiles/{voice_type}",
    response_model=UserResponse,
    summary="Remove Voice Profile",
    responses={404: {"description": "Voice profile not found"}},
)
async def remove_voice_profile(user_id: str, voice_type: VoiceType, _: ManagerDep, session: SessionDep) -> UserResponse:
    repo = UserRepository(session)
    user = await _get_user_or_404(repo, user_id)
    if not await repo.remove_voice_profile(user.id, voice_type.value):
        raise HTTPException(status_code=404, detail="Voice profile not found")
    await session.commit()
    return UserResponse(user=await present_user(session, user))


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Deactivate User",
    responses={400: {"description": "Cannot delete your own account"}, 404: {"description": "User not found"}},
)
async def delete_user(user_id: str, current: AdminDep, session: SessionDep) -> MessageResponse:
    """Soft delete: the account is marked inactive and can no longer log in."""
    if user_id == current.id:
        raise HTTPException(status_code=400, detail="Cannot delete your own account")
    repo = UserRepository(session)
    user = await _get_user_or_404(repo, user_id)
    await repo.update(user, {"is_active": False})
    logger.info(f"User {user.id} deactivated by {current.id}")
    return MessageResponse(message="User deactivated successfully")
