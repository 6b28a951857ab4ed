"""
User repository.

Data access for accounts, their role set and their voice profiles. The role
set is read and written only through ``user_roles``.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import delete, func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.locations import Location
from ..entities.users import User, UserRoleAssignment, VoiceProfile
from .base import AsyncBaseRepository, QueryBuilder


class UserRepository(AsyncBaseRepository[User]):
    """Repository for user accounts using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(User).where(User.username == username)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_login(self, login: str) -> Optional[User]:
        """Find a user by email or username."""
        stmt = select(User).where(or_(func.lower(User.email) == login.lower(), User.username == login))
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_many(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(ids)))
        return {user.id: user for user in result.scalars().all()}

    async def email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(User.id).where(func.lower(User.email) == email.lower())
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def username_taken(self, username: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_id:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.session.execute(stmt)
        return result.first() is not None

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    async def get_roles(self, user_id: str) -> List[str]:
        stmt = select(UserRoleAssignment.role).where(UserRoleAssignment.user_id == user_id)
        result = await self.session.execute(stmt.order_by(UserRoleAssignment.created_at))
        return list(result.scalars().all())

    async def roles_for(self, user_ids: Iterable[str]) -> Dict[str, List[str]]:
        ids = set(user_ids)
        roles: Dict[str, List[str]] = defaultdict(list)
        if not ids:
            return roles
        stmt = select(UserRoleAssignment).where(UserRoleAssignment.user_id.in_(ids))
        result = await self.session.execute(stmt.order_by(UserRoleAssignment.created_at))
        for assignment in result.scalars().all():
            roles[assignment.user_id].append(assignment.role)
        return roles

    async def set_roles(self, user_id: str, roles: Sequence[str]) -> List[str]:
        """Replace the role set of a user (not committed)."""
        await self.session.execute(delete(UserRoleAssignment).where(UserRoleAssignment.user_id == user_id))
        unique_roles = list(dict.fromkeys(roles))
        for role in unique_roles:
            self.session.add(UserRoleAssignment(user_id=user_id, role=role))
        await self.session.flush()
        return unique_roles

    # ------------------------------------------------------------------
    # Voice profiles
    # ------------------------------------------------------------------

    async def get_voice_profiles(self, user_id: str) -> List[VoiceProfile]:
        stmt = select(VoiceProfile).where(VoiceProfile.user_id == user_id).order_by(VoiceProfile.created_at)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_voice_types(self, user_id: str) -> List[str]:
        return [profile.voice_type for profile in await self.get_voice_profiles(user_id)]

    async def voice_profiles_for(self, user_ids: Iterable[str]) -> Dict[str, List[VoiceProfile]]:
        ids = set(user_ids)
        profiles: Dict[str, List[VoiceProfile]] = defaultdict(list)
        if not ids:
            return profiles
        stmt = select(VoiceProfile).where(VoiceProfile.user_id.in_(ids)).order_by(VoiceProfile.created_at)
        result = await self.session.execute(stmt)
        for profile in result.scalars().all():
            profiles[profile.user_id].append(profile)
        return profiles

    async def upsert_voice_profile(
        self, user_id: str, voice_type: str, assigned_by: Optional[str] = None
    ) -> VoiceProfile:
        """Return the existing (user, voice) profile or create it (not committed)."""
        stmt = select(VoiceProfile).where(VoiceProfile.user_id == user_id, VoiceProfile.voice_type == voice_type)
        result = await self.session.execute(stmt)
        profile = result.scalars().first()
        if profile is not None:
            return profile
        profile = VoiceProfile(user_id=user_id, voice_type=voice_type, assigned_by=assigned_by)
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def remove_voice_profile(self, user_id: str, voice_type: str) -> bool:
        stmt = delete(VoiceProfile).where(VoiceProfile.user_id == user_id, VoiceProfile.voice_type == voice_type)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return (result.rowcount or 0) > 0

    async def set_voice_types(
        self, user_id: str, voice_types: Sequence[str], assigned_by: Optional[str] = None
    ) -> List[VoiceProfile]:
        """Replace all voice profiles of a user (not committed)."""
        await self.session.execute(delete(VoiceProfile).where(VoiceProfile.user_id == user_id))
        profiles = []
        for voice_type in dict.fromkeys(voice_types):
            profile = VoiceProfile(user_id=user_id, voice_type=voice_type, assigned_by=assigned_by)
            self.session.add(profile)
            profiles.append(profile)
        await self.session.flush()
        return profiles

    # ------------------------------------------------------------------
    # Listing and statistics
    # ------------------------------------------------------------------

    async def search(
        self,
        *,
        page: int = 1,
        limit: int = 50,
        search: Optional[str] = None,
        city: Optional[str] = None,
        voice_type: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[User], int]:
        """Filtered, paginated user listing ordered by first name.

        Returns:
            The page of users and the total number of matches
        """
        conditions = []
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    func.lower(User.email).like(pattern),
                    func.lower(User.username).like(pattern),
                )
            )
        if city:
            located = select(Location.id).where(func.lower(Location.city) == city.lower())
            conditions.append(User.location_id.in_(located))
        if voice_type:
            voiced = select(VoiceProfile.user_id).where(VoiceProfile.voice_type == voice_type)
            conditions.append(User.id.in_(voiced))
        if role:
            holders = select(UserRoleAssignment.user_id).where(UserRoleAssignment.role == role)
            conditions.append(User.id.in_(holders))
        if is_active is not None:
            conditions.append(User.is_active == is_active)

        total_stmt = select(func.count()).select_from(User).where(*conditions)
        total = int((await self.session.execute(total_stmt)).scalar_one())

        stmt = select(User).where(*conditions).order_by(User.first_name, User.last_name)
        stmt = QueryBuilder.apply_pagination(stmt, limit, (page - 1) * limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def distinct_cities(self) -> List[str]:
        """Cities of the locations users belong to."""
        stmt = (
            select(Location.city)
            .join(User, User.location_id == Location.id)
            .distinct()
            .order_by(Location.city)
        )
        result = await self.session.execute(stmt)
        return [city for city in result.scalars().all() if city]

    async def count_by_location(self) -> Dict[str, int]:
        stmt = (
            select(Location.name, func.count(User.id))
            .join(User, User.location_id == Location.id)
            .group_by(Location.name)
        )
        result = await self.session.execute(stmt)
        return {name: int(count) for name, count in result.all()}

    async def count_by_voice_type(self, location_id: Optional[str] = None, active_only: bool = False) -> Dict[str, int]:
        stmt = select(VoiceProfile.voice_type, func.count(VoiceProfile.id)).join(
            User, User.id == VoiceProfile.user_id
        )
        if location_id:
            stmt = stmt.where(User.location_id == location_id)
        if active_only:
            stmt = stmt.where(User.is_active == True)  # noqa: E712
        result = await self.session.execute(stmt.group_by(VoiceProfile.voice_type))
        return {voice: int(count) for voice, count in result.all()}

    async def count_by_role(self, location_id: Optional[str] = None) -> Dict[str, int]:
        stmt = select(UserRoleAssignment.role, func.count(UserRoleAssignment.id)).join(
            User, User.id == UserRoleAssignment.user_id
        )
        if location_id:
            stmt = stmt.where(User.location_id == location_id)
        result = await self.session.execute(stmt.group_by(UserRoleAssignment.role))
        return {role: int(count) for role, count in result.all()}

    async def list_by_location(self, location_id: Optional[str] = None) -> List[User]:
        stmt = select(User)
        if location_id:
            stmt = stmt.where(User.location_id == location_id)
        result = await self.session.execute(stmt.order_by(User.first_name))
        return list(result.scalars().all())

    async def find_director(self, location_id: str) -> Optional[User]:
        """First active user holding DIRECTOR at a location."""
        stmt = (
            select(User)
            .join(UserRoleAssignment, UserRoleAssignment.user_id == User.id)
            .where(
                User.location_id == location_id,
                User.is_active == True,  # noqa: E712
                UserRoleAssignment.role == "DIRECTOR",
            )
            .order_by(User.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()
