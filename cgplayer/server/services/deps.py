"""
Request Dependencies.

Shared FastAPI dependencies: the application settings, a database session,
the upload storage, and the authenticated identity with its role set.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Annotated, Callable, FrozenSet, List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cgplayer.core.database import get_session
from cgplayer.core.database.entities.users import User
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import SHARED_VOICE_TYPES, UserRole
from cgplayer.core.security import TokenError, decode_access_token
from cgplayer.server.core.config import Settings
from cgplayer.server.services.uploads import UploadStorage, get_storage_for

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="JWT issued by /api/auth/login")


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with."""
    return request.app.state.settings


def get_storage(request: Request) -> UploadStorage:
    """Upload storage for the running application."""
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        storage = get_storage_for(request.app.state.settings)
        request.app.state.storage = storage
    return storage


SessionDep = Annotated[AsyncSession, Depends(get_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
StorageDep = Annotated[UploadStorage, Depends(get_storage)]


@dataclass
class CurrentUser:
    """Authenticated identity attached to a request."""

    user: User
    roles: FrozenSet[str]
    voice_types: List[str] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.user.id

    def has_any(self, *roles: UserRole | str) -> bool:
        wanted = {role.value if isinstance(role, UserRole) else role for role in roles}
        return bool(self.roles & wanted)

    @property
    def is_admin(self) -> bool:
        return self.has_any(UserRole.ADMIN)

    @property
    def is_manager(self) -> bool:
        """ADMIN or DIRECTOR."""
        return self.has_any(UserRole.ADMIN, UserRole.DIRECTOR)

    def allowed_voice_types(self) -> Optional[List[str]]:
        """Voice variants this user may listen to; None means every variant.

        Managers see everything. Everybody else sees their own voice types
        plus the shared full-choir and original recordings.
        """
        if self.is_manager:
            return None
        allowed = list(dict.fromkeys([*self.voice_types, *(voice.value for voice in SHARED_VOICE_TYPES)]))
        return allowed


async def get_current_user(
    session: SessionDep,
    settings: SettingsDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Resolve the bearer token into an active user.

    Raises:
        HTTPException: 401 without a token or for an unknown/inactive user,
            403 for an invalid or expired token.
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Access token required")

    jwt_config = settings.jwt
    try:
        payload = decode_access_token(credentials.credentials, secret=jwt_config.secret, algorithm=jwt_config.algorithm)
    except TokenError as e:
        logger.debug(f"Rejected token: {e}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token") from e

    repo = UserRepository(session)
    user = await repo.get_by_id(payload["sub"])
    if user is None or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")

    roles = frozenset(await repo.get_roles(user.id))
    voice_types = await repo.get_voice_types(user.id)
    return CurrentUser(user=user, roles=roles, voice_types=voice_types)


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]


def require_roles(*roles: UserRole) -> Callable:
    """Dependency factory: the current user must hold at least one of ``roles``."""

    async def _check(current: CurrentUserDep) -> CurrentUser:
        if not current.has_any(*roles):
            logger.info(f"User {current.id} lacks roles {[role.value for role in roles]}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current

    return _check


AdminDep = Annotated[CurrentUser, Depends(require_roles(UserRole.ADMIN))]
ManagerDep = Annotated[CurrentUser, Depends(require_roles(UserRole.ADMIN, UserRole.DIRECTOR))]
