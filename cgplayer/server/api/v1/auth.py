"""
Authentication Endpoints.

Registration, login and token verification. Tokens are bearer JWTs; every
protected route resolves them through ``get_current_user``.
"""

from fastapi import APIRouter, HTTPException, status

from cgplayer.core.database.entities.users import User
from cgplayer.core.database.repositories.locations import LocationRepository
from cgplayer.core.database.repositories.users import UserRepository
from cgplayer.core.logging_config import get_logger
from cgplayer.core.models.domain.enums import UserRole
from cgplayer.core.models.io.auth import AuthResponse, LoginRequest, RegisterRequest, VerifyResponse
from cgplayer.core.security import create_access_token, hash_password, verify_password
from cgplayer.server.core.config import Settings
from cgplayer.server.services.deps import CurrentUserDep, SessionDep, SettingsDep
from cgplayer.server.services.presenters import present_user

logger = get_logger(__name__)

router = APIRouter()


def issue_token(settings: Settings, user: User, roles) -> str:
    jwt_config = settings.jwt
    return create_access_token(
        user.id,
        user.email,
        roles,
        secret=jwt_config.secret,
        algorithm=jwt_config.algorithm,
        expires_days=jwt_config.expires_days,
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Create a singer account and return an access token.",
    responses={400: {"description": "Invalid input or duplicate email/username"}},
)
async def register(payload: RegisterRequest, session: SessionDep, settings: SettingsDep) -> AuthResponse:
    """
    Register a new account.

    New accounts always start with the CANTANTE role; elevated roles are
    granted by an administrator afterwards.
    """
    repo = UserRepository(session)
    if await repo.email_taken(payload.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    if await repo.username_taken(payload.username):
        raise HTTPException(status_code=400, detail="Username already taken")
    if payload.location_id and await LocationRepository(session).get_by_id(payload.location_id) is None:
        raise HTTPException(status_code=400, detail="Location not found")

    user = User(
        email=payload.email.lower(),
        username=payload.username,
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        location_id=payload.location_id,
        password_hash=hash_password(payload.password, settings.jwt.bcrypt_rounds),
    )
    await repo.add(user)
    roles = await repo.set_roles(user.id, [UserRole.CANTANTE.value])
    await session.commit()
    await session.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username})")
    return AuthResponse(
        message="User registered successfully",
        user=await present_user(session, user),
        token=issue_token(settings, user, roles),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login",
    description="Exchange an email or username plus password for an access token.",
    responses={400: {"description": "Invalid credentials"}},
)
async def login(payload: LoginRequest, session: SessionDep, settings: SettingsDep) -> AuthResponse:
    repo = UserRepository(session)
    user = await repo.get_by_login(payload.login)
    if user is None or not user.is_active or not verify_password(payload.password, user.password_hash):
        logger.info(f"Failed login for {payload.login!r}")
        raise HTTPException(status_code=400, detail="Invalid credentials")

    roles = await repo.get_roles(user.id)
    logger.debug(f"User {user.id} logged in")
    return AuthResponse(
        message="Login successful",
        user=await present_user(session, user),
        token=issue_token(settings, user, roles),
    )


@router.get("/verify", response_model=VerifyResponse, summary="Verify Token")
async def verify(current: CurrentUserDep, session: SessionDep) -> VerifyResponse:
    """Return the user a valid token belongs to."""
    return VerifyResponse(user=await present_user(session, current.user))


@router.get("/me", response_model=VerifyResponse, summary="Current User")
async def me(current: CurrentUserDep, session: SessionDep) -> VerifyResponse:
    return VerifyResponse(user=await present_user(session, current.user))
