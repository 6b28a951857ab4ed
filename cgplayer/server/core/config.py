"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Relational database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./cgplayer.db",
        alias="DATABASE_URL",
        description="Async SQLAlchemy connection URL",
    )
    create_all: bool = Field(
        default=True,
        alias="DB_CREATE_ALL",
        description="Create missing tables on startup (disable when Alembic owns the schema)",
    )
    echo: bool = Field(default=False, alias="DB_ECHO", description="Echo SQL statements")

    model_config = {"populate_by_name": True}


class JWTConfig(BaseModel):
    """Access token configuration."""

    secret: str = Field(
        default="change-me-in-production", alias="JWT_SECRET", description="HMAC secret for signing tokens"
    )
    algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM", description="JWT signing algorithm")
    expires_days: int = Field(default=7, alias="JWT_EXPIRES_DAYS", description="Token lifetime in days")
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS", description="bcrypt cost factor")

    model_config = {"populate_by_name": True}


class UploadConfig(BaseModel):
    """Upload storage and limits."""

    upload_dir: str = Field(default="uploads", alias="UPLOAD_DIR", description="Root directory for uploaded files")
    max_file_size: int = Field(
        default=100 * 1024 * 1024, alias="MAX_FILE_SIZE", description="Maximum audio file size in bytes"
    )
    max_files: int = Field(default=10, alias="MAX_FILES", description="Maximum files per multi-upload request")
    max_image_size: int = Field(
        default=5 * 1024 * 1024, alias="MAX_IMAGE_SIZE", description="Maximum playlist image size in bytes"
    )

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS", description="Allowed CORS origins (use * for all)")
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


class RateLimitConfig(BaseModel):
    """Global per-IP rate limiter configuration."""

    enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED", description="Enable the rate limiter")
    window_seconds: int = Field(
        default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS", description="Length of one counting window"
    )
    max_requests: int = Field(
        default=100, alias="RATE_LIMIT_MAX_REQUESTS", description="Requests allowed per IP and window"
    )

    model_config = {"populate_by_name": True}


class BootstrapConfig(BaseModel):
    """Default accounts created on first start."""

    enabled: bool = Field(
        default=True, alias="BOOTSTRAP_DEFAULT_DATA", description="Seed default accounts when no user exists"
    )
    admin_email: str = Field(default="admin@chilegospel.com", alias="BOOTSTRAP_ADMIN_EMAIL")
    admin_password: str = Field(default="admin123", alias="BOOTSTRAP_ADMIN_PASSWORD")
    director_password: str = Field(default="director123", alias="BOOTSTRAP_DIRECTOR_PASSWORD")
    singer_password: str = Field(default="singer123", alias="BOOTSTRAP_SINGER_PASSWORD")
    singer_count: int = Field(default=10, alias="BOOTSTRAP_SINGER_COUNT")

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # cgplayer Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="cgplayer server host address to bind to",
        alias="CGPLAYER_SERVER_HOST",
    )
    server_port: int = Field(
        default=5000,
        description="cgplayer server port number",
        alias="CGPLAYER_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="cgplayer server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="CGPLAYER_LOG_LEVEL",
    )
    audio_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL for audio files; derived from host and port when unset",
        alias="AUDIO_BASE_URL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(default="sqlite+aiosqlite:///./cgplayer.db", alias="DATABASE_URL")
    db_create_all: bool = Field(default=True, alias="DB_CREATE_ALL")
    db_echo: bool = Field(default=False, alias="DB_ECHO")

    # =====================================================================
    # Security Configuration
    # =====================================================================
    jwt_secret: str = Field(default="change-me-in-production", alias="JWT_SECRET")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_days: int = Field(default=7, alias="JWT_EXPIRES_DAYS")
    bcrypt_rounds: int = Field(default=10, alias="BCRYPT_ROUNDS")

    # =====================================================================
    # Upload Configuration
    # =====================================================================
    upload_dir: str = Field(default="uploads", alias="UPLOAD_DIR")
    max_file_size: int = Field(default=100 * 1024 * 1024, alias="MAX_FILE_SIZE")
    max_files: int = Field(default=10, alias="MAX_FILES")
    max_image_size: int = Field(default=5 * 1024 * 1024, alias="MAX_IMAGE_SIZE")

    # =====================================================================
    # HTTP Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    rate_limit_enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")
    rate_limit_window_seconds: int = Field(default=15 * 60, alias="RATE_LIMIT_WINDOW_SECONDS")
    rate_limit_max_requests: int = Field(default=100, alias="RATE_LIMIT_MAX_REQUESTS")

    # =====================================================================
    # Bootstrap Configuration
    # =====================================================================
    bootstrap_default_data: bool = Field(default=True, alias="BOOTSTRAP_DEFAULT_DATA")
    bootstrap_admin_email: str = Field(default="admin@chilegospel.com", alias="BOOTSTRAP_ADMIN_EMAIL")
    bootstrap_admin_password: str = Field(default="admin123", alias="BOOTSTRAP_ADMIN_PASSWORD")
    bootstrap_director_password: str = Field(default="director123", alias="BOOTSTRAP_DIRECTOR_PASSWORD")
    bootstrap_singer_password: str = Field(default="singer123", alias="BOOTSTRAP_SINGER_PASSWORD")
    bootstrap_singer_count: int = Field(default=10, alias="BOOTSTRAP_SINGER_COUNT")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def jwt(self) -> JWTConfig:
        """Get token and password hashing configuration from environment variables."""
        return JWTConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def uploads(self) -> UploadConfig:
        """Get upload configuration from environment variables."""
        return UploadConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def rate_limit(self) -> RateLimitConfig:
        """Get rate limiter configuration from environment variables."""
        return RateLimitConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def bootstrap(self) -> BootstrapConfig:
        """Get first-start seeding configuration from environment variables."""
        return BootstrapConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def public_audio_base_url(self) -> str:
        """Base URL clients use to build audio file links."""
        if self.audio_base_url:
            return self.audio_base_url.rstrip("/")
        host = "localhost" if self.server_host in ("0.0.0.0", "::") else self.server_host
        return f"http://{host}:{self.server_port}/api/songs/file"


settings = Settings()
