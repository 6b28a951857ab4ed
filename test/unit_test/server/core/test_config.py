"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables by alias and
that the grouped configuration views mirror the flat fields.
"""

import pytest

from cgplayer.server.core.config import (
    BootstrapConfig,
    CORSConfig,
    DatabaseConfig,
    JWTConfig,
    RateLimitConfig,
    Settings,
    UploadConfig,
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no .env file in the working directory."""
    monkeypatch.chdir(tmp_path)
    for name in (
        "CGPLAYER_SERVER_HOST",
        "CGPLAYER_SERVER_PORT",
        "DATABASE_URL",
        "JWT_SECRET",
        "JWT_EXPIRES_DAYS",
        "BCRYPT_ROUNDS",
        "UPLOAD_DIR",
        "MAX_FILE_SIZE",
        "MAX_FILES",
        "CORS_ORIGINS",
        "RATE_LIMIT_ENABLED",
        "RATE_LIMIT_MAX_REQUESTS",
        "RATE_LIMIT_WINDOW_SECONDS",
        "BOOTSTRAP_DEFAULT_DATA",
        "AUDIO_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestDefaults:
    def test_defaults(self, clean_env):
        settings = Settings()

        assert settings.server_port == 5000
        assert settings.jwt.expires_days == 7
        assert settings.jwt.bcrypt_rounds == 10
        assert settings.uploads.max_file_size == 100 * 1024 * 1024
        assert settings.uploads.max_files == 10
        assert settings.uploads.max_image_size == 5 * 1024 * 1024
        assert settings.rate_limit.max_requests == 100
        assert settings.rate_limit.window_seconds == 900
        assert settings.bootstrap.admin_email == "admin@chilegospel.com"

    def test_grouped_views_have_the_right_types(self, clean_env):
        settings = Settings()

        assert isinstance(settings.database, DatabaseConfig)
        assert isinstance(settings.jwt, JWTConfig)
        assert isinstance(settings.uploads, UploadConfig)
        assert isinstance(settings.cors, CORSConfig)
        assert isinstance(settings.rate_limit, RateLimitConfig)
        assert isinstance(settings.bootstrap, BootstrapConfig)


class TestSettingsBinding:
    def test_server_binding(self, clean_env):
        clean_env.setenv("CGPLAYER_SERVER_HOST", "127.0.0.1")
        clean_env.setenv("CGPLAYER_SERVER_PORT", "8080")

        settings = Settings()
        assert settings.server_host == "127.0.0.1"
        assert settings.server_port == 8080

    def test_database_binding(self, clean_env):
        clean_env.setenv("DATABASE_URL", "postgresql://cg:cg@db:5432/cgplayer")

        assert Settings().database.url == "postgresql://cg:cg@db:5432/cgplayer"

    def test_security_binding(self, clean_env):
        clean_env.setenv("JWT_SECRET", "s3cret")
        clean_env.setenv("JWT_EXPIRES_DAYS", "1")
        clean_env.setenv("BCRYPT_ROUNDS", "12")

        jwt_config = Settings().jwt
        assert jwt_config.secret == "s3cret"
        assert jwt_config.expires_days == 1
        assert jwt_config.bcrypt_rounds == 12

    def test_upload_binding(self, clean_env):
        clean_env.setenv("UPLOAD_DIR", "/data/uploads")
        clean_env.setenv("MAX_FILE_SIZE", "1024")
        clean_env.setenv("MAX_FILES", "3")

        uploads = Settings().uploads
        assert uploads.upload_dir == "/data/uploads"
        assert uploads.max_file_size == 1024
        assert uploads.max_files == 3

    def test_cors_origins_from_json_list(self, clean_env):
        clean_env.setenv("CORS_ORIGINS", '["http://localhost:3000", "https://cgplayer.cl"]')

        assert Settings().cors.origins == ["http://localhost:3000", "https://cgplayer.cl"]

    def test_rate_limit_binding(self, clean_env):
        clean_env.setenv("RATE_LIMIT_ENABLED", "false")
        clean_env.setenv("RATE_LIMIT_MAX_REQUESTS", "5")

        rate_limit = Settings().rate_limit
        assert rate_limit.enabled is False
        assert rate_limit.max_requests == 5

    def test_field_names_are_accepted_as_keywords(self, clean_env):
        settings = Settings(upload_dir="/tmp/x", rate_limit_enabled=False)

        assert settings.uploads.upload_dir == "/tmp/x"
        assert settings.rate_limit.enabled is False


class TestAudioBaseUrl:
    def test_derived_from_host_and_port(self, clean_env):
        settings = Settings(server_host="0.0.0.0", server_port=5000)
        assert settings.public_audio_base_url == "http://localhost:5000/api/songs/file"

    def test_explicit_value_wins(self, clean_env):
        clean_env.setenv("AUDIO_BASE_URL", "https://media.cgplayer.cl/api/songs/file/")
        assert Settings().public_audio_base_url == "https://media.cgplayer.cl/api/songs/file"
