"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Resolve the JWT signing secret (mandatory outside development)

Collaborators:
  - main.py: reads settings for CORS, pool init and bootstrap admin
  - container.py: selects repositories and storage backend
  - tokens.py: reads signing secret and token TTL

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, configuration only

Notes:
  - Singleton via lru_cache
  - INSECURE_DEV_JWT_SECRET is a known, published value. It only signs
    tokens when ALLOW_INSECURE_JWT_SECRET=1 outside production.
"""

from functools import lru_cache
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

# R: Weak default kept for local runs only; never a security boundary
INSECURE_DEV_JWT_SECRET = (
    "1e2eebdd6f3ff3f8090536ab2f46df5a2d91dedc39b21e2c4ad2b979377a68b5"
)

_KNOWN_ENVS = {"development", "local", "test", "testing", "staging", "production"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        database_url: PostgreSQL connection string
        app_env: Deployment environment (development, local, test, production)
        allowed_origins: Comma-separated CORS origins
        jwt_secret: Secret for signing bearer tokens
        allow_insecure_jwt_secret: Opt into the published dev secret
        jwt_ttl_days: Token lifetime in days (default: 30)
        upload_dir: Root directory for local file storage
        max_upload_bytes: Per-file upload limit (default: 5MB)
        max_home_photos: Maximum home photos per operator (default: 5)
        max_body_bytes: Max request body size
        s3_bucket: Optional S3 bucket (switches storage to S3 when set)
        bootstrap_admin_username: Administrator seeded at startup
        bootstrap_admin_password: Password for the seeded administrator
    """

    # Required (no defaults)
    database_url: str

    app_env: str = "development"

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"
    cors_allow_credentials: bool = False

    # Security - JWT Auth
    jwt_secret: str = ""
    allow_insecure_jwt_secret: bool = False
    jwt_ttl_days: int = 30

    # Uploads
    upload_dir: str = "uploads"
    max_upload_bytes: int = 5_000_000  # 5MB
    max_home_photos: int = 5

    # Security - Hardening
    max_body_bytes: int = 40 * 1024 * 1024  # R: 6 files at 5MB plus form fields
    metrics_require_auth: bool = False

    # Storage - S3 (optional)
    s3_bucket: str = ""
    s3_access_key: str = ""
    s3_secret_key: str = ""
    s3_region: str = ""
    s3_endpoint_url: str = ""

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Bootstrap administrator
    bootstrap_admin_username: str = ""
    bootstrap_admin_password: str = ""

    @field_validator("app_env")
    @classmethod
    def app_env_must_be_known(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in _KNOWN_ENVS:
            raise ValueError(f"app_env must be one of {sorted(_KNOWN_ENVS)}")
        return normalized

    @field_validator("jwt_ttl_days", "max_upload_bytes", "max_home_photos", "max_body_bytes")
    @classmethod
    def limits_must_be_positive(cls, v: int, info) -> int:
        if v <= 0:
            raise ValueError(f"{info.field_name} must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_jwt_secret(self):
        if self.allow_insecure_jwt_secret and self.is_production():
            raise ValueError("ALLOW_INSECURE_JWT_SECRET cannot be enabled in production")
        if not self.jwt_secret.strip() and not self.allow_insecure_jwt_secret:
            raise ValueError(
                "JWT_SECRET is required unless ALLOW_INSECURE_JWT_SECRET=1 "
                "outside production"
            )
        return self

    @model_validator(mode="after")
    def validate_bootstrap_admin(self):
        if bool(self.bootstrap_admin_username) != bool(self.bootstrap_admin_password):
            raise ValueError(
                "BOOTSTRAP_ADMIN_USERNAME and BOOTSTRAP_ADMIN_PASSWORD must be set together"
            )
        return self

    def is_production(self) -> bool:
        return self.app_env == "production"

    def is_development(self) -> bool:
        return self.app_env in {"development", "local"}

    def is_test(self) -> bool:
        return self.app_env in {"test", "testing"}

    def uses_insecure_jwt_secret(self) -> bool:
        return not self.jwt_secret.strip()

    def resolved_jwt_secret(self) -> str:
        """Return the configured secret, or the dev fallback when opted in."""
        if self.uses_insecure_jwt_secret():
            return INSECURE_DEV_JWT_SECRET
        return self.jwt_secret

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore unknown env vars


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
