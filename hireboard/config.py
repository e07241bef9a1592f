"""
HireBoard - Application configuration.

Centralized configuration using Pydantic Settings for environment variable management.

Environment Variables:
    Store settings use the HIREBOARD_ prefix, client settings HIREBOARD_CLIENT_.

    Store Settings:
        HIREBOARD_DATABASE_URL=...              - SQLAlchemy URL for the applicant store
        HIREBOARD_SEED_DEMO_DATA=true           - Seed demo jobs/applicants into an empty database
        HIREBOARD_RATE_LIMIT_ENABLED=true       - Toggle slowapi rate limiting

    Client Settings:
        HIREBOARD_CLIENT_API_BASE_URL=...       - API root of the applicant store
        HIREBOARD_CLIENT_REQUEST_TIMEOUT=15     - Per-request timeout in seconds
        HIREBOARD_CLIENT_USER_EMAIL=...         - Acting user, sent with every request
"""
from pydantic_settings import BaseSettings
from typing import Optional


class StoreSettings(BaseSettings):
    """
    Applicant store (FastAPI service) settings.

    SQLite is fine for local use. For a hosted store point
    HIREBOARD_DATABASE_URL at PostgreSQL; pool settings only apply there.
    """
    database_url: str = "sqlite:///./data/hireboard.db"

    # Database connection pool (PostgreSQL only)
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800

    seed_demo_data: bool = True

    # Label for notes/activities when the caller sends no X-HireBoard-User header
    default_actor: str = "System"

    rate_limit_enabled: bool = True

    # CORS allowed origins (comma-separated, e.g. "http://localhost:3000,https://myapp.com")
    allowed_origins: str = "*"

    # List endpoint paging
    default_page_size: int = 50
    max_page_size: int = 200

    class Config:
        env_prefix = "HIREBOARD_"
        env_file = ".env"
        extra = "ignore"


class ClientSettings(BaseSettings):
    """Pipeline board client settings."""
    api_base_url: str = "http://localhost:8000/api"
    request_timeout: float = 15.0

    # Session identity
    user_email: Optional[str] = None
    user_name: Optional[str] = None
    api_token: Optional[str] = None

    # Skip the PUT when an applicant is dropped onto the column it is already in
    skip_same_stage_moves: bool = True

    class Config:
        env_prefix = "HIREBOARD_CLIENT_"
        env_file = ".env"
        extra = "ignore"


class Settings(BaseSettings):
    """Combined application settings."""
    store: StoreSettings = StoreSettings()
    client: ClientSettings = ClientSettings()

    class Config:
        env_prefix = "HIREBOARD_"
        env_file = ".env"
        extra = "ignore"


# Global settings instance
settings = Settings()
