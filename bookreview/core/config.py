from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "Bookreview API"
    VERSION: str = "v1"
    DESCRIPTION: str = "A Rest API for a book catalog with reviews and ratings"

    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"  # development, staging, production

    # --- Logging ---
    LOG_LEVEL: str = "INFO"
    LOGGING_EXCLUDE_PATHS: set[str] = {"/health", "/favicon.ico"}

    # --- Database & JWT Secrets ---
    DATABASE_URL: str = "sqlite+aiosqlite:///./bookreview.db"
    JWT_SECRET: str = "dev-only-secret-change-me-0123456789abcdef"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Database Pool Settings (ignored for SQLite)
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600
    DB_POOL_TIMEOUT: int = 30

    # --- HTTP ---
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # --- Pagination ---
    BOOKS_PAGE_SIZE: int = 10
    BOOKS_MAX_PAGE_SIZE: int = 100
    REVIEWS_PAGE_SIZE: int = 5
    REVIEWS_MAX_PAGE_SIZE: int = 50
    SEARCH_PAGE_SIZE: int = 10
    SEARCH_MAX_PAGE_SIZE: int = 50

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def cors_origins_list(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
