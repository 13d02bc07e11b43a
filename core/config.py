from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Blog API"
    APP_VERSION: str = "1.0.0"
    APP_DESCRIPTION: str = """
    Minimal blogging API.

    ## Features
    * User registration and bearer token authentication
    * Post creation, search and management
    * Categories
    * Liking and unliking posts

    ## Rate Limits
    * Login: 5 attempts per minute
    * Posts: 5 posts per minute
    * Likes: 10 like operations per minute
    """
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"
    OPENAPI_URL: str = "/openapi.json"
    OPENAPI_TAGS: list[dict] = [
        {
            "name": "auth",
            "description": "Registration, login, logout and current user lookup"
        },
        {
            "name": "posts",
            "description": "Post creation, retrieval, search and management operations"
        },
        {
            "name": "categories",
            "description": "Category creation, retrieval and management operations"
        },
        {
            "name": "likes",
            "description": "Liking and unliking posts"
        },
    ]

    # CORS
    CORS_ALLOWED_ORIGINS: list[str] = ["http://localhost:5173", "http://localhost"]

    # Database
    DATABASE_URL: str = "sqlite:///./blog.db"
    SQL_ECHO: bool = False

    # JWT
    SECRET_KEY: str = "change-me-please-use-at-least-32-characters"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    JWT_ISSUER: str = "BlogApi"
    JWT_AUDIENCE: str = "BlogApp"

    # Accounts
    PLACEHOLDER_EMAIL_DOMAIN: str = "example.com"

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = True
    LOGIN_ATTEMPTS_PER_MINUTE: int = 5
    POSTS_PER_MINUTE: int = 5
    LIKES_PER_MINUTE: int = 10

    # Integrity reconciliation, 0 disables the background job
    INTEGRITY_CHECK_INTERVAL_SECONDS: int = 3600

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    SEED_DEMO_DATA: bool = False

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    # Get the current file's directory
    current_dir = Path(__file__).resolve().parent
    # Go up one level to the project root
    root_dir = current_dir.parent

    # Initialize settings with explicit .env path
    return Settings(_env_file=root_dir / ".env")
