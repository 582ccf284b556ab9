"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "sqlite:///./goaltracker.db"

    # Hosted auth backend
    SUPABASE_URL: str = "http://localhost:54321"
    SUPABASE_ANON_KEY: str = ""
    SUPABASE_SERVICE_ROLE_KEY: str = ""

    # Access tokens are issued by the hosted auth server and signed with the project secret
    SUPABASE_JWT_SECRET: str = "super-secret-jwt-token-with-at-least-32-characters-long"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: str = "authenticated"

    # Frontend URL for CORS and password reset redirects
    FRONTEND_URL: str = "http://localhost:4321"
    PASSWORD_RESET_REDIRECT_PATH: str = "/auth/reset"

    # Synthetic activity generation
    DEFAULT_TIMEZONE: str = "Europe/Warsaw"

    LOG_LEVEL: str = "INFO"

    @property
    def SUPABASE_AUTH_URL(self) -> str:
        return f"{self.SUPABASE_URL.rstrip('/')}/auth/v1"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create a global settings instance for direct import
settings = get_settings()
