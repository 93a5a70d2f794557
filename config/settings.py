"""
Application settings loaded from environment variables.
"""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ─────────────────────────────────────────────────────────
    database_url: str = "postgresql+asyncpg://localhost:5432/project-auth"
    database_echo: bool = False

    # ── Server ───────────────────────────────────────────────────────────
    port: int = 8080
    host: str = "0.0.0.0"
    debug: bool = False
    cors_origins: list = ["*"]

    # ── Credentials ──────────────────────────────────────────────────────
    bcrypt_rounds: int = 10          # bcrypt cost factor for password hashes
    access_token_bytes: int = 16     # random bytes behind each access token

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
    }


config = Settings()
