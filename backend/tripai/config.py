from pydantic_settings import BaseSettings
from functools import lru_cache

DEV_JWT_SECRET = "tripai-dev-secret-change-me"


class Settings(BaseSettings):
    env: str = "dev"
    database_url: str = "sqlite:///./data/tripai.db"

    jwt_secret: str = DEV_JWT_SECRET
    jwt_algorithm: str = "HS256"
    token_ttl_days: int = 7

    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    ai_temperature: float = 0.8
    ai_max_output_tokens: int = 8192
    ai_timeout_seconds: float = 60.0

    cors_origins: list[str] = ["*"]

    def model_post_init(self, __context):
        if self.env == "prod" and self.database_url.startswith("sqlite"):
            raise ValueError(
                "Production requires explicit DATABASE_URL (not SQLite)"
            )
        if self.env == "prod" and self.jwt_secret == DEV_JWT_SECRET:
            raise ValueError(
                "Production requires an explicit JWT_SECRET"
            )

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()
