from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./pdfmarket.db"
    database_echo: bool = False

    jwt_secret: str = "dev-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # Экономика баллов
    starting_points_balance: int = 100000
    upload_reward_points: int = 1

    max_upload_size_bytes: int = 20 * 1024 * 1024
    seed_demo_data: bool = False

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
