"""
Configuration - đọc từ biến môi trường (.env nếu có)
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Cấu hình của Exam Randomization & Proctoring API"""

    # Question bank
    QUESTION_BANK_FILE: str = "question_bank.json"

    # Server
    LOG_LEVEL: str = "INFO"
    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # Proctoring
    LIVENESS_WINDOW_SECONDS: int = Field(default=120, ge=1, description="Cửa sổ tính is_online (giây)")
    SUSPICION_HIGH_THRESHOLD: int = Field(default=1, ge=1)
    SUSPICION_COMBINED_THRESHOLD: int = Field(default=3, ge=1)

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
