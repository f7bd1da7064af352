from typing import List

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    supabase_url: str
    # Service-role key: the backend writes across tables on behalf of the uploader
    supabase_key: str
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    storage_bucket: str = "resumes"
    storage_collision_attempts: int = 3
    # Seconds before an upload status falls back to idle after success
    status_reset_seconds: float = 3.0

    cors_origins: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
