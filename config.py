# config.py
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


class Settings(BaseModel):
    """
    Application settings, read from the environment (and .env).
    """
    env: str = os.getenv("APP_ENV", "development")
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./database.db")

    ollama_base_url: str = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "llama3.1:8b")
    temperature: float = float(os.getenv("MODEL_TEMPERATURE", "0.7"))
    max_tokens: int = int(os.getenv("MODEL_MAX_TOKENS", "2000"))

    # identity stand-in: a trusted header set by the auth proxy, or a cookie
    identity_header: str = os.getenv("IDENTITY_HEADER", "X-User-Id")
    identity_cookie: str = os.getenv("IDENTITY_COOKIE", "chat_user_id")

    allowed_origins: List[str] = os.getenv("ALLOWED_ORIGINS", "http://localhost:8000").split(",")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
