from typing import List, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    GOOGLE_API_KEY: str
    GEMINI_API_BASE: str = "https://generativelanguage.googleapis.com/v1beta"
    ENVIRONMENT: str = "production"

    # Best quality first, highest availability last
    FALLBACK_MODELS: List[str] = [
        "gemini-2.5-pro",
        "gemini-2.5-flash",
        "gemini-2.5-flash-lite",
    ]
    ATTEMPT_TIMEOUT_SECONDS: float = 60.0  # 0 disables the per-attempt timeout
    CONNECT_TIMEOUT_SECONDS: float = 10.0
    MAX_OUTPUT_TOKENS: Optional[int] = None

    DATABASE_PATH: str = "synapse_store.db"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

settings = Settings()
