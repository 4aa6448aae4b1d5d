import os
import logging
from typing import Literal, get_args

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

# Load environment variables only for local development
if os.path.exists(".env"):
    load_dotenv()

StorageMode = Literal["indexed", "flat", "auto"]


class Settings(BaseModel):
    """Process-wide configuration, resolved once at startup"""

    storage_backend: StorageMode = "auto"
    database_url: str = "sqlite:///./strings.db"
    flat_store_path: str = "strings.json"
    log_level: str = "INFO"
    port: int = 8000

    @field_validator("storage_backend", mode="before")
    @classmethod
    def validate_storage_backend(cls, v):
        """Unknown modes fall back to auto instead of failing startup"""
        mode = str(v).strip().lower()
        if mode not in get_args(StorageMode):
            logger.warning(f"⚠️ Unknown STORAGE_BACKEND {v!r}, using 'auto'.")
            return "auto"
        return mode


def get_settings() -> Settings:
    """Read settings from the environment"""
    return Settings(
        storage_backend=os.getenv("STORAGE_BACKEND", "auto"),
        database_url=os.getenv("DATABASE_URL", "sqlite:///./strings.db"),
        flat_store_path=os.getenv("FLAT_STORE_PATH", "strings.json"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        port=int(os.getenv("PORT", 8000)),
    )
