"""Configuration and environment settings"""

from pydantic_settings import BaseSettings
from typing import Any, Dict, List
from pathlib import Path


class Settings(BaseSettings):
    """Application configuration"""

    # Optimization service
    API_BASE_URL: str = "http://localhost:8000"
    API_TIMEOUT: float = 60.0  # seconds
    VISUALIZATION_TIMEOUT: float = 30.0  # seconds

    # Session persistence
    SESSION_FILE: str = "~/.blockopt_session.json"

    # Ingestion
    SENTINEL_LABEL: str = "MARK"
    REJECT_DUPLICATE_MARKS: bool = True

    # Optimization request
    OPTIMIZE_TOP_N: int = 3
    CONFIG_PARAMS: Dict[str, Any] = {}  # JSON in .env
    STOCK_PRESETS: str = "500×500×2000,800×400×2000"

    # Logging
    LOG_LEVEL: str = "WARNING"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def get_stock_presets(self) -> List[str]:
        """Get operator-selectable stock descriptors, default first"""
        return [p.strip() for p in self.STOCK_PRESETS.split(",") if p.strip()]

    def get_session_path(self) -> Path:
        """Get session file path"""
        return Path(self.SESSION_FILE).expanduser()


settings = Settings()
