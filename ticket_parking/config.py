"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./ticket_parking.db"

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 8080

    # ── Security ──────────────────────────────────────────────────────────
    API_KEY: Optional[str] = None   # Set in .env to enable auth on ticket endpoints

    # ── Key-value store keys ──────────────────────────────────────────────
    ACTIVE_TICKETS_KEY: str = "@ticket_parking:active_tickets"
    HISTORY_TICKETS_KEY: str = "@ticket_parking:history_tickets"

    # ── Billing ───────────────────────────────────────────────────────────
    DEFAULT_PRICE_PER_HOUR: int = 100    # Used when a new ticket omits its rate
    CURRENCY: str = "FCFA"

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"              # Blank disables the rotating file log

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
