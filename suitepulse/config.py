"""SuitePulse — Central Configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Hosted Backend ──
    backend_url: str = "http://localhost:54321"
    backend_anon_key: str = ""
    backend_service_role_key: str = ""

    # ── Gateway ──
    gateway_timeout_seconds: float = 10.0
    gateway_max_retries: int = 3
    gateway_retry_base_delay: float = 1.0  # seconds
    gateway_retry_max_delay: float = 30.0

    # ── Metrics ──
    metrics_deadline_seconds: float = 15.0  # Aggregate bound across all sources
    focus_period: str = "7d"  # 1d | 7d | 30d

    # ── AI Provider ──
    anthropic_api_key: Optional[str] = None
    ai_model: str = "claude-sonnet-4-20250514"

    # ── App ──
    log_level: str = "INFO"
    scheduler_enabled: bool = True
    health_probe_seconds: int = 30

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
