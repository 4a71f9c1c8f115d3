"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Mandate Compliance Validator"

    # ── Rule sources ─────────────────────────────────────
    # Empty path = use the built-in tables from rules/defaults.py
    mandates_path: str = ""
    classification_rules_path: str = ""

    # ── Scoring ──────────────────────────────────────────
    compliance_pass_threshold: int = Field(default=90, ge=0, le=100)

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
