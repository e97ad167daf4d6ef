# src/megastock/core/config.py
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from megastock.domain.models import UserRole


class Settings(BaseSettings):
    # App
    app_name: str = "MegaStock Inventory API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # API Keys: mapping API key -> role (JSON string as env var)
    # Format: '{"key_abc123": "admin", "key_xyz789": "viewer"}'
    api_keys: dict[str, UserRole] = Field(default_factory=dict)

    # CORS
    cors_origins: list[str] = Field(default=["*"])

    # Remote store (Supabase). The NEXT_PUBLIC_* names are accepted so an
    # existing frontend .env can be reused.
    remote_store_enabled: bool = False
    supabase_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("supabase_url", "next_public_supabase_url"),
    )
    supabase_anon_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("supabase_anon_key", "next_public_supabase_anon_key"),
    )

    # Local storage mirror
    storage_backend: Literal["file", "memory", "none"] = "file"
    storage_dir: Path = Path("data/storage")
    storage_key: str = "megastock_products"

    # Inventory
    low_stock_threshold: int = Field(default=2, ge=0)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
