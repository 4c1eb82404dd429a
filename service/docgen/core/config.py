# Project Genie Document Service
# Copyright (C) 2025 Project Genie
#
# Licensed under AGPL-3.0. See LICENSE file for details.
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from functools import lru_cache
import json
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from dotenv import load_dotenv

load_dotenv()


def parse_cors_origins(v):
    """Parse CORS origins from various formats.

    Supports:
    - JSON array: ["https://example.com","http://localhost:3000"]
    - Comma-separated: https://example.com,http://localhost:3000
    - Single value: https://example.com
    """
    if isinstance(v, list):
        return v
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return ["http://localhost:3000"]

        try:
            parsed = json.loads(v)
            if isinstance(parsed, list):
                return [str(origin).strip() for origin in parsed if origin]
        except (json.JSONDecodeError, ValueError):
            pass

        if v.startswith("[") and v.endswith("]"):
            v = v[1:-1].strip()

        origins = [origin.strip().strip('"').strip("'") for origin in v.split(",")]
        return [origin for origin in origins if origin] or ["http://localhost:3000"]

    return ["http://localhost:3000"]


class Settings(BaseSettings):
    """Service configuration loaded from environment variables."""

    api_name: str = "Project Genie Document Service"
    environment: str = "local"
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000"  # Stored as string to avoid JSON parsing errors

    # Headless browser pool
    browser_max_browsers: int = 1  # Long-lived Chromium processes kept by the pool
    browser_max_pages: int = 5  # Concurrent leased pages per browser
    browser_idle_timeout_seconds: float = 60.0  # Close an unused browser after this long
    browser_launch_args: str = (
        "--no-sandbox,--disable-setuid-sandbox,--disable-dev-shm-usage,"
        "--disable-accelerated-2d-canvas,--no-first-run,--no-zygote,--disable-gpu"
    )

    # Renderer timings
    page_load_timeout_ms: int = 60000  # Hard ceiling for loading the HTML into the page
    font_ready_timeout_ms: int = 10000
    mermaid_settle_ms: int = 1000  # Fixed delay for client-side diagram rendering
    mermaid_script_url: str = "https://cdn.jsdelivr.net/npm/mermaid@10/dist/mermaid.min.js"
    default_page_format: str = "A4"
    attribution_text: str = "Generated by Project Genie"

    # PDF cache
    pdf_cache_enabled: bool = True
    pdf_cache_ttl_seconds: int = 60 * 60 * 24
    pdf_bucket: str | None = None  # S3 bucket; local storage is used when unset
    artifacts_path: str = "/data/pdf-cache"
    aws_region: str = "us-east-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="DOCGEN_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @model_validator(mode="after")
    def validate_browser_pool(self) -> "Settings":
        """Reject pool sizes that would leave the renderer without a browser."""
        if self.browser_max_browsers < 1:
            raise ValueError("DOCGEN_BROWSER_MAX_BROWSERS must be at least 1")
        if self.browser_max_pages < 1:
            raise ValueError("DOCGEN_BROWSER_MAX_PAGES must be at least 1")
        return self

    @model_validator(mode="after")
    def validate_cache_storage(self) -> "Settings":
        """Warn when production relies on the local cache directory."""
        if self.environment == "production" and self.pdf_cache_enabled and not self.pdf_bucket:
            import warnings
            warnings.warn(
                "⚠️  WARNING: DOCGEN_PDF_BUCKET is not set. "
                f"Cached PDFs will be written to {self.artifacts_path} and lost when the container is replaced.",
                UserWarning
            )
        return self

    @model_validator(mode="before")
    @classmethod
    def fix_cors_origins_format(cls, data: Any) -> Any:
        """Ensure cors_origins is always a string (not parsed as JSON by pydantic_settings)."""
        if isinstance(data, dict) and isinstance(data.get("cors_origins"), list):
            data["cors_origins"] = ",".join(str(v) for v in data["cors_origins"])
        return data

    @property
    def cors_origins_list(self) -> list[str]:
        """Get CORS origins as a list. Parses the string value on access."""
        return parse_cors_origins(self.cors_origins)

    @property
    def launch_args(self) -> list[str]:
        return [arg.strip() for arg in self.browser_launch_args.split(",") if arg.strip()]

    @property
    def artifacts_dir(self) -> Path:
        return Path(self.artifacts_path)


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
