"""
Environment-driven settings.

Values come from the process environment; ``load_settings()`` also reads a
``.env`` file in the working directory when one exists (python-dotenv, which
never overrides variables that are already set).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_BLOB_API_URL = "https://blob.vercel-storage.com"


@dataclass(frozen=True)
class Settings:
    blob_token: str | None = None  # BLOB_READ_WRITE_TOKEN; enables Vercel Blob
    blob_api_url: str = DEFAULT_BLOB_API_URL
    blob_timeout_seconds: float = 10.0
    storage_dir: Path = Path("data")  # Local backend root when no token is set
    log_level: str = "INFO"

    @property
    def storage_backend(self) -> str:
        return "vercel-blob" if self.blob_token else "local"


def load_settings(env_file: str | None = None) -> Settings:
    """Build Settings from the environment (and ``.env`` if present)."""
    load_dotenv(env_file)
    env = os.environ
    return Settings(
        blob_token=env.get("BLOB_READ_WRITE_TOKEN") or None,
        blob_api_url=env.get("BLOB_API_URL", DEFAULT_BLOB_API_URL).rstrip("/"),
        blob_timeout_seconds=float(env.get("BLOB_TIMEOUT_SECONDS", "10")),
        storage_dir=Path(env.get("CONSENT_STORAGE_DIR", "data")),
        log_level=env.get("CONSENT_LOG_LEVEL", "INFO").upper(),
    )
