from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

BACKENDS = ("file", "firestore", "gcs")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application settings, normally read from environment variables."""

    secret_key: str = "development-secret-change-me"
    backend: str = "file"
    key: str = "recipes"
    data_dir: str = "instance"
    project: Optional[str] = None
    collection_name: str = "app_state"
    bucket_name: Optional[str] = None
    seed: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""

        return cls(
            secret_key=os.environ.get("FLASK_SECRET_KEY", "development-secret-change-me"),
            backend=os.environ.get("RECIPES_BACKEND", "file").strip().lower(),
            key=os.environ.get("RECIPES_KEY", "recipes"),
            data_dir=os.environ.get("RECIPES_DATA_DIR", "instance"),
            project=os.environ.get("GCP_PROJECT"),
            collection_name=os.environ.get("RECIPES_COLLECTION", "app_state"),
            bucket_name=os.environ.get("GCS_BUCKET"),
            seed=_flag(os.environ.get("RECIPES_SEED")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


__all__ = ["BACKENDS", "LOG_FORMAT", "Settings"]
