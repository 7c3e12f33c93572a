"""Configuration for Tombs."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Config:
    """Application configuration."""

    database_url: str = "sqlite:///./tombs.db"
    host: str = "localhost"
    port: int = 1965
    certfile: Path | None = None
    keyfile: Path | None = None
    log_level: str = "INFO"
    log_file: Path | None = None
    json_logs: bool = False
    hash_fingerprints: bool = True
    seed: int | None = None  # fixed dungeon seed, mostly for testing

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        certfile = os.getenv("TOMBS_CERTFILE")
        keyfile = os.getenv("TOMBS_KEYFILE")
        log_file = os.getenv("TOMBS_LOG_FILE")
        seed = os.getenv("TOMBS_SEED")

        return cls(
            database_url=os.getenv("TOMBS_DATABASE_URL", cls.database_url),
            host=os.getenv("TOMBS_HOST", cls.host),
            port=int(os.getenv("TOMBS_PORT", str(cls.port))),
            certfile=Path(certfile) if certfile else None,
            keyfile=Path(keyfile) if keyfile else None,
            log_level=os.getenv("TOMBS_LOG_LEVEL", cls.log_level),
            log_file=Path(log_file) if log_file else None,
            json_logs=os.getenv("TOMBS_JSON_LOGS", "").lower()
            in ("true", "1", "yes"),
            hash_fingerprints=os.getenv("TOMBS_HASH_FINGERPRINTS", "true").lower()
            not in ("false", "0", "no"),
            seed=int(seed) if seed else None,
        )
