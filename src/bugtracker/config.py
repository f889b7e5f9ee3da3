from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, fields

ENV_PREFIX = "BUGTRACKER_"


@dataclass(frozen=True)
class BugTrackerConfig:
    db_path: str = "bugtracker.db"
    host: str = "127.0.0.1"
    port: int = 5000
    env: str = "production"  # "development" adds stack traces to error bodies
    secret_key: str = "change-me"
    token_max_age: int = 30 * 24 * 3600  # seconds
    client_url: str = "http://localhost:5173"
    default_page_size: int = 10
    max_page_size: int = 100
    log_level: str = "INFO"

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BugTrackerConfig:
        """Build a config from ``BUGTRACKER_*`` variables, e.g. ``BUGTRACKER_PORT``."""
        environ = os.environ if environ is None else environ
        values: dict[str, object] = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = int(raw) if f.type in (int, "int") else raw
        return cls(**values)  # type: ignore[arg-type]
