"""TOML configuration loader for the pantry service."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class ClaudeConfig:
    api_key: str = ""
    model: str = "claude-sonnet-4-5"


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = "gemini-2.0-flash"


@dataclass
class ExtractionConfig:
    backend: str = "claude"
    max_tokens: int = 2048
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)


@dataclass
class RateLimitConfig:
    window_seconds: float = 60.0
    max_requests: int = 10


@dataclass
class DatabaseConfig:
    path: str = "~/.config/pantry/inventory.db"


@dataclass
class LookupConfig:
    base_url: str = "https://world.openfoodfacts.org"
    timeout: float = 10.0


@dataclass
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class PantryConfig:
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    lookup: LookupConfig = field(default_factory=LookupConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> PantryConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    API keys, the rate limit, the database path and the log level can be
    overridden via environment variables.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    ext = raw.get("extraction", {})
    rl = raw.get("rate_limit", {})
    db = raw.get("database", {})
    lku = raw.get("lookup", {})
    srv = raw.get("server", {})
    log = raw.get("logging", {})

    claude_cfg = ext.get("claude", {})
    gemini_cfg = ext.get("gemini", {})

    # Resolve API keys: config file → environment variable
    claude_api_key = claude_cfg.get("api_key", "") or os.environ.get(
        "ANTHROPIC_API_KEY", ""
    )
    gemini_api_key = gemini_cfg.get("api_key", "") or os.environ.get(
        "GEMINI_API_KEY", ""
    )

    # Environment → config file for operational knobs
    max_requests = rl.get("max_requests", 10)
    env_max = os.environ.get("RATE_LIMIT_MAX_REQUESTS")
    if env_max:
        try:
            max_requests = int(env_max)
        except ValueError:
            raise ValueError(
                f"RATE_LIMIT_MAX_REQUESTS must be an integer, got {env_max!r}"
            ) from None

    return PantryConfig(
        extraction=ExtractionConfig(
            backend=ext.get("backend", "claude"),
            max_tokens=ext.get("max_tokens", 2048),
            claude=ClaudeConfig(
                api_key=claude_api_key,
                model=claude_cfg.get("model", "claude-sonnet-4-5"),
            ),
            gemini=GeminiConfig(
                api_key=gemini_api_key,
                model=gemini_cfg.get("model", "gemini-2.0-flash"),
            ),
        ),
        rate_limit=RateLimitConfig(
            window_seconds=rl.get("window_seconds", 60.0),
            max_requests=max_requests,
        ),
        database=DatabaseConfig(
            path=os.environ.get("PANTRY_DB_PATH")
            or db.get("path", "~/.config/pantry/inventory.db"),
        ),
        lookup=LookupConfig(
            base_url=lku.get("base_url", "https://world.openfoodfacts.org"),
            timeout=lku.get("timeout", 10.0),
        ),
        server=ServerConfig(
            host=srv.get("host", "127.0.0.1"),
            port=srv.get("port", 8000),
        ),
        logging=LoggingConfig(
            level=os.environ.get("LOG_LEVEL") or log.get("level", "INFO"),
        ),
    )
