"""Pydantic settings loaded from .env, with conf.json overlay."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent

# ---------------------------------------------------------------------------
# conf.json: editor runtime config (separate from .env overrides)
# ---------------------------------------------------------------------------


def get_flowcanvas_dir() -> Path:
    """Resolve the flowcanvas data directory. FLOWCANVAS_DIR env var or ~/.config/flowcanvas."""
    d = os.environ.get("FLOWCANVAS_DIR", "")
    return Path(d).expanduser() if d else Path.home() / ".config" / "flowcanvas"


class FlowcanvasConfig(BaseModel):
    log_level: str = ""
    log_file: str = ""
    cors_allow_all_origins: bool | None = None  # None = use Settings default
    session_ttl_seconds: int | None = None
    max_expression_length: int | None = None


_logger = logging.getLogger(__name__)


def load_conf() -> FlowcanvasConfig:
    """Load conf.json from the flowcanvas data directory."""
    conf_path = get_flowcanvas_dir() / "conf.json"
    if conf_path.exists():
        try:
            return FlowcanvasConfig.model_validate_json(conf_path.read_text())
        except Exception:
            _logger.warning("Failed to parse %s, using defaults", conf_path, exc_info=True)
    return FlowcanvasConfig()


def save_conf(config: FlowcanvasConfig) -> None:
    """Save conf.json to the flowcanvas data directory."""
    flowcanvas_dir = get_flowcanvas_dir()
    flowcanvas_dir.mkdir(parents=True, exist_ok=True)
    (flowcanvas_dir / "conf.json").write_text(config.model_dump_json(indent=2))


# ---------------------------------------------------------------------------
# Bootstrap: load .env, load conf.json
# ---------------------------------------------------------------------------

_env_file = BASE_DIR / ".env"
load_dotenv(_env_file)
_conf = load_conf()

# ---------------------------------------------------------------------------
# Settings (pydantic-settings): .env / env vars override conf.json defaults
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    DEBUG: bool = False

    CORS_ALLOW_ALL_ORIGINS: bool = (
        _conf.cors_allow_all_origins if _conf.cors_allow_all_origins is not None else True
    )

    # Idle editor sessions are dropped after this many seconds
    SESSION_TTL_SECONDS: int = (
        _conf.session_ttl_seconds if _conf.session_ttl_seconds is not None else 3600
    )
    MAX_EXPRESSION_LENGTH: int = (
        _conf.max_expression_length if _conf.max_expression_length is not None else 2000
    )

    LOG_LEVEL: str = _conf.log_level or "INFO"
    LOG_FILE: str = _conf.log_file or ""
    LOG_MAX_BYTES: int = 10_485_760
    LOG_BACKUP_COUNT: int = 5

    model_config = ConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
