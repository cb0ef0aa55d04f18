from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigParseError


DEFAULT_PORT = 3030
DEFAULT_EXPIRY_DAYS = 1
DEFAULT_SELF_PING_INTERVAL_SEC = 240

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_int(val: str | None, default: int) -> int:
    if val is None or str(val).strip() == "":
        return default
    try:
        return int(str(val).strip())
    except ValueError:
        return default


def _require_int(name: str, val: str | None, default: int) -> int:
    """Like `_parse_int`, but a present-yet-unparseable value aborts startup."""
    if val is None or str(val).strip() == "":
        return default
    try:
        return int(str(val).strip())
    except ValueError as exc:
        raise ConfigParseError(name, str(val)) from exc


def _parse_bool(val: str | None, default: bool = False) -> bool:
    if val is None or str(val).strip() == "":
        return default
    return str(val).strip().lower() in _TRUTHY


def _optional_str(val: str | None) -> Optional[str]:
    if val is None:
        return None
    s = str(val).strip()
    return s or None


@dataclass(frozen=True)
class Settings:
    """Runtime settings derived from environment variables.

    Only PORT and EXPIRY_DAYS are strict: a value that is set but cannot be
    parsed raises ConfigParseError. Every other input falls back to its
    default when missing or malformed.
    """

    port: int
    expiry_days: int
    database_uri: Optional[str]
    host: str
    https: bool

    self_ping_enabled: bool
    self_ping_interval_sec: int
    self_ping_url: Optional[str]
    external_url: Optional[str]
    external_hostname: Optional[str]

    log_level: str
    log_file: Optional[Path]

    @staticmethod
    def from_env(env: Optional[Mapping[str, str]] = None) -> "Settings":
        if env is None:
            env = os.environ

        port = _require_int("PORT", env.get("PORT"), DEFAULT_PORT)
        if not 0 < port < 65536:
            raise ConfigParseError("PORT", str(port), "out of range")

        expiry_days = _require_int("EXPIRY_DAYS", env.get("EXPIRY_DAYS"), DEFAULT_EXPIRY_DAYS)
        if expiry_days <= 0:
            raise ConfigParseError("EXPIRY_DAYS", str(expiry_days), "must be positive")

        database_uri = _optional_str(env.get("POSTGRES_URI")) or _optional_str(env.get("DATABASE_URL"))
        log_file = _optional_str(env.get("LOG_FILE"))

        return Settings(
            port=port,
            expiry_days=expiry_days,
            database_uri=database_uri,
            host=_optional_str(env.get("HOST")) or "localhost",
            https=_parse_bool(env.get("HTTPS")),
            self_ping_enabled=_parse_bool(env.get("SELF_PING_ENABLED")),
            self_ping_interval_sec=_parse_int(env.get("SELF_PING_INTERVAL"), DEFAULT_SELF_PING_INTERVAL_SEC),
            self_ping_url=_optional_str(env.get("SELF_PING_URL")),
            external_url=_optional_str(env.get("RENDER_EXTERNAL_URL")),
            external_hostname=_optional_str(env.get("RENDER_EXTERNAL_HOSTNAME")),
            log_level=(_optional_str(env.get("LOG_LEVEL")) or "INFO").upper(),
            log_file=Path(log_file).resolve() if log_file else None,
        )

    def as_dict(self) -> dict:
        # never expose the database URI, it usually embeds credentials
        return {
            "port": self.port,
            "expiry_days": self.expiry_days,
            "database_configured": self.database_uri is not None,
            "host": self.host,
            "https": self.https,
            "self_ping_enabled": self.self_ping_enabled,
            "self_ping_interval_sec": self.self_ping_interval_sec,
            "self_ping_url": self.self_ping_url,
            "external_url": self.external_url,
            "external_hostname": self.external_hostname,
            "log_level": self.log_level,
            "log_file": str(self.log_file) if self.log_file else None,
        }


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load a `.env` file into os.environ without overriding variables already set.

    Without a path, `.env` is looked up from the working directory upwards.
    """
    dotenv_path = str(path) if path is not None else find_dotenv(usecwd=True)
    if not dotenv_path:
        return False
    return load_dotenv(dotenv_path, override=False)


def get_settings() -> Settings:
    """Return a process-wide singleton Settings instance."""
    global _SETTINGS_SINGLETON
    try:
        cfg = _SETTINGS_SINGLETON  # type: ignore[name-defined]
    except NameError:
        _SETTINGS_SINGLETON = Settings.from_env()  # type: ignore[assignment]
        cfg = _SETTINGS_SINGLETON
    return cfg  # type: ignore[return-value]
