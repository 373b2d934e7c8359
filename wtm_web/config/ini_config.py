########## ini_config.py

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path

INI_DEFAULT_NAME = "WebTimeMachine.ini"


@dataclass(frozen=True)
class AppSettings:
    cdx_endpoint: str
    archive_base: str
    user_agent: str
    lookback_years: int
    row_limit: int
    index_timeout_seconds: int
    page_timeout_seconds: int
    fetch_workers: int

    default_scheme: str

    log_level: str

    flask_host: str
    flask_port: int
    flask_debug: bool


class IniConfig:
    """
    Adapter around ConfigParser.
    Keeps INI handling out of your app/service code.
    """

    def __init__(self, ini_path: Path):
        self._ini_path = ini_path
        self._cfg = ConfigParser()
        read_ok = self._cfg.read(str(ini_path), encoding="utf-8-sig")
        if not read_ok:
            raise FileNotFoundError(f"INI file not found or unreadable: {ini_path}")

    @property
    def ini_path(self) -> Path:
        return self._ini_path

    @staticmethod
    def from_env_or_default() -> "IniConfig":
        ini_raw = (os.getenv("APP_INI") or "").strip()
        # If APP_INI is not set, default to repo-root-relative ini location
        ini_path = Path(ini_raw) if ini_raw else (Path(__file__).resolve().parents[2] / INI_DEFAULT_NAME)
        return IniConfig(ini_path)

    def _cfg_str(self, section: str, key: str, default: str) -> str:
        return (self._cfg.get(section, key, fallback=default) or "").strip() or default

    def _cfg_positive_int(self, section: str, key: str, default: int) -> int:
        value = self._cfg.getint(section, key, fallback=default)
        if value < 1:
            raise ValueError(f"[{section}] {key} must be a positive integer, got {value}")
        return value

    def load_settings(self) -> AppSettings:
        # Wayback endpoints
        cdx_endpoint = self._cfg_str("wayback", "cdx_endpoint", "https://web.archive.org/cdx/search/cdx")
        archive_base = self._cfg_str("wayback", "archive_base", "https://web.archive.org/web").rstrip("/")
        user_agent = self._cfg_str("wayback", "user_agent", "WebTimeMachine/1.0")

        # Query shape + fetching
        lookback_years = self._cfg_positive_int("wayback", "lookback_years", 10)
        row_limit = self._cfg_positive_int("wayback", "row_limit", 500)
        index_timeout_seconds = self._cfg_positive_int("wayback", "index_timeout_seconds", 30)
        page_timeout_seconds = self._cfg_positive_int("wayback", "page_timeout_seconds", 10)
        fetch_workers = self._cfg_positive_int("wayback", "fetch_workers", 4)

        # URL normalization
        default_scheme = self._cfg_str("url_normalization", "default_scheme", "https")

        log_level = self._cfg_str("logging", "level", "INFO").upper()

        # Flask
        flask_host = self._cfg_str("flask", "host", "127.0.0.1")
        flask_port = self._cfg.getint("flask", "port", fallback=5000)
        flask_debug = self._cfg.getboolean("flask", "debug", fallback=False)

        return AppSettings(
            cdx_endpoint=cdx_endpoint,
            archive_base=archive_base,
            user_agent=user_agent,
            lookback_years=lookback_years,
            row_limit=row_limit,
            index_timeout_seconds=index_timeout_seconds,
            page_timeout_seconds=page_timeout_seconds,
            fetch_workers=fetch_workers,
            default_scheme=default_scheme,
            log_level=log_level,
            flask_host=flask_host,
            flask_port=flask_port,
            flask_debug=flask_debug,
        )
