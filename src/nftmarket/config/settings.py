"""TOML config loading, profiles and environment overrides."""

from __future__ import annotations

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any, Mapping

# Default config search path (project root or cwd)
_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent.parent / "config"
_CWD_CONFIG = Path.cwd() / "config"

# Environment variables checked in order; first non-empty wins.
MARKETPLACE_ADDRESS_ENV = ("MARKETPLACE_ADDRESS", "REACT_APP_MARKETPLACE_ADDRESS")
WALLET_PRIVATE_KEY_ENV = ("WALLET_PRIVATE_KEY",)


def _load_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base. Override values take precedence."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _find_config_dir(config_dir: Path | None = None) -> Path:
    if config_dir is not None:
        return config_dir
    if _CWD_CONFIG.exists():
        return _CWD_CONFIG
    return _CONFIG_DIR


def _first_env(names: tuple[str, ...], environ: Mapping[str, str]) -> str | None:
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def load_config(profile: str | None = None, config_dir: Path | None = None) -> dict[str, Any]:
    """Load merged config from default.toml and optional profile overlay."""
    directory = _find_config_dir(config_dir)
    default_path = directory / "default.toml"
    if not default_path.exists():
        return {}
    base = _load_toml(default_path)
    if profile:
        profile_path = directory / f"{profile}.toml"
        if profile_path.exists():
            overlay = _load_toml(profile_path)
            base = _deep_merge(base, overlay)
    return base


def apply_env_overrides(raw: dict[str, Any], environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Overlay environment-provided marketplace address and wallet key onto raw config."""
    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    address = _first_env(MARKETPLACE_ADDRESS_ENV, env)
    if address:
        overrides["marketplace"] = {"address": address}
    key = _first_env(WALLET_PRIVATE_KEY_ENV, env)
    if key:
        overrides["wallet"] = {"private_key": key}
    return _deep_merge(raw, overrides)


def get_settings(
    profile: str | None = None,
    config_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Return Settings instance from merged config and environment."""
    raw = apply_env_overrides(load_config(profile, config_dir), environ)
    return Settings.from_dict(raw)


class Settings:
    """Application settings from TOML config."""

    def __init__(
        self,
        *,
        ledger: dict[str, Any] | None = None,
        marketplace: dict[str, Any] | None = None,
        wallet: dict[str, Any] | None = None,
        logging: dict[str, Any] | None = None,
    ):
        self.ledger = ledger or {}
        self.marketplace = marketplace or {}
        self.wallet = wallet or {}
        self.logging = logging or {}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Settings:
        return cls(
            ledger=raw.get("ledger"),
            marketplace=raw.get("marketplace"),
            wallet=raw.get("wallet"),
            logging=raw.get("logging"),
        )

    # Convenience accessors with defaults
    @property
    def node_url(self) -> str:
        return self.ledger.get("node_url", "https://fullnode.testnet.aptoslabs.com/v1")

    @property
    def request_timeout_sec(self) -> float:
        return float(self.ledger.get("request_timeout_sec", 30.0))

    @property
    def finality_timeout_sec(self) -> float:
        return float(self.ledger.get("finality_timeout_sec", 60.0))

    @property
    def poll_interval_sec(self) -> float:
        return float(self.ledger.get("poll_interval_sec", 1.0))

    @property
    def marketplace_address(self) -> str:
        return str(self.marketplace.get("address") or "")

    @property
    def page_size(self) -> int:
        return int(self.marketplace.get("page_size", 8))

    @property
    def wallet_private_key(self) -> str:
        return str(self.wallet.get("private_key") or "")

    @property
    def logging_level(self) -> str:
        return self.logging.get("level", "INFO").upper()

    @property
    def logging_format(self) -> str:
        return self.logging.get("format", "console")

    @property
    def logging_level_num(self) -> int:
        return getattr(logging, self.logging_level, logging.INFO)


def configure_logging(settings: Settings) -> None:
    """Configure structlog with settings. Call once at application entry."""
    import structlog

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if settings.logging_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(settings.logging_level_num),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
