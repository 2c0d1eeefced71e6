"""
Process configuration.
Settings are read once from the environment (after python-dotenv has loaded an optional env file)
and passed explicitly into the app factory; nothing reads credentials at import time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import load_dotenv

from wallet_api.exceptions import ConfigurationError

XAMAN_BASE_URL = "https://xumm.app/api/v1/platform"
XRPL_DEVNET_URL = "https://s.devnet.rippletest.net:51234"


@dataclass(frozen=True)
class Settings:
    xaman_api_key: str
    xaman_api_secret: str
    xaman_base_url: str = XAMAN_BASE_URL
    xaman_force_network: str = "DEVNET"
    xaman_payload_expire: int = 300
    app_url: str = "http://localhost:3002"
    xrpl_network_url: str = XRPL_DEVNET_URL
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Build settings from environment variables.
        Raises ConfigurationError if XAMAN_API_KEY / XAMAN_API_SECRET are missing or a numeric value is invalid.
        """
        env = os.environ if environ is None else environ

        api_key = (env.get("XAMAN_API_KEY") or "").strip()
        api_secret = (env.get("XAMAN_API_SECRET") or "").strip()
        missing = [name for name, value in [("XAMAN_API_KEY", api_key), ("XAMAN_API_SECRET", api_secret)] if not value]
        if missing:
            raise ConfigurationError(f"Missing required environment variables: {', '.join(missing)}")

        return cls(
            xaman_api_key=api_key,
            xaman_api_secret=api_secret,
            xaman_base_url=(env.get("XAMAN_BASE_URL") or XAMAN_BASE_URL).strip().rstrip("/"),
            xaman_force_network=(env.get("XAMAN_FORCE_NETWORK") or "DEVNET").strip(),
            xaman_payload_expire=_int_setting(env, "XAMAN_PAYLOAD_EXPIRE", 300),
            app_url=(env.get("APP_URL") or "http://localhost:3002").strip().rstrip("/"),
            xrpl_network_url=(env.get("XRPL_NETWORK_URL") or XRPL_DEVNET_URL).strip(),
            host=(env.get("HOST") or "0.0.0.0").strip(),
            port=_int_setting(env, "PORT", 8080),
            log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
        )


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = int(str(raw).strip(), 10)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def load_settings(env_file: str | None = None) -> Settings:
    """Load an optional env file (overriding the process env) and build Settings."""
    if env_file and os.path.isfile(env_file):
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=False)
    return Settings.from_env()
