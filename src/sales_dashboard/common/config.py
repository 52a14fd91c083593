from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load environment variables (.env)
load_dotenv()

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUTHY


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    app_name: str = "Sales Dashboard"
    sample_data: bool = False
    sample_size: int = 75
    sample_days: int = 30
    currency: str = "R$"
    recent_limit: int = 10
    log_level: str = "INFO"
    environment: str = "dev"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            app_name=os.getenv("SALES_DASHBOARD_APP_NAME", cls.app_name),
            sample_data=_env_bool("SALES_DASHBOARD_SAMPLE_DATA", cls.sample_data),
            sample_size=_env_int("SALES_DASHBOARD_SAMPLE_SIZE", cls.sample_size),
            sample_days=_env_int("SALES_DASHBOARD_SAMPLE_DAYS", cls.sample_days),
            currency=os.getenv("SALES_DASHBOARD_CURRENCY", cls.currency),
            recent_limit=_env_int("SALES_DASHBOARD_RECENT_LIMIT", cls.recent_limit),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
            environment=os.getenv("ENVIRONMENT", cls.environment),
        )


def format_money(amount, currency: str = "R$") -> str:
    return f"{currency} {float(amount):,.2f}"
