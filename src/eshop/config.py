"""Process-level settings: environment name, log level and demo seeding.

Storage, event processing and paging limits live in ``domain.toml``. Both are
driven by the same ``PROTEAN_ENV`` variable:
    - unset / "development" → DEBUG logs, demo catalogue seeded at startup
    - "test"                → WARNING logs, no seeding
    - "staging"/"production" → INFO logs as JSON, no seeding

Individual values can always be overridden through their own variables.
"""

import os
from dataclasses import dataclass

_ENV_DEFAULTS = {
    "development": {"log_level": "DEBUG", "seed": True},
    "test": {"log_level": "WARNING", "seed": False},
    "staging": {"log_level": "INFO", "seed": False},
    "production": {"log_level": "INFO", "seed": False},
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    env: str
    log_level: str
    seed: bool = False
    log_dir: str | None = "logs"


def current_env() -> str:
    """Return the active environment name, lower-cased."""
    return (os.getenv("PROTEAN_ENV") or "development").lower()


def _flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUTHY


def load_settings(env: str | None = None) -> Settings:
    """Build settings for ``env`` (or the active environment)."""
    env = (env or current_env()).lower()
    if env not in _ENV_DEFAULTS:
        raise ValueError(f"Unknown environment: {env}")

    defaults = _ENV_DEFAULTS[env]
    return Settings(
        env=env,
        log_level=os.getenv("LOG_LEVEL", defaults["log_level"]).upper(),
        seed=_flag("ESHOP_SEED", defaults["seed"]),
        log_dir=None if env == "test" else os.getenv("ESHOP_LOG_DIR", "logs"),
    )
