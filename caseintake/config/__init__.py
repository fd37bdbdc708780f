"""Configuration loading for caseintake.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from caseintake.config import get_settings

    settings = get_settings()
    interval = settings.panel.poll_interval_ms
"""

from functools import lru_cache

from caseintake.config.loader import load_config
from caseintake.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. config/default.toml (base configuration)
    3. config/{CASEINTAKE_ENV}.toml (environment overrides)
    4. CASEINTAKE_* environment variables (runtime overrides)

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.
    """
    config_dict = load_config()
    set_toml_config(config_dict)

    # pydantic-settings gives env vars priority over the TOML source
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
