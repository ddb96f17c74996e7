import os

SETTINGS_MODULES = {
    "development": "config.development",
    "dev": "config.development",
    "local": "config.development",
    "testing": "config.testing",
    "test": "config.testing",
    "ci": "config.testing",
    "production": "config.production",
    "prod": "config.production",
    "staging": "config.production",
}


def get_settings_module() -> str:
    """Settings module named by APP_ENV (development when unset)."""
    env = (os.getenv("APP_ENV") or "development").strip().lower()
    try:
        return SETTINGS_MODULES[env]
    except KeyError:
        allowed = ", ".join(sorted(SETTINGS_MODULES))
        raise RuntimeError(f"Unknown APP_ENV {env!r}; expected one of: {allowed}") from None
