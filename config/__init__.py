import os

_SETTINGS_BY_ENV = {
    "prod": "config.production",
    "production": "config.production",
    "test": "config.testing",
    "testing": "config.testing",
}


def get_settings_module() -> str:
    """Dotted settings module for APP_ENV; anything unknown means development."""
    return _SETTINGS_BY_ENV.get(os.getenv("APP_ENV", "development").strip().lower(), "config.development")
