import os

_ALIASES = {
    "dev": "development",
    "development": "development",
    "test": "testing",
    "testing": "testing",
    "prod": "production",
    "production": "production",
}


def get_settings_module() -> str:
    """Dotted path of the settings module chosen by APP_ENV (default: development)."""
    env = os.getenv("APP_ENV", "development").strip().lower()
    return f"config.{_ALIASES.get(env, 'development')}"
