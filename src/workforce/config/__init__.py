import os


def get_settings_module() -> str:
    # Environment comes from APP_ENV, defaulting to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "workforce.config.production"

    if env in {"test", "testing"}:
        return "workforce.config.testing"

    return "workforce.config.development"
