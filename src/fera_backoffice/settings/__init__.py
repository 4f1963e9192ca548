import os


def get_settings_module() -> str:
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "fera_backoffice.settings.production"

    if env in {"test", "testing"}:
        return "fera_backoffice.settings.testing"

    return "fera_backoffice.settings.development"
