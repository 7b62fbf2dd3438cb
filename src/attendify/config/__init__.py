import os


def get_settings_module() -> str:
    # ENVIRONMENT picks the settings module, default is development
    env = os.getenv("ENVIRONMENT", "development").lower()

    if env in {"prod", "production"}:
        return "attendify.config.production"

    if env in {"test", "testing"}:
        return "attendify.config.testing"

    return "attendify.config.development"
