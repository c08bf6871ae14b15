"""Application settings loaded from environment variables."""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


class Settings(BaseSettings):
    """Process configuration. All values come from environment variables.

    Monitoring intervals and enabled flags are *not* here: they live in the
    JSON settings file edited from the admin panel and are re-read on every
    scheduler restart (see ``src.settings_store``).
    """

    # JSON settings file shared with the admin panel
    settings_path: Path = Field(default=Path("settings.json"))

    # Scheduler
    scheduler_timezone: str = Field(default="Asia/Jakarta")

    # Check functions, as "package.module:function" dotted paths
    check_signal_warning: str = Field(default="")
    check_signal_recap: str = Field(default="")
    check_offline: str = Field(default="")

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_check_paths(self) -> dict[str, str]:
        """Return the configured check paths keyed by job kind value."""
        return {
            "signalWarning": self.check_signal_warning.strip(),
            "signalRecap": self.check_signal_recap.strip(),
            "offlineCheck": self.check_offline.strip(),
        }


settings = Settings()
