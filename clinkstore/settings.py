import logging
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from clinkstore.models.config import StoragesConfig

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CLINKSTORE_", extra="ignore")

    storages: StoragesConfig = StoragesConfig()
    storages_file: str = ""

    log_level: str = "INFO"
    log_json: bool = False

    def get_storages_config(self) -> StoragesConfig:
        """Return the storages configuration, preferring ``storages_file`` when set."""
        if not self.storages_file:
            return self.storages
        logger.info("Loading storages configuration from %s", self.storages_file)
        return StoragesConfig.model_validate_json(Path(self.storages_file).read_text())


settings = Settings()
