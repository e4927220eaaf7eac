from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class StorageConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    type: str
    settings: dict[str, str] = Field(default_factory=dict, alias="config")

    def get(self, name: str, default: str = "") -> str:
        return self.settings.get(name, default)

    def get_flag(self, name: str) -> bool:
        return self.get(name).strip().lower() in TRUTHY


class StoragesConfig(BaseModel):
    default: str = ""
    instances: list[StorageConfig] = []


TRUTHY = {"1", "true", "yes", "on"}
