"""Configuration management using Pydantic Settings."""

import logging
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from launchvault.services.spacetrack.config import SpaceTrackConfig

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    """HTTP server binding."""

    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False


class QueryConfig(BaseModel):
    """Bounds applied to every translated launch query."""

    default_limit: int = 100
    max_limit: int = 500
    default_sort: str = "flight_number"

    @model_validator(mode="after")
    def check_limits(self) -> "QueryConfig":
        if self.max_limit < 1:
            raise ValueError("max_limit must be at least 1")
        if not 1 <= self.default_limit <= self.max_limit:
            raise ValueError("default_limit must be between 1 and max_limit")
        return self


class Settings(BaseSettings):
    """Main configuration class."""

    # Paths
    data_dir: Path = Path("data")

    # MongoDB
    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "spacex-api"
    mongo_collection: str = "launch"
    mongo_timeout_ms: int = 5000

    # Space-Track credentials
    spacetrack_identity: str = ""
    spacetrack_password: str = ""

    logfire_token: str = ""

    # Nested configuration sections
    server: ServerConfig = Field(default_factory=ServerConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    spacetrack: SpaceTrackConfig = Field(default_factory=SpaceTrackConfig)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("data_dir", mode="after")
    @classmethod
    def resolve_data_dir(cls, v: Path) -> Path:
        """Resolve data directory to absolute path."""
        return v.resolve()

    @property
    def has_spacetrack_credentials(self) -> bool:
        return bool(self.spacetrack_identity and self.spacetrack_password)

    def load_yaml_config(self) -> None:
        """Load and merge optional YAML overrides from data/config.yaml."""
        config_path = self.data_dir / "config.yaml"

        if not config_path.exists():
            logger.debug(f"No config file at {config_path}, using defaults")
            return

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                yaml_config = yaml.safe_load(f)

            if not yaml_config:
                logger.warning(f"Empty config file: {config_path}")
                return

            for section_name in ["server", "query", "spacetrack"]:
                if section_name in yaml_config:
                    section = getattr(self, section_name)
                    yaml_section = yaml_config[section_name]

                    section_dict = section.model_dump()
                    section_dict.update(yaml_section)

                    new_section = section.__class__(**section_dict)
                    setattr(self, section_name, new_section)

            logger.info(f"Loaded configuration from {config_path}")

        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML config: {e}")
            raise


@lru_cache()
def get_settings() -> Settings:
    """Get singleton Settings instance."""
    settings = Settings()
    settings.load_yaml_config()
    return settings
