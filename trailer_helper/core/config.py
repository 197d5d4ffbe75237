# Copyright (c) 2025 Trae AI. All rights reserved.

import yaml
from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, ValidationError
from .exceptions import ConfigError


class Config(BaseModel):
    database_path: Path
    plugin_name: str = "JavTube"
    provider_key: Optional[str] = None
    enable_trailers: bool = True
    trailer_schedule_hour: int = Field(default=1, ge=0, le=23)
    server_port: int = 5000
    server_host: str = "0.0.0.0"
    verbose: bool = False

    @property
    def provider_id_key(self) -> str:
        # Items are tagged with the plugin name unless a key is configured
        return self.provider_key or self.plugin_name

    @classmethod
    def load(cls, path: str = "config.yaml") -> "Config":
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config in {path}: {e}") from e
