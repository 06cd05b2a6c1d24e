"""Loading the optional YAML settings file."""

import io
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from lemp.errors import ConfigError
from lemp.models.config import LempConfig


logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "LEMP_CONFIG"
DEFAULT_CONFIG_FILE = "lemp.yaml"


class ConfigManager:
    """Finds, reads and validates the settings file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        explicit = path or os.environ.get(CONFIG_ENV_VAR)
        self.explicit = bool(explicit)
        self.path = Path(explicit) if explicit else Path(DEFAULT_CONFIG_FILE)
        self.yaml = YAML(typ="safe")
        self.config: Optional[LempConfig] = None

    def load(self) -> LempConfig:
        """Load settings; a missing default file just means defaults."""
        if not self.path.exists():
            if self.explicit:
                raise ConfigError(f"Config file not found: {self.path}")
            logger.debug(f"No config file at {self.path}, using defaults")
            self.config = LempConfig()
            return self.config

        try:
            data = self.yaml.load(self.path.read_text()) or {}
        except YAMLError as e:
            raise ConfigError(f"Invalid YAML in {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {self.path} must contain a mapping")

        try:
            self.config = LempConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid config {self.path}: {e}") from e

        logger.debug(f"Loaded config: {self.path}")
        return self.config


def dump_config(config: LempConfig) -> str:
    """Render settings as YAML."""
    yaml = YAML()
    yaml.default_flow_style = False
    data: Dict[str, Any] = config.dict()
    stream = io.StringIO()
    yaml.dump(data, stream)
    return stream.getvalue()
