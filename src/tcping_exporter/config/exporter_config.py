"""
Loading and validation of the exporter's YAML configuration file.
"""
import logging
from typing import List

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from tcping_exporter.contracts.target import PingPolicy, Target

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the configuration file is missing, unreadable or malformed."""


class ExporterConfig(BaseModel):
    """
    Parsed configuration: the targets to probe and the shared ping policy.
    """

    targets: List[Target] = Field(default_factory=list)
    ping: PingPolicy

    @field_validator("targets", mode="before")
    @classmethod
    def _none_means_empty(cls, value):
        return [] if value is None else value


def parse_config(text: str, source: str = "<string>") -> ExporterConfig:
    """
    Parse YAML text into an ExporterConfig.

    Raises:
        ConfigError: If the YAML is invalid or does not match the schema.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML in {source}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Error parsing YAML in {source}: top level must be a mapping")
    try:
        return ExporterConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {source}: {e}") from e


def load_config(path: str) -> ExporterConfig:
    """
    Read and parse the configuration file at ``path``.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise ConfigError(f"Error reading YAML file {path}: {e}") from e
    config = parse_config(text, source=path)
    logger.debug(
        f"Loaded {len(config.targets)} targets from {path} "
        f"(count={config.ping.count}, timeout={config.ping.timeout}ms, interval={config.ping.interval}s)"
    )
    return config
