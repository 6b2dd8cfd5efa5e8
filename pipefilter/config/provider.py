"""Configuration provider following Black Box Design principles."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import yaml

from pipefilter.modules.registry.registry import ProgramRegistry
from pipefilter.modules.transformations.errors import ConfigurationError
from pipefilter.modules.transformations.options import parse_option_string

logger = logging.getLogger("pipefilter.config")

DEFAULT_ENCODING = "utf-8"


@dataclass
class TransformationConfig:
    """Settings injected into transformation plugins."""
    timeout_seconds: Optional[float]
    encoding: str = DEFAULT_ENCODING
    default_transformations: Dict[str, List[Any]] = field(default_factory=dict)
    programs: Union[List[Dict[str, Any]], Dict[Any, Any]] = field(default_factory=list)
    source: str = "environment"

    def default_options(self, name: str) -> List[Any]:
        """Default options for the transformation called ``name``."""
        return list(self.default_transformations.get(name, []))

    def build_registry(self) -> ProgramRegistry:
        """Build the program registry from the configured programs."""
        return ProgramRegistry.from_config(self.programs)


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_transformation_config(self) -> TransformationConfig:
        """Get transformation configuration."""
        ...

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration."""
        ...


def _parse_timeout(value: Any, source: str) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid timeoutSeconds in {source}: {value!r}")
    if timeout <= 0:
        raise ConfigurationError(f"timeoutSeconds must be positive in {source}, got {timeout}")
    return timeout


class YamlConfigProvider:
    """File-based configuration provider.

    Example file::

        timeoutSeconds: 10
        encoding: utf-8
        defaultTransformations:
          External: [0, "", 1, 1]
        programs:
          - index: 0
            path: /usr/bin/tidy
            args: "-f /dev/null -i -wrap -q"
    """

    def __init__(self, config_path: Union[str, Path]):
        self.config_path = Path(config_path)
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        """Read and sanity-check the configuration file."""
        if not self.config_path.exists():
            raise ConfigurationError(f"Config file not found: {self.config_path}")

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {self.config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Top level of {self.config_path} must be a mapping")

        defaults = data.get("defaultTransformations", {})
        if not isinstance(defaults, dict):
            raise ConfigurationError("defaultTransformations must be a mapping of name to options")
        for name, options in defaults.items():
            if not isinstance(options, (list, str)):
                raise ConfigurationError(f"Default options for {name} must be a list or option string")

        logger.info(f"Configuration loaded from {self.config_path}")
        return data

    def get_transformation_config(self) -> TransformationConfig:
        """Get transformation configuration from the file."""
        source = str(self.config_path)
        defaults = {
            name: parse_option_string(options) if isinstance(options, str) else list(options)
            for name, options in self._data.get("defaultTransformations", {}).items()
        }

        return TransformationConfig(
            timeout_seconds=_parse_timeout(self._data.get("timeoutSeconds"), source),
            encoding=self._data.get("encoding", DEFAULT_ENCODING),
            default_transformations=defaults,
            programs=self._data.get("programs") or [],
            source=source,
        )

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration from the file."""
        return LoggingConfig(level=str(self._data.get("logLevel", "INFO")).upper())


class EnvConfigProvider:
    """Environment-based configuration provider.

    Programs can only come from a file named by PIPEFILTER_CONFIG; the other
    variables override values from that file.
    """

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def get_transformation_config(self) -> TransformationConfig:
        """Get transformation configuration from environment variables."""
        config_path = self.environ.get("PIPEFILTER_CONFIG")
        if config_path:
            config = YamlConfigProvider(config_path).get_transformation_config()
        else:
            config = TransformationConfig(timeout_seconds=None)

        timeout = _parse_timeout(self.environ.get("PIPEFILTER_TIMEOUT_SECONDS"), "environment")
        if timeout is not None:
            config.timeout_seconds = timeout

        config.encoding = self.environ.get("PIPEFILTER_ENCODING", config.encoding)

        external_options = self.environ.get("PIPEFILTER_EXTERNAL_OPTIONS")
        if external_options is not None:
            config.default_transformations["External"] = parse_option_string(external_options)

        return config

    def get_logging_config(self) -> LoggingConfig:
        """Get logging configuration from environment variables."""
        return LoggingConfig(level=self.environ.get("LOG_LEVEL", "INFO").upper())
