r"""
Configuration is done via YAML or JSON files.
catalogprep searches for the file :code:`/etc/catalogprep/catalogprep.yml` if no
configuration file is passed.

You can pass multiple configuration files. The filter rules of all files are concatenated in the
order of the files, all other options are taken from the last file defining them.

..  code-block:: bash
    :caption: Valid Run Examples

    catalogprep run /different/path/file.yml
    catalogprep run base.yml additional_filters.yml

Configuration File Structure
----------------------------

..  code-block:: yaml
    :caption: Example of a complete configuration file

    version: config-1.0
    handoff_capacity: 0
    logger:
        level: INFO
        loggers:
            FilterChain: {level: DEBUG}
    metrics:
        enabled: true
        port: 8000
    filters:
        - pattern: '^web'
          target: source
          rewrite: 'www'
        - pattern: '^cpu\.(.+)'
          target: metric
          rewrite: 'cpu_$1'
        - pattern: '^test$'
          target: origin
          discard: true

The filter rules are not validated here.
Invalid rules are rejected and reported when the filter chain is built, see
:code:`catalogprep test config`.
"""

import logging
from copy import deepcopy
from io import StringIO
from logging.config import dictConfig
from typing import Iterable, List, Optional

from attrs import asdict, define, field, validators
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from catalogprep.abc.exceptions import CatalogprepException
from catalogprep.util.defaults import (
    DEFAULT_CONFIG_LOCATION,
    DEFAULT_HANDOFF_CAPACITY,
    DEFAULT_LOG_CONFIG,
    DEFAULT_LOG_DATE_FORMAT,
    DEFAULT_LOG_FORMAT,
    DEFAULT_METRICS_PORT,
)

logger = logging.getLogger("Config")

yaml = YAML(typ="safe", pure=True)
yaml.default_flow_style = False


class InvalidConfigurationError(CatalogprepException):
    """Raise if the configuration is invalid."""


class InvalidConfigurationErrors(InvalidConfigurationError):
    """Raise for multiple configuration related exceptions."""

    errors: List[InvalidConfigurationError]

    def __init__(self, errors: List[InvalidConfigurationError]) -> None:
        self.errors = errors
        super().__init__("\n".join(str(error) for error in errors))


def _convert_section(section_class):
    def convert(value):
        if value is None:
            return section_class()
        if isinstance(value, dict):
            return section_class(**value)
        return value

    return convert


@define(kw_only=True)
class MetricsConfig:
    """the metrics config class used in Configuration"""

    enabled: bool = field(validator=validators.instance_of(bool), default=False)
    """Expose prometheus metrics. Defaults to :code:`false`."""
    port: int = field(validator=validators.instance_of(int), default=DEFAULT_METRICS_PORT)
    """Port of the prometheus exporter. Defaults to :code:`8000`."""


@define(kw_only=True)
class LoggerConfig:
    """The logger config class used in Configuration.
    The resulting dict config is derived from the python logging module:
    https://docs.python.org/3/library/logging.config.html#dictionary-schema-details
    """

    _LOG_LEVELS = (
        logging.NOTSET,  # 0
        logging.DEBUG,  # 10
        logging.INFO,  # 20
        logging.WARNING,  # 30
        logging.ERROR,  # 40
        logging.CRITICAL,  # 50
    )

    level: str = field(
        default="INFO",
        validator=[
            validators.instance_of(str),
            validators.in_([logging.getLevelName(level) for level in _LOG_LEVELS]),
        ],
    )
    """The log level of the root logger. Defaults to :code:`INFO`."""
    format: str = field(default=DEFAULT_LOG_FORMAT, validator=validators.instance_of(str))
    """The format of the log message as supported by the :code:`CatalogprepFormatter`."""
    datefmt: str = field(default=DEFAULT_LOG_DATE_FORMAT, validator=validators.instance_of(str))
    """The date format of the log message. Defaults to :code:`"%Y-%m-%d %H:%M:%S"`."""
    loggers: dict = field(
        validator=validators.deep_mapping(
            key_validator=validators.instance_of(str),
            value_validator=validators.instance_of(dict),
            mapping_validator=validators.instance_of(dict),
        ),
        factory=dict,
    )
    """Log levels of single loggers, e.g. :code:`FilterChain: {level: DEBUG}` to trace every
    discarded record."""

    def __attrs_post_init__(self) -> None:
        valid_levels = [logging.getLevelName(level) for level in self._LOG_LEVELS]
        for logger_name, logger_config in self.loggers.items():
            if logger_config.get("level", "INFO") not in valid_levels:
                raise ValueError(
                    f"invalid level {logger_config.get('level')!r} for logger '{logger_name}'"
                )

    def as_dict_config(self) -> dict:
        """Return the configuration for :code:`logging.config.dictConfig`."""
        log_config = deepcopy(DEFAULT_LOG_CONFIG)
        log_config["formatters"]["catalogprep"].update(
            {"format": self.format, "datefmt": self.datefmt}
        )
        for logger_name, logger_config in self.loggers.items():
            log_config["loggers"].setdefault(logger_name, {}).update(logger_config)
        log_config["loggers"]["root"]["level"] = self.level
        return log_config

    def setup_logging(self) -> None:
        """Setup the logging configuration.
        is called in the :code:`catalogprep.run_catalogprep` module.
        """
        dictConfig(self.as_dict_config())


@define(kw_only=True)
class Configuration:
    """the configuration class"""

    version: str = field(validator=validators.instance_of(str), converter=str, default="unset")
    """Version of the configuration file. Used for documentation purposes only.
    Defaults to :code:`unset`."""
    logger: LoggerConfig = field(
        validator=validators.instance_of(LoggerConfig),
        converter=_convert_section(LoggerConfig),
        factory=LoggerConfig,
    )
    """Logger configuration, see :code:`LoggerConfig`."""
    metrics: MetricsConfig = field(
        validator=validators.instance_of(MetricsConfig),
        converter=_convert_section(MetricsConfig),
        factory=MetricsConfig,
    )
    """Metrics configuration, see :code:`MetricsConfig`."""
    handoff_capacity: int = field(
        validator=[validators.instance_of(int), validators.ge(0)],
        default=DEFAULT_HANDOFF_CAPACITY,
    )
    """Capacity of the handoffs between the stages. :code:`0` means unbuffered rendezvous
    handoffs, where the reader waits until the filter chain took the record.
    Defaults to :code:`0`."""
    filters: list = field(
        validator=[
            validators.instance_of(list),
            validators.deep_iterable(member_validator=validators.instance_of(dict)),
        ],
        converter=lambda value: [] if value is None else value,
        factory=list,
    )
    """Ordered list of filter rules."""
    _sources: tuple = field(validator=validators.instance_of(tuple), factory=tuple, eq=False)

    @property
    def config_paths(self) -> List[str]:
        """Paths of the configuration files."""
        return list(self._sources)

    @staticmethod
    def _read(config_path: str) -> dict:
        try:
            with open(config_path, "r", encoding="utf8") as config_file:
                config_dict = yaml.load(config_file)
        except FileNotFoundError as error:
            raise InvalidConfigurationError(
                f"One or more of the given config file(s) does not exist: {error.filename}"
            ) from error
        except OSError as error:
            raise InvalidConfigurationError(f"{config_path} {error}") from error
        except YAMLError as error:
            raise InvalidConfigurationError(
                f"Invalid yaml or json file: {config_path} {error}"
            ) from error
        if config_dict is None:
            return {}
        if not isinstance(config_dict, dict):
            raise InvalidConfigurationError(
                f"Invalid configuration file: {config_path} does not contain a mapping"
            )
        return config_dict

    @classmethod
    def _create(cls, config_dict: dict, sources: tuple) -> "Configuration":
        config_dict = {key: value for key, value in config_dict.items() if key != "sources"}
        try:
            return cls(**(config_dict | {"sources": sources}))
        except TypeError as error:
            raise InvalidConfigurationError(
                f"Invalid configuration file: {', '.join(sources)} {error.args[0]}"
            ) from error
        except ValueError as error:
            raise InvalidConfigurationError(
                f"Invalid configuration file: {', '.join(sources)} {error}"
            ) from error

    @classmethod
    def from_source(cls, config_path: str) -> "Configuration":
        """Create configuration from a file.

        Parameters
        ----------
        config_path : str
            path of the file to create the configuration from.

        Returns
        -------
        config : Configuration
            Configuration object attrs class.

        """
        return cls._create(cls._read(config_path), (config_path,))

    @classmethod
    def from_sources(cls, config_paths: Optional[Iterable[str]] = None) -> "Configuration":
        """Creates configuration from a list of configuration files.

        Parameters
        ----------
        config_paths : list[str]
            List of configuration files to create the configuration from.

        Returns
        -------
        config : Configuration
            resulting configuration object.

        """
        config_paths = list(config_paths) if config_paths else [DEFAULT_CONFIG_LOCATION]
        errors = []
        merged: dict = {}
        filters: list = []
        for config_path in config_paths:
            try:
                config_dict = cls._read(config_path)
                cls._create(config_dict, (config_path,))
            except InvalidConfigurationError as error:
                errors.append(error)
                continue
            filters.extend(config_dict.get("filters") or [])
            merged.update(config_dict)
        if errors:
            raise InvalidConfigurationErrors(errors)
        merged["filters"] = filters
        configuration = cls._create(merged, tuple(config_paths))
        logger.debug(
            "loaded %d filter rules from %s", len(configuration.filters), ", ".join(config_paths)
        )
        return configuration

    def as_dict(self) -> dict:
        """Return the configuration as dict."""
        return asdict(self, filter=lambda attribute, _: attribute.name != "_sources")

    def as_yaml(self) -> str:
        """Return the configuration as yaml string."""
        stream = StringIO()
        yaml.dump(self.as_dict(), stream)
        return stream.getvalue()
