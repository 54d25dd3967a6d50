"""Configuration loader for iot-driver."""

from __future__ import annotations

import os
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from . import constants
from .telemetry_store import DeviceInfo


class ConfigurationError(ValueError):
    """Raised when configuration values cannot be interpreted."""


@dataclass(slots=True)
class ServerConfig:
    host: str = constants.DEFAULT_SERVER_HOST
    port: int = constants.DEFAULT_SERVER_PORT
    telemetry_capacity: int = constants.DEFAULT_TELEMETRY_CAPACITY


@dataclass(slots=True)
class DeviceConfig:
    name: str = constants.DEFAULT_DEVICE_NAME
    model: str = constants.DEFAULT_DEVICE_MODEL
    manufacturer: str = constants.DEFAULT_DEVICE_MANUFACTURER
    type: str = constants.DEFAULT_DEVICE_TYPE

    def to_device_info(self) -> DeviceInfo:
        return DeviceInfo(
            name=self.name,
            model=self.model,
            manufacturer=self.manufacturer,
            type=self.type,
        )


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_access: bool = False


@dataclass(slots=True)
class DriverConfig:
    server: ServerConfig
    device: DeviceConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid server port: {value!r}") from exc
    if not 0 <= port <= 65535:
        raise ConfigurationError(f"Server port out of range: {port}")
    return port


def load_config(
    path: Optional[Path] = None, *, environ: Optional[Mapping[str, str]] = None
) -> DriverConfig:
    """Load configuration from disk, applying defaults where necessary.

    ``SERVER_HOST`` and ``SERVER_PORT`` in the environment take precedence over
    the file.
    """

    config_path = path or constants.DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ
    # values may contain non-ASCII device names; keep '%' literal
    parser = ConfigParser(interpolation=None)
    parser.read_dict(
        {
            "server": {
                "host": constants.DEFAULT_SERVER_HOST,
                "port": str(constants.DEFAULT_SERVER_PORT),
                "telemetry_capacity": str(constants.DEFAULT_TELEMETRY_CAPACITY),
            },
            "device": {
                "name": constants.DEFAULT_DEVICE_NAME,
                "model": constants.DEFAULT_DEVICE_MODEL,
                "manufacturer": constants.DEFAULT_DEVICE_MANUFACTURER,
                "type": constants.DEFAULT_DEVICE_TYPE,
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_access": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path, encoding="utf-8")

    host_override = env.get(constants.ENV_SERVER_HOST)
    if host_override:
        parser.set("server", "host", host_override)
    port_override = env.get(constants.ENV_SERVER_PORT)
    if port_override:
        parser.set("server", "port", port_override)

    try:
        capacity = parser.getint(
            "server",
            "telemetry_capacity",
            fallback=constants.DEFAULT_TELEMETRY_CAPACITY,
        )
    except ValueError as exc:
        raise ConfigurationError("Invalid telemetry_capacity") from exc

    server = ServerConfig(
        host=parser.get("server", "host"),
        port=_parse_port(parser.get("server", "port")),
        telemetry_capacity=max(1, capacity),
    )

    device = DeviceConfig(
        name=parser.get("device", "name"),
        model=parser.get("device", "model"),
        manufacturer=parser.get("device", "manufacturer"),
        type=parser.get("device", "type"),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_access=parser.getboolean("logging", "log_access", fallback=False),
    )

    return DriverConfig(
        server=server,
        device=device,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: DriverConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
