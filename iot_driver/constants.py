"""Constants used across the iot-driver package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "iot-driver"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_SERVER_HOST = "0.0.0.0"
DEFAULT_SERVER_PORT = 8080

ENV_SERVER_HOST = "SERVER_HOST"
ENV_SERVER_PORT = "SERVER_PORT"

DEFAULT_TELEMETRY_CAPACITY = 10
TELEMETRY_HEADERS = ("timestamp", "temperature", "status")
SEED_TEMPERATURE = "25.0"
STATUS_OK = "ok"

DEFAULT_DEVICE_NAME = "的v分·"
DEFAULT_DEVICE_MODEL = "个人"
DEFAULT_DEVICE_MANUFACTURER = "拰发·"
DEFAULT_DEVICE_TYPE = " 为服务"
