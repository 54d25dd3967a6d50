"""Command handling for the simulated device."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional

from . import constants
from .telemetry_store import TelemetryStore, unix_timestamp

LOGGER = logging.getLogger(__name__)

MISSING_TEMPERATURE_MESSAGE = "Missing temperature parameter"
UNKNOWN_COMMAND_MESSAGE = "Unknown command"
INVALID_PAYLOAD_MESSAGE = "Invalid command payload"


class CommandProcessingError(RuntimeError):
    """Raised when an individual command cannot be processed."""

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class CommandValidationError(CommandProcessingError):
    """Raised when a command payload is malformed or incomplete."""


class UnknownCommandError(CommandProcessingError):
    """Raised when the command name is not one the device understands."""


class DeviceCommand(str, Enum):
    """Commands accepted by the simulated device."""

    SET_TEMP = "set_temp"

    @classmethod
    def parse(cls, name: str) -> Optional["DeviceCommand"]:
        """Return the matching command, or ``None`` when unrecognized."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass(slots=True)
class CommandRequest:
    command: str
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "CommandRequest":
        if not isinstance(payload, Mapping):
            raise CommandValidationError(INVALID_PAYLOAD_MESSAGE, code="invalid_payload")

        command = payload.get("command")
        if not isinstance(command, str):
            raise CommandValidationError(INVALID_PAYLOAD_MESSAGE, code="invalid_payload")

        params = payload.get("params")
        return cls(
            command=command,
            params=dict(params) if isinstance(params, Mapping) else {},
        )


def _extract_temperature(params: Mapping[str, Any]) -> Optional[float]:
    value = params.get("temperature")
    # bool is an int subclass but is not a JSON number
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        temperature = float(value)
    except OverflowError:
        return None
    if not math.isfinite(temperature):
        return None
    return temperature


class CommandProcessor:
    """Executes device commands against the telemetry store.

    A successful command performs exactly one append; a rejected command
    leaves the store untouched.
    """

    def __init__(
        self,
        store: TelemetryStore,
        *,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._store = store
        self._clock = clock or time.time

    async def execute(self, request: CommandRequest) -> None:
        command = DeviceCommand.parse(request.command)

        if command is None:
            LOGGER.warning("Rejected unknown command: %r", request.command)
            raise UnknownCommandError(UNKNOWN_COMMAND_MESSAGE, code="unknown_command")

        if command is DeviceCommand.SET_TEMP:
            await self._set_temperature(request.params)

    async def _set_temperature(self, params: Mapping[str, Any]) -> None:
        temperature = _extract_temperature(params)
        if temperature is None:
            LOGGER.warning("Rejected set_temp without numeric temperature: %r", params)
            raise CommandValidationError(
                MISSING_TEMPERATURE_MESSAGE, code="missing_temperature"
            )

        row = (unix_timestamp(self._clock), f"{temperature:.2f}", constants.STATUS_OK)
        await self._store.append(row)
        LOGGER.info("Temperature set to %s", row[1])
