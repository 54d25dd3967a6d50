"""Application supervisor wiring the device state to its HTTP listener."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .commands import CommandProcessor
from .config import DriverConfig, load_config
from .logging import configure_logging
from .server import DriverServer
from .telemetry_store import TelemetryStore

LOGGER = logging.getLogger(__name__)


class DriverApp:
    """Owns the telemetry store and serves it until shutdown is requested."""

    def __init__(self, config: Optional[DriverConfig] = None) -> None:
        self._config = config or load_config()
        self._device_info = self._config.device.to_device_info()
        self._store = TelemetryStore.seeded(
            capacity=self._config.server.telemetry_capacity
        )
        self._processor = CommandProcessor(self._store)
        self._server: Optional[DriverServer] = None
        self._shutdown_event: Optional[asyncio.Event] = None

    @property
    def store(self) -> TelemetryStore:
        return self._store

    async def run(self) -> None:
        """Start the listener and block until :meth:`request_shutdown`."""

        self._shutdown_event = asyncio.Event()
        server_config = self._config.server

        LOGGER.info("iot-driver starting with config: %s", self._config.path)
        self._server = DriverServer(
            server_config.host,
            server_config.port,
            device_info=self._device_info,
            store=self._store,
            processor=self._processor,
        )
        await self._server.start()

        try:
            await self._shutdown_event.wait()
        finally:
            await self._server.stop()
            self._server = None
            LOGGER.info("iot-driver stopped")

    def request_shutdown(self) -> None:
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    @classmethod
    def start(cls, config: Optional[DriverConfig] = None) -> None:
        instance = cls(config=config)
        configure_logging(
            instance._config.logging.level,
            log_path=instance._config.logging.path,
            log_access=instance._config.logging.log_access,
        )
        try:
            asyncio.run(instance.run())
        except KeyboardInterrupt:
            LOGGER.info("iot-driver received shutdown signal")
