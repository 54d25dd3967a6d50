"""HTTP surface of the simulated device."""

from __future__ import annotations

import contextlib
import functools
import json
import logging
from typing import Optional

from aiohttp import web

from .commands import (
    INVALID_PAYLOAD_MESSAGE,
    CommandProcessingError,
    CommandProcessor,
    CommandRequest,
)
from .telemetry_store import DeviceInfo, TelemetryStore

LOGGER = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"

_dumps = functools.partial(json.dumps, ensure_ascii=False)


def _error_response(message: str) -> web.Response:
    return web.json_response(
        {"status": "error", "message": message}, status=400, dumps=_dumps
    )


class DeviceHandlers:
    """Request handlers bound to the device state they serve."""

    def __init__(
        self,
        device_info: DeviceInfo,
        store: TelemetryStore,
        processor: CommandProcessor,
    ) -> None:
        self._device_info = device_info
        self._store = store
        self._processor = processor

    def register(self, app: web.Application) -> None:
        app.router.add_get("/info", self.info)
        app.router.add_get("/data", self.data)
        app.router.add_post("/cmd", self.cmd)
        app.router.add_get("/stream", self.stream)

    async def info(self, request: web.Request) -> web.Response:
        return web.json_response(self._device_info.as_dict(), dumps=_dumps)

    async def data(self, request: web.Request) -> web.Response:
        body = await self._store.latest_csv()
        return web.Response(text=body, content_type=CSV_CONTENT_TYPE, charset="utf-8")

    async def stream(self, request: web.Request) -> web.Response:
        body = await self._store.all_csv()
        return web.Response(
            text=body,
            content_type=CSV_CONTENT_TYPE,
            charset="utf-8",
            headers={"Cache-Control": "no-cache"},
        )

    async def cmd(self, request: web.Request) -> web.Response:
        try:
            payload = await request.json()
        except (ValueError, RecursionError):
            LOGGER.warning("Rejected command with undecodable body")
            return _error_response(INVALID_PAYLOAD_MESSAGE)

        try:
            command = CommandRequest.from_payload(payload)
            await self._processor.execute(command)
        except CommandProcessingError as exc:
            return _error_response(exc.message)

        return web.json_response({"status": "success"})


def build_app(
    device_info: DeviceInfo,
    store: TelemetryStore,
    processor: Optional[CommandProcessor] = None,
) -> web.Application:
    """Create the aiohttp application wired to the given device state."""

    app = web.Application()
    handlers = DeviceHandlers(
        device_info, store, processor or CommandProcessor(store)
    )
    handlers.register(app)
    return app


class DriverServer:
    """HTTP listener serving the device endpoints."""

    def __init__(
        self,
        host: str,
        port: int,
        *,
        device_info: DeviceInfo,
        store: TelemetryStore,
        processor: Optional[CommandProcessor] = None,
    ) -> None:
        self._host = host
        self._port = port
        self._device_info = device_info
        self._store = store
        self._processor = processor
        self._runner: Optional[web.AppRunner] = None
        self._site: Optional[web.TCPSite] = None

    async def start(self) -> None:
        app = build_app(self._device_info, self._store, self._processor)

        self._runner = web.AppRunner(app)
        await self._runner.setup()
        self._site = web.TCPSite(self._runner, self._host, self._port)
        try:
            await self._site.start()
        except OSError:
            await self.stop()
            raise
        LOGGER.info("Device endpoints listening on http://%s:%s", self._host, self._port)

    async def stop(self) -> None:
        with contextlib.suppress(Exception):
            if self._site is not None:
                await self._site.stop()
        if self._runner is not None:
            await self._runner.cleanup()
        self._site = None
        self._runner = None
