import pytest
import pytest_asyncio
from aiohttp.test_utils import TestServer

from iot_driver.commands import CommandProcessor
from iot_driver.server import build_app
from iot_driver.telemetry_store import DeviceInfo, TelemetryStore

FIXED_NOW = 1_700_000_000.0


@pytest.fixture
def device_info() -> DeviceInfo:
    return DeviceInfo(
        name="bench-sensor",
        model="TS-1",
        manufacturer="Acme",
        type="thermometer",
    )


@pytest.fixture
def store() -> TelemetryStore:
    return TelemetryStore.seeded(clock=lambda: FIXED_NOW)


@pytest_asyncio.fixture
async def server(device_info, store):
    processor = CommandProcessor(store, clock=lambda: FIXED_NOW + 5)
    app = build_app(device_info, store, processor)
    async with TestServer(app) as test_server:
        yield test_server
