import asyncio
from pathlib import Path

import aiohttp
import pytest

from iot_driver.app import DriverApp
from iot_driver.config import load_config


@pytest.mark.asyncio
async def test_app_serves_until_shutdown(tmp_path: Path, unused_tcp_port) -> None:
    config = load_config(
        tmp_path / "iot-driver.cfg",
        environ={"SERVER_HOST": "127.0.0.1", "SERVER_PORT": str(unused_tcp_port)},
    )
    app = DriverApp(config)
    task = asyncio.create_task(app.run())

    try:
        url = f"http://127.0.0.1:{unused_tcp_port}/data"
        body = None
        async with aiohttp.ClientSession() as session:
            for _ in range(50):
                try:
                    async with session.get(url) as response:
                        body = await response.text()
                        break
                except aiohttp.ClientConnectionError:
                    await asyncio.sleep(0.05)

        assert body is not None
        assert body.startswith("timestamp,temperature,status\n")
        assert body.endswith(",25.0,ok")
    finally:
        app.request_shutdown()
        await asyncio.wait_for(task, timeout=5)


@pytest.mark.asyncio
async def test_app_uses_configured_capacity(tmp_path: Path) -> None:
    config_path = tmp_path / "iot-driver.cfg"
    config_path.write_text("[server]\ntelemetry_capacity = 3\n", encoding="utf-8")
    app = DriverApp(load_config(config_path, environ={}))

    for index in range(5):
        await app.store.append((str(index), "20.00", "ok"))

    rows = await app.store.snapshot()
    assert [row[0] for row in rows] == ["2", "3", "4"]
