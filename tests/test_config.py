from pathlib import Path

import pytest

from iot_driver import constants
from iot_driver.config import ConfigurationError, load_config, save_config


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "iot-driver.cfg"
    config = load_config(config_path, environ={})

    assert config.server.host == "0.0.0.0"
    assert config.server.port == 8080
    assert config.server.telemetry_capacity == 10
    assert config.device.name == constants.DEFAULT_DEVICE_NAME
    assert config.device.type == " 为服务"
    assert config.logging.level == "INFO"
    assert config.logging.path is None
    assert config.logging.log_access is False
    assert config.path == config_path


def test_load_config_overrides_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / "iot-driver.cfg"
    config_file.write_text(
        """
[server]
host = 127.0.0.1
port = 9090
telemetry_capacity = 4

[device]
name = lab-probe
model = LP-2
manufacturer = Example Corp
type = sensor

[logging]
level = DEBUG
path = ~/logs/iot-driver.log
log_access = true
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={})

    assert config.server.host == "127.0.0.1"
    assert config.server.port == 9090
    assert config.server.telemetry_capacity == 4
    info = config.device.to_device_info()
    assert info.as_dict() == {
        "device_name": "lab-probe",
        "device_model": "LP-2",
        "manufacturer": "Example Corp",
        "device_type": "sensor",
    }
    assert config.logging.level == "DEBUG"
    assert config.logging.path == Path("~/logs/iot-driver.log").expanduser()
    assert config.logging.log_access is True


def test_environment_overrides_file(tmp_path: Path) -> None:
    config_file = tmp_path / "iot-driver.cfg"
    config_file.write_text("[server]\nhost = 10.0.0.1\nport = 9000\n", encoding="utf-8")

    config = load_config(
        config_file, environ={"SERVER_HOST": "192.168.1.5", "SERVER_PORT": "8181"}
    )

    assert config.server.host == "192.168.1.5"
    assert config.server.port == 8181
    assert config.raw.get("server", "port") == "8181"


@pytest.mark.parametrize("port", ["http", "70000"])
def test_invalid_port_raises(tmp_path: Path, port: str) -> None:
    with pytest.raises(ConfigurationError):
        load_config(tmp_path / "missing.cfg", environ={"SERVER_PORT": port})


def test_capacity_is_clamped_to_one(tmp_path: Path) -> None:
    config_file = tmp_path / "iot-driver.cfg"
    config_file.write_text("[server]\ntelemetry_capacity = 0\n", encoding="utf-8")

    config = load_config(config_file, environ={})

    assert config.server.telemetry_capacity == 1


def test_save_config_round_trips_overrides(tmp_path: Path) -> None:
    config_path = tmp_path / "nested" / "iot-driver.cfg"
    config = load_config(config_path, environ={"SERVER_PORT": "8282"})

    save_config(config)
    reloaded = load_config(config_path, environ={})

    assert reloaded.server.port == 8282
    assert reloaded.device.name == constants.DEFAULT_DEVICE_NAME
