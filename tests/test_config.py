"""Tests for reading the link configuration from the environment."""

from pathlib import Path

import pytest

from openvino_sys.binder import LinkMode
from openvino_sys.config import LinkConfig
from openvino_sys.errors import ConfigError


def test_defaults():
    config = LinkConfig.from_env({})

    assert config == LinkConfig()
    assert config.link_mode is LinkMode.RUNTIME_FIRST_USE
    assert config.lib_path is None
    assert not config.skip_linking


@pytest.mark.parametrize("value, mode", [
    ("dynamic", LinkMode.BUILD_TIME),
    ("runtime", LinkMode.RUNTIME_FIRST_USE),
    (" Dynamic ", LinkMode.BUILD_TIME),
])
def test_link_mode(value, mode):
    assert LinkConfig.from_env({"OPENVINO_LINKING": value}).link_mode is mode


def test_invalid_link_mode():
    with pytest.raises(ConfigError) as exc_info:
        LinkConfig.from_env({"OPENVINO_LINKING": "static"})

    assert exc_info.value.variable == "OPENVINO_LINKING"
    assert exc_info.value.value == "static"
    assert exc_info.value.allowed == ["dynamic", "runtime"]


def test_invalid_value_is_value_error():
    with pytest.raises(ValueError):
        LinkConfig.from_env({"OPENVINO_LINKING": ""})


def test_lib_path():
    config = LinkConfig.from_env({"OPENVINO_LIB_PATH": "/opt/ov/libopenvino_c.so"})
    assert config.lib_path == Path("/opt/ov/libopenvino_c.so")


def test_blank_lib_path_ignored():
    assert LinkConfig.from_env({"OPENVINO_LIB_PATH": "  "}).lib_path is None


@pytest.mark.parametrize("value", ["1", "true", "YES", "on"])
def test_skip_linking_enabled(value):
    assert LinkConfig.from_env({"OPENVINO_SKIP_LINKING": value}).skip_linking


@pytest.mark.parametrize("value", ["", "0", "false", "No", "off"])
def test_skip_linking_disabled(value):
    assert not LinkConfig.from_env({"OPENVINO_SKIP_LINKING": value}).skip_linking


def test_invalid_skip_value():
    with pytest.raises(ConfigError) as exc_info:
        LinkConfig.from_env({"OPENVINO_SKIP_LINKING": "maybe"})
    assert exc_info.value.variable == "OPENVINO_SKIP_LINKING"


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("OPENVINO_LINKING", "dynamic")
    monkeypatch.delenv("OPENVINO_LIB_PATH", raising=False)
    monkeypatch.delenv("OPENVINO_SKIP_LINKING", raising=False)

    assert LinkConfig.from_env().link_mode is LinkMode.BUILD_TIME


def test_config_is_frozen():
    config = LinkConfig()
    with pytest.raises(Exception):
        config.skip_linking = True
