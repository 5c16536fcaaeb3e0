import json
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError

from .config import LibCSettings, MsvcVersionPolicy, SettingsLoader, ToolchainSettings
from .core_types import Architecture, ConfigurationError, ErrorKind


@pytest.fixture
def settings_data():
    return {
        "compiler_path": "/opt/gcc/bin/gcc",
        "compiler_options": ["-march=x86-64"],
        "target_arch": "x86_64",
        "runtime_version": 11,
        "libc": {"name": "musl", "compiler_options": ["-specs", "musl-gcc.specs"]},
    }


def test_defaults(mocker):
    mocker.patch("toolchain_helper.architecture.platform.machine", return_value="aarch64")
    settings = ToolchainSettings()

    assert settings.compiler_path is None
    assert settings.compiler_options == []
    assert settings.target_arch is Architecture.AARCH64
    assert settings.runtime_version == 17
    assert settings.msvc_policy == MsvcVersionPolicy()
    assert settings.libc.name == "glibc"
    assert settings.libc.get_compiler_options() == []


@pytest.mark.parametrize(
    "value, expected",
    [
        ("x86_64", Architecture.AMD64),
        ("x64", Architecture.AMD64),
        ("amd64", Architecture.AMD64),
        ("aarch64", Architecture.AARCH64),
        ("i686", Architecture.UNSUPPORTED),
        ("riscv64", Architecture.UNKNOWN),
    ],
)
def test_target_arch_is_canonicalized(value, expected):
    assert ToolchainSettings(target_arch=value).target_arch is expected


def test_settings_are_read_only():
    settings = ToolchainSettings()
    with pytest.raises(ValidationError):
        settings.compiler_options = ["-O2"]


def test_unknown_fields_are_rejected():
    with pytest.raises(ValueError):
        ToolchainSettings(compiler="gcc")


def test_empty_compiler_path_means_no_override():
    assert ToolchainSettings(compiler_path="  ").compiler_path is None


def test_libc_options_are_copied():
    libc = LibCSettings(name="musl", compiler_options=["-static"])
    options = libc.get_compiler_options()
    options.append("-x")
    assert libc.compiler_options == ["-static"]


def test_load(tmp_path, settings_data):
    path = tmp_path / "toolchain.json"
    path.write_text(json.dumps(settings_data))

    settings = SettingsLoader.load(path)

    assert settings.compiler_path == Path("/opt/gcc/bin/gcc")
    assert settings.compiler_options == ["-march=x86-64"]
    assert settings.target_arch is Architecture.AMD64
    assert settings.runtime_version == 11
    assert settings.libc.get_compiler_options() == ["-specs", "musl-gcc.specs"]


@pytest.mark.asyncio
async def test_load_async(tmp_path, settings_data):
    path = tmp_path / "toolchain.json"
    path.write_text(json.dumps(settings_data))

    settings = await SettingsLoader.load_async(path)

    assert settings == SettingsLoader.load(path)


def test_load_missing_file(tmp_path):
    with pytest.raises(ConfigurationError) as excinfo:
        SettingsLoader.load(tmp_path / "missing.json")
    assert excinfo.value.error_code is ErrorKind.INVALID_CONFIGURATION


@pytest.mark.asyncio
async def test_load_async_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        await SettingsLoader.load_async(tmp_path / "missing.json")


def test_load_invalid_json(tmp_path):
    path = tmp_path / "toolchain.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError) as excinfo:
        SettingsLoader.load(path)
    assert "Invalid JSON" in str(excinfo.value)


def test_load_invalid_settings(tmp_path):
    path = tmp_path / "toolchain.json"
    path.write_text(json.dumps({"runtime_version": 0}))

    with pytest.raises(ConfigurationError) as excinfo:
        SettingsLoader.load(path)
    assert "validation_errors" in excinfo.value.context


def test_save_round_trip(tmp_path, settings_data):
    settings = ToolchainSettings.model_validate(settings_data)
    path = tmp_path / "nested" / "toolchain.json"

    SettingsLoader.save(path, settings)

    assert SettingsLoader.load(path) == settings
    assert json.loads(path.read_text())["target_arch"] == "amd64"


def test_compiler_path_accepts_interpreter():
    settings = ToolchainSettings(compiler_path=sys.executable)
    assert settings.compiler_path == Path(sys.executable)
