#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD CLI application tests."""

import os
from typing import Any
from unittest.mock import patch

import pytest
from serial import SerialException

import stmload
from stmload.apps import stmload as stmload_app
from stmload.apps.utils.utils import StmLoadAppError
from stmload.utils.serial_proxy import SerialProxy
from tests.cli_runner import CliRunner

SERIAL = "stmload.utils.interfaces.device.serial_device.Serial"


@pytest.fixture(scope="module")
def data_dir() -> str:
    return os.path.join(os.path.dirname(os.path.dirname(__file__)), "bootloader", "data")


def run_safe_main(monkeypatch: pytest.MonkeyPatch, args: list[str]) -> int:
    """Run the console script entry point and return its exit code."""
    monkeypatch.setattr("sys.argv", ["stmload", *args])
    with pytest.raises(SystemExit) as exc:
        stmload_app.safe_main()
    return 0 if exc.value.code is None else int(exc.value.code)


def test_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(stmload_app.main, ["--version"])
    assert stmload.__version__ in result.output


def test_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(stmload_app.main, ["--help"])
    assert "Load S-record IMAGE into RAM of STM32 device" in result.output
    assert "--baudrate" in result.output
    assert "--write-timeout" in result.output


def test_load(cli_runner: CliRunner, caplog: Any, data_dir: str) -> None:
    # There's a problem with logging under CliRunner
    # https://github.com/pytest-dev/pytest/issues/3344
    caplog.set_level(100_000)
    image = os.path.join(data_dir, "blink.s19")
    with patch(SERIAL, SerialProxy.init_proxy(sync_ack_attempt=3)):
        result = cli_runner.invoke(stmload_app.main, ["COM1", image])
    assert "Autobaud\n..OK!\n" in result.output
    assert "Bootloader version: 2.2" in result.output
    assert "Target PID: 410" in result.output
    assert "Writing 16 bytes on 0x20000000" in result.output
    assert "Writing 8 bytes on 0x20000020" in result.output
    assert "Jumping to loaded program, startaddress=0x20000000" in result.output
    assert "Jumped into loaded program, have a nice day!" in result.output
    proxy = SerialProxy.latest
    assert proxy
    assert proxy.go_address == 0x20000000
    assert len(proxy.memory) == 3
    assert not proxy.is_open


def test_identify(cli_runner: CliRunner, caplog: Any) -> None:
    caplog.set_level(100_000)
    with patch(SERIAL, SerialProxy.init_proxy(id_response=b"\x01\x04\x13\x79")):
        result = cli_runner.invoke(stmload_app.main, ["-b", "57600", "COM1"])
    assert "Target PID: 413 (STM32F40xxx/41xxx)" in result.output
    assert "Writing" not in result.output
    proxy = SerialProxy.latest
    assert proxy
    assert proxy.baudrate == 57600
    assert proxy.go_address is None


def test_safe_main_success(monkeypatch: pytest.MonkeyPatch, caplog: Any, data_dir: str) -> None:
    caplog.set_level(100_000)
    with patch(SERIAL, SerialProxy.init_proxy()):
        code = run_safe_main(monkeypatch, ["COM1", os.path.join(data_dir, "blink.s19")])
    assert code == 0


@pytest.mark.parametrize(
    "proxy_config",
    [
        {"sync_ack_attempt": 0},
        {"fail_exchange": 1},
        {"fail_exchange": 4, "fail_reply": b""},
        {"fail_exchange": 10},
    ],
)
def test_safe_main_protocol_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: Any, caplog: Any, data_dir: str, proxy_config: dict
) -> None:
    caplog.set_level(100_000)
    with patch(SERIAL, SerialProxy.init_proxy(**proxy_config)):
        code = run_safe_main(monkeypatch, ["COM1", os.path.join(data_dir, "blink.s19")])
    assert code == 2
    assert "Bootloader" in capsys.readouterr().err
    proxy = SerialProxy.latest
    assert proxy
    assert not proxy.is_open


def test_safe_main_missing_image(monkeypatch: pytest.MonkeyPatch, caplog: Any) -> None:
    caplog.set_level(100_000)
    with patch(SERIAL, SerialProxy.init_proxy()):
        code = run_safe_main(monkeypatch, ["COM1", "missing_image.s19"])
    assert code == 1
    assert SerialProxy.latest is None


def test_safe_main_port_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: Any, caplog: Any, data_dir: str
) -> None:
    caplog.set_level(100_000)
    with patch(SERIAL, side_effect=SerialException("could not open port 'COM99'")):
        code = run_safe_main(monkeypatch, ["COM99", os.path.join(data_dir, "blink.s19")])
    assert code == 1
    assert "Cannot open serial port COM99" in capsys.readouterr().err


@pytest.mark.parametrize(
    "args",
    [
        [],
        ["-b", "12345", "COM1"],
        ["--retries", "0", "COM1"],
        ["--unknown-option", "COM1"],
        ["COM1", "image.s19", "extra"],
    ],
)
def test_safe_main_usage_error(
    monkeypatch: pytest.MonkeyPatch, caplog: Any, args: list[str]
) -> None:
    caplog.set_level(100_000)
    assert run_safe_main(monkeypatch, args) == 1


def test_safe_main_without_arguments(monkeypatch: pytest.MonkeyPatch, capsys: Any) -> None:
    with patch(SERIAL, SerialProxy.init_proxy()):
        assert run_safe_main(monkeypatch, []) == 1
    assert "Missing argument 'PORT'" in capsys.readouterr().err
    assert SerialProxy.latest is None


def test_port_failure_exception(cli_runner: CliRunner, caplog: Any) -> None:
    caplog.set_level(100_000)
    with patch(SERIAL, side_effect=SerialException("could not open port 'COM99'")):
        result = cli_runner.invoke(stmload_app.main, ["COM99"], expected_code=1)
    assert isinstance(result.exception, StmLoadAppError)
