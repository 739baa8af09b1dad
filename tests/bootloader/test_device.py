#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of target identification."""

import pytest

from stmload.bootloader.device import ProductId, TargetInfo
from stmload.exceptions import StmLoadValueError


def test_parse() -> None:
    info = TargetInfo.parse(b"\x22\x00\x00\x79", b"\x01\x04\x10\x79")
    assert info.bootloader_version == 0x22
    assert info.product_id == 0x410
    assert info.version == "2.2"
    assert info.device_name == "STM32F10xxx Medium-density"
    assert str(info) == (
        "Bootloader version: 2.2\nTarget PID: 410 (STM32F10xxx Medium-density)"
    )


@pytest.mark.parametrize(
    "version,text",
    [(0x10, "1.0"), (0x22, "2.2"), (0x31, "3.1"), (0xAB, "a.b")],
)
def test_version(version: int, text: str) -> None:
    assert TargetInfo(version, 0x410).version == text


def test_device_name_without_description() -> None:
    info = TargetInfo(0x31, 0x413)
    assert info.device_name == "STM32F40xxx/41xxx"
    assert str(info).endswith("Target PID: 413 (STM32F40xxx/41xxx)")


def test_unknown_product() -> None:
    info = TargetInfo(0x31, 0x123)
    assert info.device_name == ""
    assert str(info) == "Bootloader version: 3.1\nTarget PID: 123"


@pytest.mark.parametrize(
    "version_response,id_response",
    [(b"", b"\x01\x04\x10\x79"), (b"\x22\x00\x00\x79", b"\x01\x04")],
)
def test_parse_short_response(version_response: bytes, id_response: bytes) -> None:
    with pytest.raises(StmLoadValueError):
        TargetInfo.parse(version_response, id_response)


def test_product_id_lookup() -> None:
    assert ProductId.from_tag(0x410) == ProductId.F10X_MD
    assert ProductId.from_tag(0x449).label == "STM32F74xxx/75xxx"
    assert ProductId.contains(0x449)
    assert not ProductId.contains(0x999)
