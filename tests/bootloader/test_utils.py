#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of checksum calculation and address packing."""

from functools import reduce
from operator import xor

import pytest

from stmload.bootloader.utils import calc_checksum, pack_address
from stmload.exceptions import StmLoadValueError


@pytest.mark.parametrize(
    "payload,checksum",
    [
        (b"\x01", 0xFE),
        (b"\x02", 0xFD),
        (b"\x21", 0xDE),
        (b"\x31", 0xCE),
        (b"\x00", 0xFF),
        (b"\xff", 0x00),
        (b"\x00\x00\x20\x00", 0x20),
        (b"\x08\x00\x00\x00", 0x08),
        (b"\x03\xde\xad\xbe\xef", 0x21),
    ],
)
def test_calc_checksum(payload: bytes, checksum: int) -> None:
    assert calc_checksum(payload) == checksum


@pytest.mark.parametrize(
    "payload",
    [b"\x20\x00\x00\x00", b"\x03\xde\xad\xbe\xef", bytes(range(65))],
)
def test_multi_byte_frame_folds_to_zero(payload: bytes) -> None:
    """Payload followed by its checksum XOR-folds to zero."""
    assert reduce(xor, payload + bytes([calc_checksum(payload)])) == 0


def test_calc_checksum_empty() -> None:
    with pytest.raises(StmLoadValueError):
        calc_checksum(b"")


@pytest.mark.parametrize(
    "address,data",
    [
        (0, b"\x00\x00\x00\x00"),
        (0x2000, b"\x00\x00\x20\x00"),
        (0x08000000, b"\x08\x00\x00\x00"),
        (0xFFFFFFFF, b"\xff\xff\xff\xff"),
    ],
)
def test_pack_address(address: int, data: bytes) -> None:
    assert pack_address(address) == data


@pytest.mark.parametrize("address", [-1, 0x1_0000_0000])
def test_pack_address_out_of_range(address: int) -> None:
    with pytest.raises(StmLoadValueError):
        pack_address(address)
