#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""STM32 bootloader utility functions."""

from functools import reduce
from operator import xor

from stmload.exceptions import StmLoadValueError

ADDRESS_LENGTH = 4


def calc_checksum(payload: bytes) -> int:
    """Calculate the checksum byte which follows a transmitted unit.

    A single command byte is protected by its complement (0xFF - byte), a longer
    payload by the XOR of all its bytes.

    :param payload: Command byte or payload to be sent.
    :raises StmLoadValueError: Payload is empty.
    :return: Checksum byte.
    """
    if not payload:
        raise StmLoadValueError("Cannot calculate checksum of an empty payload")
    if len(payload) == 1:
        return 0xFF - payload[0]
    return reduce(xor, payload)


def pack_address(address: int) -> bytes:
    """Pack 32-bit address into big-endian bytes as the bootloader expects it.

    :param address: Memory address.
    :raises StmLoadValueError: Address does not fit into 32 bits.
    :return: Four address bytes, most significant first.
    """
    if not 0 <= address <= 0xFFFF_FFFF:
        raise StmLoadValueError(f"Address {address:#x} is out of the 32-bit range")
    return address.to_bytes(ADDRESS_LENGTH, byteorder="big")
