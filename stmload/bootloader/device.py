#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""STM32 target identification.

This module provides the TargetInfo class with the data reported by the
Get-Version and Get-ID commands and a table of well known product IDs.
"""

from dataclasses import dataclass

from stmload.exceptions import StmLoadValueError
from stmload.utils.stmload_enum import StmLoadEnum


class ProductId(StmLoadEnum):
    """Product IDs reported by the Get-ID command of STM32 bootloaders."""

    F10X_LD = (0x412, "STM32F10xxx", "Low-density")
    F10X_MD = (0x410, "STM32F10xxx", "Medium-density")
    F10X_HD = (0x414, "STM32F10xxx", "High-density")
    F10X_XL = (0x430, "STM32F10xxx", "XL-density")
    F10X_MD_VL = (0x420, "STM32F10xxx", "Medium-density value line")
    F105_107 = (0x418, "STM32F105xx/107xx", "Connectivity line")
    F03X = (0x444, "STM32F03xx4/6")
    F05X = (0x440, "STM32F05xxx/030x8")
    F07X = (0x448, "STM32F07xxx")
    F09X = (0x442, "STM32F09xxx")
    F40X = (0x413, "STM32F40xxx/41xxx")
    F42X = (0x419, "STM32F42xxx/43xxx")
    F401_BC = (0x423, "STM32F401xB/C")
    F401_DE = (0x433, "STM32F401xD/E")
    F411 = (0x431, "STM32F411xx")
    F74X = (0x449, "STM32F74xxx/75xxx")
    L47X = (0x415, "STM32L47xxx/48xxx")
    G07X = (0x460, "STM32G07xxx/08xxx")
    G431 = (0x468, "STM32G431xx/441xx")
    H74X = (0x450, "STM32H74xxx/75xxx")


@dataclass(frozen=True)
class TargetInfo:
    """Identification data of the connected target.

    :param bootloader_version: Bootloader version byte, major and minor number in nibbles.
    :param product_id: 16-bit product ID.
    """

    bootloader_version: int
    product_id: int

    @classmethod
    def parse(cls, version_response: bytes, id_response: bytes) -> "TargetInfo":
        """Create target info from the responses of Get-Version and Get-ID commands.

        The first byte of the Get-Version response is the version, bytes 1 and 2 of
        the Get-ID response are the big-endian product ID.

        :param version_response: Data returned after the Get-Version acknowledge.
        :param id_response: Data returned after the Get-ID acknowledge.
        :raises StmLoadValueError: A response is too short.
        :return: Target info instance.
        """
        if len(version_response) < 1 or len(id_response) < 3:
            raise StmLoadValueError("Identification response is too short")
        return cls(
            bootloader_version=version_response[0],
            product_id=int.from_bytes(id_response[1:3], byteorder="big"),
        )

    @property
    def version(self) -> str:
        """Bootloader version in format "major.minor"."""
        return f"{self.bootloader_version >> 4:x}.{self.bootloader_version & 0xF:x}"

    @property
    def device_name(self) -> str:
        """Name of the device family if the product ID is known, otherwise empty string."""
        if not ProductId.contains(self.product_id):
            return ""
        product = ProductId.from_tag(self.product_id)
        if product.description:
            return f"{product.label} {product.description}"
        return product.label

    def __str__(self) -> str:
        pid = f"{self.product_id:x}"
        if self.device_name:
            pid += f" ({self.device_name})"
        return f"Bootloader version: {self.version}\nTarget PID: {pid}"
