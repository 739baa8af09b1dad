#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD serial communication proxy.

This module provides a replacement of the serial.Serial class which simulates
the STM32 USART ROM bootloader, so the loader can be exercised without hardware.
"""

import logging
from functools import reduce
from operator import xor
from typing import Optional, Type

logger = logging.getLogger(__name__)

ACK = b"\x79"
NACK = b"\x1f"


class SerialProxy:
    """Serial port simulating the STM32 USART bootloader.

    The proxy reassembles the byte stream written by the host into units (command,
    address, data block) according to the bootloader state, checks their checksum
    and queues the reply which the host reads back.

    :cvar sync_ack_attempt: Sync byte which is acknowledged (1-based), 0 for never.
    :cvar version_response: Data sent after acknowledging Get-Version command.
    :cvar id_response: Data sent after acknowledging Get-ID command.
    :cvar fail_exchange: Exchange (1-based, sync excluded) answered by `fail_reply`.
    :cvar fail_reply: Reply to the failing exchange, empty for no reply (timeout).
    :cvar latest: The most recently created proxy instance.
    """

    sync_ack_attempt: int = 1
    version_response: bytes = b"\x22\x00\x00" + ACK
    id_response: bytes = b"\x01\x04\x10" + ACK
    fail_exchange: Optional[int] = None
    fail_reply: bytes = NACK
    latest: Optional["SerialProxy"] = None

    @classmethod
    def init_proxy(
        cls,
        sync_ack_attempt: int = 1,
        version_response: bytes = b"\x22\x00\x00" + ACK,
        id_response: bytes = b"\x01\x04\x10" + ACK,
        fail_exchange: Optional[int] = None,
        fail_reply: bytes = NACK,
    ) -> "Type[SerialProxy]":
        """Configure behavior of the simulated bootloader.

        :param sync_ack_attempt: Sync byte which is acknowledged (1-based), 0 for never.
        :param version_response: Data sent after acknowledging Get-Version command.
        :param id_response: Data sent after acknowledging Get-ID command.
        :param fail_exchange: Exchange (1-based, sync excluded) answered by `fail_reply`.
        :param fail_reply: Reply to the failing exchange, empty for no reply (timeout).
        :return: SerialProxy class with configured behavior.
        """
        cls.sync_ack_attempt = sync_ack_attempt
        cls.version_response = version_response
        cls.id_response = id_response
        cls.fail_exchange = fail_exchange
        cls.fail_reply = fail_reply
        cls.latest = None
        return cls

    def __init__(
        self,
        port: str,
        timeout: float,
        baudrate: int,
        write_timeout: Optional[float] = None,
        bytesize: int = 8,
        parity: str = "E",
        stopbits: int = 1,
    ):
        """Initialize serial proxy with connection parameters.

        The signature is compatible with serial.Serial, the parameters are only stored.

        :param port: Serial port name.
        :param timeout: Read timeout in seconds.
        :param baudrate: Serial communication speed in bits per second.
        :param write_timeout: Write timeout in seconds.
        :param bytesize: Number of data bits.
        :param parity: Parity setting.
        :param stopbits: Number of stop bits.
        """
        self.port = port
        self.timeout = timeout
        self.write_timeout = write_timeout
        self.baudrate = baudrate
        self.bytesize = bytesize
        self.parity = parity
        self.stopbits = stopbits
        self.is_open = True
        self.buffer = bytes()
        self.state = "sync"
        self.pending = bytearray()
        self.sync_count = 0
        self.exchanges: list[bytes] = []
        self.memory: dict[int, bytes] = {}
        self.write_address = 0
        self.go_address: Optional[int] = None
        SerialProxy.latest = self

    def open(self) -> None:
        """Simulate opening of the serial port."""
        self.is_open = True

    def close(self) -> None:
        """Simulate closing of the serial port."""
        self.is_open = False

    def _unit_length(self) -> int:
        """Get length of the unit expected in current state, checksum included."""
        if self.state in ("address", "go_address"):
            return 5
        if self.state == "data":
            # length byte holds N - 1
            return self.pending[0] + 3 if self.pending else 1
        return 2

    def _reply(self, unit: bytes) -> bytes:
        """Process complete unit and get the reply of the bootloader."""
        payload, checksum = unit[:-1], unit[-1]
        self.exchanges.append(payload)
        expected = 0xFF - payload[0] if len(payload) == 1 else reduce(xor, payload)
        if len(self.exchanges) == self.fail_exchange:
            logger.debug(f"Failing exchange {len(self.exchanges)}")
            self.state = "command"
            return self.fail_reply
        if checksum != expected:
            logger.debug(f"Bad checksum {checksum:#04x}, expected {expected:#04x}")
            self.state = "command"
            return NACK

        if self.state == "command":
            if payload[0] == 0x01:
                return ACK + self.version_response
            if payload[0] == 0x02:
                return ACK + self.id_response
            if payload[0] == 0x31:
                self.state = "address"
                return ACK
            if payload[0] == 0x21:
                self.state = "go_address"
                return ACK
            return NACK
        if self.state == "address":
            self.write_address = int.from_bytes(payload, byteorder="big")
            self.state = "data"
            return ACK
        if self.state == "data":
            self.memory[self.write_address] = bytes(payload[1:])
            self.state = "command"
            return ACK
        self.go_address = int.from_bytes(payload, byteorder="big")
        self.state = "started"
        return ACK

    def write(self, data: bytes) -> int:
        """Simulate write of data into the bootloader.

        :param data: Bytes to write.
        :return: Number of bytes written.
        """
        logger.debug(f"I got: {data!r}")
        for byte in data:
            if self.state == "sync":
                self.sync_count += 1
                if self.sync_count == self.sync_ack_attempt:
                    self.buffer += ACK
                    self.state = "command"
                continue
            if self.state == "started":
                continue
            self.pending.append(byte)
            if len(self.pending) == self._unit_length():
                self.buffer += self._reply(bytes(self.pending))
                self.pending.clear()
        return len(data)

    def read(self, length: int) -> bytes:
        """Read portion of the queued reply.

        :param length: Amount of data to read from buffer in bytes.
        :return: Data segment read from buffer, empty if no reply is queued.
        """
        segment = self.buffer[:length]
        self.buffer = self.buffer[length:]
        logger.debug(f"I responded with: '{segment!r}'")
        return segment

    def __str__(self) -> str:
        """Get class name of the proxy."""
        return self.__class__.__name__

    def reset_input_buffer(self) -> None:
        """Simulate resetting of input buffer."""

    def reset_output_buffer(self) -> None:
        """Simulate resetting of output buffer."""

    def flush(self) -> None:
        """Simulate flushing of output buffer."""
