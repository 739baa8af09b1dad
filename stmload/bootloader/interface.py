#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""STM32 USART bootloader communication interface.

This module implements the two link level procedures of the bootloader protocol:
the autobaud synchronization and the exchange of one checksummed unit answered by
a single reply byte.
"""

import logging
from typing import Callable, Optional

from stmload.bootloader.commands import SYNC_BYTE, ExchangeOutcome, ReplyByte
from stmload.bootloader.exceptions import BootloaderConnectionError, BootloaderSyncError
from stmload.bootloader.utils import calc_checksum
from stmload.exceptions import StmLoadError, StmLoadTimeoutError, StmLoadValueError
from stmload.utils.interfaces.device.base import DeviceBase

logger = logging.getLogger(__name__)


class BootloaderInterface:
    """STM32 USART bootloader communication interface.

    The interface owns the device (byte channel) for the whole session. Only the
    autobaud synchronization retries; an exchange is attempted exactly once and its
    outcome is returned to the caller.

    :cvar SYNC_ATTEMPTS: Number of sync bytes sent before giving up.
    :cvar SYNC_TIMEOUT: Time to wait for the acknowledge of one sync byte [ms].
    """

    SYNC_ATTEMPTS = 50
    SYNC_TIMEOUT = 100

    def __init__(self, device: DeviceBase) -> None:
        """Initialize the BootloaderInterface.

        :param device: Device (serial port) to be used for communication.
        """
        self.device = device
        self.synced = False

    def open(self) -> None:
        """Open the underlying device.

        :raises BootloaderConnectionError: When the device cannot be opened.
        """
        try:
            self.device.open()
        except StmLoadError as exc:
            raise BootloaderConnectionError(f"Cannot open UART interface: {exc}") from exc

    def close(self) -> None:
        """Close the underlying device.

        :raises BootloaderConnectionError: When the device cannot be closed.
        """
        try:
            self.device.close()
        except StmLoadError as exc:
            raise BootloaderConnectionError(f"Cannot close UART interface: {exc}") from exc

    def write(self, data: bytes) -> None:
        """Send raw data to the target.

        :param data: Data to send to the device
        :raises BootloaderConnectionError: When sending the data fails
        """
        try:
            self.device.write(data)
        except StmLoadError as exc:
            raise BootloaderConnectionError(f"Write failed: {exc}") from exc

    def read(self, length: int, timeout: int) -> bytes:
        """Read exactly `length` raw bytes from the target.

        :param length: Number of bytes to read.
        :param timeout: Read timeout in milliseconds.
        :raises StmLoadTimeoutError: The data did not arrive in time.
        :raises BootloaderConnectionError: The read operation failed.
        :return: Data read from the device.
        """
        try:
            return self.device.read(length, timeout)
        except StmLoadTimeoutError:
            raise
        except StmLoadError as exc:
            raise BootloaderConnectionError(f"Read failed: {exc}") from exc

    def sync_connection(
        self,
        attempts: int = SYNC_ATTEMPTS,
        timeout: int = SYNC_TIMEOUT,
        attempt_callback: Optional[Callable[[int], None]] = None,
    ) -> int:
        """Synchronize the bootloader's autobaud with the host.

        1. Send the sync byte 0x7F
        2. Wait for one reply byte within the timeout
        3. Stop on acknowledge, otherwise try again

        A failed or timed out read only consumes an attempt, a failed write aborts
        the synchronization at once.

        :param attempts: Maximal number of sync bytes to send, defaults to 50.
        :param timeout: Time to wait for the reply to one sync byte [ms].
        :param attempt_callback: Called with the attempt number after each unsuccessful attempt.
        :raises StmLoadValueError: Number of attempts is not a positive number.
        :raises BootloaderConnectionError: Writing the sync byte failed.
        :raises BootloaderSyncError: The target never acknowledged.
        :return: Number of sync bytes sent.
        """
        if self.synced:
            return 0

        if attempts <= 0:
            raise StmLoadValueError("Attempts for sync must be positive number")

        for attempt in range(1, attempts + 1):
            self.write(bytes([SYNC_BYTE]))
            try:
                reply = self.device.read(1, timeout)
            except StmLoadTimeoutError:
                reply = b""
            except StmLoadError as exc:
                logger.debug(f"Sync attempt {attempt}: read failed: {exc}")
                reply = b""
            if reply and reply[0] == ReplyByte.ACK.tag:
                logger.info(f"Synchronized after {attempt} attempt(s)")
                self.synced = True
                return attempt
            logger.debug(f"No acknowledge for sync byte, attempts left: {attempts - attempt}")
            if attempt_callback:
                attempt_callback(attempt)

        raise BootloaderSyncError(f"Cannot synchronize, no acknowledge in {attempts} attempts")

    def exchange(self, payload: bytes, timeout: int) -> ExchangeOutcome:
        """Send one unit followed by its checksum and classify the reply.

        The result of the checksum write is not verified; a failure there is logged
        and surfaces as a missing or wrong reply.

        :param payload: Command byte or payload to be sent.
        :param timeout: Time to wait for the reply byte [ms].
        :return: Outcome of the exchange.
        """
        try:
            self.device.write(payload)
        except StmLoadError as exc:
            logger.debug(f"Payload write failed: {exc}")
            return ExchangeOutcome.IO_FAILURE

        checksum = calc_checksum(payload)
        try:
            self.device.write(bytes([checksum]))
        except StmLoadError as exc:
            logger.warning(f"Checksum write failed: {exc}")

        try:
            reply = self.device.read(1, timeout)
        except StmLoadTimeoutError:
            logger.debug(f"No reply within {timeout} ms")
            return ExchangeOutcome.TIMED_OUT
        except StmLoadError as exc:
            logger.debug(f"Reply read failed: {exc}")
            return ExchangeOutcome.IO_FAILURE

        if reply[0] == ReplyByte.ACK.tag:
            return ExchangeOutcome.ACKNOWLEDGED
        logger.debug(f"Reply {reply[0]:#04x} is not an acknowledge")
        return ExchangeOutcome.NEGATIVE_ACKNOWLEDGED
