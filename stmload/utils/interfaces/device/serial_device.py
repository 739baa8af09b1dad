#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD serial device interface implementation.

The STM32 USART bootloader expects 8 data bits, even parity and one stop bit.
The port is used in raw mode; parity and framing errors are not reported
separately, they show up as failed or timed out reads.
"""

import logging
from typing import Optional

from serial import EIGHTBITS, PARITY_EVEN, STOPBITS_ONE, Serial, SerialTimeoutException

from stmload.exceptions import StmLoadConnectionError, StmLoadPermissionError, StmLoadTimeoutError
from stmload.utils.interfaces.device.base import DeviceBase
from stmload.utils.misc import format_bytes

logger = logging.getLogger(__name__)


class SerialDevice(DeviceBase):
    """STMLOAD Serial Device Interface.

    Wraps a pyserial port configured for the bootloader: raw bytes, even parity,
    fixed baud rate.

    :cvar DEFAULT_BAUDRATE: Default serial communication speed (115200 bps).
    :cvar DEFAULT_TIMEOUT: Default read/write timeout in milliseconds.
    """

    DEFAULT_BAUDRATE = 115200
    DEFAULT_TIMEOUT = 100

    def __init__(
        self,
        port: Optional[str] = None,
        timeout: Optional[int] = None,
        baudrate: Optional[int] = None,
        parity: str = PARITY_EVEN,
        write_timeout: Optional[int] = None,
    ):
        """Initialize the UART interface.

        :param port: Name of the serial port, defaults to None
        :param timeout: Default read timeout in milliseconds, defaults to 100
        :param baudrate: Speed of the UART interface, defaults to 115200
        :param parity: Parity setting, the bootloader requires even parity
        :param write_timeout: Write timeout in milliseconds, None blocks until all data are sent
        :raises StmLoadConnectionError: When the port cannot be opened or configured
        :raises StmLoadPermissionError: When the permission is denied
        """
        super().__init__()
        self._timeout = timeout or self.DEFAULT_TIMEOUT
        try:
            self._device = Serial(
                port=port,
                timeout=self._timeout / 1000,
                write_timeout=write_timeout / 1000 if write_timeout else None,
                baudrate=baudrate or self.DEFAULT_BAUDRATE,
                bytesize=EIGHTBITS,
                parity=parity,
                stopbits=STOPBITS_ONE,
            )
        except Exception as e:
            if "PermissionError" in str(e):
                raise StmLoadPermissionError(f"Could not open port '{port}'. Access denied.") from e
            raise StmLoadConnectionError(str(e)) from e

    @property
    def timeout(self) -> int:
        """Get default timeout value in milliseconds."""
        return self._timeout

    @timeout.setter
    def timeout(self, value: int) -> None:
        """Set default read timeout value in milliseconds.

        :param value: Timeout value in milliseconds.
        """
        self._timeout = value
        self._device.timeout = value / 1000

    @property
    def is_opened(self) -> bool:
        """Check if the serial device is currently open."""
        return self._device.is_open

    def open(self) -> None:
        """Open the UART interface and drop any stale input.

        :raises StmLoadPermissionError: When the permission is denied
        :raises StmLoadConnectionError: When opening device fails
        """
        if not self.is_opened:
            try:
                self._device.open()
            except Exception as e:
                self.close()
                if "PermissionError" in str(e):
                    raise StmLoadPermissionError(str(e)) from e
                raise StmLoadConnectionError(str(e)) from e
        try:
            self._device.reset_input_buffer()
        except Exception as e:
            raise StmLoadConnectionError(str(e)) from e

    def close(self) -> None:
        """Close the UART interface.

        :raises StmLoadConnectionError: When closing device fails.
        """
        if self.is_opened:
            try:
                self._device.reset_input_buffer()
                self._device.reset_output_buffer()
                self._device.close()
            except Exception as e:
                raise StmLoadConnectionError(str(e)) from e

    def read(self, length: int, timeout: Optional[int] = None) -> bytes:
        """Read exactly `length` bytes from the serial device.

        Each underlying read waits at most `timeout` milliseconds for data, so the
        timeout applies per chunk, not to the whole transfer. A zero timeout blocks
        until the data arrives.

        :param length: Number of bytes to read from the device.
        :param timeout: Read timeout in milliseconds, None means the default timeout.
        :return: Data read from the device.
        :raises StmLoadConnectionError: When device is not opened or reading fails.
        :raises StmLoadTimeoutError: When the requested amount of data did not arrive in time.
        """
        if not self.is_opened:
            raise StmLoadConnectionError("Device is not opened for reading")
        read_timeout = self._timeout if timeout is None else timeout
        data = bytearray()
        try:
            self._device.timeout = read_timeout / 1000 if read_timeout else None
            while len(data) < length:
                chunk = self._device.read(length - len(data))
                if not chunk:
                    break
                data.extend(chunk)
        except Exception as e:
            raise StmLoadConnectionError(str(e)) from e
        if data:
            logger.debug(f"<{format_bytes(data)}>")
        if len(data) < length:
            raise StmLoadTimeoutError(
                f"Received {len(data)} of {length} bytes within {read_timeout} ms"
            )
        return bytes(data)

    def write(self, data: bytes, timeout: Optional[int] = None) -> None:
        """Send all data to device.

        :param data: Data bytes to send to the device.
        :param timeout: Write timeout in milliseconds, None means the default timeout.
        :raises StmLoadTimeoutError: When sending of data times out.
        :raises StmLoadConnectionError: When device is not opened, the send operation
            fails or not all bytes were written.
        """
        if not self.is_opened:
            raise StmLoadConnectionError("Device is not opened for writing")
        logger.debug(f"[{format_bytes(data)}]")
        try:
            if timeout is not None:
                self._device.write_timeout = timeout / 1000
            written = self._device.write(data)
            self._device.flush()
        except SerialTimeoutException as e:
            raise StmLoadTimeoutError(
                f"Write timeout error. The timeout is set to {self._device.write_timeout} s."
            ) from e
        except Exception as e:
            raise StmLoadConnectionError(str(e)) from e
        if written != len(data):
            raise StmLoadConnectionError(f"Short write, {written} of {len(data)} bytes sent")

    def __str__(self) -> str:
        """Return port name of the UART interface.

        :raises StmLoadConnectionError: When information cannot be collected from device.
        """
        try:
            return self._device.port
        except Exception as e:
            raise StmLoadConnectionError(str(e)) from e
