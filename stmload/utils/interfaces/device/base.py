#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD device interface base class.

This module provides the abstract base class for the byte channel the bootloader
protocol runs on.
"""

import logging
from abc import ABC, abstractmethod
from types import TracebackType
from typing import Optional, Type

from typing_extensions import Self

logger = logging.getLogger(__name__)


class DeviceBase(ABC):
    """Abstract base class for device communication interfaces.

    The device is a duplex byte channel: blocking writes and reads bounded by a
    timeout. A device is a context manager; leaving the context always closes it.
    """

    def __enter__(self) -> Self:
        """Open the device and return it for use in the ``with`` block.

        :return: The device instance itself.
        """
        self.open()
        return self

    def __exit__(
        self,
        exception_type: Optional[Type[BaseException]] = None,
        exception_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        """Close the connection when leaving the context, regardless of an exception.

        :param exception_type: Type of exception that caused the context to exit, if any.
        :param exception_value: Exception instance that caused the context to exit, if any.
        :param traceback: Traceback object associated with the exception, if any.
        """
        self.close()

    @property
    @abstractmethod
    def is_opened(self) -> bool:
        """Indicates whether interface is open.

        :return: True if interface is open, False otherwise.
        """

    @abstractmethod
    def open(self) -> None:
        """Open the interface.

        :raises StmLoadConnectionError: If the interface cannot be opened.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the interface and release associated resources."""

    @abstractmethod
    def read(self, length: int, timeout: Optional[int] = None) -> bytes:
        """Read exactly `length` bytes from the device.

        A nonzero timeout bounds the wait for each chunk of incoming data, zero
        means no timeout gating (the caller asserts the data is available).

        :param length: Length of data to be read in bytes.
        :param timeout: Read timeout in milliseconds, None for default timeout.
        :raises StmLoadTimeoutError: The data did not arrive in time.
        :raises StmLoadConnectionError: The read operation failed.
        :return: Data read from the device.
        """

    @abstractmethod
    def write(self, data: bytes, timeout: Optional[int] = None) -> None:
        """Write all data to the device.

        :param data: Data to be written to the device.
        :param timeout: Write timeout to be applied in milliseconds.
        :raises StmLoadConnectionError: The write failed or was incomplete.
        """

    @property
    @abstractmethod
    def timeout(self) -> int:
        """Get the default timeout value for device communication.

        :return: Timeout value in milliseconds.
        """

    @timeout.setter
    @abstractmethod
    def timeout(self, value: int) -> None:
        """Set default timeout value for device communication.

        :param value: Timeout value in milliseconds.
        """

    @abstractmethod
    def __str__(self) -> str:
        """Return string containing information about the interface."""
