#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD exception classes.

This module defines the base hierarchy of exceptions used across the STMLOAD
package, so that callers may handle any loader failure with a single except clause.
"""

from typing import Optional

#######################################################################
# # STM32 Loader Exceptions
#######################################################################


class StmLoadError(Exception):
    """STMLOAD Base Exception.

    Base exception class for all loader related errors. It provides consistent
    error formatting; all STMLOAD specific exceptions inherit from this class.

    :cvar fmt: Default error message format template.
    """

    fmt = "STMLOAD: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base STMLOAD Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        If no description is provided, defaults to "Unknown Error".

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class StmLoadKeyError(StmLoadError, KeyError):
    """STMLOAD Key Error, e.g. an enumeration member lookup failed."""


class StmLoadValueError(StmLoadError, ValueError):
    """STMLOAD standard value error."""


class StmLoadIOError(StmLoadError, IOError):
    """STMLOAD standard IO error.

    Raised for local input/output problems such as a firmware image which cannot
    be opened or read.
    """


class StmLoadParsingError(StmLoadError):
    """STMLOAD parsing error.

    Raised when textual input (firmware image lines, configuration files) cannot
    be decoded.
    """


class StmLoadConnectionError(StmLoadError, ConnectionError):
    """STMLOAD Connection Error.

    Raised when the communication with the target fails on the transport level,
    e.g. the serial port cannot be opened or a read/write operation fails.
    """


class StmLoadPermissionError(StmLoadError, PermissionError):
    """STMLOAD permission error, e.g. access to the serial port is denied."""


class StmLoadTimeoutError(StmLoadError, TimeoutError):
    """STMLOAD timeout exception.

    Raised when the target does not provide the requested data within the
    specified timeout.
    """
