#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 bootloader exception classes.

Link failures (autobaud exhausted, transport I/O errors) and command failures
(negative acknowledge or timeout) are fatal for the whole session; a firmware
record which cannot be decoded is reported and skipped.
"""

from typing import Optional

from stmload.bootloader.commands import ExchangeOutcome
from stmload.exceptions import StmLoadConnectionError, StmLoadError, StmLoadParsingError


########################################################################################################################
# STM32 Bootloader Exceptions
########################################################################################################################
class BootloaderError(StmLoadError):
    """Base exception class for bootloader operations.

    :cvar fmt: Format string template for bootloader error messages.
    """

    fmt = "Bootloader: {description}"


class BootloaderCommandError(BootloaderError):
    """A bootloader exchange did not end with an acknowledge.

    The failed step and the outcome of the exchange are kept, so the message tells
    apart negative acknowledge, timeout and I/O error.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "Bootloader: {step} failed -> {description}"

    def __init__(self, step: str, outcome: ExchangeOutcome):
        """Initialize the bootloader command exception.

        :param step: Description of the step (command, address, data) which failed.
        :param outcome: Outcome of the failed exchange.
        """
        super().__init__(outcome.description)
        self.step = step
        self.outcome = outcome

    def __str__(self) -> str:
        """Return string representation of the exception."""
        return self.fmt.format(step=self.step, description=self.description)


class BootloaderConnectionError(StmLoadConnectionError, BootloaderError):
    """The link with the bootloader could not be established or failed.

    :cvar fmt: Error message format template for connection issues.
    """

    fmt = "Bootloader: Connection issue -> {description}"


class BootloaderSyncError(BootloaderConnectionError):
    """The target did not acknowledge any of the sync bytes."""

    fmt = "Bootloader: Autobaud failed -> {description}"


class SRecordError(StmLoadParsingError):
    """A firmware image line cannot be decoded into a record.

    :cvar fmt: Error message format template.
    """

    fmt = "S-Record: {description}"

    def __init__(self, desc: Optional[str] = None, line_number: Optional[int] = None) -> None:
        """Initialize the record error.

        :param desc: Reason why the line was rejected.
        :param line_number: 1-based line number in the image, if known.
        """
        super().__init__(desc)
        self.line_number = line_number
