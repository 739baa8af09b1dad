#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD application utilities.

This module provides the application error class and the decorator translating
exceptions into process exit codes.
"""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from stmload import STMLOAD_DEBUG_LOG_FILE, STMLOAD_DEBUG_LOGGING_DISABLED
from stmload.exceptions import StmLoadError

logger = logging.getLogger(__name__)


class StmLoadAppError(StmLoadError):
    """STMLOAD application error exception for CLI tools.

    Used for failures of the local setup (image file, serial port) which are
    reported with their own exit code.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "{description}"

    def __init__(self, desc: Optional[str] = None, error_code: int = 1) -> None:
        """Initialize the AppError.

        :param desc: Description to print out on command line, defaults to None
        :param error_code: Error code passed to OS, defaults to 1
        """
        super().__init__(desc)
        self.description = desc
        self.error_code = error_code


def catch_stmload_error(function: Callable) -> Callable:
    """Catch and handle StmLoadError and other exceptions.

    StmLoadAppError exits with its error code (1 by default), any other
    StmLoadError (synchronization, command or transport failure) exits with 2,
    unexpected exceptions exit with 3. The message is printed to stderr and the
    traceback goes to the debug log.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except StmLoadAppError as app_exc:
            if app_exc.description:
                click.echo(f"{app_exc.__class__.__name__}: {app_exc}", err=True)
            logger.debug(str(app_exc), exc_info=True)
            if 0 < app_exc.error_code < 256:
                sys.exit(app_exc.error_code)
            sys.exit(1)
        except (AssertionError, StmLoadError) as stmload_exc:
            click.echo(f"{stmload_exc.__class__.__name__}: {stmload_exc}", err=True)
            logger.debug(str(stmload_exc), exc_info=True)
            if not STMLOAD_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {STMLOAD_DEBUG_LOG_FILE} for more info", fg="yellow"
                )
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            if not STMLOAD_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {STMLOAD_DEBUG_LOG_FILE} for more info.", fg="yellow"
                )
            sys.exit(3)

    return wrapper
