#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD - RAM loader for the STM32 USART ROM bootloader.

The package talks to the system-memory bootloader of STM32 devices over a serial
line, identifies the target and downloads an S-record image into RAM, then
starts its execution.

Behaviour of the package may be tuned by the following environment variables:
    - STMLOAD_DEBUG: enable debugging defaults
    - STMLOAD_DEBUG_LOGGING_DISABLED: do not create the debug log file
    - STMLOAD_DEBUG_LOG_FILE: custom location of the debug log file
"""

import os
from typing import Optional, Union

from platformdirs import PlatformDirs

from .__version__ import __version__


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


__author__ = "NXP"
__license__ = "BSD-3-Clause"

STMLOAD_PLATFORM_DIRS = PlatformDirs(appauthor="nxp", appname="stmload", version=__version__)

STMLOAD_DEBUG = value_to_bool(os.environ.get("STMLOAD_DEBUG"))

STMLOAD_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("STMLOAD_DEBUG_LOGGING_DISABLED"))
STMLOAD_DEBUG_LOG_FILE = os.environ.get(
    "STMLOAD_DEBUG_LOG_FILE", os.path.join(STMLOAD_PLATFORM_DIRS.user_log_dir, "debug.log")
)

STMLOAD_CONFIG_FOLDER = os.path.expanduser("~/.stmload")
