#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""CLI helper for Click."""

import logging
from typing import Any, Callable, TypeVar, Union

import click

from stmload import __version__ as stmload_version

FC = TypeVar("FC", bound=Union[Callable[..., Any], click.Command])


def timeout_option(
    timeout: int = 100,
    use_long_form_only: bool = False,
) -> Callable[[FC], FC]:
    """Get the timeout option.

    :param use_long_form_only: Use long version only
    :param timeout: Default timeout in milliseconds

    :return: click decorator
    """
    options = [] if use_long_form_only else ["-t"]
    options.append("--timeout")
    return click.option(
        *options,
        metavar="<ms>",
        type=click.IntRange(min=1),
        help=f"""Sets timeout when waiting on reply over a serial line. The default is {timeout} milliseconds.""",
        default=timeout,
    )


def baudrate_option(choices: list[str], baudrate: int = 115200) -> Callable[[FC], FC]:
    """Click decorator handling the serial line speed.

    Provides: `baudrate: str` one of the choices.

    :param choices: Supported baud rates as strings.
    :param baudrate: Default baud rate.
    :return: Click decorator.
    """
    return click.option(
        "-b",
        "--baudrate",
        default=str(baudrate),
        show_default=True,
        type=click.Choice(choices=choices, case_sensitive=False),
        help="Speed of the serial line.",
    )


def stmload_apps_common_options(options: FC) -> FC:
    """Common click options.

    Sets --help, --version; provides: `log_level: int` for logging.

    :return: click decorator
    """
    options = click.help_option("--help")(options)
    options = click.version_option(stmload_version, "--version")(options)
    options = click.option(
        "-vv",
        "--debug",
        "log_level",
        flag_value=logging.DEBUG,
        help="Display more debugging information.",
    )(options)
    options = click.option(
        "-v",
        "--verbose",
        "log_level",
        flag_value=logging.INFO,
        help="Print more detailed information",
    )(options)
    return options
