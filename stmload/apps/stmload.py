#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""RAM loader for STM32 parts with the USART ROM bootloader."""

import sys
from typing import Optional

import click

from stmload.apps.utils import stmload_logger
from stmload.apps.utils.common_cli_options import (
    baudrate_option,
    stmload_apps_common_options,
    timeout_option,
)
from stmload.apps.utils.utils import StmLoadAppError, catch_stmload_error
from stmload.bootloader.interface import BootloaderInterface
from stmload.bootloader.protocol import BootloaderProtocol
from stmload.exceptions import StmLoadError
from stmload.utils.interfaces.device.serial_device import SerialDevice
from stmload.utils.misc import load_text


def print_attempt(attempt: int) -> None:
    """Print progress mark of an unsuccessful sync attempt."""
    click.echo(".", nl=False)


@click.command(name="stmload")
@stmload_apps_common_options
@click.argument("port")
@click.argument("image", required=False, type=click.Path(dir_okay=False, exists=True))
@baudrate_option(BootloaderProtocol.ALLOWED_BAUD_RATES_STR, SerialDevice.DEFAULT_BAUDRATE)
@click.option(
    "-r",
    "--retries",
    type=click.IntRange(min=1),
    default=BootloaderInterface.SYNC_ATTEMPTS,
    show_default=True,
    help="Number of sync bytes sent before giving up the autobaud.",
)
@timeout_option(timeout=BootloaderProtocol.CONTROL_TIMEOUT)
@click.option(
    "--write-timeout",
    metavar="<ms>",
    type=click.IntRange(min=1),
    default=BootloaderProtocol.WRITE_TIMEOUT,
    show_default=True,
    help="Timeout of the reply to a memory write data block in milliseconds.",
)
def main(
    port: str,
    image: Optional[str],
    baudrate: str,
    retries: int,
    timeout: int,
    write_timeout: int,
    log_level: int,
) -> None:
    """Load S-record IMAGE into RAM of STM32 device connected to PORT and start it.

    Without IMAGE the target is only synchronized and identified.
    """
    stmload_logger.install(level=log_level)

    image_lines = None
    if image:
        try:
            image_lines = load_text(image).splitlines()
        except StmLoadError as exc:
            raise StmLoadAppError(f"Cannot open image file: {exc.description}") from exc

    try:
        device = SerialDevice(port, timeout, int(baudrate))
    except StmLoadError as exc:
        raise StmLoadAppError(f"Cannot open serial port {port}: {exc.description}") from exc

    interface = BootloaderInterface(device)
    with BootloaderProtocol(
        interface,
        print_func=click.echo,
        control_timeout=timeout,
        write_timeout=write_timeout,
    ) as protocol:
        protocol.run(image_lines, sync_attempts=retries, attempt_callback=print_attempt)


@catch_stmload_error
def safe_main() -> None:
    """Calls the main function, usage errors exit with code 1."""
    try:
        sys.exit(main(standalone_mode=False))  # pylint: disable=no-value-for-parameter
    except click.ClickException as exc:
        exc.show()
        sys.exit(1)


if __name__ == "__main__":
    safe_main()
