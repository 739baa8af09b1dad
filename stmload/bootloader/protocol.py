#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause
"""STM32 USART bootloader RAM loading protocol.

This module drives a whole loader session: autobaud synchronization, target
identification, writing of the image records into RAM and the final jump.
Any exchange which is not acknowledged terminates the session, because the
state of the bootloader is unknown afterwards.
"""

import logging
from dataclasses import dataclass
from types import TracebackType
from typing import Callable, Iterable, Optional, Type

from typing_extensions import Self

from stmload.bootloader.commands import CommandTag, ExchangeOutcome
from stmload.bootloader.device import TargetInfo
from stmload.bootloader.exceptions import (
    BootloaderCommandError,
    BootloaderConnectionError,
    BootloaderSyncError,
)
from stmload.bootloader.interface import BootloaderInterface
from stmload.bootloader.srec import Record, iter_records
from stmload.bootloader.utils import pack_address
from stmload.exceptions import StmLoadTimeoutError, StmLoadValueError

logger = logging.getLogger(__name__)


@dataclass
class LoadSession:
    """State of one loader session.

    The entry address is taken from the first record written, later records do
    not change it even if their address is lower.
    """

    target: Optional[TargetInfo] = None
    entry_address: Optional[int] = None
    records_written: int = 0
    bytes_written: int = 0
    started: bool = False

    def record_written(self, record: Record) -> None:
        """Account a record written to the target memory.

        :param record: Record which was written.
        """
        if self.entry_address is None:
            self.entry_address = record.address
        self.records_written += 1
        self.bytes_written += len(record.data)

    @property
    def jump_address(self) -> int:
        """Address for the Go command, 0 if no record was written."""
        return self.entry_address if self.entry_address is not None else 0


class BootloaderProtocol:
    """STM32 USART bootloader protocol handler.

    The protocol is a context manager, the interface is opened on enter and always
    closed on exit.

    :cvar CONTROL_TIMEOUT: Reply timeout of command, address and identification exchanges [ms].
    :cvar WRITE_TIMEOUT: Reply timeout of the memory write data exchange [ms].
    :cvar RESPONSE_LENGTH: Length of Get-Version and Get-ID response data.
    :cvar MAX_WRITE_LENGTH: Maximal number of bytes written by one Write Memory command.
    :cvar ALLOWED_BAUD_RATES: Baud rates the bootloader autobaud can detect.
    """

    CONTROL_TIMEOUT = 100
    WRITE_TIMEOUT = 500
    RESPONSE_LENGTH = 4
    MAX_WRITE_LENGTH = 256

    ALLOWED_BAUD_RATES = [1200, 2400, 4800, 9600, 19200, 38400, 57600, 115200]
    # this is just for click - Click.choice must be str
    ALLOWED_BAUD_RATES_STR = [str(i) for i in ALLOWED_BAUD_RATES]

    def __init__(
        self,
        interface: BootloaderInterface,
        print_func: Callable[[str], None],
        control_timeout: int = CONTROL_TIMEOUT,
        write_timeout: int = WRITE_TIMEOUT,
    ) -> None:
        """Initialize the BootloaderProtocol.

        :param interface: Communication interface of the bootloader.
        :param print_func: Function to handle output messages during operations.
        :param control_timeout: Reply timeout of control exchanges in milliseconds.
        :param write_timeout: Reply timeout of memory write data exchange in milliseconds.
        """
        self.interface = interface
        self.print_func = print_func
        self.control_timeout = control_timeout
        self.write_timeout = write_timeout

    def __enter__(self) -> Self:
        self.interface.open()
        return self

    def __exit__(
        self,
        exception_type: Optional[Type[BaseException]] = None,
        exception_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the communication interface."""
        if self.interface:
            self.interface.close()

    def check_outcome(self, outcome: ExchangeOutcome, step: str) -> None:
        """Raise an exception unless the exchange was acknowledged.

        :param outcome: Outcome of the exchange.
        :param step: Name of the step used in the error message.
        :raises BootloaderConnectionError: The exchange failed on the I/O level.
        :raises BootloaderCommandError: The target refused the unit or did not reply.
        """
        logger.info(f"CMD: {step}, STATUS: {outcome.label}")
        if outcome is ExchangeOutcome.ACKNOWLEDGED:
            return
        if outcome is ExchangeOutcome.IO_FAILURE:
            raise BootloaderConnectionError(f"{step} failed -> {outcome.description}")
        raise BootloaderCommandError(step, outcome)

    def send_command(self, command: CommandTag) -> None:
        """Send single byte command and require the acknowledge.

        :param command: Command to be sent.
        """
        logger.debug(f"->SEND COMMAND: {command.label}")
        outcome = self.interface.exchange(bytes([command.tag]), self.control_timeout)
        self.check_outcome(outcome, str(command.description))

    def send_data(self, data: bytes, step: str, timeout: Optional[int] = None) -> None:
        """Send a payload and require the acknowledge.

        :param data: Payload to be sent, the checksum is appended by the interface.
        :param step: Name of the step used in the error message.
        :param timeout: Reply timeout in milliseconds, defaults to the control timeout.
        """
        outcome = self.interface.exchange(
            data, self.control_timeout if timeout is None else timeout
        )
        self.check_outcome(outcome, step)

    def read_response(self, length: int = RESPONSE_LENGTH) -> bytes:
        """Read data the target sends after acknowledging a command.

        :param length: Number of bytes to read.
        :raises BootloaderCommandError: The data did not arrive in time.
        :return: Response data.
        """
        try:
            return self.interface.read(length, self.control_timeout)
        except StmLoadTimeoutError as exc:
            logger.debug(str(exc))
            raise BootloaderCommandError("Data receive", ExchangeOutcome.TIMED_OUT) from exc

    def sync_connection(
        self,
        attempts: int = BootloaderInterface.SYNC_ATTEMPTS,
        attempt_callback: Optional[Callable[[int], None]] = None,
    ) -> int:
        """Perform autobaud, the first step of the bootloader protocol.

        :param attempts: Maximal number of sync bytes to send.
        :param attempt_callback: Called after each unsuccessful attempt.
        :return: Number of sync bytes sent.
        """
        self.print_func("Autobaud")
        try:
            sent = self.interface.sync_connection(attempts, attempt_callback=attempt_callback)
        except BootloaderSyncError:
            self.print_func("Fail!")
            raise
        except BootloaderConnectionError:
            self.print_func("Error!")
            raise
        self.print_func("OK!")
        return sent

    def get_version(self) -> bytes:
        """Send Get-Version command and read its response.

        :return: Response data, the first byte is the bootloader version.
        """
        self.send_command(CommandTag.GET_VERSION)
        return self.read_response()

    def get_id(self) -> bytes:
        """Send Get-ID command and read its response.

        :return: Response data, bytes 1 and 2 are the big-endian product ID.
        """
        self.send_command(CommandTag.GET_ID)
        return self.read_response()

    def get_info(self) -> TargetInfo:
        """Read bootloader version and product ID of the target.

        :return: Identification of the target.
        """
        version_response = self.get_version()
        id_response = self.get_id()
        return TargetInfo.parse(version_response, id_response)

    def write_memory(self, address: int, data: bytes) -> None:
        """Write data into target memory.

        The command byte, the address and the data block are three exchanges; the
        data block is preceded by its length minus one.

        :param address: Start address in the target memory.
        :param data: Data to be written.
        :raises StmLoadValueError: Data are longer than one Write Memory command allows.
        """
        if len(data) > self.MAX_WRITE_LENGTH:
            raise StmLoadValueError(
                f"Data length {len(data)} exceeds the limit of {self.MAX_WRITE_LENGTH} bytes"
            )
        self.send_command(CommandTag.WRITE_MEMORY)
        self.send_data(pack_address(address), "Memory address send")
        block = bytes([(len(data) - 1) & 0xFF]) + data
        self.send_data(block, "Memory write", self.write_timeout)

    def go(self, address: int) -> None:
        """Start execution of the program at the given address.

        :param address: Address the target jumps to.
        """
        self.send_command(CommandTag.GO)
        self.send_data(pack_address(address), "Go command")

    def load_records(self, records: Iterable[Record], session: LoadSession) -> LoadSession:
        """Write records into target memory in the given order.

        :param records: Records to be written.
        :param session: Session keeping the entry address and statistics.
        :return: The updated session.
        """
        for record in records:
            self.print_func(f"Writing {len(record.data)} bytes on {record.address:#x}")
            self.write_memory(record.address, record.data)
            session.record_written(record)
        logger.info(
            f"Loading completed, written {session.records_written} records, "
            f"{session.bytes_written}B"
        )
        return session

    def run(
        self,
        image_lines: Optional[Iterable[str]] = None,
        sync_attempts: int = BootloaderInterface.SYNC_ATTEMPTS,
        attempt_callback: Optional[Callable[[int], None]] = None,
    ) -> LoadSession:
        """Run the whole loader session.

        1. Synchronize
        2. Identify the target (Get-Version, Get-ID)
        3. Write the records of the image, if any image was given
        4. Jump to the address of the first record written (or 0)

        :param image_lines: Lines of the S-record image, None for identification only.
        :param sync_attempts: Maximal number of sync bytes to send.
        :param attempt_callback: Called after each unsuccessful sync attempt.
        :return: The finished session.
        """
        session = LoadSession()
        self.sync_connection(sync_attempts, attempt_callback)
        session.target = self.get_info()
        self.print_func(str(session.target))
        if image_lines is None:
            return session

        self.load_records(iter_records(image_lines), session)

        self.print_func(f"Jumping to loaded program, startaddress={session.jump_address:#x}")
        self.go(session.jump_address)
        session.started = True
        self.print_func("Jumped into loaded program, have a nice day!")
        return session
