#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Tests of the autobaud synchronization and the checksummed exchange."""

import pytest

from stmload.bootloader.commands import ExchangeOutcome
from stmload.bootloader.exceptions import BootloaderConnectionError, BootloaderSyncError
from stmload.bootloader.interface import BootloaderInterface
from stmload.exceptions import StmLoadConnectionError, StmLoadTimeoutError, StmLoadValueError
from tests.bootloader.virtual_device import VirtualDevice

ACK = b"\x79"
NACK = b"\x1f"


@pytest.mark.parametrize("ack_attempt", [1, 2, 7, 50])
def test_sync_acknowledged_on_attempt(ack_attempt: int) -> None:
    device = VirtualDevice([StmLoadTimeoutError()] * (ack_attempt - 1) + [ACK])
    interface = BootloaderInterface(device)
    failed = []
    assert interface.sync_connection(attempt_callback=failed.append) == ack_attempt
    assert device.written == [b"\x7f"] * ack_attempt
    assert failed == list(range(1, ack_attempt))
    assert interface.synced


def test_sync_silent_target() -> None:
    device = VirtualDevice()
    interface = BootloaderInterface(device)
    with pytest.raises(BootloaderSyncError, match="50 attempts"):
        interface.sync_connection()
    assert device.written == [b"\x7f"] * 50
    assert not interface.synced


def test_sync_custom_attempts() -> None:
    device = VirtualDevice()
    with pytest.raises(BootloaderConnectionError):
        BootloaderInterface(device).sync_connection(attempts=3)
    assert len(device.written) == 3


def test_sync_non_ack_and_read_error_consume_attempts() -> None:
    device = VirtualDevice([NACK, b"\x00", StmLoadConnectionError("Framing"), ACK])
    assert BootloaderInterface(device).sync_connection() == 4


def test_sync_write_failure_is_fatal() -> None:
    device = VirtualDevice([ACK], fail_writes={1})
    with pytest.raises(BootloaderConnectionError) as exc:
        BootloaderInterface(device).sync_connection()
    assert not isinstance(exc.value, BootloaderSyncError)
    assert len(device.written) == 1
    assert device.reads == 0


def test_sync_already_synced() -> None:
    device = VirtualDevice([ACK])
    interface = BootloaderInterface(device)
    interface.sync_connection()
    assert interface.sync_connection() == 0
    assert len(device.written) == 1


def test_sync_invalid_attempts() -> None:
    with pytest.raises(StmLoadValueError):
        BootloaderInterface(VirtualDevice()).sync_connection(attempts=0)


@pytest.mark.parametrize(
    "payload,frame",
    [
        (b"\x01", [b"\x01", b"\xfe"]),
        (b"\x00\x00\x20\x00", [b"\x00\x00\x20\x00", b"\x20"]),
    ],
)
def test_exchange_acknowledged(payload: bytes, frame: list[bytes]) -> None:
    device = VirtualDevice([ACK])
    assert BootloaderInterface(device).exchange(payload, 100) == ExchangeOutcome.ACKNOWLEDGED
    assert device.written == frame


@pytest.mark.parametrize(
    "reply,outcome",
    [
        (NACK, ExchangeOutcome.NEGATIVE_ACKNOWLEDGED),
        (b"\x00", ExchangeOutcome.NEGATIVE_ACKNOWLEDGED),
        (b"\x7f", ExchangeOutcome.NEGATIVE_ACKNOWLEDGED),
        (StmLoadTimeoutError(), ExchangeOutcome.TIMED_OUT),
        (StmLoadConnectionError("Port closed"), ExchangeOutcome.IO_FAILURE),
    ],
)
def test_exchange_outcome(reply: object, outcome: ExchangeOutcome) -> None:
    device = VirtualDevice([reply])  # type: ignore[list-item]
    assert BootloaderInterface(device).exchange(b"\x31", 100) is outcome


def test_exchange_silent_target() -> None:
    device = VirtualDevice()
    assert BootloaderInterface(device).exchange(b"\x02", 100) is ExchangeOutcome.TIMED_OUT


def test_exchange_payload_write_failure() -> None:
    device = VirtualDevice([ACK], fail_writes={1})
    assert BootloaderInterface(device).exchange(b"\x21", 100) is ExchangeOutcome.IO_FAILURE
    assert len(device.written) == 1
    assert device.reads == 0


def test_exchange_checksum_write_failure_is_not_checked() -> None:
    device = VirtualDevice([ACK], fail_writes={2})
    assert BootloaderInterface(device).exchange(b"\x21", 100) is ExchangeOutcome.ACKNOWLEDGED
    assert device.reads == 1


def test_open_close() -> None:
    device = VirtualDevice()
    interface = BootloaderInterface(device)
    interface.open()
    assert device.is_opened
    interface.close()
    assert not device.is_opened
