#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 USART bootloader commands, reply bytes and exchange outcomes.

Every unit sent to the bootloader (a command byte or a multi-byte payload) is
followed by one checksum byte and answered by exactly one reply byte.
"""

from stmload.utils.stmload_enum import StmLoadEnum

# Autobaud byte, the bootloader measures its bit timing on it
SYNC_BYTE = 0x7F


########################################################################################################################
# Bootloader Command Tags
########################################################################################################################
class CommandTag(StmLoadEnum):
    """STM32 USART bootloader command tags used by the loader."""

    GET_VERSION = (0x01, "GetVersion", "Get command (0x1)")
    GET_ID = (0x02, "GetID", "Get PID command (0x2)")
    GO = (0x21, "Go", "Go command (0x21)")
    WRITE_MEMORY = (0x31, "WriteMemory", "Memory write command (0x31)")


########################################################################################################################
# Bootloader Reply Bytes
########################################################################################################################
class ReplyByte(StmLoadEnum):
    """Single byte replies of the bootloader."""

    ACK = (0x79, "ACK", "Acknowledge")
    NACK = (0x1F, "NACK", "Negative acknowledge")


########################################################################################################################
# Exchange Outcome
########################################################################################################################
class ExchangeOutcome(StmLoadEnum):
    """Result of one write-payload, write-checksum, read-reply cycle.

    Exactly one outcome is produced per exchange.
    """

    ACKNOWLEDGED = (0, "Acknowledged", "Acknowledged")
    NEGATIVE_ACKNOWLEDGED = (1, "NegativeAcknowledged", "Negative acknowledge")
    TIMED_OUT = (2, "TimedOut", "Timeout")
    IO_FAILURE = (3, "IoFailure", "I/O error")
