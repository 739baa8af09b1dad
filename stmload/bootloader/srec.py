#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Motorola S-record decoder for the RAM loader.

Only S3 records (32-bit address) carry data for the loader, the layout of one
line is ``S3 LL AAAAAAAA DD..DD CC`` where LL counts the address, data and
checksum bytes. The record checksum is not verified.
"""

import logging
import string
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional

from stmload.bootloader.exceptions import SRecordError

logger = logging.getLogger(__name__)

RECORD_TAG = "S3"
# address (4 bytes) + checksum (1 byte) counted by the length field
LENGTH_OVERHEAD = 5
MAX_DATA_LENGTH = 64

_LENGTH_OFFSET = len(RECORD_TAG)
_ADDRESS_OFFSET = _LENGTH_OFFSET + 2
_DATA_OFFSET = _ADDRESS_OFFSET + 8
_HEX_DIGITS = frozenset(string.hexdigits)


@dataclass(frozen=True)
class Record:
    """One decoded S3 record: target address and the data to be written there."""

    address: int
    data: bytes

    def __str__(self) -> str:
        return f"{len(self.data)} bytes at {self.address:#010x}"


def _parse_hex(text: str) -> int:
    """Parse a fixed width field of hexadecimal digits.

    :param text: Field content, sign, prefix or whitespace are not accepted.
    :raises ValueError: The field is empty or contains a non-hex character.
    :return: Unsigned value of the field.
    """
    if not text or not _HEX_DIGITS.issuperset(text):
        raise ValueError(f"'{text}' is not a hexadecimal number")
    return int(text, 16)


def decode_line(line: str, line_number: Optional[int] = None) -> Optional[Record]:
    """Decode one line of the firmware image.

    :param line: Line of the image, trailing line break is ignored.
    :param line_number: Line number used in error reports.
    :raises SRecordError: The line is not a valid S3 record and has to be skipped.
    :return: Decoded record or None for a blank line.
    """
    line = line.rstrip("\r\n")
    if not line.strip():
        return None
    if not line.startswith(RECORD_TAG):
        raise SRecordError(f"Only {RECORD_TAG} record will be recognized", line_number)

    header = line[_LENGTH_OFFSET:_DATA_OFFSET]
    if len(header) != _DATA_OFFSET - _LENGTH_OFFSET:
        raise SRecordError("Can not decode record header", line_number)
    try:
        length = _parse_hex(header[: _ADDRESS_OFFSET - _LENGTH_OFFSET]) - LENGTH_OVERHEAD
        address = _parse_hex(header[_ADDRESS_OFFSET - _LENGTH_OFFSET :])
    except ValueError as exc:
        raise SRecordError(f"Can not decode record header: {exc}", line_number) from exc

    if not 0 <= length <= MAX_DATA_LENGTH:
        raise SRecordError(f"Bad record, data length {length}", line_number)

    data = bytearray()
    for index in range(length):
        offset = _DATA_OFFSET + 2 * index
        digits = line[offset : offset + 2]
        try:
            if len(digits) != 2:
                raise ValueError("record is truncated")
            data.append(_parse_hex(digits))
        except ValueError as exc:
            raise SRecordError(f"Bad record, data {index}: {exc}", line_number) from exc

    return Record(address=address, data=bytes(data))


def iter_records(lines: Iterable[str]) -> Iterator[Record]:
    """Decode records from the lines of a firmware image.

    Lines which are not valid S3 records are reported and skipped, the rest of
    the image is still processed.

    :param lines: Lines of the firmware image.
    :return: Iterator of records in the file order.
    """
    for line_number, line in enumerate(lines, start=1):
        try:
            record = decode_line(line, line_number)
        except SRecordError as exc:
            logger.warning(f"{exc.description}, skipping. (line {line_number})")
            continue
        if record is not None:
            yield record
