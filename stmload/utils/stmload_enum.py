#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD custom enumeration extensions.

Enumerations whose members carry a numeric tag (the value used on the wire),
a human readable label and an optional description.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from typing_extensions import Self

from stmload.exceptions import StmLoadKeyError


@dataclass(frozen=True)
class StmLoadEnumMember:
    """STMLOAD Enum member representation."""

    tag: int
    label: str
    description: Optional[str] = None


class StmLoadEnum(StmLoadEnumMember, Enum):
    """STMLOAD enhanced enumeration.

    Members compare equal to both their tag and their label, which allows code like
    ``CommandTag.GO == 0x21``.
    """

    def __eq__(self, __value: object) -> bool:
        return self.tag == __value or self.label == __value

    def __hash__(self) -> int:
        return hash((self.tag, self.label, self.description))

    @classmethod
    def contains(cls, tag: int) -> bool:
        """Check if a member with given tag exists in enum.

        :param tag: Tag of enum member to check for existence.
        :return: True if member exists, False otherwise.
        """
        return any(item.tag == tag for item in cls.__members__.values())

    @classmethod
    def from_tag(cls, tag: int) -> Self:
        """Get enum member with given tag.

        :param tag: Tag to be used for searching
        :raises StmLoadKeyError: If enum with given tag is not found
        :return: Found enum member
        """
        for item in cls.__members__.values():
            if item.tag == tag:
                return item
        raise StmLoadKeyError(f"There is no {cls.__name__} item with tag {tag} defined")
