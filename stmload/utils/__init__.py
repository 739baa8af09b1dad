#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STMLOAD utilities package.

Common helpers shared by the bootloader protocol and the CLI application:
file loading, enumerations and the device (transport) interfaces.
"""
