#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""STM32 USART bootloader package.

This package implements the host side of the STM32 system-memory bootloader
protocol needed to load a program into RAM and start it.
"""
