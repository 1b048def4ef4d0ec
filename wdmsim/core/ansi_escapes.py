#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.ansi_escapes: A random subset of ANSI terminal escape codes for colored messages
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.ansi_escapes
========================

A random subset of ANSI terminal escape codes for colored messages
"""

red = '\x1b[1;31;40m'
green = '\x1b[1;32;40m'
blue = '\x1b[1;34;40m'
cyan = '\x1b[1;36;40m'
yellow = '\x1b[1;33;40m'
reset = '\x1b[0m'
