#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.exceptions: Exceptions thrown by other wdmsim modules
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.exceptions
======================

Exceptions thrown by other wdmsim modules
"""


class ConfigurationError(Exception):
    """User-provided configuration contains an error"""


class EquipmentConfigError(ConfigurationError):
    """Incomplete or wrong configuration within the equipment library"""


class NetworkTopologyError(ConfigurationError):
    """Topology of user-provided network is wrong"""


class ParametersError(ConfigurationError):
    """Incomplete or wrong parameters of a network element"""


class SimulationError(Exception):
    """Performance results are not available or can not be trusted"""


class PerformanceInvariantError(SimulationError):
    """Consistency checks on freshly computed performance results failed"""


class AmplifierIndexError(SimulationError, IndexError):
    """Line amplifier index out of the range declared by a fiber"""
