#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.info: optical signal condition at one point of a lightpath
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.info
================

This module contains :class:`SignalState`, the condition of the optical signal of one lightpath
at one point of the network.
"""

from collections import namedtuple
from math import inf, sqrt
from typing import Optional


class SignalState(namedtuple('SignalState', 'power chromatic_dispersion pmd_squared osnr')):
    """Optical signal condition of a lightpath at one point.

    Every field is either ``None`` (undefined), or a measured value. The OSNR may also be infinite
    when no noise has been accumulated yet.

    :param power: channel power (dBm)
    :param chromatic_dispersion: accumulated chromatic dispersion (ps/nm)
    :param pmd_squared: accumulated polarization mode dispersion, squared (ps^2). Kept squared so that
        PMD of successive stages is simply added.
    :param osnr: optical signal to noise ratio over a 12.5 GHz reference bandwidth (dB)
    """
    def __new__(cls, power: Optional[float] = None, chromatic_dispersion: Optional[float] = None,
                pmd_squared: Optional[float] = None, osnr: Optional[float] = None):
        return super().__new__(cls, power, chromatic_dispersion, pmd_squared, osnr)

    @classmethod
    def transmitted(cls, power: float) -> 'SignalState':
        """State at the output of a transponder: no dispersion, no noise"""
        return cls(power, 0.0, 0.0, inf)

    @property
    def pmd(self) -> Optional[float]:
        """Accumulated polarization mode dispersion (ps)"""
        if self.pmd_squared is None:
            return None
        return sqrt(self.pmd_squared)

    @property
    def is_defined(self) -> bool:
        return all(value is not None for value in self)

    def attenuated(self, loss: float) -> 'SignalState':
        return self._replace(power=self.power - loss)

    def __str__(self):
        def fmt(value, unit):
            return 'undefined' if value is None else f'{value:.2f} {unit}'
        return '\n'.join([f'  power:                {fmt(self.power, "dBm")}',
                          f'  chromatic dispersion: {fmt(self.chromatic_dispersion, "ps/nm")}',
                          f'  PMD:                  {fmt(self.pmd, "ps")}',
                          f'  OSNR (12.5 GHz):      {fmt(self.osnr, "dB")}'])
