#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.utils: utility functions that are used with wdmsim
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.utils
=================

This module contains utility functions that are used with wdmsim: unit conversions,
the OSNR accumulation rule, the ASE noise contribution of an amplifier and the
helpers describing the optical slot grid.
"""

from csv import writer
from math import inf, isinf
from typing import Iterable, Optional
from numpy import log10
from scipy import constants

from wdmsim.core.exceptions import ConfigurationError


REFERENCE_BANDWIDTH = 12.5e9  # Hz
"""Reference bandwidth of every OSNR value computed by wdmsim"""

OPTICAL_SLOT_WIDTH = 12.5e9  # Hz
"""Width of one optical slot of the frequency grid"""

SLOT_ZERO_FREQUENCY = 193.1e12  # Hz
"""Central frequency of the optical slot number 0"""


def write_csv(obj, filename):
    """
    Convert dictionary items to a CSV file the dictionary format:
    ::

        {'result category 1':
                        [
                        # 1st line of results
                        {'header 1' : value_xxx,
                         'header 2' : value_yyy},
                         # 2nd line of results: same headers, different results
                        {'header 1' : value_www,
                         'header 2' : value_zzz}
                        ],
        'result_category 2':
                        [
                        {},{}
                        ]
        }

    The generated csv file will be:
    ::

        result_category 1
        header 1    header 2
        value_xxx   value_yyy
        value_www   value_zzz
        result_category 2
        ...

    Empty categories only produce their title line.
    """
    with open(filename, 'w', encoding='utf-8', newline='') as f:
        w = writer(f)
        for data_key, data_list in obj.items():
            w.writerow([data_key])
            if not data_list:
                continue
            w.writerow(list(data_list[0].keys()))
            for data_dict in data_list:
                w.writerow(list(data_dict.values()))


def lin2db(value) -> Optional[float]:
    """Convert linear unit to logarithmic (dB)

    Non positive values have no logarithmic representation: they are reported as undefined.

    >>> round(lin2db(0.001), 2)
    -30.0
    >>> round(lin2db(1.26), 2)
    1.0
    >>> round(lin2db(100.0), 2)
    20.0
    >>> lin2db(0) is None
    True
    >>> lin2db(float('inf'))
    inf
    """
    if value <= 0:
        return None
    return float(10 * log10(value))


def db2lin(value):
    """Convert logarithimic units to linear

    >>> round(db2lin(10.0), 2)
    10.0
    >>> round(db2lin(1.0), 2)
    1.26
    >>> round(db2lin(-10.0), 2)
    0.1
    >>> db2lin(float('-inf'))
    0.0
    """
    return 10**(value / 10)


def watt2dbm(value):
    """Convert Watt units to dBm

    >>> round(watt2dbm(0.001), 1)
    0.0
    >>> round(watt2dbm(0.02), 1)
    13.0
    """
    return lin2db(value * 1e3)


def dbm2watt(value):
    """Convert dBm units to Watt

    >>> round(dbm2watt(0), 4)
    0.001
    >>> round(dbm2watt(13), 4)
    0.02
    """
    return db2lin(value) * 1e-3


def mw_per_ghz_to_dbm(psd_mw_per_ghz, bandwidth_hz):
    """Power in dBm of a flat power spectral density (mW/GHz) over a bandwidth (Hz)

    >>> round(mw_per_ghz_to_dbm(0.08, 12.5e9), 3)
    0.0
    >>> round(mw_per_ghz_to_dbm(0.08, 25e9), 3)
    3.01
    """
    return lin2db(psd_mw_per_ghz * bandwidth_hz * 1e-9)


def osnr_accumulation(osnrs_db: Iterable[float]) -> float:
    """Accumulate OSNR contributions expressed in dB

    Noise powers add up, so the accumulated OSNR is the inverse of the sum of the inverse
    linear OSNRs. Infinite contributions (no noise added, e.g. an absent amplifier) are skipped.
    When no finite contribution remains, the result is noiseless (infinite OSNR).

    >>> osnr_accumulation([])
    inf
    >>> round(osnr_accumulation([20.0, 20.0]), 2)
    16.99
    >>> round(osnr_accumulation([30.0, float('inf')]), 2)
    30.0
    >>> osnr_accumulation([30.0, float('-inf')])
    -inf
    """
    nsr = 0
    for osnr in osnrs_db:
        if osnr is None:
            raise ValueError('Undefined OSNR can not be accumulated')
        if osnr == inf:
            continue
        nsr += db2lin(-osnr)
    if nsr == 0:
        return inf
    if isinf(nsr):
        return -inf
    return -lin2db(nsr)


def edfa_osnr_contribution(frequency: float, nf_db: Optional[float], pin_dbm: float) -> float:
    """Linear OSNR added by one amplifier over the reference bandwidth

    :param frequency: central frequency of the channel (Hz)
    :param nf_db: noise figure of the amplifier (dB), None if there is no amplifier
    :param pin_dbm: channel power at the amplifier input (dBm)
    :return: the linear OSNR of the amplifier alone, infinite if there is no amplifier

    >>> edfa_osnr_contribution(193.1e12, None, 0)
    inf
    >>> round(lin2db(edfa_osnr_contribution(193.1e12, 5, 0)), 2)
    52.96
    """
    if nf_db is None:
        return inf
    ase_power = db2lin(nf_db) * constants.h * frequency * REFERENCE_BANDWIDTH
    return dbm2watt(pin_dbm) / ase_power


def slot_central_frequency(slot: int) -> float:
    """Central frequency (Hz) of an optical slot

    >>> slot_central_frequency(0)
    193100000000000.0
    >>> slot_central_frequency(-8)
    193000000000000.0
    """
    return SLOT_ZERO_FREQUENCY + slot * OPTICAL_SLOT_WIDTH


def slot_lowest_frequency(slot: int) -> float:
    """Lower edge (Hz) of an optical slot

    >>> slot_lowest_frequency(0)
    193093750000000.0
    """
    return SLOT_ZERO_FREQUENCY + (slot - 0.5) * OPTICAL_SLOT_WIDTH


def slot_highest_frequency(slot: int) -> float:
    """Upper edge (Hz) of an optical slot

    >>> slot_highest_frequency(0)
    193106250000000.0
    """
    return SLOT_ZERO_FREQUENCY + (slot + 0.5) * OPTICAL_SLOT_WIDTH


def slots_central_frequency(slots: Iterable[int]) -> float:
    """Central frequency (Hz) of the band made of contiguous optical slots

    >>> slots_central_frequency([0, 1, 2, 3])
    193118750000000.0
    """
    slots = list(slots)
    return (slot_lowest_frequency(min(slots)) + slot_highest_frequency(max(slots))) / 2


wavelength2freq = constants.lambda2nu
freq2wavelength = constants.nu2lambda


def convert_length(value, units):
    """Convert length into kilometers

    >>> convert_length(1, 'km')
    1.0
    >>> convert_length(123, 'm')
    0.123
    >>> convert_length(666, 'yards')
    Traceback (most recent call last):
        ...
    wdmsim.core.exceptions.ConfigurationError: Cannot convert length in "yards" into kilometers
    """
    if units == 'km':
        return value * 1e0
    elif units == 'm':
        return value / 1e3
    else:
        raise ConfigurationError(f'Cannot convert length in "{units}" into kilometers')


def merge_params(dict1, dict2):
    """Complete dict1 with the contents of dict2, recursively; values of dict1 take precedence

    >>> d1 = {'gain': 16, 'booster': {'nf': 5}}
    >>> d2 = {'gain': 20, 'pmd': 0.1, 'booster': {'nf': 6, 'gain': 17}}
    >>> merge_params(d1, d2)
    {'gain': 16, 'booster': {'nf': 5, 'gain': 17}, 'pmd': 0.1}
    """
    copy_dict1 = dict1.copy()
    for key in dict2:
        if key in dict1:
            if isinstance(dict1[key], dict) and isinstance(dict2[key], dict):
                copy_dict1[key] = merge_params(copy_dict1[key], dict2[key])
        else:
            copy_dict1[key] = dict2[key]
    return copy_dict1


def within_bounds(value, low, high) -> bool:
    """True if value lies in [low, high]; a missing bound is unconstrained, a missing value is never within

    >>> within_bounds(3, None, 5), within_bounds(None, None, None), within_bounds(-1, 0, None)
    (True, False, False)
    """
    if value is None:
        return False
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True
