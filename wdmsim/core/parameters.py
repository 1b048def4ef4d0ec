#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.parameters: parameters of the network elements
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.parameters
======================

This module contains all parameters to configure standard network elements.
"""

from wdmsim.core.utils import convert_length
from wdmsim.core.exceptions import ParametersError


class Parameters:
    def asdict(self):
        class_dict = self.__class__.__dict__
        instance_dict = self.__dict__
        new_dict = {}
        for key in class_dict:
            if isinstance(class_dict[key], property):
                new_dict[key] = instance_dict['_' + key]
        return new_dict


class FiberParams(Parameters):
    def __init__(self, **kwargs):
        try:
            self._length = convert_length(kwargs['length'], kwargs.get('length_units', 'km'))  # km
            self._loss_coef = kwargs['loss_coef']  # dB/km
        except KeyError as e:
            raise ParametersError(f'Fiber configurations json must include {e}. Configuration: {kwargs}')
        if self._length <= 0:
            raise ParametersError(f'Fiber length must be strictly positive, got {self._length} km')
        self._dispersion = kwargs.get('dispersion', 16.7)  # ps/nm/km
        self._pmd_coef = kwargs.get('pmd_coef', 0.1)  # ps/sqrt(km)

    @property
    def length(self):
        return self._length

    @property
    def loss_coef(self):
        return self._loss_coef

    @property
    def dispersion(self):
        return self._dispersion

    @property
    def pmd_coef(self):
        return self._pmd_coef


class AmplifierParams:
    """Booster or pre-amplifier settings

    gain (dB), nf (dB), pmd (ps) and cd_compensation (ps/nm).
    """
    default_values = {
        'gain': None,
        'nf': None,
        'pmd': 0,
        'cd_compensation': 0,
    }
    mandatory = ('gain', 'nf')

    def __init__(self, **params):
        clean_params = {k: v for k, v in params.items() if v != ''}
        missing = [k for k in self.mandatory if clean_params.get(k) is None]
        if missing:
            raise ParametersError(f'Amplifier configurations must include {missing}. Configuration: {params}')
        for k, v in self.default_values.items():
            setattr(self, k, clean_params.get(k, v))

    def asdict(self):
        return {k: getattr(self, k) for k in self.default_values}


class LineAmplifierParams(AmplifierParams):
    """Optical line amplifier settings

    Adds to :class:`AmplifierParams` the position (km from the fiber origin) and the acceptable ranges of the
    gain (dB) and of the total output power (dBm). Missing bounds are unconstrained.
    """
    default_values = {
        **AmplifierParams.default_values,
        'position': None,
        'gain_min': None,
        'gain_max': None,
        'out_power_min': None,
        'out_power_max': None,
    }
    mandatory = ('position', 'gain', 'nf')

    def __init__(self, **params):
        super().__init__(**params)
        for low, high in (('gain_min', 'gain_max'), ('out_power_min', 'out_power_max')):
            low_value, high_value = getattr(self, low), getattr(self, high)
            if low_value is not None and high_value is not None and low_value > high_value:
                raise ParametersError(f'Line amplifier {low} ({low_value}) is larger than {high} ({high_value})')


class RoadmParams(Parameters):
    def __init__(self, **kwargs):
        try:
            self._add_module_loss = list(kwargs['add_module_loss'])  # dB, one value per add module
        except KeyError as e:
            raise ParametersError(f'ROADM configurations must include {e}. Configuration: {kwargs}')
        except TypeError as e:
            raise ParametersError(f'ROADM add_module_loss must be a list of losses. Configuration: {kwargs}') from e
        self._switch_loss = kwargs.get('switch_loss', 0)  # dB
        self._pmd = kwargs.get('pmd', 0)  # ps

    @property
    def add_module_loss(self):
        return self._add_module_loss

    @property
    def switch_loss(self):
        return self._switch_loss

    @property
    def pmd(self):
        return self._pmd


class FilterlessParams(Parameters):
    def __init__(self, **kwargs):
        self._insertion_loss = kwargs.get('insertion_loss', 0)  # dB
        self._pmd = kwargs.get('pmd', 0)  # ps
        self._degree = kwargs.get('degree', 2)
        self._add_ports = kwargs.get('add_ports', 1)
        if self._degree < 1 or self._add_ports < 1:
            raise ParametersError('Filterless nodes need at least one degree and one add port. '
                                  f'Configuration: {kwargs}')

    @property
    def insertion_loss(self):
        return self._insertion_loss

    @property
    def pmd(self):
        return self._pmd

    @property
    def add_ports(self):
        return self._add_ports

    @property
    def degree(self):
        return self._degree
