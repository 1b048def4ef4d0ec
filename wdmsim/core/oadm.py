#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.oadm: switching architectures of the OADM nodes
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.oadm
================

Switching architectures of the :class:`.elements.Oadm` nodes.

An architecture is a strategy object attached to one node. It computes the
:class:`.info.SignalState` of a lightpath right after the node switch fabric, for lightpaths
which are added in the node, which cross it (express) or which are dropped in it. The propagation
engine never needs to know which kind of node it is dealing with.
"""

from wdmsim.core.info import SignalState
from wdmsim.core.parameters import RoadmParams, FilterlessParams
from wdmsim.core.utils import lin2db
from wdmsim.core.exceptions import ConfigurationError, NetworkTopologyError


class OadmArchitecture:
    """Interface of the OADM architectures

    :cvar equalizes: True if the node can enforce a spectral equalization target on its output degrees
    """
    name = None
    equalizes = False

    def added_lightpath_transform(self, state: SignalState, add_module_index: int, first_fiber) -> SignalState:
        """Signal of a lightpath added in this node, at the input of `first_fiber` (before its booster)"""
        raise NotImplementedError

    def express_lightpath_transform(self, state: SignalState, input_fiber, output_fiber) -> SignalState:
        """Signal of a lightpath coming from `input_fiber` (after its pre-amplifier) at the input of `output_fiber`
        (before its booster)"""
        raise NotImplementedError

    def dropped_lightpath_transform(self, state: SignalState, input_fiber) -> SignalState:
        """Signal of a lightpath coming from `input_fiber` (after its pre-amplifier) at the drop transponder"""
        raise NotImplementedError

    @property
    def to_json(self):
        return {'architecture': self.name, **self.params.asdict()}


class RoadmArchitecture(OadmArchitecture):
    """Wavelength selective switch based ROADM.

    Added lightpaths cross one add module and the switch fabric; express and dropped lightpaths only cross the
    switch fabric. Output degrees may be equalized.
    """
    name = 'Roadm'
    equalizes = True

    def __init__(self, **params):
        self.params = RoadmParams(**params)

    def _switch(self, state, loss):
        return state._replace(power=state.power - loss,
                              pmd_squared=state.pmd_squared + self.params.pmd ** 2)

    def added_lightpath_transform(self, state, add_module_index, first_fiber):
        if not 0 <= add_module_index < len(self.params.add_module_loss):
            raise NetworkTopologyError(f'Fiber {first_fiber.uid}: add module {add_module_index} does not exist in '
                                       f'node {first_fiber.origin}')
        return self._switch(state, self.params.add_module_loss[add_module_index] + self.params.switch_loss)

    def express_lightpath_transform(self, state, input_fiber, output_fiber):
        return self._switch(state, self.params.switch_loss)

    def dropped_lightpath_transform(self, state, input_fiber):
        return self._switch(state, self.params.switch_loss)

    def __repr__(self):
        return f'{type(self).__name__}(switch_loss={self.params.switch_loss!r}dB, ' \
            f'add_modules={len(self.params.add_module_loss)})'


class FilterlessArchitecture(OadmArchitecture):
    """Broadcast and select node built with passive splitters and couplers.

    The signal entering a degree is split towards the other degrees and the drop side, and every output degree
    couples the other degrees with the add side: each crossed splitter or coupler costs its splitting ratio.
    """
    name = 'Filterless'

    def __init__(self, **params):
        self.params = FilterlessParams(**params)

    @property
    def degree_loss(self):
        return lin2db(self.params.degree)

    @property
    def add_loss(self):
        return lin2db(self.params.add_ports)

    def _cross(self, state, loss):
        return state._replace(power=state.power - loss - self.params.insertion_loss,
                              pmd_squared=state.pmd_squared + self.params.pmd ** 2)

    def added_lightpath_transform(self, state, add_module_index, first_fiber):
        if not 0 <= add_module_index < self.params.add_ports:
            raise NetworkTopologyError(f'Fiber {first_fiber.uid}: add port {add_module_index} does not exist in '
                                       f'node {first_fiber.origin}')
        return self._cross(state, self.add_loss + self.degree_loss)

    def express_lightpath_transform(self, state, input_fiber, output_fiber):
        return self._cross(state, 2 * self.degree_loss)

    def dropped_lightpath_transform(self, state, input_fiber):
        return self._cross(state, self.degree_loss + self.add_loss)

    def __repr__(self):
        return f'{type(self).__name__}(degree={self.params.degree!r}, add_ports={self.params.add_ports!r})'


_ARCHITECTURES = {cls.name: cls for cls in (RoadmArchitecture, FilterlessArchitecture)}


def architecture_from_json(params: dict) -> OadmArchitecture:
    """Build the architecture named by params['architecture'] with the remaining parameters"""
    params = dict(params)
    name = params.pop('architecture', 'Roadm')
    try:
        cls = _ARCHITECTURES[name]
    except KeyError:
        raise ConfigurationError(f'Unknown OADM architecture "{name}", expected one of {sorted(_ARCHITECTURES)}')
    return cls(**params)
