#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.elements: network elements which affect the optical signal of a lightpath
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.elements
====================

Standard network elements.

A network element only has a local "view" of the network: amplifiers transform a
:class:`.info.SignalState` into another one, fibers describe how a signal evolves along their
length and which amplifiers they carry. :class:`Oadm` nodes delegate the handling of
added, express and dropped lightpaths to their :py:mod:`.oadm` architecture.

Network elements MUST implement two attributes :py:attr:`uid` and :py:attr:`name` representing a
unique identifier and a printable name.
"""

from collections import namedtuple
from typing import List, Optional

from wdmsim.core.utils import lin2db, edfa_osnr_contribution, slots_central_frequency, within_bounds
from wdmsim.core.parameters import FiberParams, AmplifierParams, LineAmplifierParams
from wdmsim.core.info import SignalState
from wdmsim.core.exceptions import NetworkTopologyError, ParametersError


class Location(namedtuple('Location', 'latitude longitude city region')):
    """Represents a geographical location with latitude, longitude, city, and region."""
    def __new__(cls, latitude: float = 0, longitude: float = 0, city: str = None, region: str = None):
        return super().__new__(cls, latitude, longitude, city, region)


class _Node:
    """Convenience class for providing common functionality of all network elements

    :ivar uid: Unique identifier for the node.
    :vartype uid: str
    :ivar name: Printable name of the node.
    :vartype name: str
    :ivar metadata: Metadata including location.
    :vartype metadata: Dict[str, Any]
    """
    def __init__(self, uid, name=None, metadata=None, type_variety=None):
        if name is None:
            name = uid
        self.uid, self.name = uid, name
        if metadata is None:
            metadata = {'location': {}}
        if metadata and not isinstance(metadata.get('location'), Location):
            metadata['location'] = Location(**metadata.pop('location', {}))
        self.metadata = metadata
        self.type_variety = type_variety

    @property
    def location(self):
        return self.metadata['location']
    loc = location


class Oadm(_Node):
    """Optical add/drop multiplexer.

    How added, express and dropped lightpaths are affected by the node is entirely defined by its
    architecture, see :py:mod:`.oadm`. A node without architecture can not be traversed by any lightpath.
    """
    def __init__(self, *args, architecture=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.architecture = architecture

    @property
    def to_json(self):
        return {'uid': self.uid,
                'type': type(self).__name__,
                'type_variety': self.type_variety if self.type_variety is not None else 'default',
                'params': self.architecture.to_json if self.architecture is not None else {},
                'metadata': {
                    'location': self.metadata['location']._asdict()
                }
                }

    def __repr__(self):
        return f'{type(self).__name__}(uid={self.uid!r}, architecture={self.architecture!r})'

    def __str__(self):
        return '\n'.join([f'{type(self).__name__} {self.uid}',
                          f'  architecture: {self.architecture}'])


class Amplifier:
    """Booster or pre-amplifier of a fiber.

    The amplifier applies its gain, chromatic dispersion compensation and PMD to the signal, and adds
    ASE noise which depends on the channel power at its input.
    """
    params_class = AmplifierParams

    def __init__(self, **params):
        self.params = self.params_class(**params)

    @property
    def gain(self):
        return self.params.gain

    @property
    def nf(self):
        return self.params.nf

    @property
    def pmd(self):
        return self.params.pmd

    @property
    def cd_compensation(self):
        return self.params.cd_compensation

    def propagate(self, state: SignalState) -> SignalState:
        """Signal at the amplifier output. OSNR is left unchanged: see :meth:`osnr_contribution`."""
        return state._replace(power=state.power + self.gain,
                              chromatic_dispersion=state.chromatic_dispersion + self.cd_compensation,
                              pmd_squared=state.pmd_squared + self.pmd ** 2)

    def __call__(self, state):
        return self.propagate(state)

    def osnr_contribution(self, frequency: float, pin: float) -> float:
        """OSNR (dB) of the noise added by this amplifier alone

        :param frequency: channel central frequency (Hz)
        :param pin: channel power at the amplifier input (dBm)
        """
        return lin2db(edfa_osnr_contribution(frequency, self.nf, pin))

    @property
    def to_json(self):
        return self.params.asdict()

    def __repr__(self):
        return f'{type(self).__name__}(gain={self.gain!r}dB, nf={self.nf!r}dB)'


class LineAmplifier(Amplifier):
    """Optical line amplifier placed along a fiber"""
    params_class = LineAmplifierParams

    @property
    def position(self):
        return self.params.position

    @property
    def out_power_bounds(self):
        """(min, max) acceptable total output power (dBm), None for a missing bound"""
        return (self.params.out_power_min, self.params.out_power_max)

    def is_gain_ok(self) -> bool:
        return within_bounds(self.gain, self.params.gain_min, self.params.gain_max)

    def is_output_power_ok(self, power: Optional[float]) -> bool:
        """True if a total output power (dBm) lies within the acceptable range, bounds included"""
        return within_bounds(power, *self.out_power_bounds)

    def __repr__(self):
        return f'{type(self).__name__}(position={self.position!r}km, gain={self.gain!r}dB, nf={self.nf!r}dB)'


class Fiber(_Node):
    """Amplified WDM fiber link between two OADMs.

    The fiber may carry a booster amplifier at its origin, a pre-amplifier at its destination and any
    number of optical line amplifiers. When an equalization target (mW/GHz) is set, the origin OADM
    equalizes the power of every lightpath entering this fiber, before the booster.
    """
    def __init__(self, *args, origin, destination, params=None, booster=None, preamp=None,
                 line_amplifiers=None, equalization_target=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.origin, self.destination = origin, destination
        try:
            self.params = FiberParams(**(params or {}))
            self.booster = Amplifier(**booster) if booster is not None else None
            self.preamp = Amplifier(**preamp) if preamp is not None else None
            amplifiers = [LineAmplifier(**amp) for amp in (line_amplifiers or [])]
        except ParametersError as e:
            raise ParametersError(f'Config error in {self.uid}: {e}') from e
        for amp in amplifiers:
            if not 0 <= amp.position <= self.length:
                raise NetworkTopologyError(f'Fiber {self.uid}: line amplifier positions must be between 0 and the '
                                           f'fiber length ({self.length} km), got {amp.position} km')
        self.line_amplifiers = sorted(amplifiers, key=lambda amp: amp.position)
        if equalization_target is not None and equalization_target <= 0:
            raise ParametersError(f'Config error in {self.uid}: equalization target must be strictly positive')
        self.equalization_target = equalization_target

    @property
    def length(self):
        return self.params.length

    @property
    def loss_coef(self):
        return self.params.loss_coef

    @property
    def dispersion(self):
        return self.params.dispersion

    @property
    def pmd_coef(self):
        return self.params.pmd_coef

    @property
    def loss(self):
        """Total passive attenuation (dB)"""
        return self.loss_coef * self.length

    @property
    def chromatic_dispersion(self):
        """Chromatic dispersion of the bare fiber (ps/nm)"""
        return self.dispersion * self.length

    @property
    def pmd_squared(self):
        """Squared PMD of the bare fiber (ps^2)"""
        return self.pmd_coef ** 2 * self.length

    @property
    def total_line_gain(self):
        return sum(amp.gain for amp in self.line_amplifiers)

    @property
    def total_line_cd_compensation(self):
        return sum(amp.cd_compensation for amp in self.line_amplifiers)

    @property
    def total_line_pmd_squared(self):
        return sum(amp.pmd ** 2 for amp in self.line_amplifiers)

    def propagate_distance(self, state: SignalState, distance: float) -> SignalState:
        """Signal after travelling `distance` km of bare fiber: no amplifier is applied"""
        return state._replace(power=state.power - self.loss_coef * distance,
                              chromatic_dispersion=state.chromatic_dispersion + self.dispersion * distance,
                              pmd_squared=state.pmd_squared + self.pmd_coef ** 2 * distance)

    def feasible_amplifier_gains(self) -> bool:
        """True if every line amplifier gain lies within its acceptable range"""
        return all(amp.is_gain_ok() for amp in self.line_amplifiers)

    @property
    def to_json(self):
        return {'uid': self.uid,
                'type': type(self).__name__,
                'type_variety': self.type_variety,
                'origin': self.origin,
                'destination': self.destination,
                'params': {
                    'length': self.length,
                    'length_units': 'km',
                    'loss_coef': self.loss_coef,
                    'dispersion': self.dispersion,
                    'pmd_coef': self.pmd_coef
                },
                'booster': self.booster.to_json if self.booster is not None else None,
                'preamp': self.preamp.to_json if self.preamp is not None else None,
                'line_amplifiers': [amp.to_json for amp in self.line_amplifiers],
                'equalization_target': self.equalization_target,
                'metadata': {
                    'location': self.metadata['location']._asdict()
                }
                }

    def __repr__(self):
        return f'{type(self).__name__}(uid={self.uid!r}, ' \
            f'length={round(self.length, 1)!r}km, ' \
            f'loss={round(self.loss, 1)!r}dB)'

    def __str__(self):
        return '\n'.join([f'{type(self).__name__}          {self.uid}',
                          f'  {self.origin} -> {self.destination}',
                          f'  length (km):                 {self.length:.2f}',
                          f'  total loss (dB):             {self.loss:.2f}',
                          f'  booster:                     {self.booster!r}',
                          f'  pre-amplifier:               {self.preamp!r}',
                          f'  line amplifiers:             {len(self.line_amplifiers)}'])


class Lightpath:
    """End-to-end optical channel occupying contiguous optical slots over a sequence of fibers

    :ivar fibers: uids of the traversed fibers, in propagation order
    :ivar slots: optical slot ids occupied by the lightpath
    :ivar tx_power: transponder injection power (dBm)
    :ivar add_module_index: index of the add module used in the origin OADM
    """
    def __init__(self, uid, fibers: List[str], slots: List[int], tx_power: float = 0, add_module_index: int = 0,
                 name=None):
        self.uid = uid
        self.name = uid if name is None else name
        if not fibers:
            raise ParametersError(f'Lightpath {uid} must traverse at least one fiber')
        self.fibers = list(fibers)
        slots = sorted(slots)
        if not slots:
            raise ParametersError(f'Lightpath {uid} must occupy at least one optical slot')
        if slots != list(range(slots[0], slots[0] + len(slots))):
            raise ParametersError(f'Lightpath {uid} optical slots must be contiguous, got {slots}')
        self.slots = slots
        self.tx_power = tx_power
        self.add_module_index = add_module_index

    @property
    def frequency(self):
        """Central frequency (Hz)"""
        return slots_central_frequency(self.slots)

    @property
    def number_of_slots(self):
        return len(self.slots)

    @property
    def to_json(self):
        return {'uid': self.uid,
                'fibers': self.fibers,
                'slots': self.slots,
                'tx_power': self.tx_power,
                'add_module_index': self.add_module_index}

    def __repr__(self):
        return f'{type(self).__name__}(uid={self.uid!r}, fibers={self.fibers!r}, slots={self.slots!r})'
