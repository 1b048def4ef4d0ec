#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.network: Working with networks which consist of network elements
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.network
===================

Working with networks which consist of network elements: the :class:`Network` container
and the helpers which lay out and set the line amplifiers of the fibers.
"""

from logging import getLogger
from math import ceil
from typing import Dict, List
from networkx import MultiDiGraph

from wdmsim.core.elements import Oadm, Fiber, Lightpath, LineAmplifier
from wdmsim.core.exceptions import NetworkTopologyError, ParametersError
from wdmsim.core.parameters import LineAmplifierParams


logger = getLogger(__name__)


class Network:
    """OADM nodes connected by fibers, and the lightpaths routed over them

    The graph is a :class:`networkx.MultiDiGraph` whose nodes are the OADM uids and whose edges are the fibers,
    keyed by fiber uid, so that parallel fibers between two nodes are supported.
    """
    def __init__(self):
        self.graph = MultiDiGraph()
        self._fibers: Dict[str, Fiber] = {}
        self._lightpaths: Dict[str, Lightpath] = {}
        self._traversing: Dict[str, Dict[str, Lightpath]] = {}

    def add_oadm(self, oadm: Oadm):
        if oadm.uid in self.graph:
            raise NetworkTopologyError(f'Duplicate node uid {oadm.uid}')
        self.graph.add_node(oadm.uid, oadm=oadm)

    def add_fiber(self, fiber: Fiber):
        if fiber.uid in self._fibers:
            raise NetworkTopologyError(f'Duplicate fiber uid {fiber.uid}')
        for end in (fiber.origin, fiber.destination):
            if end not in self.graph:
                raise NetworkTopologyError(f'Fiber {fiber.uid} refers to unknown node {end}')
        if fiber.origin == fiber.destination:
            raise NetworkTopologyError(f'Fiber {fiber.uid} starts and ends in the same node {fiber.origin}')
        self.graph.add_edge(fiber.origin, fiber.destination, key=fiber.uid, fiber=fiber, weight=fiber.length)
        self._fibers[fiber.uid] = fiber
        self._traversing[fiber.uid] = {}

    def add_lightpath(self, lightpath: Lightpath):
        """Register a lightpath, checking that its fibers exist and form a continuous route"""
        if lightpath.uid in self._lightpaths:
            raise NetworkTopologyError(f'Duplicate lightpath uid {lightpath.uid}')
        fibers = [self.fiber(uid) for uid in lightpath.fibers]
        if len(set(lightpath.fibers)) != len(fibers):
            raise NetworkTopologyError(f'Lightpath {lightpath.uid} traverses the same fiber more than once')
        for previous, following in zip(fibers, fibers[1:]):
            if previous.destination != following.origin:
                raise NetworkTopologyError(f'Lightpath {lightpath.uid}: fiber {following.uid} does not start where '
                                           f'fiber {previous.uid} ends ({previous.destination})')
        self._lightpaths[lightpath.uid] = lightpath
        for fiber in fibers:
            self._traversing[fiber.uid][lightpath.uid] = lightpath

    def remove_lightpath(self, uid: str):
        lightpath = self.lightpath(uid)
        for fiber_uid in lightpath.fibers:
            del self._traversing[fiber_uid][uid]
        del self._lightpaths[uid]

    def oadm(self, uid: str) -> Oadm:
        try:
            return self.graph.nodes[uid]['oadm']
        except KeyError:
            raise NetworkTopologyError(f'Unknown node {uid}')

    def fiber(self, uid: str) -> Fiber:
        try:
            return self._fibers[uid]
        except KeyError:
            raise NetworkTopologyError(f'Unknown fiber {uid}')

    def lightpath(self, uid: str) -> Lightpath:
        try:
            return self._lightpaths[uid]
        except KeyError:
            raise NetworkTopologyError(f'Unknown lightpath {uid}')

    def oadms(self) -> List[Oadm]:
        return [data['oadm'] for _, data in self.graph.nodes(data=True)]

    def fibers(self) -> List[Fiber]:
        return list(self._fibers.values())

    def lightpaths(self) -> List[Lightpath]:
        return list(self._lightpaths.values())

    def lightpath_fibers(self, lightpath: Lightpath) -> List[Fiber]:
        return [self.fiber(uid) for uid in lightpath.fibers]

    def traversing_lightpaths(self, fiber: Fiber) -> List[Lightpath]:
        """Lightpaths routed over a fiber, in the order they were added"""
        return list(self._traversing[fiber.uid].values())

    def degree(self, uid: str) -> int:
        """Number of fibers entering a node"""
        return self.graph.in_degree(uid)

    def validate(self):
        """Check that every node crossed by a lightpath knows how to switch it, and that equalization targets are
        only set on fibers leaving nodes able to equalize

        :raises NetworkTopologyError: on the first inconsistency found
        """
        for lightpath in self.lightpaths():
            fibers = self.lightpath_fibers(lightpath)
            for uid in [fibers[0].origin] + [f.destination for f in fibers]:
                if self.oadm(uid).architecture is None:
                    raise NetworkTopologyError(f'Node {uid} has no switching architecture but is crossed by '
                                               f'lightpath {lightpath.uid}')
        for fiber in self.fibers():
            architecture = self.oadm(fiber.origin).architecture
            if fiber.equalization_target is not None and architecture is not None and not architecture.equalizes:
                raise NetworkTopologyError(f'Fiber {fiber.uid}: node {fiber.origin} can not equalize its output power')

    def __repr__(self):
        return f'{type(self).__name__}(nodes={self.graph.number_of_nodes()}, fibers={len(self._fibers)}, ' \
            f'lightpaths={len(self._lightpaths)})'


def add_line_amplifiers_uniformly(fiber: Fiber, max_span_length: float, template: dict) -> List[LineAmplifier]:
    """Replace the line amplifiers of a fiber by equally spaced ones

    The number of amplifiers is the smallest one such that no span, between two amplifiers or between an amplifier
    and an end of the fiber, is longer than `max_span_length` (km). Unless overridden in `template`, each
    amplifier gain compensates the loss of the span before it.

    :param fiber: fiber to equip
    :param max_span_length: maximum length without amplification (km)
    :param template: other line amplifier parameters (at least the noise figure 'nf')
    """
    if max_span_length <= 0:
        raise ParametersError(f'Maximum span length must be strictly positive, got {max_span_length}')
    number = ceil(fiber.length / max_span_length) - 1
    spacing = fiber.length / (number + 1)
    params = {'gain': fiber.loss_coef * spacing, **{k: v for k, v in template.items() if v is not None}}
    try:
        fiber.line_amplifiers = [LineAmplifier(**{**params, 'position': (i + 1) * spacing}) for i in range(number)]
    except ParametersError as e:
        raise ParametersError(f'Config error in {fiber.uid}: {e}') from e
    logger.info(f'{fiber.uid}: {number} line amplifiers placed every {spacing:.2f} km')
    return fiber.line_amplifiers


def set_line_amplifier_gains(fiber: Fiber, compensate: str = 'previous'):
    """Set the gain of each line amplifier to the loss of the span before ('previous') or after ('next') it"""
    if compensate not in ('previous', 'next'):
        raise ParametersError(f'Span to compensate must be "previous" or "next", got {compensate!r}')
    positions = [0.0] + [amp.position for amp in fiber.line_amplifiers] + [fiber.length]
    for i, amp in enumerate(fiber.line_amplifiers, start=1):
        if compensate == 'previous':
            span = positions[i] - positions[i - 1]
        else:
            span = positions[i + 1] - positions[i]
        amp.params.gain = abs(fiber.loss_coef * span)


def set_line_amplifier_parameter(fiber: Fiber, name: str, value):
    """Set the same value of one parameter (gain, nf, pmd, bounds...) on every line amplifier of a fiber"""
    if name == 'position' or name not in LineAmplifierParams.default_values:
        raise ParametersError(f'Line amplifier parameter {name!r} can not be set on all amplifiers at once')
    # only the bounds may be unset
    if value is None and not name.endswith(('_min', '_max')):
        raise ParametersError(f'Config error in {fiber.uid}: line amplifier parameter {name!r} can not be None')
    try:
        params = [LineAmplifierParams(**{**amp.params.asdict(), name: value}) for amp in fiber.line_amplifiers]
    except ParametersError as e:
        raise ParametersError(f'Config error in {fiber.uid}: {e}') from e
    for amp, amp_params in zip(fiber.line_amplifiers, params):
        amp.params = amp_params
