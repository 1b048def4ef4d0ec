#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# wdmsim.core.propagation: physical layer performance of the lightpaths of a network
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
wdmsim.core.propagation
=======================

Propagation of every lightpath of a :class:`.network.Network` and storage of the results.

:class:`PropagationEngine` walks each lightpath fiber by fiber. For every traversed fiber it records the
:class:`.info.SignalState` right after the booster (fiber start), right before the pre-amplifier (fiber end)
and at the input and output of every line amplifier. It then stores the state seen by the drop transponder
and sums the power of all lightpaths at the ends of each fiber and at its line amplifiers.

Results are kept in a :class:`PerformanceRepository`. A repository is built from scratch by each
:meth:`PropagationEngine.recompute` and only published once it is complete and consistent; a published
repository is never modified afterwards.
"""

from collections import namedtuple
from logging import getLogger
from math import inf
from typing import Dict, List, Optional

from wdmsim.core.info import SignalState
from wdmsim.core.utils import (lin2db, db2lin, mw_per_ghz_to_dbm, osnr_accumulation, within_bounds,
                               OPTICAL_SLOT_WIDTH)
from wdmsim.core.exceptions import (AmplifierIndexError, NetworkTopologyError, PerformanceInvariantError,
                                    SimulationError)


_logger = getLogger(__name__)


FiberEnds = namedtuple('FiberEnds', 'start end')
"""Values after the booster (start) and before the pre-amplifier (end) of a fiber"""

AmplifierStates = namedtuple('AmplifierStates', 'input output')
"""Values at the input and the output of a line amplifier"""


def _uid(element):
    return getattr(element, 'uid', element)


def _total_power(powers):
    """Sum of channel powers (dBm) in the linear domain, None if there is no channel"""
    powers = list(powers)
    if not powers:
        return None
    return lin2db(sum(db2lin(p) for p in powers))


class PerformanceRepository:
    """Read-only snapshot of the performance of all lightpaths of a network

    Fibers and lightpaths may be given either as elements or as uids to every query. The output power bounds
    of the line amplifiers are recorded when the repository is created, so that later edits of the fibers
    do not change the answers of a published repository.
    """
    def __init__(self, fibers, lightpaths):
        self._fibers = {f.uid: f for f in fibers}
        self._lightpaths = {lp.uid: lp for lp in lightpaths}
        self._out_power_bounds: Dict[str, List[tuple]] = {
            f.uid: [amp.out_power_bounds for amp in f.line_amplifiers] for f in fibers}
        self._ends: Dict[str, Dict[str, FiberEnds]] = {uid: {} for uid in self._fibers}
        self._amplifiers: Dict[str, Dict[str, List[AmplifierStates]]] = {uid: {} for uid in self._fibers}
        self._receivers: Dict[str, SignalState] = {}
        self._total_ends: Dict[str, FiberEnds] = {}
        self._total_amplifiers: Dict[str, List[AmplifierStates]] = {}

    def _store_fiber(self, fiber, lightpath, ends: FiberEnds, amplifiers: List[AmplifierStates]):
        self._ends[fiber.uid][lightpath.uid] = ends
        self._amplifiers[fiber.uid][lightpath.uid] = amplifiers

    def _store_receiver(self, lightpath, state: SignalState):
        self._receivers[lightpath.uid] = state

    def _store_totals(self, fiber, ends: FiberEnds, amplifiers: List[AmplifierStates]):
        self._total_ends[fiber.uid] = ends
        self._total_amplifiers[fiber.uid] = amplifiers

    def fiber(self, fiber):
        try:
            return self._fibers[_uid(fiber)]
        except KeyError:
            raise NetworkTopologyError(f'Unknown fiber {_uid(fiber)}')

    def line_amplifier_count(self, fiber) -> int:
        """Number of line amplifiers the fiber had when the repository was computed"""
        return len(self._out_power_bounds[self.fiber(fiber).uid])

    def _check_index(self, fiber, index):
        count = self.line_amplifier_count(fiber)
        if not 0 <= index < count:
            raise AmplifierIndexError(f'Fiber {fiber.uid} has {count} line amplifiers, no amplifier {index}')

    def fibers(self):
        return list(self._fibers.values())

    def lightpaths(self):
        return list(self._lightpaths.values())

    def traversing_lightpaths(self, fiber) -> List[str]:
        """Uids of the lightpaths recorded on a fiber"""
        return list(self._ends.get(_uid(fiber), {}))

    def fiber_ends(self, fiber, lightpath) -> Optional[FiberEnds]:
        """States of a lightpath after the booster and before the pre-amplifier of a fiber

        :return: None if the lightpath does not traverse the fiber
        """
        return self._ends.get(_uid(fiber), {}).get(_uid(lightpath))

    def amplifier_states(self, fiber, lightpath, index: int) -> AmplifierStates:
        """States of a lightpath at the input and output of the line amplifier number `index` of a fiber

        :raises AmplifierIndexError: if the fiber has no such amplifier
        :raises NetworkTopologyError: if the lightpath does not traverse the fiber
        """
        fiber = self.fiber(fiber)
        self._check_index(fiber, index)
        try:
            return self._amplifiers[fiber.uid][_uid(lightpath)][index]
        except KeyError:
            raise NetworkTopologyError(f'Lightpath {_uid(lightpath)} does not traverse fiber {fiber.uid}')

    def receiver_state(self, lightpath) -> Optional[SignalState]:
        """State of a lightpath at the drop transponder, None for an unknown lightpath"""
        return self._receivers.get(_uid(lightpath))

    def total_power_at_fiber_ends(self, fiber) -> Optional[FiberEnds]:
        """Total power (dBm) after the booster and before the pre-amplifier, None for an unknown fiber"""
        return self._total_ends.get(_uid(fiber))

    def total_power_at_amplifier_inputs(self, fiber) -> List[Optional[float]]:
        return [states.input for states in self._total_amplifiers[self.fiber(fiber).uid]]

    def total_power_at_amplifier_outputs(self, fiber) -> List[Optional[float]]:
        return [states.output for states in self._total_amplifiers[self.fiber(fiber).uid]]

    def total_power_at_amplifier_input(self, fiber, index: int) -> Optional[float]:
        fiber = self.fiber(fiber)
        self._check_index(fiber, index)
        return self._total_amplifiers[fiber.uid][index].input

    def total_power_at_amplifier_output(self, fiber, index: int) -> Optional[float]:
        fiber = self.fiber(fiber)
        self._check_index(fiber, index)
        return self._total_amplifiers[fiber.uid][index].output

    def amplifier_output_powers_ok(self, fiber) -> List[bool]:
        """For each line amplifier of the fiber, whether its total output power lies within its bounds"""
        fiber = self.fiber(fiber)
        outputs = self.total_power_at_amplifier_outputs(fiber)
        return [within_bounds(power, *bounds) for bounds, power in zip(self._out_power_bounds[fiber.uid], outputs)]

    def feasible_amplifier_input_power(self, fiber) -> bool:
        """True if the total output power of every line amplifier of the fiber lies within its bounds

        A fiber which carries no lightpath has no defined power, so none of its amplifiers is feasible.
        """
        return all(self.amplifier_output_powers_ok(fiber))

    def __repr__(self):
        return f'{type(self).__name__}(fibers={len(self._fibers)}, lightpaths={len(self._lightpaths)})'


class PropagationEngine:
    """Computes the performance of all lightpaths of one network

    :param network: the :class:`.network.Network` to simulate. Use one engine per network.
    """
    def __init__(self, network):
        self.network = network
        self._repository = None

    @property
    def repository(self) -> PerformanceRepository:
        """Last repository published by :meth:`recompute`"""
        if self._repository is None:
            raise SimulationError('No performance available: the network has never been computed')
        return self._repository

    def recompute(self) -> PerformanceRepository:
        """Propagate every lightpath and publish a new repository

        If anything fails, the repository published by a previous call stays in place.
        """
        self.network.validate()
        fibers = self.network.fibers()
        lightpaths = self.network.lightpaths()
        _logger.info(f'Propagating {len(lightpaths)} lightpaths over {len(fibers)} fibers')
        repository = PerformanceRepository(fibers, lightpaths)
        for lightpath in lightpaths:
            self._propagate_lightpath(lightpath, repository)
        for fiber in fibers:
            self._aggregate_fiber(fiber, repository)
        self._check_invariants(repository)
        self._warn_infeasible(repository)
        self._repository = repository
        return repository

    def _architecture(self, uid):
        architecture = self.network.oadm(uid).architecture
        if architecture is None:
            raise NetworkTopologyError(f'Node {uid} has no switching architecture')
        return architecture

    @staticmethod
    def _contribution(amplifier, frequency, pin):
        if amplifier is None:
            return inf
        return amplifier.osnr_contribution(frequency, pin)

    def _propagate_lightpath(self, lightpath, repository):
        frequency = lightpath.frequency
        previous_fiber, previous_end = None, None
        for fiber in self.network.lightpath_fibers(lightpath):
            architecture = self._architecture(fiber.origin)
            if previous_fiber is None:
                pre_booster = architecture.added_lightpath_transform(SignalState.transmitted(lightpath.tx_power),
                                                                     lightpath.add_module_index, fiber)
                osnrs = [pre_booster.osnr]
            else:
                after_preamp = previous_end
                if previous_fiber.preamp is not None:
                    after_preamp = previous_fiber.preamp(previous_end)
                pre_booster = architecture.express_lightpath_transform(after_preamp, previous_fiber, fiber)
                osnrs = [pre_booster.osnr, self._contribution(previous_fiber.preamp, frequency, previous_end.power)]
            if fiber.equalization_target is not None:
                if not architecture.equalizes:
                    raise NetworkTopologyError(f'Fiber {fiber.uid}: node {fiber.origin} can not equalize')
                bandwidth = lightpath.number_of_slots * OPTICAL_SLOT_WIDTH
                pre_booster = pre_booster._replace(power=mw_per_ghz_to_dbm(fiber.equalization_target, bandwidth))
            start = pre_booster
            if fiber.booster is not None:
                start = fiber.booster(pre_booster)
            osnrs.append(self._contribution(fiber.booster, frequency, pre_booster.power))
            start = start._replace(osnr=osnr_accumulation(osnrs))

            osnrs = [start.osnr]
            amplifiers = []
            state, position = start, 0
            for amp in fiber.line_amplifiers:
                amp_input = fiber.propagate_distance(state, amp.position - position)
                amp_input = amp_input._replace(osnr=osnr_accumulation(osnrs))
                osnrs.append(amp.osnr_contribution(frequency, amp_input.power))
                amp_output = amp(amp_input)._replace(osnr=osnr_accumulation(osnrs))
                amplifiers.append(AmplifierStates(amp_input, amp_output))
                state, position = amp_output, amp.position
            end = fiber.propagate_distance(state, fiber.length - position)._replace(osnr=osnr_accumulation(osnrs))

            repository._store_fiber(fiber, lightpath, FiberEnds(start, end), amplifiers)
            _logger.debug(f'{lightpath.uid} on {fiber.uid}: start {start}, end {end}')
            previous_fiber, previous_end = fiber, end

        received = previous_end
        if previous_fiber.preamp is not None:
            received = previous_fiber.preamp(previous_end)
        received = self._architecture(previous_fiber.destination).dropped_lightpath_transform(received,
                                                                                              previous_fiber)
        osnr = osnr_accumulation([previous_end.osnr,
                                  self._contribution(previous_fiber.preamp, frequency, previous_end.power)])
        received = received._replace(osnr=osnr)
        repository._store_receiver(lightpath, received)
        _logger.debug(f'{lightpath.uid} received:\n{received}')

    @staticmethod
    def _aggregate_fiber(fiber, repository):
        ends = [repository.fiber_ends(fiber, uid) for uid in repository.traversing_lightpaths(fiber)]
        total_start = _total_power(e.start.power for e in ends)
        total_end = _total_power(e.end.power for e in ends)
        amplifiers = []
        power, position = total_start, 0
        for amp in fiber.line_amplifiers:
            if power is None:
                amplifiers.append(AmplifierStates(None, None))
                continue
            amp_input = power - fiber.loss_coef * (amp.position - position)
            power, position = amp_input + amp.gain, amp.position
            amplifiers.append(AmplifierStates(amp_input, power))
        repository._store_totals(fiber, FiberEnds(total_start, total_end), amplifiers)

    def _check_invariants(self, repository):
        fibers = {f.uid for f in self.network.fibers()}
        recorded = {f.uid for f in repository.fibers()}
        if recorded != fibers:
            raise PerformanceInvariantError(f'Computed fibers {sorted(recorded)} differ from the network fibers '
                                            f'{sorted(fibers)}')
        for fiber in self.network.fibers():
            expected = {lp.uid for lp in self.network.traversing_lightpaths(fiber)}
            computed = set(repository.traversing_lightpaths(fiber))
            if computed != expected:
                raise PerformanceInvariantError(f'Fiber {fiber.uid}: computed lightpaths {sorted(computed)} differ '
                                                f'from the traversing lightpaths {sorted(expected)}')
            for uid in computed:
                count = len(repository._amplifiers[fiber.uid][uid])
                expected_count = repository.line_amplifier_count(fiber)
                if count != expected_count:
                    raise PerformanceInvariantError(f'Fiber {fiber.uid}: {count} amplifier states computed for '
                                                    f'lightpath {uid}, expected {expected_count}')

    @staticmethod
    def _warn_infeasible(repository):
        for fiber in repository.fibers():
            if not repository.traversing_lightpaths(fiber):
                continue
            if not repository.feasible_amplifier_input_power(fiber):
                _logger.warning(f'Fiber {fiber.uid}: total output power of some line amplifiers is out of bounds '
                                f'{repository.total_power_at_amplifier_outputs(fiber)}')
            if not fiber.feasible_amplifier_gains():
                _logger.warning(f'Fiber {fiber.uid}: gain of some line amplifiers is out of bounds')
