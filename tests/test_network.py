#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# test_network
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
Checks the network container and the line amplifier design helpers
"""

import pytest
from numpy.testing import assert_allclose

from wdmsim.core.elements import Oadm, Fiber, Lightpath
from wdmsim.core.exceptions import NetworkTopologyError, ParametersError
from wdmsim.core.network import (Network, add_line_amplifiers_uniformly, set_line_amplifier_gains,
                                 set_line_amplifier_parameter)
from wdmsim.core.oadm import FilterlessArchitecture


FIBER_80KM = {'params': {'length': 80, 'loss_coef': 0.2}}


def test_network_accessors(line_network):
    network = line_network(FIBER_80KM, FIBER_80KM,
                           lightpaths=[Lightpath('lp1', ['A-B', 'B-C'], [0]), Lightpath('lp2', ['B-C'], [1])])
    assert [n.uid for n in network.oadms()] == ['A', 'B', 'C']
    assert [f.uid for f in network.fibers()] == ['A-B', 'B-C']
    assert [lp.uid for lp in network.lightpaths()] == ['lp1', 'lp2']
    assert [lp.uid for lp in network.traversing_lightpaths(network.fiber('B-C'))] == ['lp1', 'lp2']
    assert [f.uid for f in network.lightpath_fibers(network.lightpath('lp1'))] == ['A-B', 'B-C']
    assert network.degree('B') == 1
    assert network.graph.has_edge('A', 'B', key='A-B')
    network.validate()

    network.remove_lightpath('lp1')
    assert [lp.uid for lp in network.traversing_lightpaths(network.fiber('A-B'))] == []
    with pytest.raises(NetworkTopologyError, match='Unknown lightpath'):
        network.lightpath('lp1')


def test_parallel_fibers(line_network):
    network = line_network(FIBER_80KM)
    network.add_fiber(Fiber('A-B bis', origin='A', destination='B', params={'length': 60, 'loss_coef': 0.2}))
    assert network.graph.number_of_edges('A', 'B') == 2
    assert network.degree('B') == 2


def test_wrong_fibers(line_network):
    network = line_network(FIBER_80KM)
    with pytest.raises(NetworkTopologyError, match='Duplicate fiber'):
        network.add_fiber(Fiber('A-B', origin='A', destination='B', **FIBER_80KM))
    with pytest.raises(NetworkTopologyError, match='unknown node Z'):
        network.add_fiber(Fiber('A-Z', origin='A', destination='Z', **FIBER_80KM))
    with pytest.raises(NetworkTopologyError, match='same node'):
        network.add_fiber(Fiber('A-A', origin='A', destination='A', **FIBER_80KM))
    with pytest.raises(NetworkTopologyError, match='Duplicate node'):
        network.add_oadm(Oadm('A'))


@pytest.mark.parametrize('fibers, message', [
    (['A-B', 'A-B'], 'more than once'),
    (['B-C', 'A-B'], 'does not start where'),
    (['A-B', 'C-D'], 'Unknown fiber'),
])
def test_wrong_lightpath_route(line_network, fibers, message):
    network = line_network(FIBER_80KM, FIBER_80KM)
    with pytest.raises(NetworkTopologyError, match=message):
        network.add_lightpath(Lightpath('lp', fibers, [0]))


def test_validate_missing_architecture():
    network = Network()
    network.add_oadm(Oadm('A'))
    network.add_oadm(Oadm('B'))
    network.add_fiber(Fiber('A-B', origin='A', destination='B', **FIBER_80KM))
    # a node without architecture is fine as long as no lightpath crosses it
    network.validate()
    network.add_lightpath(Lightpath('lp', ['A-B'], [0]))
    with pytest.raises(NetworkTopologyError, match='no switching architecture'):
        network.validate()


def test_validate_equalization_on_filterless():
    network = Network()
    network.add_oadm(Oadm('A', architecture=FilterlessArchitecture()))
    network.add_oadm(Oadm('B', architecture=FilterlessArchitecture()))
    network.add_fiber(Fiber('A-B', origin='A', destination='B', equalization_target=0.01, **FIBER_80KM))
    with pytest.raises(NetworkTopologyError, match='can not equalize'):
        network.validate()


@pytest.mark.parametrize('length, max_span_length, positions', [
    (30, 40, []),
    (80, 80, []),
    (100, 40, [100 / 3, 200 / 3]),
    (120, 40, [40, 80]),
    (160, 80, [80]),
])
def test_add_line_amplifiers_uniformly(length, max_span_length, positions):
    fiber = Fiber('f', origin='A', destination='B', params={'length': length, 'loss_coef': 0.25})
    amplifiers = add_line_amplifiers_uniformly(fiber, max_span_length, {'nf': 5.5, 'gain_max': 30})
    assert_allclose([amp.position for amp in amplifiers], positions)
    assert fiber.line_amplifiers is amplifiers
    for amp in amplifiers:
        assert_allclose(amp.gain, 0.25 * length / (len(positions) + 1))
        assert amp.nf == 5.5
        assert amp.params.gain_max == 30


def test_add_line_amplifiers_uniformly_errors():
    fiber = Fiber('f', origin='A', destination='B', params={'length': 100, 'loss_coef': 0.25})
    with pytest.raises(ParametersError, match='strictly positive'):
        add_line_amplifiers_uniformly(fiber, 0, {'nf': 5})
    with pytest.raises(ParametersError, match='Config error in f'):
        add_line_amplifiers_uniformly(fiber, 40, {})


@pytest.mark.parametrize('compensate, gains', [('previous', [6, 8, 12]), ('next', [8, 12, 4])])
def test_set_line_amplifier_gains(compensate, gains):
    fiber = Fiber('f', origin='A', destination='B', params={'length': 150, 'loss_coef': 0.2},
                  line_amplifiers=[{'position': p, 'gain': 0, 'nf': 5} for p in (30, 70, 130)])
    set_line_amplifier_gains(fiber, compensate)
    assert_allclose([amp.gain for amp in fiber.line_amplifiers], gains)


def test_set_line_amplifier_parameter():
    fiber = Fiber('f', origin='A', destination='B', params={'length': 150, 'loss_coef': 0.2},
                  line_amplifiers=[{'position': p, 'gain': 10, 'nf': 5} for p in (50, 100)])
    set_line_amplifier_parameter(fiber, 'out_power_max', 21)
    set_line_amplifier_parameter(fiber, 'nf', 6)
    assert [amp.params.out_power_max for amp in fiber.line_amplifiers] == [21, 21]
    assert [amp.nf for amp in fiber.line_amplifiers] == [6, 6]
    with pytest.raises(ParametersError):
        set_line_amplifier_parameter(fiber, 'position', 10)
    with pytest.raises(ParametersError):
        set_line_amplifier_parameter(fiber, 'colour', 'blue')
    with pytest.raises(ParametersError):
        set_line_amplifier_gains(fiber, 'both')


@pytest.mark.parametrize('name, value, message', [
    ('gain', None, "can not be None"),
    ('pmd', None, "can not be None"),
    ('gain_min', 30, 'gain_min'),
    ('out_power_max', -10, 'out_power_min'),
])
def test_set_line_amplifier_parameter_checks(name, value, message):
    fiber = Fiber('f', origin='A', destination='B', params={'length': 150, 'loss_coef': 0.2},
                  line_amplifiers=[{'position': p, 'gain': 10, 'nf': 5, 'gain_max': 20, 'out_power_min': 0}
                                   for p in (50, 100)])
    with pytest.raises(ParametersError, match=message):
        set_line_amplifier_parameter(fiber, name, value)
    # nothing changed
    assert [amp.params.asdict() for amp in fiber.line_amplifiers] == \
        [{'gain': 10, 'nf': 5, 'pmd': 0, 'cd_compensation': 0, 'position': p, 'gain_min': None, 'gain_max': 20,
          'out_power_min': 0, 'out_power_max': None} for p in (50, 100)]
    set_line_amplifier_parameter(fiber, 'gain_max', None)
    assert all(amp.params.gain_max is None for amp in fiber.line_amplifiers)
