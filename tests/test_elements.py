#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# test_elements
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

"""
Checks amplifiers, fibers and lightpaths
"""

from math import inf
import pytest
from numpy.testing import assert_allclose

from wdmsim.core.elements import Amplifier, LineAmplifier, Fiber, Lightpath, Oadm, Location
from wdmsim.core.exceptions import NetworkTopologyError, ParametersError
from wdmsim.core.info import SignalState
from wdmsim.core.utils import lin2db, edfa_osnr_contribution


def test_amplifier_propagate():
    amp = Amplifier(gain=17, nf=5, pmd=0.3, cd_compensation=-200)
    state = amp(SignalState(-10, 1000, 1, 30))
    assert_allclose(state.power, 7)
    assert_allclose(state.chromatic_dispersion, 800)
    assert_allclose(state.pmd_squared, 1.09)
    assert state.osnr == 30


def test_amplifier_osnr_contribution():
    amp = Amplifier(gain=17, nf=5)
    assert_allclose(amp.osnr_contribution(193.1e12, -10), lin2db(edfa_osnr_contribution(193.1e12, 5, -10)))


@pytest.mark.parametrize('params', [{'gain': 17}, {'nf': 5}, {'gain': '', 'nf': 5}])
def test_amplifier_mandatory_params(params):
    with pytest.raises(ParametersError):
        Amplifier(**params)


@pytest.mark.parametrize('gain, expected', [(10, True), (17, True), (25, True), (9.9, False), (25.1, False)])
def test_line_amplifier_gain_bounds(gain, expected):
    amp = LineAmplifier(position=10, gain=gain, nf=5, gain_min=10, gain_max=25)
    assert amp.is_gain_ok() == expected


def test_line_amplifier_output_power_bounds():
    amp = LineAmplifier(position=10, gain=16, nf=5, out_power_min=0, out_power_max=20)
    assert amp.is_output_power_ok(0)
    assert amp.is_output_power_ok(20)
    assert not amp.is_output_power_ok(-0.01)
    assert not amp.is_output_power_ok(20.01)
    assert not amp.is_output_power_ok(None)
    assert LineAmplifier(position=10, gain=16, nf=5).is_output_power_ok(-40)


def test_line_amplifier_inconsistent_bounds():
    with pytest.raises(ParametersError, match='gain_min'):
        LineAmplifier(position=10, gain=16, nf=5, gain_min=20, gain_max=10)


def test_fiber_properties():
    fiber = Fiber('f', origin='A', destination='B',
                  params={'length': 100, 'loss_coef': 0.2, 'dispersion': 17, 'pmd_coef': 0.1},
                  line_amplifiers=[{'position': 70, 'gain': 14, 'nf': 5, 'pmd': 0.2, 'cd_compensation': -500},
                                   {'position': 30, 'gain': 6, 'nf': 5}])
    assert_allclose(fiber.loss, 20)
    assert_allclose(fiber.chromatic_dispersion, 1700)
    assert_allclose(fiber.pmd_squared, 1)
    assert [amp.position for amp in fiber.line_amplifiers] == [30, 70]
    assert_allclose(fiber.total_line_gain, 20)
    assert_allclose(fiber.total_line_cd_compensation, -500)
    assert_allclose(fiber.total_line_pmd_squared, 0.04)
    assert fiber.booster is None and fiber.preamp is None
    state = fiber.propagate_distance(SignalState.transmitted(0), 30)
    assert_allclose(state, (-6, 510, 0.3, inf))


def test_fiber_default_params():
    fiber = Fiber('f', origin='A', destination='B', params={'length': 1000, 'length_units': 'm', 'loss_coef': 0.25})
    assert fiber.length == 1
    assert fiber.dispersion == 16.7
    assert fiber.pmd_coef == 0.1
    assert fiber.feasible_amplifier_gains()
    assert fiber.location == Location()


@pytest.mark.parametrize('position', [-1, 80.5])
def test_fiber_amplifier_outside(position):
    with pytest.raises(NetworkTopologyError, match='between 0 and the fiber length'):
        Fiber('f', origin='A', destination='B', params={'length': 80, 'loss_coef': 0.2},
              line_amplifiers=[{'position': position, 'gain': 16, 'nf': 5}])


@pytest.mark.parametrize('params', [{'length': 80}, {'loss_coef': 0.2}, {'length': 0, 'loss_coef': 0.2}])
def test_fiber_wrong_params(params):
    with pytest.raises(ParametersError, match='Config error in f'):
        Fiber('f', origin='A', destination='B', params=params)


def test_fiber_equalization_target():
    with pytest.raises(ParametersError, match='equalization target'):
        Fiber('f', origin='A', destination='B', params={'length': 80, 'loss_coef': 0.2}, equalization_target=0)


def test_fiber_to_json():
    fiber = Fiber('f', origin='A', destination='B', params={'length': 80, 'loss_coef': 0.2},
                  booster={'gain': 17, 'nf': 5}, line_amplifiers=[{'position': 40, 'gain': 8, 'nf': 5}])
    data = fiber.to_json
    assert data['origin'] == 'A'
    assert data['params']['length'] == 80
    assert data['booster']['gain'] == 17
    assert data['preamp'] is None
    assert data['line_amplifiers'][0]['position'] == 40
    assert 'f' in repr(fiber)


def test_lightpath():
    lightpath = Lightpath('lp', ['A-B', 'B-C'], [3, 1, 2], tx_power=1)
    assert lightpath.slots == [1, 2, 3]
    assert lightpath.number_of_slots == 3
    assert_allclose(lightpath.frequency, 193.125e12)
    assert lightpath.name == 'lp'
    assert lightpath.to_json['fibers'] == ['A-B', 'B-C']


@pytest.mark.parametrize('fibers, slots', [([], [0]), (['A-B'], []), (['A-B'], [0, 2])])
def test_lightpath_wrong_params(fibers, slots):
    with pytest.raises(ParametersError):
        Lightpath('lp', fibers, slots)


def test_oadm_without_architecture():
    node = Oadm('A', metadata={'location': {'city': 'Lannion'}})
    assert node.architecture is None
    assert node.location.city == 'Lannion'
    assert node.to_json['params'] == {}
    assert node.to_json['type_variety'] == 'default'
