#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSD-3-Clause
# conftest
# Copyright (C) 2025 wdmsim contributors
# see AUTHORS.rst for a list of contributors

from pathlib import Path
import pytest

from wdmsim.core.elements import Oadm, Fiber
from wdmsim.core.network import Network
from wdmsim.core.oadm import RoadmArchitecture


TEST_DIR = Path(__file__).parent
DATA_DIR = TEST_DIR / 'data'


@pytest.fixture
def lossless_roadm():
    return RoadmArchitecture(add_module_loss=[0, 3], switch_loss=0, pmd=0)


@pytest.fixture
def line_network(lossless_roadm):
    """Build a chain of lossless ROADMs A, B, C... linked by one fiber per set of keyword arguments

    Fibers are named after their ends, e.g. 'A-B'.
    """
    def _build(*fibers, lightpaths=()):
        network = Network()
        names = [chr(ord('A') + i) for i in range(len(fibers) + 1)]
        for name in names:
            network.add_oadm(Oadm(name, architecture=lossless_roadm))
        for origin, destination, kwargs in zip(names, names[1:], fibers):
            network.add_fiber(Fiber(f'{origin}-{destination}', origin=origin, destination=destination, **kwargs))
        for lightpath in lightpaths:
            network.add_lightpath(lightpath)
        return network
    return _build
