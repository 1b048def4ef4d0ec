#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
wdmsim.tools.json_io
====================

Loading and saving data from JSON files in wdmsim's internal data format
"""

from logging import getLogger
from pathlib import Path
import json
from copy import deepcopy
from typing import Dict, Optional

from wdmsim.core import elements
from wdmsim.core.exceptions import ConfigurationError, EquipmentConfigError, NetworkTopologyError, ParametersError
from wdmsim.core.network import Network, add_line_amplifiers_uniformly, set_line_amplifier_gains
from wdmsim.core.oadm import architecture_from_json, FilterlessArchitecture, _ARCHITECTURES
from wdmsim.core.parameters import LineAmplifierParams
from wdmsim.core.utils import merge_params, write_csv


_logger = getLogger(__name__)


_examples_dir = Path(__file__).parent.parent / 'example-data'
DEFAULT_EQPT_CONFIG = _examples_dir / 'eqpt_config.json'
DEFAULT_TOPOLOGY = _examples_dir / 'line_network.json'


class _JsonThing:
    """Base class for json equipment
    """
    def update_attr(self, default_values, kwargs, name):
        """Build the attributes based on kwargs dict
        """
        clean_kwargs = {k: v for k, v in kwargs.items() if v != ''}
        for k, v in default_values.items():
            setattr(self, k, clean_kwargs.get(k, v))
            if k not in clean_kwargs and name != 'Amp' and v is not None and v != []:
                # do not show this warning if the default value is None
                msg = f'\n\tWARNING missing {k} attribute in eqpt_config.json[{name}]' \
                    + f'\n\tdefault value is {k} = {v}\n'
                _logger.warning(msg)


class Fiber(_JsonThing):
    """Fiber default settings
    """
    default_values = {
        'type_variety': '',
        'loss_coef': None,
        'dispersion': 16.7,
        'pmd_coef': 0.1
    }

    def __init__(self, **kwargs):
        self.update_attr(self.default_values, kwargs, self.__class__.__name__)
        if self.loss_coef is None:
            raise EquipmentConfigError(f'Fiber {self.type_variety}: missing loss_coef attribute')


class Amp(_JsonThing):
    """List of amplifiers with their specs
    """
    default_values = {'type_variety': '', **LineAmplifierParams.default_values}

    def __init__(self, **kwargs):
        self.update_attr(self.default_values, kwargs, 'Amp')
        if 'position' in kwargs:
            raise EquipmentConfigError(f'Amplifier {self.type_variety}: position can not be set in the library')


class Oadm(_JsonThing):
    """OADM switching architectures and their losses

    Attributes which are not listed in default_values are kept as they are and handed over to the architecture.
    """
    default_values = {
        'type_variety': 'default',
        'architecture': 'Roadm',
        'pmd': 0
    }

    def __init__(self, **kwargs):
        self.update_attr(self.default_values, kwargs, 'Oadm')
        for k, v in kwargs.items():
            if k not in self.default_values:
                setattr(self, k, v)
        if self.architecture not in _ARCHITECTURES:
            raise EquipmentConfigError(f'Oadm {self.type_variety}: unknown architecture "{self.architecture}"')


def _library_params(thing):
    return {k: v for k, v in thing.__dict__.items() if k != 'type_variety'}


def _equipment_from_json(json_data: dict) -> dict:
    """build global dictionnary eqpt_library that stores all eqpt characteristics:
    fiber, amplifier and OADM type_variety from the eqpt_config.json content
    """
    equipment = {}
    for key, entries in json_data.items():
        equipment[key] = {}
        for entry in entries:
            subkey = entry.get('type_variety', 'default')
            if key == 'Edfa':
                equipment[key][subkey] = Amp(**entry)
            elif key == 'Fiber':
                equipment[key][subkey] = Fiber(**entry)
            elif key == 'Oadm':
                equipment[key][subkey] = Oadm(**entry)
            else:
                raise EquipmentConfigError(f'Unrecognized network element type "{key}"')
    return equipment


def load_equipment(filename: Path) -> dict:
    """Load equipment, returns equipment dict
    """
    json_data = load_json(filename)
    return _equipment_from_json(json_data)


def load_network(filename: Path, equipment: dict) -> Network:
    """load network json

    :param filename: input file to read from
    :param equipment: equipment library
    """
    if filename.suffix.lower() != '.json':
        raise ValueError(f'unsupported topology filename extension {filename.suffix.lower()}')
    return network_from_json(load_json(filename), equipment)


def save_network(network: Network, filename: str):
    """Dump the network into a JSON file

    :param network: network to work on
    :param filename: file to write to
    """
    save_json(network_to_json(network), filename)


def _with_library(config: dict, equipment: dict, typ: str, default_variety: Optional[str] = None) -> dict:
    """Element params completed by the library params of its type_variety; element params take precedence"""
    variety = config.get('type_variety', default_variety)
    if variety is None:
        return config
    try:
        library = equipment[typ][variety]
    except KeyError:
        raise ConfigurationError(f'The {typ} of variety type {variety} was not recognized:'
                                 '\nplease check it is properly defined in the eqpt_config json file')
    return merge_params(config, _library_params(library))


def _amplifier_from_json(config: Optional[dict], equipment: dict) -> Optional[dict]:
    if config is None:
        return None
    params = _with_library(dict(config), equipment, 'Edfa')
    params.pop('type_variety', None)
    return params


def _design_line_amplifiers(fiber: elements.Fiber, design: dict, equipment: dict):
    """Lay out the line amplifiers of a fiber following its 'design' section"""
    try:
        max_span_length = design['max_span_length']
    except KeyError as e:
        raise ParametersError(f'Config error in {fiber.uid}: line amplifier design must include {e}') from e
    template = _amplifier_from_json(design.get('line_amplifier', {}), equipment)
    template.pop('position', None)
    add_line_amplifiers_uniformly(fiber, max_span_length, template)
    if 'compensate' in design:
        set_line_amplifier_gains(fiber, design['compensate'])


def network_from_json(json_data: dict, equipment: dict) -> Network:
    """create the network based on json input dict and using equipment library to fill in the gaps
    """
    json_data = deepcopy(json_data)
    network = Network()
    oadm_params = {}
    for el_config in json_data['elements']:
        typ = el_config.pop('type', 'Oadm')
        if typ != 'Oadm':
            raise ConfigurationError(f'Unknown network equipment "{typ}"')
        if el_config.get('type_variety') is None:
            el_config['type_variety'] = 'default'
        variety = el_config['type_variety']
        params = el_config.pop('params', {})
        if variety in equipment.get('Oadm', {}):
            params = merge_params(params, _library_params(equipment['Oadm'][variety]))
        elif 'architecture' not in params:
            raise ConfigurationError(f'The Oadm of variety type {variety} was not recognized:'
                                     '\nplease check it is properly defined in the eqpt_config json file')
        oadm_params[el_config['uid']] = params
        network.add_oadm(elements.Oadm(**el_config))

    for fiber_config in json_data.get('fibers', []):
        fiber_config.pop('type', None)
        fiber_config['params'] = _with_library(fiber_config.get('params', {}), equipment, 'Fiber',
                                               fiber_config.get('type_variety'))
        fiber_config['booster'] = _amplifier_from_json(fiber_config.get('booster'), equipment)
        fiber_config['preamp'] = _amplifier_from_json(fiber_config.get('preamp'), equipment)
        fiber_config['line_amplifiers'] = [_amplifier_from_json(amp, equipment)
                                           for amp in fiber_config.get('line_amplifiers', [])]
        design = fiber_config.pop('design', None)
        fiber = elements.Fiber(**fiber_config)
        if design is not None:
            if fiber.line_amplifiers:
                raise ConfigurationError(f'Fiber {fiber.uid}: line amplifiers can not be both listed and designed')
            _design_line_amplifiers(fiber, design, equipment)
        network.add_fiber(fiber)

    # filterless nodes split the signal towards all their degrees: default to the actual node degree
    for uid, params in oadm_params.items():
        if params.get('architecture') == FilterlessArchitecture.name and 'degree' not in params:
            params = {**params, 'degree': max(network.degree(uid), 1)}
        try:
            network.oadm(uid).architecture = architecture_from_json(params)
        except ParametersError as e:
            raise ParametersError(f'Config error in {uid}: {e}') from e

    for lp_config in json_data.get('lightpaths', []):
        try:
            network.add_lightpath(elements.Lightpath(**lp_config))
        except TypeError as e:
            raise NetworkTopologyError(f'can not build lightpath from {lp_config}: {e}') from e
    return network


def network_to_json(network: Network) -> dict:
    """Export network as a json dict
    """
    return {
        'elements': [n.to_json for n in network.oadms()],
        'fibers': [f.to_json for f in network.fibers()],
        'lightpaths': [lp.to_json for lp in network.lightpaths()]
    }


def _state_to_json(state) -> Dict:
    return {
        'power': state.power,
        'chromatic_dispersion': state.chromatic_dispersion,
        'pmd': state.pmd,
        'osnr': state.osnr
    }


def performance_to_json(repository) -> dict:
    """Export the content of a performance repository as a json dict

    An infinite OSNR (no noise added) is written as Infinity.
    """
    lightpaths = []
    for lightpath in repository.lightpaths():
        fibers = []
        for uid in lightpath.fibers:
            fiber = repository.fiber(uid)
            ends = repository.fiber_ends(fiber, lightpath)
            amplifiers = [repository.amplifier_states(fiber, lightpath, i)
                          for i in range(repository.line_amplifier_count(fiber))]
            fibers.append({
                'fiber': uid,
                'start': _state_to_json(ends.start),
                'end': _state_to_json(ends.end),
                'line_amplifiers': [{'input': _state_to_json(a.input), 'output': _state_to_json(a.output)}
                                    for a in amplifiers]
            })
        lightpaths.append({
            'uid': lightpath.uid,
            'fibers': fibers,
            'receiver': _state_to_json(repository.receiver_state(lightpath))
        })
    fibers = []
    for fiber in repository.fibers():
        totals = repository.total_power_at_fiber_ends(fiber)
        fibers.append({
            'uid': fiber.uid,
            'total_power_start': totals.start,
            'total_power_end': totals.end,
            'line_amplifiers': [{'position': amp.position,
                                 'total_power_input': pin,
                                 'total_power_output': pout,
                                 'gain_ok': amp.is_gain_ok(),
                                 'output_power_ok': ok}
                                for amp, pin, pout, ok in zip(fiber.line_amplifiers,
                                                              repository.total_power_at_amplifier_inputs(fiber),
                                                              repository.total_power_at_amplifier_outputs(fiber),
                                                              repository.amplifier_output_powers_ok(fiber))],
            'feasible_amplifier_input_power': repository.feasible_amplifier_input_power(fiber)
        })
    return {'lightpaths': lightpaths, 'fibers': fibers}


def performance_to_csv(repository, filename: Path):
    """Save the receiver state of each lightpath and the total powers of each fiber in CSV format"""
    receivers = []
    for lightpath in repository.lightpaths():
        state = repository.receiver_state(lightpath)
        receivers.append({'lightpath': lightpath.uid,
                          'fibers': ' | '.join(lightpath.fibers),
                          'frequency (THz)': round(lightpath.frequency * 1e-12, 5),
                          'power (dBm)': state.power,
                          'chromatic dispersion (ps/nm)': state.chromatic_dispersion,
                          'PMD (ps)': state.pmd,
                          'OSNR (dB)': state.osnr})
    fibers = []
    for fiber in repository.fibers():
        totals = repository.total_power_at_fiber_ends(fiber)
        fibers.append({'fiber': fiber.uid,
                       'total power start (dBm)': totals.start,
                       'total power end (dBm)': totals.end,
                       'line amplifiers': repository.line_amplifier_count(fiber),
                       'feasible amplifier power': repository.feasible_amplifier_input_power(fiber),
                       'feasible amplifier gain': fiber.feasible_amplifier_gains()})
    write_csv({'lightpaths': receivers, 'fibers': fibers}, filename)


def load_json(filename: Path) -> dict:
    """load json data"""
    with open(filename, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return data


def save_json(obj: Dict, filename: Path):
    """Save in json format"""
    with open(filename, 'w', encoding='utf-8') as f:
        json.dump(obj, f, indent=2, ensure_ascii=False)
