#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
wdmsim.tools.cli_examples
=========================

Common code for CLI examples
"""

import argparse
import logging
import sys
from pathlib import Path

from wdmsim.core import ansi_escapes
from wdmsim.core import exceptions
from wdmsim.core.propagation import PropagationEngine
from wdmsim.tools.json_io import (load_equipment, load_network, save_network, save_json, performance_to_json,
                                  performance_to_csv, DEFAULT_EQPT_CONFIG, DEFAULT_TOPOLOGY)


_logger = logging.getLogger(__name__)
_examples_dir = Path(__file__).parent.parent / 'example-data'
_help_footer = '''
This program is part of wdmsim, a physical layer performance simulator for WDM networks.

'''
_help_fname_json = 'FILE.json'
_help_fname_json_csv = 'FILE.(json|csv)'


def show_example_data_dir():
    print(f'{_examples_dir}/')


def load_common_data(equipment_filename: Path, topology_filename: Path):
    """Load the equipment library and the network topology from JSON files."""
    try:
        equipment = load_equipment(equipment_filename)
        network = load_network(topology_filename, equipment)
    except exceptions.EquipmentConfigError as e:
        print(f'{ansi_escapes.red}Configuration error in the equipment library:{ansi_escapes.reset} {e}')
        sys.exit(1)
    except exceptions.NetworkTopologyError as e:
        print(f'{ansi_escapes.red}Invalid network definition:{ansi_escapes.reset} {e}')
        sys.exit(1)
    except exceptions.ParametersError as e:
        print(f'{ansi_escapes.red}Element parameters error:{ansi_escapes.reset} {e}')
        sys.exit(1)
    except exceptions.ConfigurationError as e:
        print(f'{ansi_escapes.red}Configuration error:{ansi_escapes.reset} {e}')
        sys.exit(1)
    except ValueError as e:
        # also raised by the json decoder on a malformed file
        print(f'{ansi_escapes.red}Invalid input file:{ansi_escapes.reset} {e}')
        sys.exit(1)
    return (equipment, network)


def _setup_logging(args):
    logging.basicConfig(level={2: logging.DEBUG, 1: logging.INFO, 0: logging.WARNING}.get(args.verbose, logging.DEBUG))


def _add_common_options(parser: argparse.ArgumentParser, network_default: Path):
    parser.add_argument('topology', nargs='?', type=Path, metavar='NETWORK-TOPOLOGY.json',
                        default=network_default,
                        help='Input network topology')
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help='Increase verbosity (can be specified several times)')
    parser.add_argument('-e', '--equipment', type=Path, metavar=_help_fname_json,
                        default=DEFAULT_EQPT_CONFIG, help='Equipment library')
    parser.add_argument('--save-network', type=Path, metavar=_help_fname_json,
                        help='Save the network, with its designed line amplifiers, as a JSON file')


def _print_fiber(repository, fiber):
    totals = repository.total_power_at_fiber_ends(fiber)
    if totals.start is None:
        print(f'{ansi_escapes.cyan}{fiber.uid}{ansi_escapes.reset}: no lightpath')
        return
    print(f'{ansi_escapes.cyan}{fiber.uid}{ansi_escapes.reset}: total power {totals.start:.2f} dBm after the booster, '
          f'{totals.end:.2f} dBm before the pre-amplifier')
    outputs = repository.total_power_at_amplifier_outputs(fiber)
    powers_ok = repository.amplifier_output_powers_ok(fiber)
    for index, (amp, power, power_ok) in enumerate(zip(fiber.line_amplifiers, outputs, powers_ok)):
        if power_ok and amp.is_gain_ok():
            color = ansi_escapes.green
        else:
            color = ansi_escapes.red
        print(f'  {color}line amplifier {index}{ansi_escapes.reset} at {amp.position:.1f} km: '
              f'gain {amp.gain:.2f} dB, total output power {power:.2f} dBm')


def performance_main_example(args=None):
    """Main script computing the performance of every lightpath of a network. It prints the state of each
    lightpath at its drop transponder, and the total power of each fiber.
    """
    parser = argparse.ArgumentParser(
        description='Compute power, dispersion, PMD and OSNR of the lightpaths of a WDM network',
        epilog=_help_footer,
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _add_common_options(parser, network_default=DEFAULT_TOPOLOGY)
    parser.add_argument('--lightpath', metavar='UID', help='Only show the results of this lightpath')
    parser.add_argument('--save-results', type=Path, metavar=_help_fname_json_csv,
                        help='Save the performance of all lightpaths and fibers')

    args = parser.parse_args(args if args is not None else sys.argv[1:])
    _setup_logging(args)

    (equipment, network) = load_common_data(args.equipment, args.topology)
    if args.save_network is not None:
        save_network(network, args.save_network)
        print(f'{ansi_escapes.blue}Network saved to {args.save_network}{ansi_escapes.reset}')

    engine = PropagationEngine(network)
    try:
        repository = engine.recompute()
    except exceptions.NetworkTopologyError as e:
        print(f'{ansi_escapes.red}Invalid network definition:{ansi_escapes.reset} {e}')
        sys.exit(1)
    except exceptions.ConfigurationError as e:
        print(f'{ansi_escapes.red}Configuration error:{ansi_escapes.reset} {e}')
        sys.exit(1)
    except exceptions.SimulationError as e:
        print(f'{ansi_escapes.red}Simulation error:{ansi_escapes.reset} {e}')
        sys.exit(1)

    lightpaths = repository.lightpaths()
    if args.lightpath is not None:
        lightpaths = [lp for lp in lightpaths if lp.uid == args.lightpath]
        if not lightpaths:
            print(f'{ansi_escapes.red}Invocation error:{ansi_escapes.reset} unknown lightpath {args.lightpath}')
            sys.exit(1)

    print(f'{ansi_escapes.blue}State of the lightpaths at their drop transponder{ansi_escapes.reset}')
    for lightpath in lightpaths:
        print(f'{ansi_escapes.cyan}{lightpath.uid}{ansi_escapes.reset}: {" -> ".join(lightpath.fibers)}, '
              f'{lightpath.frequency * 1e-12:.5f} THz')
        print(repository.receiver_state(lightpath))

    print(f'{ansi_escapes.blue}Total power per fiber{ansi_escapes.reset}')
    fibers = repository.fibers()
    if args.lightpath is not None:
        fibers = [repository.fiber(uid) for uid in lightpaths[0].fibers]
    for fiber in fibers:
        _print_fiber(repository, fiber)

    if args.save_results:
        extension = args.save_results.suffix.lower()
        if extension == '.json':
            save_json(performance_to_json(repository), args.save_results)
            print(f'{ansi_escapes.blue}Saved JSON to {args.save_results}{ansi_escapes.reset}')
        elif extension == '.csv':
            performance_to_csv(repository, args.save_results)
            print(f'{ansi_escapes.blue}Saved CSV to {args.save_results}{ansi_escapes.reset}')
        else:
            print(f'{ansi_escapes.red}Cannot save output: neither JSON nor CSV file{ansi_escapes.reset}')
            sys.exit(1)
