# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# converts kconfigreader output (<base>.dimacs, <base>.rsf) into a variability model and dumps it as JSON

import argparse
import json
import logging
import sys

from kconfiglib import KconfigError

from .converter import extract
from .locations import METHODS
from .model import Tristate
from .settings import ExtractorSettings


def write_dimacs_mapping(file, model):
    with open(file, 'w') as f:
        for index, variable in model.dimacs_mapping().items():
            f.write(f'c {index} {variable}\n')


def summary(model):
    tristates = sum(1 for symbol in model if isinstance(symbol.kind, Tristate))
    edges = sum(len(symbol.used_in_constraints) for symbol in model)
    return (f'variables: {len(model)}, tristate: {tristates}, constraint usages: {edges}, '
            f'top level: {len(model.roots())}')


def main(argv=None):
    parser = argparse.ArgumentParser(description='Converts kconfigreader output into a variability model.')
    parser.add_argument('--input', help='base path of the kconfigreader output (without .dimacs/.rsf)', required=True)
    parser.add_argument('--source-tree', help='source tree the Kconfig files were read from')
    parser.add_argument('--arch', help='architecture (ARCH/SRCARCH) for the kconfiglib location method')
    parser.add_argument('--find-locations', action='store_true', default=None,
                        help='store the places where variables are declared')
    parser.add_argument('--location-method', choices=METHODS, help='how to find source locations')
    parser.add_argument('--output', help='JSON output file')
    parser.add_argument('--dimacs-mapping', help='output file for "c <number> <name>" lines')
    parser.add_argument('--verbose', action='store_true', help='log every parsed entry')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s: %(message)s')

    try:
        settings = ExtractorSettings.from_environment(
            source_tree=args.source_tree,
            arch=args.arch,
            find_locations=args.find_locations,
            location_method=args.location_method,
        )
        model = extract(args.input, settings)
    except (OSError, ValueError, KconfigError) as e:
        print(f'error: {e}', file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(model.to_json(), f, indent=2)
    if args.dimacs_mapping:
        write_dimacs_mapping(args.dimacs_mapping, model)

    print(summary(model))
    return 0


if __name__ == '__main__':
    sys.exit(main())
