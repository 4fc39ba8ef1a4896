# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# finds the places in the Kconfig files where the variables of a model are declared
#
# regex:      sweeps over every Kconfig* file of the source tree and matches "config NAME" lines
# kconfiglib: parses the Kconfig tree with kconfiglib and walks its menu nodes

import logging
import os
import re
from contextlib import contextmanager
from typing import Dict, List

from kconfiglib import Kconfig, Symbol

from .model import SourceLocation, VariabilityModel

logger = logging.getLogger(__name__)

PREFIX = 'CONFIG_'
METHODS = ('regex', 'kconfiglib')
CONFIG_LINE = re.compile(r'^[^#]*config\s*([A-Za-z0-9_]+)')


def find_in_kconfig_file(path, source_tree, names, locations):
    relative = os.path.relpath(path, source_tree).replace(os.sep, '/')
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line_number, line in enumerate(f, start=1):
            match = CONFIG_LINE.fullmatch(line.rstrip('\n'))
            if match:
                name = PREFIX + match.group(1)
                if name in names:
                    locations.setdefault(name, []).append(SourceLocation(relative, line_number))


def sweep_kconfig_files(source_tree, names) -> Dict[str, List[SourceLocation]]:
    locations: Dict[str, List[SourceLocation]] = {}
    for root, dirs, files in os.walk(source_tree):
        dirs[:] = sorted(d for d in dirs if not d.startswith('.'))
        for name in sorted(files):
            if not name.startswith('Kconfig'):
                continue
            path = os.path.join(root, name)
            try:
                find_in_kconfig_file(path, source_tree, names, locations)
            except OSError:
                logger.exception('Could not read Kconfig file %s', path)
    return locations


@contextmanager
def kconfig_environment(source_tree, arch=None):
    values = {'srctree': str(source_tree)}
    if arch:
        values['ARCH'] = arch
        values['SRCARCH'] = arch
    saved = {key: os.environ.get(key) for key in values}
    os.environ.update(values)
    try:
        yield
    finally:
        for key, value in saved.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value


def collect_items(node, names, locations):
    while node:
        if isinstance(node.item, Symbol):
            name = PREFIX + node.item.name
            if name in names:
                locations.setdefault(name, []).append(SourceLocation(node.filename, node.linenr))

        if node.list:
            collect_items(node.list, names, locations)

        node = node.next


def walk_kconfig_tree(source_tree, names, arch=None) -> Dict[str, List[SourceLocation]]:
    locations: Dict[str, List[SourceLocation]] = {}
    with kconfig_environment(source_tree, arch):
        kconf = Kconfig('Kconfig', warn=False)
    collect_items(kconf.top_node, names, locations)
    return locations


def find_source_locations(model: VariabilityModel, source_tree, method='regex', arch=None) -> VariabilityModel:
    """Returns a copy of the model in which every variable carries the places it is declared at."""
    if method not in METHODS:
        raise ValueError(f'Unknown location method {method!r}, expected one of {", ".join(METHODS)}')

    names = set(model.symbols)
    if method == 'regex':
        locations = sweep_kconfig_files(source_tree, names)
    else:
        locations = walk_kconfig_tree(source_tree, names, arch)

    logger.info('found source locations for %d of %d variables', len(locations), len(names))
    return model.with_source_locations(locations)
