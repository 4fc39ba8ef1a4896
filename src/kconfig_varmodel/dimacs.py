# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# reads the variable numbers that kconfigreader writes as comments ("c <number> <name>") in front of
# the "p cnf" line of a DIMACS file
# tristate symbols appear twice: once as NAME and once as NAME_MODULE

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .errors import FormatError

logger = logging.getLogger(__name__)

PREFIX = 'CONFIG_'
MODULE_SUFFIX = '_MODULE'


@dataclass
class DimacsEntry:
    name: str
    dimacs_number: int
    # None for plain bool entries
    module_number: Optional[int] = None

    @property
    def is_tristate(self):
        return self.module_number is not None


def split_line(line):
    parts = line.rstrip('\n').split(' ')
    while parts and parts[-1] == '':
        parts.pop()
    return parts


def is_problem_line(parts):
    return len(parts) == 4 and parts[0] == 'p'


def read_variable(parts, line_number, cache):
    if len(parts) < 3:
        raise FormatError(f'Expected "c <number> <name>" at line {line_number}')
    try:
        number = int(parts[1])
    except ValueError as e:
        raise FormatError(f"Couldn't parse integer at line {line_number}: {parts[1]!r}") from e

    # names can contain spaces, e.g. "ARCH_HWEIGHT_CFLAGS=-fcall-saved-ecx -fcall-saved-edx"
    name = PREFIX + ' '.join(parts[2:])

    if name.endswith(MODULE_SUFFIX):
        name = name[:-len(MODULE_SUFFIX)]
        existing = cache.get(name)
        cache[name] = DimacsEntry(name, existing.dimacs_number if existing else 0, number)
    else:
        existing = cache.get(name)
        if existing is None:
            cache[name] = DimacsEntry(name, number)
        else:
            existing.dimacs_number = number
    logger.debug('line %d: %s -> %d', line_number, name, number)


def read_variable_map(file) -> List[DimacsEntry]:
    """Returns the symbols declared in the comment header of the given DIMACS file.

    A NAME_MODULE entry without a matching NAME entry is a bool symbol that happens to end in
    _MODULE, not the module half of a tristate; it is returned as a bool entry under its full name.
    """
    cache: Dict[str, DimacsEntry] = {}
    with open(file, mode='r', encoding='utf-8', errors='surrogateescape') as f:
        for line_number, line in enumerate(f, start=1):
            parts = split_line(line)
            if is_problem_line(parts):
                break
            if not parts or parts[0] != 'c':
                raise FormatError(f'Expected comment line starting with "c" at line {line_number}')
            read_variable(parts, line_number, cache)

    entries = []
    for entry in cache.values():
        if entry.is_tristate and entry.dimacs_number == 0:
            entry = DimacsEntry(entry.name + MODULE_SUFFIX, entry.module_number)
        entries.append(entry)

    logger.info('read %d variables from DIMACS header of %s', len(entries), file)
    return entries
