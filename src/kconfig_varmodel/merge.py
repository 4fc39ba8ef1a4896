# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# puts the DIMACS numbers of the header entries onto the symbols of the menu tree

import logging
from typing import Dict, Iterable

from .dimacs import DimacsEntry
from .errors import FormatError
from .model import Bool, SymbolBuilder, Tristate

logger = logging.getLogger(__name__)

# kconfigreader always writes this one to the DIMACS file, even if the Kconfig files never declare it
MODULES = 'CONFIG_MODULES'


def merge_dimacs_numbers(entries: Iterable[DimacsEntry], symbols: Dict[str, SymbolBuilder]):
    for entry in entries:
        # int, hex and string symbols appear once per value, as NAME=<value>; only NAME matches the tree
        name = entry.name.split('=', 1)[0]

        symbol = symbols.get(name)
        if symbol is None:
            if name != MODULES:
                raise FormatError(f'Found variable {name} in DIMACS but not in RSF')
            logger.debug('%s is not declared in the menu tree, adding it as bool', MODULES)
            symbol = SymbolBuilder(MODULES, Bool())
            symbols[name] = symbol

        if isinstance(symbol.kind, Bool):
            symbol.dimacs_number = entry.dimacs_number
        elif isinstance(symbol.kind, Tristate):
            symbol.dimacs_number = entry.dimacs_number
            if entry.module_number is not None:
                symbol.kind = Tristate(entry.module_number)
        # no single number for other types; dimacs_number stays 0
