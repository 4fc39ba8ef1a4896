# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# resolves the "S@<id>" references found in the properties of each symbol into the
# "used in constraints" relation and its reverse

from typing import Dict, Mapping, Set

from .errors import FormatError
from .model import SymbolBuilder


def resolve_used_symbols(symbols: Dict[str, SymbolBuilder], id_to_name: Mapping[str, str],
                         used_ids: Mapping[str, Set[str]]):
    for name, ids in used_ids.items():
        symbol = symbols.get(name)
        if symbol is None:
            raise FormatError(f'Found no variable with name {name}')

        used = set()
        for symbol_id in ids:
            used_name = id_to_name.get(symbol_id)
            if used_name is None or used_name not in symbols:
                raise FormatError(f'Found no variable for ID {symbol_id}')
            used.add(used_name)
        # only reachable through a second declaration of the same name
        used.discard(name)
        symbol.used_in_constraints = used

    # the reverse is only complete after every forward set is known
    for symbol in symbols.values():
        symbol.used_in_constraints_of_others = set()
    for symbol in symbols.values():
        for used_name in symbol.used_in_constraints:
            symbols[used_name].used_in_constraints_of_others.add(symbol.name)
