# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
"""
The variability model built from kconfigreader output.

A symbol's kind is one of ``Bool``, ``Tristate`` (carrying the DIMACS number of
its ``_MODULE`` half) or ``Other`` (int, hex, string, ...). All symbols of a
model live in one name-indexed table; the hierarchy is stored as a parent name
per symbol and children are derived from it.

During conversion symbols are collected as mutable ``SymbolBuilder`` records,
which are frozen into ``Symbol`` values once every number, parent and usage set
is known.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterator, List, Mapping, Optional, Set, Tuple, Union

import networkx as nx


@dataclass(frozen=True)
class Bool:
    @property
    def type(self) -> str:
        return 'bool'


@dataclass(frozen=True)
class Tristate:
    # 0 until the _MODULE half has been seen in the DIMACS header
    module_number: int = 0

    @property
    def type(self) -> str:
        return 'tristate'


@dataclass(frozen=True)
class Other:
    type_tag: str

    @property
    def type(self) -> str:
        return self.type_tag


Kind = Union[Bool, Tristate, Other]


def kind_for_type(type_name: str) -> Kind:
    if type_name == 'bool':
        return Bool()
    if type_name == 'tristate':
        return Tristate()
    return Other(type_name)


@dataclass(frozen=True, order=True)
class SourceLocation:
    source: str
    line: int

    def __str__(self):
        return f'{self.source}:{self.line}'


@dataclass(frozen=True)
class Symbol:
    name: str
    kind: Kind
    dimacs_number: int = 0
    parent: Optional[str] = None
    used_in_constraints: FrozenSet[str] = frozenset()
    used_in_constraints_of_others: FrozenSet[str] = frozenset()
    source_locations: Optional[Tuple[SourceLocation, ...]] = None

    @property
    def type(self) -> str:
        return self.kind.type

    @property
    def module_number(self) -> Optional[int]:
        return self.kind.module_number if isinstance(self.kind, Tristate) else None

    def to_json(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            'name': self.name,
            'type': self.type,
            'dimacsNumber': self.dimacs_number,
        }
        if isinstance(self.kind, Tristate):
            data['dimacsModuleNumber'] = self.kind.module_number
        data['parent'] = self.parent
        data['usedInConstraints'] = sorted(self.used_in_constraints)
        data['usedInConstraintsOfOthers'] = sorted(self.used_in_constraints_of_others)
        if self.source_locations is not None:
            data['sourceLocations'] = [str(location) for location in self.source_locations]
        return data


@dataclass
class SymbolBuilder:
    """In-progress symbol; only exists inside one conversion."""

    name: str
    kind: Kind
    dimacs_number: int = 0
    parent: Optional[str] = None
    used_in_constraints: Set[str] = field(default_factory=set)
    used_in_constraints_of_others: Set[str] = field(default_factory=set)

    def freeze(self) -> Symbol:
        return Symbol(
            name=self.name,
            kind=self.kind,
            dimacs_number=self.dimacs_number,
            parent=self.parent,
            used_in_constraints=frozenset(self.used_in_constraints),
            used_in_constraints_of_others=frozenset(self.used_in_constraints_of_others),
        )


class VariableType(enum.Enum):
    BOOLEAN = 'boolean'


class ConstraintFileType(enum.Enum):
    DIMACS = 'dimacs'


class Attribute(enum.Enum):
    CONSTRAINT_USAGE = 'constraint_usage'
    HIERARCHICAL = 'hierarchical'
    SOURCE_LOCATIONS = 'source_locations'


@dataclass(frozen=True)
class ModelDescriptor:
    variable_type: VariableType
    constraint_file_type: ConstraintFileType
    attributes: FrozenSet[Attribute] = frozenset()

    def has_attribute(self, attribute: Attribute) -> bool:
        return attribute in self.attributes

    def with_attribute(self, attribute: Attribute) -> ModelDescriptor:
        return replace(self, attributes=self.attributes | {attribute})


class VariabilityModel:
    """Immutable result of a conversion: symbols, constraint file and descriptor."""

    def __init__(self, constraint_file: str, symbols: Mapping[str, Symbol], descriptor: ModelDescriptor):
        self._constraint_file = constraint_file
        self._symbols = MappingProxyType(dict(symbols))
        self._descriptor = descriptor
        self._children: Dict[str, Set[str]] = {}
        for symbol in self._symbols.values():
            if symbol.parent is not None:
                self._children.setdefault(symbol.parent, set()).add(symbol.name)

    @property
    def constraint_file(self) -> str:
        return self._constraint_file

    @property
    def symbols(self) -> Mapping[str, Symbol]:
        return self._symbols

    @property
    def descriptor(self) -> ModelDescriptor:
        return self._descriptor

    def __len__(self):
        return len(self._symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self._symbols.values())

    def __contains__(self, name):
        return name in self._symbols

    def __getitem__(self, name) -> Symbol:
        return self._symbols[name]

    def get(self, name: str) -> Optional[Symbol]:
        return self._symbols.get(name)

    def children(self, name: str) -> FrozenSet[str]:
        return frozenset(self._children.get(name, ()))

    def roots(self) -> List[str]:
        return sorted(symbol.name for symbol in self if symbol.parent is None)

    def nesting_depth(self, name: str) -> int:
        depth = 0
        symbol = self._symbols[name]
        while symbol.parent is not None:
            depth += 1
            symbol = self._symbols[symbol.parent]
        return depth

    def dimacs_mapping(self) -> Dict[int, str]:
        mapping = {}
        for symbol in self:
            if symbol.dimacs_number:
                mapping[symbol.dimacs_number] = symbol.name
            if symbol.module_number:
                mapping[symbol.module_number] = symbol.name + '_MODULE'
        return dict(sorted(mapping.items()))

    def constraint_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        graph.add_nodes_from(self._symbols)
        for symbol in self:
            graph.add_edges_from((symbol.name, used) for used in symbol.used_in_constraints)
        return graph

    def hierarchy_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        graph.add_nodes_from(self._symbols)
        graph.add_edges_from((symbol.parent, symbol.name) for symbol in self if symbol.parent is not None)
        return graph

    def with_source_locations(self, locations: Mapping[str, List[SourceLocation]]) -> VariabilityModel:
        symbols = {
            name: replace(symbol, source_locations=tuple(locations.get(name, ())))
            for name, symbol in self._symbols.items()
        }
        return VariabilityModel(self._constraint_file, symbols,
                                self._descriptor.with_attribute(Attribute.SOURCE_LOCATIONS))

    def to_json(self) -> Dict[str, object]:
        return {
            'constraintFile': self._constraint_file,
            'variableType': self._descriptor.variable_type.value,
            'constraintFileType': self._descriptor.constraint_file_type.value,
            'attributes': sorted(attribute.value for attribute in self._descriptor.attributes),
            'variables': [self._symbols[name].to_json() for name in sorted(self._symbols)],
        }

    def __repr__(self):
        return f'VariabilityModel({len(self)} symbols, constraint_file={self._constraint_file!r})'
