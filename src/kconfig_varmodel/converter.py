# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# converts the output of kconfigreader (<base>.dimacs and <base>.rsf) into a VariabilityModel

import atexit
import logging
import os
import shutil
import tempfile

from .dimacs import read_variable_map
from .locations import find_source_locations
from .merge import merge_dimacs_numbers
from .model import (Attribute, ConstraintFileType, ModelDescriptor, VariabilityModel,
                    VariableType)
from .rsf import read_rsf
from .settings import ExtractorSettings
from .usage import resolve_used_symbols

logger = logging.getLogger(__name__)


def delete(file):
    os.remove(file) if os.path.exists(file) else None


def copy_constraint_file(file):
    # kconfigreader's output files are removed by whoever ran it, so the model keeps its own copy
    handle, copy = tempfile.mkstemp(prefix='varmodel', suffix='.dimacs')
    os.close(handle)
    try:
        shutil.copyfile(file, copy)
    except OSError:
        delete(copy)
        raise
    atexit.register(delete, copy)
    return copy


def convert(output_base) -> VariabilityModel:
    """Reads <output_base>.dimacs and <output_base>.rsf and builds the variability model.

    Raises FormatError if either file is malformed or they do not describe the same symbols,
    and OSError if a file cannot be read or copied.
    """
    output_base = os.path.abspath(output_base)
    dimacs_file = output_base + '.dimacs'
    rsf_file = output_base + '.rsf'

    entries = read_variable_map(dimacs_file)
    tree = read_rsf(rsf_file)

    symbols = tree.symbols
    merge_dimacs_numbers(entries, symbols)
    resolve_used_symbols(symbols, tree.id_to_name, tree.used_ids)

    constraint_file = copy_constraint_file(dimacs_file)
    descriptor = ModelDescriptor(
        VariableType.BOOLEAN,
        ConstraintFileType.DIMACS,
        frozenset({Attribute.CONSTRAINT_USAGE, Attribute.HIERARCHICAL}),
    )
    model = VariabilityModel(constraint_file, {name: symbol.freeze() for name, symbol in symbols.items()},
                             descriptor)
    logger.info('converted %s into %d variables', output_base, len(model))
    return model


def extract(output_base, settings=None) -> VariabilityModel:
    """Converts the kconfigreader output and, if configured, adds source locations."""
    settings = settings or ExtractorSettings()
    model = convert(output_base)
    if settings.find_locations:
        model = find_source_locations(model, settings.source_tree, settings.location_method, settings.arch)
    return model
