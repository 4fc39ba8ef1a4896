"""
Tests for finding where the variables of a model are declared.

Verifies:
  1. The regex sweep finds config and menuconfig lines in all Kconfig* files.
  2. Commented declarations, hidden directories and unknown names are ignored.
  3. The kconfiglib walk finds the same declarations.
  4. The environment is restored after a kconfiglib parse.
"""

import os

import pytest

from kconfig_varmodel import (Attribute, Bool, ConstraintFileType, ModelDescriptor, SourceLocation, Symbol,
                              Tristate, VariabilityModel, VariableType, find_source_locations)
from kconfig_varmodel.locations import kconfig_environment

EXPECTED = {
    'CONFIG_ALPHA': [SourceLocation('Kconfig', 3), SourceLocation('sub/Kconfig.debug', 1)],
    'CONFIG_GAMMA': [SourceLocation('Kconfig', 6)],
    'CONFIG_DELTA': [SourceLocation('Kconfig', 11)],
    'CONFIG_BETA': [],
}


@pytest.fixture
def model():
    symbols = {
        'CONFIG_ALPHA': Symbol('CONFIG_ALPHA', Tristate(2), 1),
        'CONFIG_BETA': Symbol('CONFIG_BETA', Bool(), 3),
        'CONFIG_GAMMA': Symbol('CONFIG_GAMMA', Bool(), 4),
        'CONFIG_DELTA': Symbol('CONFIG_DELTA', Bool(), 5, parent='CONFIG_GAMMA'),
    }
    descriptor = ModelDescriptor(VariableType.BOOLEAN, ConstraintFileType.DIMACS,
                                 frozenset({Attribute.CONSTRAINT_USAGE, Attribute.HIERARCHICAL}))
    return VariabilityModel('model.dimacs', symbols, descriptor)


def test_regex_sweep(model, testdata):
    located = find_source_locations(model, testdata('kconfig'))

    assert located.descriptor.has_attribute(Attribute.SOURCE_LOCATIONS)
    for name, locations in EXPECTED.items():
        assert list(located[name].source_locations) == locations, name


def test_kconfiglib_walk(model, testdata):
    located = find_source_locations(model, testdata('kconfig'), method='kconfiglib')

    assert located.descriptor.has_attribute(Attribute.SOURCE_LOCATIONS)
    for name, locations in EXPECTED.items():
        assert sorted(located[name].source_locations) == sorted(locations), name


def test_unknown_method(model, testdata):
    with pytest.raises(ValueError, match='Unknown location method'):
        find_source_locations(model, testdata('kconfig'), method='grep')


def test_kconfig_environment_is_restored(monkeypatch):
    monkeypatch.setenv('ARCH', 'arm')
    monkeypatch.delenv('srctree', raising=False)
    monkeypatch.delenv('SRCARCH', raising=False)

    with kconfig_environment('/src/linux', 'x86'):
        assert os.environ['srctree'] == '/src/linux'
        assert os.environ['ARCH'] == 'x86'
        assert os.environ['SRCARCH'] == 'x86'

    assert os.environ['ARCH'] == 'arm'
    assert 'srctree' not in os.environ
    assert 'SRCARCH' not in os.environ
