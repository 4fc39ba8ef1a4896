# Copyright (C) 2025 Eric Ketzler, Elias Kuiter
# settings of the extractor, read from the KCONFIG_VARMODEL_* environment variables

from dataclasses import dataclass
from os import getenv
from typing import Optional

from .locations import METHODS

ENV_PREFIX = 'KCONFIG_VARMODEL_'
TRUE_VALUES = ('1', 'true', 'yes', 'on')
FALSE_VALUES = ('0', 'false', 'no', 'off', '')


def getenv_flag(key, default=False):
    value = getenv(ENV_PREFIX + key)
    if value is None:
        return default
    flag = value.strip().lower()
    if flag not in TRUE_VALUES + FALSE_VALUES:
        raise ValueError(f'Invalid value {value!r} for {ENV_PREFIX}{key}, '
                         f'expected one of {", ".join(TRUE_VALUES + FALSE_VALUES[:-1])}')
    return flag in TRUE_VALUES


@dataclass(frozen=True)
class ExtractorSettings:
    source_tree: Optional[str] = None
    arch: Optional[str] = None
    find_locations: bool = False
    location_method: str = 'regex'

    def __post_init__(self):
        if self.location_method not in METHODS:
            raise ValueError(f'Unknown location method {self.location_method!r}, '
                             f'expected one of {", ".join(METHODS)}')
        if self.find_locations and not self.source_tree:
            raise ValueError('Finding source locations requires a source tree')

    @classmethod
    def from_environment(cls, **overrides):
        """Reads the KCONFIG_VARMODEL_* variables; keyword arguments that are not None win."""
        values = {
            'source_tree': getenv(ENV_PREFIX + 'SOURCE_TREE'),
            'arch': getenv(ENV_PREFIX + 'ARCH'),
            'find_locations': getenv_flag('FIND_LOCATIONS'),
            'location_method': getenv(ENV_PREFIX + 'LOCATION_METHOD', 'regex'),
        }
        values.update((key, value) for key, value in overrides.items() if value is not None)
        return cls(**values)
