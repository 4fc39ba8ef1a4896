from .converter import convert, extract
from .errors import FormatError
from .locations import find_source_locations
from .model import (Attribute, Bool, ConstraintFileType, ModelDescriptor, Other, SourceLocation, Symbol,
                    Tristate, VariabilityModel, VariableType)
from .settings import ExtractorSettings

__version__ = '0.1.0'
