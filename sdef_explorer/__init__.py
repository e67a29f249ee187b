"""
sdef_explorer - generate Swift ScriptingBridge bindings from sdef documents.
"""

from .errors import SDEFError, SDEFLoaderError, SDEFParsingError
from .model import (
    ClassExtension,
    Command,
    Element,
    Enumeration,
    Enumerator,
    Include,
    Model,
    Parameter,
    Property,
    PropertyType,
    SdefClass,
    Suite,
)
from .parser import SDEFParser, parse_sdef
from .merge import merge_model
from .pipeline import build_model, load_model

__version__ = "0.1.0"

__all__ = [
    "SDEFError",
    "SDEFLoaderError",
    "SDEFParsingError",
    "ClassExtension",
    "Command",
    "Element",
    "Enumeration",
    "Enumerator",
    "Include",
    "Model",
    "Parameter",
    "Property",
    "PropertyType",
    "SdefClass",
    "Suite",
    "SDEFParser",
    "parse_sdef",
    "merge_model",
    "build_model",
    "load_model",
]
