"""docweave generator: merges virtual members into a class docblock.

Public API:
    Generator: abstract base, subclasses implement handle()
    ConfigGenerator: registers members from a configuration entry
    Argument: method parameter used by the method add-methods
"""

from .base import Generator, Listener
from .config_generator import ConfigGenerator
from .models import (
    Argument,
    DeclaredMethod,
    DeclaredProperty,
    VirtualMethod,
    VirtualProperty,
    Visibility,
    normalize_type,
)
from .output import ConsoleOutput, LoggingOutput, OutputSink
from .registry import EntryRegistry

__all__ = [
    "Argument",
    "ConfigGenerator",
    "ConsoleOutput",
    "DeclaredMethod",
    "DeclaredProperty",
    "EntryRegistry",
    "Generator",
    "Listener",
    "LoggingOutput",
    "OutputSink",
    "VirtualMethod",
    "VirtualProperty",
    "Visibility",
    "normalize_type",
]
