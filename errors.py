# errors.py
from __future__ import annotations


class EnigmaError(Exception):
    """Root of every failure raised by the machine and its helpers."""


class ConfigError(EnigmaError, ValueError):
    """Structural misuse: bad rotor order, counts, reflector setup, …"""


class FormatError(ConfigError):
    """Malformed cycle notation (unbalanced groups, repeats, stray symbols)."""


class SymbolError(EnigmaError, LookupError):
    """A symbol that is not a member of the alphabet in use."""


class RangeError(EnigmaError, IndexError):
    """An index outside ``0 .. size-1``."""


__all__ = [
    "EnigmaError",
    "ConfigError",
    "FormatError",
    "SymbolError",
    "RangeError",
]
