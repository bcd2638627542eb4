# devscript/script/__init__.py
"""Script language: parsing and multi-file aggregation."""

from .aggregator import ScriptLoadError, aggregate, discover_scripts, load_scripts
from .parser import parse_script
from .types import DEFAULT_ROLE, DEFAULT_VIBE, MasterSpec, ScriptSpec

__all__ = [
    "ScriptSpec",
    "MasterSpec",
    "DEFAULT_ROLE",
    "DEFAULT_VIBE",
    "parse_script",
    "aggregate",
    "discover_scripts",
    "load_scripts",
    "ScriptLoadError",
]
