# devscript/context/__init__.py
"""Context hydration for @use references."""

from .hydrator import SKIP_DIRS, SOURCE_SUFFIXES, compact, hydrate

__all__ = ["hydrate", "compact", "SKIP_DIRS", "SOURCE_SUFFIXES"]
