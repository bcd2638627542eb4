# devscript/manifest/__init__.py
"""Extraction of <file> blocks from provider responses and writing them to disk."""

from .writer import FileBlock, FileWriteResult, apply_changes, extract_file_blocks

__all__ = ["FileBlock", "FileWriteResult", "apply_changes", "extract_file_blocks"]
