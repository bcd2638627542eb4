# devscript/script/aggregator.py
"""
Merge several parsed scripts into one master spec.

Scalars are last-writer-wins (non-empty values only), lists concatenate in
file order keeping duplicates, and tasks stack as newline-separated
paragraphs.
"""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from .parser import parse_script
from .types import LIST_TAGS, SCALAR_TAGS, MasterSpec, ScriptSpec

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".dev"


class ScriptLoadError(Exception):
    """Raised when a script file cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read script {path}: {reason}")


def aggregate(specs: Iterable[ScriptSpec]) -> MasterSpec:
    """
    Merge specs in order into a single MasterSpec.

    Args:
        specs: Parsed scripts in enumeration order (may be empty)

    Returns:
        Merged MasterSpec (all-empty for no input)
    """
    master = MasterSpec()
    tasks: list[str] = []

    for spec in specs:
        for field_name in SCALAR_TAGS.values():
            value = getattr(spec, field_name)
            if value:
                setattr(master, field_name, value)
        for field_name in LIST_TAGS.values():
            getattr(master, field_name).extend(getattr(spec, field_name))
        if spec.task:
            tasks.append(spec.task)

    master.task = "\n".join(tasks)
    return master


def discover_scripts(
    paths: Sequence[str | Path], extension: str = DEFAULT_EXTENSION
) -> list[Path]:
    """
    Expand CLI-style paths into an ordered list of script files.

    Files are kept in the order given; a directory contributes its own
    script files sorted by name (not recursive). No paths means the current
    directory.
    """
    if not paths:
        paths = [Path.cwd()]

    found: list[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            found.extend(
                sorted(p for p in path.iterdir() if p.is_file() and p.suffix == extension)
            )
        else:
            found.append(path)
    return found


def load_scripts(paths: Sequence[Path]) -> list[ScriptSpec]:
    """
    Read and parse each script file.

    Raises:
        ScriptLoadError: If any file is missing or unreadable
    """
    specs = []
    for path in paths:
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ScriptLoadError(path, str(e)) from e
        specs.append(parse_script(raw))
        logger.info(f"Parsed script {path}")
    return specs
