# devscript/context/hydrator.py
"""
Context hydration: resolve @use references into inlined, compacted source.

Each reference is resolved on its own. A missing or unreadable reference
becomes an inline error block at its position instead of failing the call.
Directories are walked recursively in sorted order, skipping noise
directories and keeping only source/document extensions.
"""

import asyncio
import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

SKIP_DIRS = frozenset({
    ".git", ".hg", ".svn", "node_modules", ".next", "dist", "build", "out",
    "target", "coverage", "__pycache__", ".venv", "venv", ".tox",
    ".mypy_cache", ".pytest_cache", ".ruff_cache", ".eggs",
})

SOURCE_SUFFIXES = frozenset({
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".dev", ".md",
    ".py", ".go", ".rs", ".java", ".kt", ".c", ".h", ".cpp", ".hpp", ".cs",
    ".rb", ".php", ".swift", ".sh", ".sql", ".css", ".scss", ".html",
    ".json", ".yaml", ".yml", ".toml", ".txt",
})

# Block comments, or "//" to end of line unless preceded by "\" or ":" (URLs)
_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/|([^\\:]|^)//[^\n]*", re.MULTILINE)


def file_start_marker(path: str) -> str:
    return f"--- FILE: {path} ---"


def file_end_marker(path: str) -> str:
    return f"--- END FILE: {path} ---"


def error_marker(reference: str, message: str) -> str:
    return f"--- HYDRATION ERROR [{reference}]: {message} ---"


def _strip_comments(text: str) -> str:
    # Removing one comment can expose another (e.g. "/*a*/" inside "//"),
    # so repeat until nothing changes.
    while True:
        stripped = _COMMENT_RE.sub(r"\1", text)
        if stripped == text:
            return stripped
        text = stripped


def compact(text: str) -> str:
    """
    Strip comments, collapse blank-line runs and trim the whole text.

    Best-effort textual heuristic, not a lexer: "//" inside string literals
    is treated as a comment. Idempotent.
    """
    lines = [line.rstrip() for line in _strip_comments(text).splitlines()]

    collapsed: list[str] = []
    for line in lines:
        if not line and collapsed and not collapsed[-1]:
            continue
        collapsed.append(line)

    return "\n".join(collapsed).strip()


def _is_skipped_dir(name: str) -> bool:
    return name in SKIP_DIRS or name.endswith(".egg-info")


def _walk(
    root: Path,
    suffixes: frozenset[str],
    skip_dirs: frozenset[str],
    visited: set[Path] | None = None,
) -> list[Path]:
    """
    Recursively list source files under root in sorted, deterministic order.

    Each real directory is entered once, so symlink cycles terminate.
    """
    if visited is None:
        visited = set()
    visited.add(root.resolve())

    found: list[Path] = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if entry.is_dir():
            if _is_skipped_dir(entry.name) or entry.name in skip_dirs:
                continue
            if entry.resolve() in visited:
                logger.debug(f"Skipping already visited directory {entry}")
                continue
            found.extend(_walk(entry, suffixes, skip_dirs, visited))
        elif entry.is_file() and entry.suffix.lower() in suffixes:
            found.append(entry)
    return found


def _display_path(path: Path, base_dir: Path) -> str:
    try:
        return str(PurePosixPath(*path.relative_to(base_dir).parts))
    except ValueError:
        return str(path)


def _read_block(path: Path, label: str) -> str:
    content = path.read_text(encoding="utf-8")
    return "\n".join([file_start_marker(label), compact(content), file_end_marker(label)])


async def hydrate(
    references: Sequence[str],
    base_dir: str | Path | None = None,
    extra_suffixes: Iterable[str] = (),
    extra_skip_dirs: Iterable[str] = (),
) -> str:
    """
    Resolve references into one context string.

    Args:
        references:      Paths (relative to base_dir) in declaration order
        base_dir:        Directory references resolve against (default: cwd)
        extra_suffixes:  Additional file extensions to include from directories
        extra_skip_dirs: Additional directory names to skip

    Returns:
        Concatenated file and error blocks in declaration/discovery order
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    suffixes = SOURCE_SUFFIXES | {s.lower() for s in extra_suffixes}
    skip_dirs = frozenset(extra_skip_dirs)

    blocks: list[str] = []
    for reference in references:
        target = base / reference
        try:
            if target.is_dir():
                files = await asyncio.to_thread(_walk, target, suffixes, skip_dirs)
                logger.info(f"Hydrating {reference}: {len(files)} file(s)")
            else:
                # Surfaces FileNotFoundError / PermissionError for the marker
                target.stat()
                files = [target]
        except OSError as e:
            logger.warning(f"Hydration error [{reference}]: {e}")
            blocks.append(error_marker(reference, e.strerror or str(e)))
            continue

        for path in files:
            label = _display_path(path, base)
            try:
                blocks.append(await asyncio.to_thread(_read_block, path, label))
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Hydration error [{label}]: {e}")
                blocks.append(error_marker(label, str(e)))

    return "\n\n".join(blocks)
