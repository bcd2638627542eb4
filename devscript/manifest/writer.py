# devscript/manifest/writer.py
"""
Manifestation: extract <file path="..."> blocks from a response and write them.

Grammar: <file path="PATH">BODY</file>, path single- or double-quoted, tag
name case-insensitive, PATH on one line, BODY non-greedy up to the first
closing </file> and never containing another <file opener.
Blocks are taken left to right without overlap. A block with an empty path
or an empty (stripped) body is skipped. Every other block yields exactly one
FileWriteResult, in order; a failed write never stops the following ones.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_FILE_BLOCK_RE = re.compile(
    r"""<file\s+path\s*=\s*(?P<quote>["'])(?P<path>(?:(?!(?P=quote))[^<>\n])*)(?P=quote)\s*>(?P<body>(?:(?!<file\s).)*?)</file\s*>""",
    re.IGNORECASE | re.DOTALL,
)


@dataclass
class FileBlock:
    """One syntactically valid block from the response."""

    path: str
    body: str


@dataclass
class FileWriteResult:
    """Outcome of writing one block."""

    path: str
    success: bool
    error_message: str | None = None


def extract_file_blocks(response_text: str) -> list[FileBlock]:
    """
    Find all valid file blocks in appearance order.

    Unterminated blocks never match; blocks with an empty path or body are
    logged and skipped.
    """
    blocks = []
    for match in _FILE_BLOCK_RE.finditer(response_text):
        path = match.group("path").strip()
        body = match.group("body").strip()
        if not path or not body:
            logger.warning(
                f"Skipping invalid file block at offset {match.start()}: "
                f"{'empty path' if not path else f'empty content for {path}'}"
            )
            continue
        blocks.append(FileBlock(path=path, body=body))
    return blocks


def _resolve_target(base: Path, rel_path: str) -> Path:
    target = (base / rel_path).resolve()
    try:
        target.relative_to(base)
    except ValueError:
        raise ValueError(f"Path escapes the working directory: {rel_path}") from None
    return target


def write_block(block: FileBlock, base_dir: Path) -> FileWriteResult:
    """Create parent directories and overwrite the target file with the block body."""
    try:
        target = _resolve_target(base_dir.resolve(), block.path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(block.body, encoding="utf-8")
    except (OSError, ValueError) as e:
        logger.error(f"Failed to apply: {block.path} - {e}")
        return FileWriteResult(path=block.path, success=False, error_message=str(e))

    logger.info(f"Applied: {block.path}")
    return FileWriteResult(path=block.path, success=True)


def apply_changes(response_text: str, base_dir: str | Path | None = None) -> list[FileWriteResult]:
    """
    Write every valid file block of a response to disk.

    Args:
        response_text: Raw provider response
        base_dir:      Directory relative paths resolve against (default: cwd)

    Returns:
        One FileWriteResult per valid block, in appearance order
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    results = [write_block(block, base) for block in extract_file_blocks(response_text)]

    failed = sum(1 for r in results if not r.success)
    logger.info(f"Manifested {len(results)} file(s): {len(results) - failed} succeeded, {failed} failed")
    return results
