# devscript/script/parser.py
"""
Line-oriented parser for the .dev script language.

Each line is classified by its leading tag token (@role, @rule, ...).
@task switches into capture mode: following lines are kept verbatim until a
line whose stripped form starts with "@", which is then handled as a normal
tag line. Unknown tags and untagged lines are ignored.
"""

import logging

from .types import LIST_TAGS, SCALAR_TAGS, TAG_SIGIL, TASK_TAG, ScriptSpec

logger = logging.getLogger(__name__)


def _split_tag(stripped: str) -> tuple[str, str]:
    """Split '@tag remainder' into (lowercased tag, stripped remainder)."""
    parts = stripped.split(None, 1)
    remainder = parts[1].strip() if len(parts) > 1 else ""
    return parts[0].lower(), remainder


def _finish_task(spec: ScriptSpec, captured: list[str]) -> None:
    # Blank lines framing the body separate it from the surrounding tags
    while captured and not captured[-1].strip():
        captured.pop()
    while captured and not captured[0].strip():
        captured.pop(0)
    if not captured:
        return
    body = "\n".join(captured)
    spec.task = f"{spec.task}\n{body}" if spec.task else body


def parse_script(raw_text: str) -> ScriptSpec:
    """
    Parse raw script text into a ScriptSpec.

    Never raises; malformed or unrecognized lines are skipped.

    Args:
        raw_text: Script file content

    Returns:
        ScriptSpec with every field populated (empty when not declared)
    """
    spec = ScriptSpec()
    captured: list[str] | None = None

    for line in raw_text.splitlines():
        stripped = line.strip()

        if captured is not None:
            if not stripped.startswith(TAG_SIGIL):
                captured.append(line)
                continue
            _finish_task(spec, captured)
            captured = None

        if not stripped.startswith(TAG_SIGIL):
            continue

        tag, remainder = _split_tag(stripped)

        if tag == TASK_TAG:
            captured = [remainder] if remainder else []
        elif tag in SCALAR_TAGS:
            setattr(spec, SCALAR_TAGS[tag], remainder)
        elif tag in LIST_TAGS:
            if remainder:
                getattr(spec, LIST_TAGS[tag]).append(remainder)
        else:
            logger.debug(f"Ignoring unknown tag {tag!r}")

    if captured is not None:
        _finish_task(spec, captured)

    return spec
