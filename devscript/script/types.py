# devscript/script/types.py
"""Script data model shared by the parser, aggregator and prompt builder."""

from dataclasses import dataclass, field

TAG_SIGIL = "@"

# Scalar tags overwrite their field, list tags append to theirs.
SCALAR_TAGS = {
    "@role": "role",
    "@vibe": "vibe",
    "@format": "response_format_override",
    "@limit": "limitation",
}
LIST_TAGS = {
    "@tech": "tech_stack",
    "@rule": "rules",
    "@not": "negative_constraints",
    "@guard": "guards",
    "@test": "test_assertions",
    "@use": "context_references",
}
TASK_TAG = "@task"

DEFAULT_ROLE = "Senior Software Engineer"
DEFAULT_VIBE = "Stoic, concise, professional"


@dataclass
class ScriptSpec:
    """
    Parsed content of one script file, or the merge of several (master spec).

    Absent values are empty strings / empty lists, never None. Display
    defaults (DEFAULT_ROLE, DEFAULT_VIBE) are applied when the prompt is built,
    so an empty field always means "not declared".
    """

    role: str = ""
    vibe: str = ""
    tech_stack: list[str] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)
    negative_constraints: list[str] = field(default_factory=list)
    guards: list[str] = field(default_factory=list)
    response_format_override: str = ""
    limitation: str = ""
    test_assertions: list[str] = field(default_factory=list)
    context_references: list[str] = field(default_factory=list)
    task: str = ""


# The aggregator's output has the same shape.
MasterSpec = ScriptSpec
