# devscript/prompts/builder.py
"""
Deterministic assembly of the final instruction prompt.

Pure function of (MasterSpec, hydrated context). Section order is fixed:
role, tone, project context, guards (optional), forbidden patterns,
validation checks (optional), constraints, objective, response format.
The <file path="..."> response contract is always present.
"""

from devscript.script.types import DEFAULT_ROLE, DEFAULT_VIBE, MasterSpec

from . import load_prompt

DEFAULT_FORBIDDEN = [
    "Do not use `any` or other unsafe-typed escape hatches.",
    "Do not write deeply nested conditionals; prefer early returns.",
    "Do not include conversational filler, greetings or apologies.",
]
DEFAULT_RULE = "Write clean, maintainable, idiomatic code that follows the project's existing conventions."
DEFAULT_TASK = "Analyze the provided project context and advise on the most valuable improvements."
EMPTY_CONTEXT = "No project context was provided."


def _bullets(items: list[str]) -> str:
    return "\n".join(f"- {item}" for item in items)


def _section(title: str, body: str) -> str:
    return f"# {title}\n{body}"


def build_prompt(spec: MasterSpec, hydrated_context: str) -> str:
    """
    Render the master spec and hydrated context into one prompt string.

    Args:
        spec:             Aggregated MasterSpec
        hydrated_context: Output of hydrate() (may be empty)

    Returns:
        The complete prompt text
    """
    sections = [
        _section("ROLE", f"Act as a {spec.role or DEFAULT_ROLE}."),
        _section("TONE", f"Respond in this tone: {spec.vibe or DEFAULT_VIBE}."),
        _section("PROJECT CONTEXT", hydrated_context.strip() or EMPTY_CONTEXT),
    ]

    if spec.guards:
        sections.append(_section(
            "ANTI-HALLUCINATION GUARDS",
            "Follow these directives strictly:\n" + _bullets(spec.guards),
        ))

    sections.append(_section(
        "FORBIDDEN PATTERNS",
        _bullets(DEFAULT_FORBIDDEN + spec.negative_constraints),
    ))

    if spec.test_assertions:
        sections.append(_section(
            "VALIDATION CHECKS",
            "The solution must satisfy these behavioral checks:\n"
            + _bullets(spec.test_assertions),
        ))

    rules = list(spec.rules)
    if spec.limitation:
        rules.append(f"Limitation: {spec.limitation}")
    sections.append(_section("CONSTRAINTS", _bullets(rules or [DEFAULT_RULE])))

    sections.append(_section("OBJECTIVE", spec.task.strip() or DEFAULT_TASK))

    response_format = load_prompt("response_format").strip()
    if spec.response_format_override:
        response_format = (
            f"Additional format constraint: {spec.response_format_override}\n\n"
            + response_format
        )
    sections.append(_section("RESPONSE FORMAT", response_format))

    return "\n\n".join(sections)
