# devscript/prompts/__init__.py
"""Prompt template loading utilities."""

from pathlib import Path


def load_prompt(name: str) -> str:
    """Load a prompt template by name.

    Args:
        name: Template filename without .txt extension (e.g. 'response_format')

    Returns:
        Template content as string

    Raises:
        FileNotFoundError: If the template file doesn't exist
    """
    prompt_path = Path(__file__).parent / f"{name}.txt"
    if not prompt_path.exists():
        raise FileNotFoundError(f"Prompt not found: {prompt_path}")

    return prompt_path.read_text(encoding="utf-8")


__all__ = ["load_prompt"]
