# devscript/__init__.py
"""devscript: compile .dev prompt scripts, call an LLM, and apply the files it returns."""

__version__ = "0.1.0"
