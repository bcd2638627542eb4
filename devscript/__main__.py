# devscript/__main__.py
"""Allow running as `python -m devscript`."""

from devscript.cli import app

app()
