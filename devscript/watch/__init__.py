# devscript/watch/__init__.py
"""Watch mode: debounced single-flight re-runs on script changes."""

from .loop import FileEvent, WatchdogBridge, WatchLoop, WatchState, watch_directory

__all__ = ["FileEvent", "WatchLoop", "WatchState", "WatchdogBridge", "watch_directory"]
