# devscript/watch/loop.py
"""
Debounced, single-flight re-execution on script changes.

File events arrive through an asyncio.Queue. Each qualifying event
(re)arms a debounce timer; when the timer fires the loop either starts a run
(Idle -> Running) or, if a run is still in flight, drops the trigger. Runs
are never queued or overlapped, so only one pipeline pass writes to the
working tree at a time.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)

MODIFIED = "modified"


class WatchState(Enum):
    """Watch loop states."""

    IDLE = "idle"
    RUNNING = "running"


@dataclass(frozen=True)
class FileEvent:
    """A filesystem change notification."""

    path: Path
    event_type: str


class WatchLoop:
    """
    Explicit Idle/Running state machine fed by an event queue.

    Attributes:
        events:           Event channel; use submit() or put events directly
        state:            Current WatchState
        runs_started:     Triggers that started a run
        runs_completed:   Runs that finished (successfully or not)
        dropped_triggers: Triggers discarded because a run was in flight
    """

    def __init__(
        self,
        action: Callable[[], Awaitable[Any]],
        root: str | Path,
        extension: str = ".dev",
        debounce: float = 0.5,
    ) -> None:
        """
        Args:
            action:    Coroutine function executing one pipeline pass
            root:      Watched directory
            extension: Script extension that qualifies (e.g. ".dev")
            debounce:  Quiet period in seconds before a trigger fires
        """
        self._action = action
        self.root = Path(root).resolve()
        self.extension = extension
        self.debounce = debounce

        self.events: asyncio.Queue[FileEvent | None] = asyncio.Queue()
        self.state = WatchState.IDLE
        self.runs_started = 0
        self.runs_completed = 0
        self.dropped_triggers = 0

        self._timer: asyncio.TimerHandle | None = None
        self._current: asyncio.Task | None = None

    def is_qualifying(self, event: FileEvent) -> bool:
        """Content change of a script file directly or indirectly under root."""
        if event.event_type != MODIFIED or event.path.suffix != self.extension:
            return False
        try:
            event.path.resolve().relative_to(self.root)
        except ValueError:
            return False
        return True

    def submit(self, event: FileEvent) -> None:
        self.events.put_nowait(event)

    def stop(self) -> None:
        """Ask run() to return after the in-flight run (if any) finishes."""
        self.events.put_nowait(None)

    async def run(self) -> None:
        """Consume events until stop() is called."""
        logger.info(f"Watching {self.root} for *{self.extension} changes")
        try:
            while (event := await self.events.get()) is not None:
                if self.is_qualifying(event):
                    logger.debug(f"Change detected: {event.path}")
                    self._arm()
        finally:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if self._current is not None:
                await asyncio.gather(self._current, return_exceptions=True)

    def _arm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(self.debounce, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self.state is WatchState.RUNNING:
            self.dropped_triggers += 1
            logger.info("Change ignored: a run is already in progress")
            return

        self.state = WatchState.RUNNING
        self.runs_started += 1
        self._current = asyncio.create_task(self._execute())

    async def _execute(self) -> None:
        try:
            await self._action()
        except Exception:
            logger.exception("Watch run failed")
        finally:
            self.state = WatchState.IDLE
            self.runs_completed += 1


class WatchdogBridge(FileSystemEventHandler):
    """Forward watchdog observer-thread callbacks into a WatchLoop's queue."""

    def __init__(self, watch_loop: WatchLoop, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__()
        self._watch_loop = watch_loop
        self._loop = loop

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        raw = event.dest_path if event.event_type == "moved" else event.src_path
        file_event = FileEvent(path=Path(os.fsdecode(raw)), event_type=event.event_type)
        self._loop.call_soon_threadsafe(self._watch_loop.submit, file_event)


async def watch_directory(
    root: str | Path,
    action: Callable[[], Awaitable[Any]],
    extension: str = ".dev",
    debounce: float = 0.5,
    on_ready: Callable[[WatchLoop], None] | None = None,
) -> None:
    """
    Watch root (non-recursive) with watchdog and drive a WatchLoop.

    Runs until cancelled or until the WatchLoop is stopped.
    """
    loop = asyncio.get_running_loop()
    watch_loop = WatchLoop(action, root, extension=extension, debounce=debounce)

    observer = Observer()
    observer.schedule(WatchdogBridge(watch_loop, loop), str(watch_loop.root), recursive=False)
    observer.start()
    if on_ready is not None:
        on_ready(watch_loop)
    try:
        await watch_loop.run()
    finally:
        observer.stop()
        await asyncio.to_thread(observer.join)
