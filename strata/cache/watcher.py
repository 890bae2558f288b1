"""
Strata Cache - File Watcher

Polls dependency files and reports changes.

Each watch records the file's signature at registration time. A daemon
thread re-reads signatures every ``poll_interval`` seconds; when a file is
modified, deleted or becomes unreadable its watch is dropped and the
callback fires once, on the watcher thread.
"""

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from .retention import FileSignature, file_signature

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[str], None]


@dataclass(eq=False)
class WatchHandle:
    """Registration returned by ``FileWatcher.watch``; pass it back to ``unwatch``."""

    path: str
    signature: FileSignature | None
    on_change: ChangeCallback = field(repr=False)
    id: int = 0


class FileWatcher:
    """Polling file-change monitor."""

    def __init__(self, poll_interval: float = 1.0, name: str = "strata-file-watcher"):
        self.poll_interval = poll_interval
        self.name = name

        self._handles: dict[int, WatchHandle] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def watched_count(self) -> int:
        with self._lock:
            return len(self._handles)

    def watch(self, path: str, on_change: ChangeCallback, signature: FileSignature | None = None) -> WatchHandle:
        """
        Start watching ``path``.

        Args:
            path: File to watch
            on_change: Called with ``path`` once the file changes
            signature: Baseline to compare against (default: current signature)

        Returns:
            Handle identifying this registration
        """
        if signature is None:
            signature = file_signature(path)

        with self._lock:
            if self._stop.is_set():
                raise RuntimeError("FileWatcher is closed")
            handle = WatchHandle(path=path, signature=signature, on_change=on_change, id=next(self._ids))
            self._handles[handle.id] = handle
            self._ensure_thread()

        logger.debug("Watching file %s", path, extra={"path": path, "watch_id": handle.id})
        return handle

    def unwatch(self, handle: WatchHandle) -> None:
        """Stop watching. Unknown or already-fired handles are ignored."""
        with self._lock:
            self._handles.pop(handle.id, None)

    def check_now(self) -> list[WatchHandle]:
        """
        Run one polling pass synchronously.

        Returns:
            The handles whose files changed (their callbacks have been invoked)
        """
        with self._lock:
            candidates = list(self._handles.values())

        changed = [handle for handle in candidates if file_signature(handle.path) != handle.signature]
        if not changed:
            return []

        fired: list[WatchHandle] = []
        with self._lock:
            for handle in changed:
                # Lost a race with unwatch()
                if self._handles.pop(handle.id, None) is not None:
                    fired.append(handle)

        # Callbacks run without the lock held; they may call back into unwatch()
        for handle in fired:
            logger.debug("Dependency file changed: %s", handle.path, extra={"path": handle.path, "watch_id": handle.id})
            try:
                handle.on_change(handle.path)
            except Exception as e:
                logger.warning(
                    f"File change callback failed for {handle.path}: {e}",
                    extra={"path": handle.path, "watch_id": handle.id, "error": str(e)},
                    exc_info=True,
                )
        return fired

    def _ensure_thread(self) -> None:
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
            self._thread.start()

    def _run(self) -> None:
        while not self._stop.wait(self.poll_interval):
            self.check_now()

    def close(self) -> None:
        """Stop the polling thread and drop every watch. Idempotent."""
        with self._lock:
            self._stop.set()
            self._handles.clear()
            thread = self._thread
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=max(self.poll_interval * 2, 1.0))
        logger.debug("File watcher closed", extra={"watcher": self.name})
