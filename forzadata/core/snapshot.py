# core/snapshot.py
import threading


class SnapshotStore:
    """Single-slot holder for the latest published snapshot string."""

    def __init__(self):
        self._lock = threading.Lock()
        self._text = ""
        self._count = 0

    def publish(self, text: str):
        with self._lock:
            self._text = text
            self._count += 1

    def get(self) -> str:
        with self._lock:
            return self._text

    @property
    def count(self) -> int:
        with self._lock:
            return self._count


class SnapshotSink:
    def __init__(self, store: SnapshotStore):
        self.store = store

    def emit(self, frame):
        self.store.publish(frame.to_snapshot())

    def close(self):
        pass
