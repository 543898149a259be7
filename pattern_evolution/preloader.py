"""
pattern_evolution/preloader.py - Bounded background producer for expensive resources
"""
import logging
import queue
import threading
from abc import ABC, abstractmethod
from typing import Any, Optional

logger = logging.getLogger(__name__)

PUT_POLL_SECONDS = 0.05
GET_POLL_SECONDS = 0.1
JOIN_TIMEOUT_SECONDS = 5.0


class Generator(ABC):
    """Produces one item per call; must not raise for expected failures"""

    @abstractmethod
    def generate(self) -> Any:
        pass


class Preloader:
    """One worker thread keeps a bounded FIFO of generated items topped up"""

    def __init__(self, capacity: int, generator: Generator, name: str = 'preloader'):
        if capacity < 1:
            raise ValueError(f"Preloader capacity must be at least 1, got {capacity}")

        self.capacity = capacity
        self.generator = generator
        self._queue = queue.Queue(maxsize=capacity)
        self._running = threading.Event()
        self._running.set()
        self._closed = False
        self._worker = threading.Thread(target=self._work, name=name, daemon=True)
        self._worker.start()

    def _work(self):
        while self._running.is_set():
            try:
                item = self.generator.generate()
            except Exception:
                logger.exception("Generator %r failed, stopping worker", self.generator)
                return

            while self._running.is_set():
                try:
                    self._queue.put(item, timeout=PUT_POLL_SECONDS)
                    break
                except queue.Full:
                    continue

    @property
    def running(self) -> bool:
        return self._running.is_set() and self._worker.is_alive()

    def get_next(self) -> Any:
        """Block until an item is available"""
        while True:
            try:
                return self._queue.get(timeout=GET_POLL_SECONDS)
            except queue.Empty:
                if not self._worker.is_alive():
                    raise RuntimeError("Preloader worker has stopped")

    def try_get_next(self) -> Optional[Any]:
        """Return an item if one is ready, otherwise None"""
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None

    def close(self, timeout: float = JOIN_TIMEOUT_SECONDS) -> None:
        if self._closed:
            return
        self._closed = True
        self._running.clear()

        # Free one slot so a worker blocked in put() can observe the flag
        try:
            self._queue.get_nowait()
        except queue.Empty:
            pass

        self._worker.join(timeout)
        if self._worker.is_alive():
            logger.warning("Preloader worker did not stop within %.1fs", timeout)

    def __enter__(self) -> 'Preloader':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
