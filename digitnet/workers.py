"""A fixed pool of worker threads, each owning private state."""
from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

S = TypeVar("S")
T = TypeVar("T")

Job = Callable[[S], Optional[T]]

_TERMINATE = object()


class WorkerError(RuntimeError):
    """Raised by ``WorkerPool.collect`` when a job failed inside a worker."""


@dataclass
class _Failure:
    worker: str
    error: BaseException


class WorkerPool(Generic[S, T]):
    """Run jobs on ``size`` threads that share one FIFO job queue.

    Every worker gets its own state from ``state_factory``; a job is called with
    that state and may return a result, which is placed on the shared result
    queue. Returning ``None`` produces no result.
    """

    def __init__(self, size: int, state_factory: Callable[[], S], name: str = "worker") -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        self._jobs: queue.Queue = queue.Queue()
        self._results: queue.Queue = queue.Queue()
        self._broken = threading.Event()
        self._closed = False
        self._threads: list[threading.Thread] = []
        for idx in range(size):
            thread = threading.Thread(
                target=self._run,
                args=(state_factory(),),
                name=f"{name}-{idx}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        logger.debug("Started %d %s threads", size, name)

    def _run(self, state: S) -> None:
        while True:
            job = self._jobs.get()
            if job is _TERMINATE:
                break
            try:
                result = job(state)
            except Exception as exc:
                self._broken.set()
                self._results.put(_Failure(threading.current_thread().name, exc))
                break
            if result is not None:
                self._results.put(result)

    def submit(self, job: Job) -> None:
        if self._closed:
            raise RuntimeError("cannot submit jobs to a pool that has been shut down")
        if self._broken.is_set():
            raise WorkerError("a worker has failed; the pool accepts no more jobs")
        self._jobs.put(job)

    def collect(self, count: int) -> list[T]:
        """Block until ``count`` results have arrived and return them in arrival order."""
        results: list[T] = []
        for _ in range(count):
            item = self._results.get()
            if isinstance(item, _Failure):
                raise WorkerError(f"job failed in {item.worker}: {item.error!r}") from item.error
            results.append(item)
        return results

    def shutdown(self) -> None:
        """Send one terminate signal per worker and wait for every thread to exit."""
        if self._closed:
            return
        self._closed = True
        for _ in self._threads:
            self._jobs.put(_TERMINATE)
        for thread in self._threads:
            thread.join()
        logger.debug("Stopped %d worker threads", len(self._threads))

    def __enter__(self) -> "WorkerPool[S, T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
