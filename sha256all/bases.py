from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
from time import perf_counter
from typing import TYPE_CHECKING, Iterator, List, Optional, Union
from .digester import FileDigester
from .jobqueue import WorkQueue
from .records import SinkError
from .walk import TraversalError, iter_files

if TYPE_CHECKING:
    from .sinks import DigestSink

DEFAULT_QUEUE_SIZE = 16

log = logging.getLogger(__name__)


def default_workers(cpus: Optional[int] = None) -> int:
    """Half of the available CPUs, but never fewer than one"""
    if cpus is None:
        cpus = os.cpu_count() or 1
    return max(1, cpus // 2)


@dataclass(frozen=True)
class RunSummary:
    workers: int
    elapsed: float

    def __str__(self) -> str:
        return f"workers={self.workers}; t={self.elapsed:.6f}s"


@dataclass
class DigestPipeline(ABC):
    """
    Walks a directory tree in one producer and digests the files it finds in
    ``workers`` concurrent digesters, connected by a bounded work queue.
    Subclasses decide what the producer and the digesters run on; this class
    owns the participants' construction and the run's timing.
    """

    sink: DigestSink
    workers: int = field(default_factory=default_workers)
    queue_size: int = DEFAULT_QUEUE_SIZE

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")

    @abstractmethod
    def drain(self, root: str) -> None:
        """
        Run the producer and all digesters against ``root`` and return once
        every one of them has finished.  Raises `TraversalError` if the walk
        failed, or the first `SinkError` hit by a digester.
        """
        ...

    def run(self, root: Union[str, Path]) -> RunSummary:
        root = os.fspath(root)
        log.info("Digesting files under %s with %d workers", root, self.workers)
        start = perf_counter()
        self.drain(root)
        summary = RunSummary(workers=self.workers, elapsed=perf_counter() - start)
        log.info("Finished %s: %s", root, summary)
        return summary

    def new_queue(self) -> WorkQueue[str]:
        return WorkQueue(self.queue_size)

    def walk(self, root: str) -> Iterator[str]:
        return iter_files(root)

    def digesters(self) -> List[FileDigester]:
        return [FileDigester(worker_id=i, sink=self.sink) for i in range(self.workers)]

    @staticmethod
    def check_sinks(digesters: List[FileDigester]) -> None:
        for d in digesters:
            if d.sink_error is not None:
                raise d.sink_error

    def produce(self, root: str, queue: WorkQueue[str]) -> None:
        """
        Push every file under ``root`` onto ``queue``, then close it.  The
        queue is closed even if the walk fails.
        """
        n = 0
        try:
            for path in self.walk(root):
                queue.put(path)
                n += 1
        except TraversalError:
            log.debug("Walk of %s failed after %d files", root, n)
            raise
        finally:
            queue.close()
        log.debug("Walk of %s queued %d files", root, n)


__all__ = [
    "DEFAULT_QUEUE_SIZE",
    "DigestPipeline",
    "RunSummary",
    "SinkError",
    "TraversalError",
    "default_workers",
]
