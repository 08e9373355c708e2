from __future__ import annotations
from abc import ABC, abstractmethod
from threading import Lock
from typing import List, TextIO
from .records import DigestFailure, DigestResult, Record


class DigestSink(ABC):
    """
    Destination for the records produced by digest workers.  `emit()` may be
    called concurrently from several threads.
    """

    @abstractmethod
    def emit(self, record: Record) -> None:
        ...

    def flush(self) -> None:
        pass


class StreamSink(DigestSink):
    """Writes each record to a text stream as soon as it is emitted"""

    def __init__(self, fp: TextIO) -> None:
        self.fp = fp
        self._lock = Lock()

    def emit(self, record: Record) -> None:
        line = record.format()
        with self._lock:
            print(line, file=self.fp)

    def flush(self) -> None:
        with self._lock:
            self.fp.flush()


class BufferedSink(DigestSink):
    """
    Holds formatted records in memory and only writes them to the stream when
    `flush()` is called
    """

    def __init__(self, fp: TextIO) -> None:
        self.fp = fp
        self._lock = Lock()
        self._lines: List[str] = []

    def emit(self, record: Record) -> None:
        line = record.format()
        with self._lock:
            self._lines.append(line)

    def flush(self) -> None:
        with self._lock:
            lines, self._lines = self._lines, []
        for ln in lines:
            print(ln, file=self.fp)
        self.fp.flush()


class CollectingSink(DigestSink):
    def __init__(self) -> None:
        self._lock = Lock()
        self.records: List[Record] = []

    def emit(self, record: Record) -> None:
        with self._lock:
            self.records.append(record)

    @property
    def results(self) -> List[DigestResult]:
        with self._lock:
            return [r for r in self.records if isinstance(r, DigestResult)]

    @property
    def failures(self) -> List[DigestFailure]:
        with self._lock:
            return [r for r in self.records if isinstance(r, DigestFailure)]
