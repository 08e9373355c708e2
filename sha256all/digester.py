from __future__ import annotations
from dataclasses import dataclass, field
from hashlib import sha256
import logging
from typing import TYPE_CHECKING, Iterable, Iterator, Optional
import trio
from .records import DigestFailure, DigestResult, Record, SinkError

if TYPE_CHECKING:
    from .sinks import DigestSink

DIGEST_BLOCK_SIZE = 1 << 16

log = logging.getLogger(__name__)


@dataclass
class FileDigester:
    """
    A single worker: computes the SHA-256 digest of each path it is given and
    reports the outcome to ``sink``.  Errors opening or reading a file are
    reported as `DigestFailure` records and never stop the worker.

    If the sink fails, the error is kept in ``sink_error``, nothing more is
    sent to the sink, and the worker goes on pulling paths until its input is
    exhausted so that the producer is never left blocked on a full queue.
    """

    worker_id: int
    sink: DigestSink
    sink_error: Optional[SinkError] = field(default=None, init=False, compare=False)

    def digest(self, path: str) -> Record:
        dgst = sha256()
        try:
            fp = open(path, "rb")
        except OSError as e:
            log.debug("Worker %d: error opening %s: %s", self.worker_id, path, e)
            return DigestFailure(self.worker_id, path, "open", e)
        with fp:
            try:
                while True:
                    block = fp.read(DIGEST_BLOCK_SIZE)
                    if not block:
                        break
                    dgst.update(block)
            except OSError as e:
                log.debug("Worker %d: error reading %s: %s", self.worker_id, path, e)
                return DigestFailure(self.worker_id, path, "read", e)
        return DigestResult(self.worker_id, dgst.digest(), path)

    async def async_digest(self, path: str) -> Record:
        dgst = sha256()
        try:
            fp = await trio.open_file(path, "rb")
        except OSError as e:
            log.debug("Worker %d: error opening %s: %s", self.worker_id, path, e)
            return DigestFailure(self.worker_id, path, "open", e)
        async with fp:
            try:
                while True:
                    blob = await fp.read(DIGEST_BLOCK_SIZE)
                    if not blob:
                        break
                    dgst.update(blob)
            except OSError as e:
                log.debug("Worker %d: error reading %s: %s", self.worker_id, path, e)
                return DigestFailure(self.worker_id, path, "read", e)
        return DigestResult(self.worker_id, dgst.digest(), path)

    def iter_digests(self, paths: Iterable[str]) -> Iterator[Record]:
        for p in paths:
            yield self.digest(p)

    def deliver(self, rec: Record) -> None:
        if self.sink_error is not None:
            return
        try:
            self.sink.emit(rec)
        except (OSError, ValueError) as e:
            log.error("Worker %d: could not write result: %s", self.worker_id, e)
            self.sink_error = SinkError(rec.path, e)

    def run(self, paths: Iterable[str]) -> None:
        n = 0
        for rec in self.iter_digests(paths):
            self.deliver(rec)
            n += 1
        log.debug("Worker %d finished after %d files", self.worker_id, n)
