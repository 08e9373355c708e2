from __future__ import annotations
import logging
from typing import Iterator
from interleave import FINISH_ALL, interleave
from .bases import DigestPipeline
from .jobqueue import WorkQueue
from .records import Record

log = logging.getLogger(__name__)


class InterleavePipeline(DigestPipeline):
    """
    Runs the walker and the digesters as iterators in a thread pool via
    `interleave`, emitting their records to the sink from the calling thread
    """

    def drain(self, root: str) -> None:
        queue = self.new_queue()
        iterators = [self.producer(root, queue)]
        digesters = self.digesters()
        iterators.extend(d.iter_digests(queue) for d in digesters)
        # Every iterator needs its own thread, or else the walker may never
        # get scheduled while the digesters wait on the queue
        with interleave(
            iterators,
            max_workers=len(iterators),
            onerror=FINISH_ALL,
        ) as it:
            for rec in it:
                # A failing sink must not stop this loop, or the digesters
                # stop pulling from the queue and the walker blocks forever
                digesters[rec.worker_id].deliver(rec)
        log.debug("Walker and %d workers for %s have finished", self.workers, root)
        self.check_sinks(digesters)

    def producer(self, root: str, queue: WorkQueue[str]) -> Iterator[Record]:
        self.produce(root, queue)
        yield from ()
