from __future__ import annotations
import logging
import threading
from typing import List
from .bases import DigestPipeline
from .walk import TraversalError

log = logging.getLogger(__name__)


class ThreadedPipeline(DigestPipeline):
    def drain(self, root: str) -> None:
        queue = self.new_queue()
        errors: List[TraversalError] = []

        def producer() -> None:
            try:
                self.produce(root, queue)
            except TraversalError as e:
                errors.append(e)

        threads = [
            threading.Thread(
                target=producer, name=f"sha256all.walk {root}", daemon=True
            )
        ]
        digesters = self.digesters()
        threads.extend(
            threading.Thread(
                target=d.run,
                args=(queue,),
                name=f"sha256all.digest {d.worker_id} {root}",
                daemon=True,
            )
            for d in digesters
        )
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        log.debug("Walker and %d workers for %s have finished", self.workers, root)
        if errors:
            raise errors[0]
        self.check_sinks(digesters)
