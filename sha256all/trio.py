from __future__ import annotations
import logging
import math
from typing import List
import trio
from .bases import DigestPipeline
from .digester import FileDigester
from .walk import TraversalError

log = logging.getLogger(__name__)


class TrioPipeline(DigestPipeline):
    """
    Runs the walker and the digesters as tasks in a single trio nursery,
    connected by a memory channel that holds up to ``queue_size`` paths
    """

    def drain(self, root: str) -> None:
        digesters = self.digesters()
        errors = trio.run(self.async_drain, root, digesters)
        if errors:
            raise errors[0]
        self.check_sinks(digesters)

    async def async_drain(
        self, root: str, digesters: List[FileDigester]
    ) -> List[TraversalError]:
        errors: List[TraversalError] = []
        bufsize = self.queue_size if self.queue_size > 0 else math.inf
        async with trio.open_nursery() as nursery:
            sender, receiver = trio.open_memory_channel(bufsize)
            nursery.start_soon(self.async_walk, root, sender, errors)
            async with receiver:
                for d in digesters:
                    nursery.start_soon(self.async_worker, d, receiver.clone())
        log.debug("Walker and %d workers for %s have finished", self.workers, root)
        return errors

    async def async_walk(
        self,
        root: str,
        sender: trio.MemorySendChannel[str],
        errors: List[TraversalError],
    ) -> None:
        # Closing the sender is what tells the workers to stop, so it has to
        # happen whether or not the walk succeeds.
        async with sender:
            try:
                # Directory listings are blocking calls; step the walk in a
                # worker thread to keep them off the event loop.
                paths = iter(self.walk(root))
                while True:
                    path = await trio.to_thread.run_sync(next, paths, None)
                    if path is None:
                        break
                    await sender.send(path)
            except TraversalError as e:
                errors.append(e)

    async def async_worker(
        self, digester: FileDigester, receiver: trio.MemoryReceiveChannel[str]
    ) -> None:
        n = 0
        async with receiver:
            async for path in receiver:
                digester.deliver(await digester.async_digest(path))
                n += 1
        log.debug("Worker %d finished after %d files", digester.worker_id, n)
