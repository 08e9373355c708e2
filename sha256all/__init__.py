"""
Compute the SHA-256 digest of every file in a directory tree

A single walker discovers files and hands their paths to a fixed pool of
digest workers through a bounded queue; each worker reports a digest (or a
failure) for every path it receives to a `DigestSink`.
"""

from .bases import DEFAULT_QUEUE_SIZE, DigestPipeline, RunSummary, default_workers
from .digester import DIGEST_BLOCK_SIZE, FileDigester
from .interleaved import InterleavePipeline
from .jobqueue import QueueClosed, WorkQueue
from .records import DigestFailure, DigestResult, Record, SinkError, display_path
from .sinks import BufferedSink, CollectingSink, DigestSink, StreamSink
from .threads import ThreadedPipeline
from .trio import TrioPipeline
from .walk import TraversalError, iter_files

__version__ = "0.1.0"

CLASSES = {
    "threads": ThreadedPipeline,
    "interleave": InterleavePipeline,
    "trio": TrioPipeline,
}

__all__ = [
    "BufferedSink",
    "CLASSES",
    "CollectingSink",
    "DEFAULT_QUEUE_SIZE",
    "DIGEST_BLOCK_SIZE",
    "DigestFailure",
    "DigestPipeline",
    "DigestResult",
    "DigestSink",
    "FileDigester",
    "InterleavePipeline",
    "QueueClosed",
    "Record",
    "RunSummary",
    "SinkError",
    "StreamSink",
    "ThreadedPipeline",
    "TraversalError",
    "TrioPipeline",
    "WorkQueue",
    "default_workers",
    "display_path",
    "iter_files",
]
