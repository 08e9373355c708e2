from __future__ import annotations
import logging
from pathlib import Path
import sys
from typing import Optional
import click
from . import CLASSES
from .bases import DEFAULT_QUEUE_SIZE, default_workers
from .profiling import cpu_profile
from .records import SinkError
from .report import RunReport, append_report
from .sinks import BufferedSink, DigestSink, StreamSink
from .walk import TraversalError

log = logging.getLogger("sha256all")


@click.command()
@click.option(
    "-b",
    "--buffer",
    "buffer_results",
    is_flag=True,
    help="Hold digest lines in memory and print them once the run finishes",
)
@click.option(
    "--cpuprofile",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write a cProfile capture of the run to this file",
)
@click.option(
    "-I",
    "--implementation",
    type=click.Choice(list(CLASSES)),
    default="threads",
    show_default=True,
    help="How to run the walker & digest workers",
)
@click.option(
    "-Q",
    "--queue-size",
    type=int,
    default=DEFAULT_QUEUE_SIZE,
    show_default=True,
    help="Maximum number of paths waiting for a worker (0 = no limit)",
)
@click.option(
    "-R",
    "--report",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Append a report as a line of JSON to this file",
)
@click.option(
    "-T",
    "--workers",
    type=click.IntRange(min=1),
    help="Number of digest workers  [default: half the number of CPUs]",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase logging verbosity.  Repeat option for more logs.",
)
@click.argument(
    "root",
    type=click.Path(exists=True, path_type=Path),
    default=".",
    required=False,
)
def main(
    root: Path,
    buffer_results: bool,
    cpuprofile: Optional[Path],
    implementation: str,
    queue_size: int,
    report: Optional[Path],
    workers: Optional[int],
    verbose: int,
) -> None:
    """Print the SHA-256 digest of every file under ROOT"""
    if verbose == 0:
        log_level = logging.WARNING
    elif verbose == 1:
        log_level = logging.INFO
    elif verbose == 2:
        log_level = logging.DEBUG
    else:
        log_level = 1
    logging.basicConfig(format="%(asctime)s %(levelname)s %(message)s", level=log_level)
    sink: DigestSink
    if buffer_results:
        sink = BufferedSink(sys.stdout)
    else:
        sink = StreamSink(sys.stdout)
    if workers is None:
        workers = default_workers()
    pipeline = CLASSES[implementation](
        sink=sink, workers=workers, queue_size=queue_size
    )
    log.debug("Using %s implementation, queue size %d", implementation, queue_size)
    try:
        with cpu_profile(cpuprofile):
            summary = pipeline.run(root)
    except (SinkError, TraversalError) as e:
        raise click.ClickException(str(e))
    finally:
        try:
            sink.flush()
        except (OSError, ValueError) as e:
            log.error("Could not flush results: %s", e)
    click.echo(str(summary), err=True)
    if report is not None:
        append_report(
            report,
            RunReport(
                root=str(root),
                implementation=implementation,
                workers=summary.workers,
                queue_size=queue_size,
                elapsed=summary.elapsed,
            ),
        )


if __name__ == "__main__":
    main()
