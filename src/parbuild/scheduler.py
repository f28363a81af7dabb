"""Job scheduler - splits compilation across parallel workers.

The source list is cut into J contiguous batches of N // J sources, where J is
the requested job count capped at N. The J batches run concurrently, one
thread each. The N % J sources left over form a remainder batch that runs on
the calling thread after every parallel batch has finished.

Example for sources [a.c, b.c, c.c] and -j 2:
    parallel:  worker-0 [a.c]   worker-1 [b.c]
    then:      remainder [c.c]
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence

from .callbacks import ProgressCallback
from .compiler import CancellationToken, CompilationWorker
from .config import BuildConfiguration
from .models import BatchResult, CompilationBatch, ScheduleResult
from .process import Invoker, run_command

logger = logging.getLogger(__name__)

JOBS_FLAGS = ("-j", "--jobs")


def resolve_jobs(requested: Optional[int], source_count: int) -> int:
    """Resolve the effective number of concurrent workers.

    Args:
        requested: Requested parallelism; None, zero and negative values mean 1
        source_count: Number of sources to compile

    Returns:
        min(requested, source_count), never less than 1
    """
    jobs = requested if requested is not None and requested > 0 else 1
    return max(1, min(jobs, source_count))


def parse_jobs(args: Sequence[str]) -> int:
    """Read the requested job count from "-j N" or "--jobs N".

    Args:
        args: Command-line arguments

    Returns:
        Requested job count; 1 when the flag is absent, has no value, or its
        value is not a positive integer
    """
    for index, arg in enumerate(args[:-1]):
        if arg in JOBS_FLAGS:
            try:
                jobs = int(args[index + 1])
            except ValueError:
                logger.debug(f"Ignoring invalid job count: {args[index + 1]!r}")
                return 1
            return jobs if jobs > 0 else 1
    return 1


def partition(
    sources: Sequence[str],
    objects: Sequence[Path],
    jobs: Optional[int],
) -> tuple[list[CompilationBatch], Optional[CompilationBatch]]:
    """Cut the source list into parallel batches and a remainder batch.

    Args:
        sources: Source paths
        objects: Object paths, one per source
        jobs: Requested parallelism

    Returns:
        Tuple of (parallel batches, remainder batch or None). Together they
        cover every index of sources exactly once, in order.

    Raises:
        ValueError: If sources and objects differ in length
    """
    if len(sources) != len(objects):
        raise ValueError(f"{len(sources)} sources but {len(objects)} objects")

    count = len(sources)
    if count == 0:
        return [], None

    workers = resolve_jobs(jobs, count)
    size = count // workers
    remaining = count % workers

    batches = [
        CompilationBatch(
            name=f"worker-{i}",
            sources=tuple(sources[i * size : (i + 1) * size]),
            objects=tuple(objects[i * size : (i + 1) * size]),
        )
        for i in range(workers)
    ]

    remainder = None
    if remaining:
        remainder = CompilationBatch(
            name="remainder",
            sources=tuple(sources[count - remaining :]),
            objects=tuple(objects[count - remaining :]),
        )
    return batches, remainder


class JobScheduler:
    """Runs compilation batches on a thread pool with fail-fast semantics.

    Args:
        config: Build configuration
        invoker: Runs a command and returns its exit status
        callback: Progress callback handed to every worker
    """

    def __init__(
        self,
        config: BuildConfiguration,
        invoker: Invoker = run_command,
        callback: Optional[ProgressCallback] = None,
    ):
        self.config = config
        self.worker = CompilationWorker(config, invoker=invoker, callback=callback)

    def schedule(self, sources: Sequence[str], objects: Sequence[Path], jobs: Optional[int] = 1) -> ScheduleResult:
        """Compile every source, blocking until all workers are done.

        Args:
            sources: Source paths
            objects: Object paths, one per source
            jobs: Requested parallelism

        Returns:
            ScheduleResult with one BatchResult per batch that ran

        Raises:
            CompilationError: If any compiler invocation failed. Raised only
                after every parallel worker has stopped; the remainder batch
                is skipped.
        """
        start_time = time.monotonic()
        batches, remainder = partition(sources, objects, jobs)
        result = ScheduleResult(jobs=len(batches))
        if not batches:
            return result

        token = CancellationToken()
        logger.info(f"Compiling {len(sources)} sources on {len(batches)} workers (remainder: {len(remainder) if remainder else 0})")

        result.batches.extend(self._run_parallel(batches, token))
        if token.cancelled:
            raise token.to_error()

        if remainder is not None:
            result.batches.append(self.worker.run(remainder, token))
            if token.cancelled:
                raise token.to_error()

        result.elapsed = time.monotonic() - start_time
        logger.info(f"Compiled {result.compiled_count} sources in {result.elapsed:.2f}s")
        return result

    def _run_parallel(self, batches: list[CompilationBatch], token: CancellationToken) -> list[BatchResult]:
        """Run batches concurrently, one thread each, and wait for all of them.

        An unexpected exception in a worker cancels the token so the other
        workers stop early, and is re-raised once the pool has drained.
        """
        results: list[BatchResult] = []
        error: Optional[BaseException] = None

        with ThreadPoolExecutor(max_workers=len(batches), thread_name_prefix="compile") as executor:
            futures: list[Future[BatchResult]] = [executor.submit(self.worker.run, batch, token) for batch in batches]
            for batch, future in zip(batches, futures):
                try:
                    results.append(future.result())
                except Exception as e:
                    logger.error(f"{batch.name} raised {type(e).__name__}: {e}", exc_info=True)
                    token.cancel(1, source=batch.name)
                    if error is None:
                        error = e

        if error is not None:
            raise error
        return results
