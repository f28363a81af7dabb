"""Data models for compilation scheduling.

Defines the core dataclasses used by the scheduler and its workers:
- CompilationBatch: Contiguous slice of the source list owned by one worker
- BatchResult: Outcome of running one batch
- ScheduleResult: Aggregated outcome of a whole compilation phase
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator


@dataclass(frozen=True)
class CompilationBatch:
    """An ordered run of (source, object) pairs compiled by a single worker.

    Attributes:
        name: Worker label used in progress output (e.g. "worker-0")
        sources: Source paths relative to the configured source directory
        objects: Object paths, one per source, in the same order
    """

    name: str
    sources: tuple[str, ...]
    objects: tuple[Path, ...]

    def __post_init__(self) -> None:
        if len(self.sources) != len(self.objects):
            raise ValueError(f"Batch {self.name}: {len(self.sources)} sources but {len(self.objects)} objects")

    def __len__(self) -> int:
        return len(self.sources)

    def pairs(self) -> Iterator[tuple[str, Path]]:
        """Iterate (source, object) pairs in batch order."""
        return zip(self.sources, self.objects)


@dataclass
class BatchResult:
    """Outcome of running one compilation batch.

    Attributes:
        name: Batch name
        status: 0 on success, otherwise the failing compiler's exit status
        compiled: Number of sources compiled successfully
        total: Number of sources in the batch
        failed_command: Command that failed, if any
        cancelled: True if the batch stopped because another worker failed
    """

    name: str
    status: int = 0
    compiled: int = 0
    total: int = 0
    failed_command: list[str] | None = None
    cancelled: bool = False

    @property
    def success(self) -> bool:
        """True if every source in the batch compiled."""
        return self.status == 0 and not self.cancelled and self.compiled == self.total


@dataclass
class ScheduleResult:
    """Aggregated result of a compilation phase.

    Attributes:
        jobs: Effective number of concurrent workers
        batches: Results of every batch that ran, remainder batch last
        elapsed: Wall-clock time in seconds
    """

    jobs: int
    batches: list[BatchResult] = field(default_factory=list)
    elapsed: float = 0.0

    @property
    def compiled_count(self) -> int:
        """Number of sources compiled across all batches."""
        return sum(b.compiled for b in self.batches)

    @property
    def success(self) -> bool:
        """True if every batch succeeded."""
        return all(b.success for b in self.batches)
