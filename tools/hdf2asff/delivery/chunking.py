"""
Chunking and per-chunk outcome records
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def chunk(items: Sequence[T], size: int) -> List[List[T]]:
    """Split ``items`` into consecutive chunks of ``size``; the last may be shorter"""
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


@dataclass
class ChunkOutcome:
    """What happened to one chunk at its sink"""

    index: int
    submitted: int
    succeeded: int = 0
    failed: int = 0
    failed_findings: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.failed == 0


@dataclass
class DeliveryReport:
    """Outcome of delivering a whole run"""

    chunks: List[ChunkOutcome] = field(default_factory=list)
    summary: Optional[ChunkOutcome] = None

    def _all(self) -> List[ChunkOutcome]:
        return self.chunks + ([self.summary] if self.summary else [])

    @property
    def submitted(self) -> int:
        return sum(outcome.submitted for outcome in self._all())

    @property
    def succeeded(self) -> int:
        return sum(outcome.succeeded for outcome in self._all())

    @property
    def failed(self) -> int:
        return sum(outcome.failed for outcome in self._all())

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self._all())
