"""
Sample record handed from collectors to the output queue.
"""

from dataclasses import dataclass, field
from datetime import datetime

Number = int | float


@dataclass(frozen=True)
class Sample:
    """
    One timestamped, named measurement.

    Samples from one gather cycle share the same ``timestamp``. Ownership
    passes to the queue consumer once the sample is enqueued.
    """

    metric: str
    value: Number
    timestamp: datetime
    # Compared for equality but left out of the hash
    tags: dict[str, str] = field(default_factory=dict, hash=False)

    def __repr__(self) -> str:
        return f"Sample({self.metric}={self.value!r} @ {self.timestamp.isoformat()})"
