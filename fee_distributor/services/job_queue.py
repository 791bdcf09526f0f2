"""
Priority job queue: descending priority, FIFO among equal priority.

Kept as a sorted list with a bisect insert. The asset set is small and owner
curated, and the FIFO tie-break is observable, so it is encoded explicitly in
the sort key rather than left to a heap.
"""

import bisect
from typing import Iterator, List, Optional

from fee_distributor.core.exceptions import InvalidIndexError
from fee_distributor.core.types import DistributorState, JobType, ProcessingJob


class PriorityJobQueue:
    """View over the job list stored in DistributorState."""

    def __init__(self, state: DistributorState):
        self._state = state

    @property
    def _jobs(self) -> List[ProcessingJob]:
        # Always read through the state so a rollback is picked up
        return self._state.queue

    def __len__(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[ProcessingJob]:
        return iter(list(self._jobs))

    def push(self, asset: str, amount: int, priority: int, job_type: JobType) -> ProcessingJob:
        job = ProcessingJob(
            asset=asset,
            amount=amount,
            priority=priority,
            job_type=job_type,
            sequence=self._state.next_sequence,
        )
        self._state.next_sequence += 1
        keys = [queued.sort_key for queued in self._jobs]
        self._jobs.insert(bisect.bisect_right(keys, job.sort_key), job)
        return job

    def peek(self) -> Optional[ProcessingJob]:
        return self._jobs[0] if self._jobs else None

    def remove(self, job: ProcessingJob) -> None:
        self._jobs.remove(job)

    def at(self, index: int) -> ProcessingJob:
        if index < 0 or index >= len(self._jobs):
            raise InvalidIndexError(index, len(self._jobs))
        return self._jobs[index]

    def clear(self) -> List[ProcessingJob]:
        removed = list(self._jobs)
        self._jobs.clear()
        return removed
