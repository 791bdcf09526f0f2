"""
Tests for the priority job queue.
"""

import pytest

from fee_distributor.core.exceptions import InvalidIndexError
from fee_distributor.core.types import DistributorState, JobType
from fee_distributor.services import PriorityJobQueue


@pytest.fixture
def queue():
    return PriorityJobQueue(DistributorState(owner="0x0000000000000000000000000000000000000a11"))


def test_descending_priority_with_fifo_ties(queue):
    queue.push("generic-a", 1, 25, JobType.GENERIC)
    queue.push("reward", 1, 100, JobType.REWARD_ASSET)
    queue.push("generic-b", 1, 25, JobType.GENERIC)
    queue.push("bridge", 1, 75, JobType.BRIDGE_ASSET)
    queue.push("generic-c", 1, 25, JobType.GENERIC)

    assert [job.asset for job in queue] == ["reward", "bridge", "generic-a", "generic-b", "generic-c"]


def test_peek_and_remove(queue):
    first = queue.push("a", 10, 50, JobType.LP_POSITION)
    queue.push("b", 20, 50, JobType.LP_POSITION)

    assert queue.peek() is first
    queue.remove(first)

    assert queue.peek().asset == "b"
    assert len(queue) == 1


def test_at_rejects_out_of_range(queue):
    queue.push("a", 10, 50, JobType.GENERIC)

    assert queue.at(0).asset == "a"
    with pytest.raises(InvalidIndexError):
        queue.at(1)
    with pytest.raises(InvalidIndexError):
        queue.at(-1)


def test_clear_returns_removed_jobs(queue):
    queue.push("a", 10, 50, JobType.GENERIC)
    queue.push("b", 10, 50, JobType.GENERIC)

    removed = queue.clear()

    assert [job.asset for job in removed] == ["a", "b"]
    assert queue.peek() is None


def test_sequence_survives_clear(queue):
    """Insertion stamps keep increasing so FIFO holds across clears."""
    first = queue.push("a", 1, 25, JobType.GENERIC)
    queue.clear()
    second = queue.push("b", 1, 25, JobType.GENERIC)

    assert second.sequence > first.sequence
