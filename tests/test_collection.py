"""
Tests for pulling pool fees into the distributor.
"""

import pytest

from fee_distributor.core.exceptions import (
    EmptyArrayError,
    InvalidPairAddressError,
    TooManyPairsError,
    ZeroAddressError,
)
from fee_distributor.core.types import EventType, JobType, ZERO_ADDRESS
from tests.conftest import DIRECT_TOKEN


def test_collect_skims_and_queues(env, distributor):
    env.direct_pool.accrue_fees(DIRECT_TOKEN, 500)
    env.direct_pool.accrue_fees(env.REWARD, 200)

    collected = distributor.collect_fees([env.direct_pool.address])

    assert collected == {DIRECT_TOKEN: 500, env.REWARD: 200}
    assert env.balance(DIRECT_TOKEN) == 500
    assert distributor.queue_length() == 2
    assert distributor.job_at(0).job_type is JobType.REWARD_ASSET
    collected_events = [e for e in distributor.events if e.event_type is EventType.FEES_COLLECTED]
    assert len(collected_events) == 2


def test_collect_from_single_pair(env, distributor):
    env.bridged_pool.accrue_fees(env.BRIDGE, 300)

    assert distributor.collect_fees_from_pair(env.bridged_pool.address) == {env.BRIDGE: 300}


def test_duplicate_pairs_collected_once(env, distributor):
    env.direct_pool.accrue_fees(DIRECT_TOKEN, 500)
    pair = env.direct_pool.address

    collected = distributor.collect_fees([pair, pair])

    assert collected == {DIRECT_TOKEN: 500}
    assert distributor.queue_length() == 1


def test_nothing_to_collect(env, distributor):
    assert distributor.collect_fees([env.direct_pool.address]) == {}
    assert distributor.queue_length() == 0


def test_empty_pair_list_rejected(distributor):
    with pytest.raises(EmptyArrayError):
        distributor.collect_fees([])


def test_too_many_pairs_rejected(env, distributor):
    pairs = [env.direct_pool.address] * 21

    with pytest.raises(TooManyPairsError):
        distributor.collect_fees(pairs)


def test_unknown_pair_rejected(env, distributor):
    env.direct_pool.accrue_fees(DIRECT_TOKEN, 500)

    with pytest.raises(InvalidPairAddressError):
        distributor.collect_fees([env.direct_pool.address, "0x0000000000000000000000000000000000009999"])

    # Validation happens before any skim
    assert env.balance(DIRECT_TOKEN) == 0


def test_zero_pair_rejected(distributor):
    with pytest.raises(ZeroAddressError):
        distributor.collect_fees([ZERO_ADDRESS])
