"""
Tests for balance-delta tracking and queue insertion.
"""

import pytest

from fee_distributor.core.exceptions import ArrayLengthMismatchError, NotOwnerError, ZeroAddressError
from fee_distributor.core.types import JobType, ZERO_ADDRESS
from tests.conftest import BRIDGED_TOKEN, DIRECT_TOKEN, ORPHAN_TOKEN, STRANGER


def test_reward_and_bridge_tracked_from_construction(env, config):
    """Reward and bridge assets are tracked without any owner call."""
    distributor = env.build_distributor(config)

    assert distributor.is_tracked(env.REWARD)
    assert distributor.is_tracked(env.BRIDGE)
    assert not distributor.is_tracked(DIRECT_TOKEN)


def test_update_is_idempotent(env, distributor):
    """A second update without new deposits creates no jobs."""
    env.deposit(env.BRIDGE, 500)

    first = distributor.update_balance_tracking()
    second = distributor.update_balance_tracking()

    assert len(first) == 1
    assert second == []
    assert distributor.queue_length() == 1
    assert distributor.pending_balance(env.BRIDGE) == 500
    assert distributor.last_processed_balance(env.BRIDGE) == 500


def test_only_positive_delta_is_queued(env, distributor):
    """A second deposit is queued as its own delta."""
    env.deposit(DIRECT_TOKEN, 1_000)
    distributor.update_balance_tracking()
    env.deposit(DIRECT_TOKEN, 250)

    jobs = distributor.update_balance_tracking()

    assert [job.amount for job in jobs] == [250]
    assert distributor.pending_balance(DIRECT_TOKEN) == 1_250
    assert distributor.last_processed_balance(DIRECT_TOKEN) == 1_250


def test_untracked_assets_are_ignored(env, distributor):
    """Holdings of an asset nobody tracks never reach the queue."""
    env.deposit("0x00000000000000000000000000000000000000e1", 9_999)

    assert distributor.update_balance_tracking() == []
    assert distributor.queue_length() == 0


def test_priority_ordering(env, distributor):
    """Reward and bridge jobs are dequeued before a regular asset's job."""
    env.deposit(ORPHAN_TOKEN, 1_000)
    env.deposit(env.BRIDGE, 1_000)
    env.deposit(env.REWARD, 1_000)

    distributor.update_balance_tracking()

    order = [distributor.job_at(i).job_type for i in range(distributor.queue_length())]
    assert order == [JobType.REWARD_ASSET, JobType.BRIDGE_ASSET, JobType.GENERIC]
    assert distributor.job_at(0).asset == env.REWARD
    assert distributor.job_at(0).priority > distributor.job_at(2).priority


def test_lp_position_gets_mid_tier_priority(env, distributor):
    """A genuine LP token is queued between bridge and generic assets."""
    distributor.add_tokens_to_tracking([env.direct_pool.address], sender=env.OWNER)
    env.give_lp(env.direct_pool, 10_000)
    env.deposit(BRIDGED_TOKEN, 1_000)

    distributor.update_balance_tracking()

    assert distributor.job_at(0).job_type is JobType.LP_POSITION
    assert distributor.job_at(1).job_type is JobType.GENERIC


def test_add_tokens_requires_owner(env, distributor):
    with pytest.raises(NotOwnerError):
        distributor.add_tokens_to_tracking([STRANGER], sender=STRANGER)


def test_add_tokens_rejects_zero_address(env, distributor):
    with pytest.raises(ZeroAddressError):
        distributor.add_tokens_to_tracking([ZERO_ADDRESS], sender=env.OWNER)


def test_add_tokens_skips_already_tracked(env, distributor):
    added = distributor.add_tokens_to_tracking([DIRECT_TOKEN, STRANGER], sender=env.OWNER)

    assert added == [STRANGER]


def test_add_tokens_does_not_snapshot_existing_holdings(env, config):
    """Holdings present before tracking started are picked up as a delta."""
    distributor = env.build_distributor(config)
    env.deposit(DIRECT_TOKEN, 700)

    distributor.add_tokens_to_tracking([DIRECT_TOKEN], sender=env.OWNER)
    jobs = distributor.update_balance_tracking()

    assert [(job.asset, job.amount) for job in jobs] == [(DIRECT_TOKEN, 700)]


def test_reset_balance_tracking(env, distributor):
    """Reset overwrites the snapshot and zeroes pending amounts."""
    env.deposit(DIRECT_TOKEN, 1_000)
    distributor.update_balance_tracking()

    distributor.reset_balance_tracking([DIRECT_TOKEN], [400], sender=env.OWNER)

    assert distributor.last_processed_balance(DIRECT_TOKEN) == 400
    assert distributor.pending_balance(DIRECT_TOKEN) == 0


def test_reset_balance_tracking_length_mismatch(env, distributor):
    with pytest.raises(ArrayLengthMismatchError):
        distributor.reset_balance_tracking([DIRECT_TOKEN], [0, 1], sender=env.OWNER)


def test_deposit_after_conversion_is_detected(env, distributor):
    """Converting a job lowers the snapshot so the next deposit is a fresh delta."""
    env.deposit(DIRECT_TOKEN, 10_000)
    distributor.update_balance_tracking()
    distributor.process_queue(1)

    assert distributor.last_processed_balance(DIRECT_TOKEN) == 0

    env.deposit(DIRECT_TOKEN, 500)
    jobs = distributor.update_balance_tracking()

    # The reward produced by the swap is queued as well
    assert [job.amount for job in jobs if job.asset == DIRECT_TOKEN] == [500]
