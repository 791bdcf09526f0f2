"""
Tests for owner gating and two-step ownership transfer.
"""

import pytest

from fee_distributor.core.exceptions import NotOwnerError, NotPendingOwnerError, ZeroAddressError
from fee_distributor.core.types import EventType, ZERO_ADDRESS
from tests.conftest import STRANGER


NEW_OWNER = "0x0000000000000000000000000000000000000a22"


def test_two_step_ownership_transfer(env, distributor):
    distributor.transfer_ownership(NEW_OWNER, sender=env.OWNER)

    assert distributor.owner == env.OWNER
    assert distributor.pending_owner == NEW_OWNER

    distributor.accept_ownership(sender=NEW_OWNER)

    assert distributor.owner == NEW_OWNER
    assert distributor.pending_owner is None
    assert distributor.events[-1].event_type is EventType.OWNERSHIP_TRANSFERRED


def test_previous_owner_loses_access(env, distributor):
    distributor.transfer_ownership(NEW_OWNER, sender=env.OWNER)
    distributor.accept_ownership(sender=NEW_OWNER)

    with pytest.raises(NotOwnerError):
        distributor.clear_queue(sender=env.OWNER)
    assert distributor.clear_queue(sender=NEW_OWNER) == 0


def test_only_pending_owner_can_accept(env, distributor):
    distributor.transfer_ownership(NEW_OWNER, sender=env.OWNER)

    with pytest.raises(NotPendingOwnerError):
        distributor.accept_ownership(sender=STRANGER)


def test_accept_without_transfer_rejected(distributor):
    with pytest.raises(NotPendingOwnerError):
        distributor.accept_ownership(sender=STRANGER)


def test_transfer_requires_owner(distributor):
    with pytest.raises(NotOwnerError):
        distributor.transfer_ownership(NEW_OWNER, sender=STRANGER)


def test_transfer_to_zero_rejected(env, distributor):
    with pytest.raises(ZeroAddressError):
        distributor.transfer_ownership(ZERO_ADDRESS, sender=env.OWNER)


def test_owner_gated_operations(env, distributor):
    calls = [
        lambda: distributor.reset_balance_tracking([], [], sender=STRANGER),
        lambda: distributor.emergency_resume(sender=STRANGER),
        lambda: distributor.emergency_process_token(env.REWARD, 0, sender=STRANGER),
    ]
    for call in calls:
        with pytest.raises(NotOwnerError):
            call()
