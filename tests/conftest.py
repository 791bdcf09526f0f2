"""
Shared fixtures: a sandbox world with a handful of pools and a distributor.
"""

import pytest

from fee_distributor.core.config import Settings
from fee_distributor.sandbox import SandboxEnvironment


DIRECT_TOKEN = "0x00000000000000000000000000000000000000c1"
BRIDGED_TOKEN = "0x00000000000000000000000000000000000000c2"
ORPHAN_TOKEN = "0x00000000000000000000000000000000000000c3"
STRANGER = "0x000000000000000000000000000000000000bad0"

POOL_DEPTH = 1_000_000


@pytest.fixture
def config():
    """Default settings with auto-distribution off so tests control payouts."""
    return Settings(auto_distribute=False, distribution_cooldown=3600)


@pytest.fixture
def env():
    """Sandbox with reward/bridge, direct/reward and bridged/bridge pools."""
    sandbox = SandboxEnvironment()
    sandbox.bridge_pool = sandbox.create_pool(sandbox.BRIDGE, sandbox.REWARD, POOL_DEPTH, POOL_DEPTH)
    sandbox.direct_pool = sandbox.create_pool(DIRECT_TOKEN, sandbox.REWARD, POOL_DEPTH, POOL_DEPTH)
    sandbox.bridged_pool = sandbox.create_pool(BRIDGED_TOKEN, sandbox.BRIDGE, POOL_DEPTH, POOL_DEPTH)
    return sandbox


@pytest.fixture
def distributor(env, config):
    """Distributor tracking the direct, bridged and orphan tokens besides reward/bridge."""
    fee_distributor = env.build_distributor(config)
    fee_distributor.add_tokens_to_tracking(
        [DIRECT_TOKEN, BRIDGED_TOKEN, ORPHAN_TOKEN],
        sender=env.OWNER,
    )
    return fee_distributor
