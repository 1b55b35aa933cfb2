"""Swap execution module.

Provides:
- double_multi_hop_swap: Round-trip swap over two routes
- create_pools_from_route: Pool loader for a list of hops
- ChainClient: web3 reads plus local signing
"""

from hopswap.swap.executor import (
    DoubleSwapExecutor,
    LegResult,
    SwapError,
    SwapLeg,
    SwapLegError,
    double_multi_hop_swap,
)
from hopswap.swap.pools import Hop, create_pools_from_route
from hopswap.swap.signer import ChainClient, ChainClientProtocol

__all__ = [
    # Executor
    "double_multi_hop_swap",
    "DoubleSwapExecutor",
    "LegResult",
    "SwapLeg",
    "SwapError",
    "SwapLegError",
    # Pools
    "Hop",
    "create_pools_from_route",
    # Chain
    "ChainClient",
    "ChainClientProtocol",
]
