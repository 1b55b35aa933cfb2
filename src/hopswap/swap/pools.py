"""Load V3 pool snapshots for a route of hops."""

import asyncio
import logging
from typing import Optional

from hopswap.config import Settings, get_settings
from hopswap.sdk import Pool, Token
from hopswap.swap.signer import ChainClientProtocol

logger = logging.getLogger(__name__)

# (token_in_address, token_out_address, fee)
Hop = tuple[str, str, int]


async def create_pools_from_route(
    route: list[Hop],
    client: ChainClientProtocol,
    settings: Optional[Settings] = None,
) -> list[Pool]:
    """Build one zero-liquidity pool per hop, in route order.

    Both token decimals of a hop are read concurrently, then the pool's
    ``slot0``. Any failed read aborts the whole route.

    Args:
        route: Hops as (token_in, token_out, fee)
        client: Chain client used for the reads
        settings: Chain id and pool factory parameters

    Returns:
        Pools in the same order as ``route``
    """
    settings = settings or get_settings()
    pools: list[Pool] = []

    for token_in_address, token_out_address, fee in route:
        try:
            decimals_in, decimals_out = await asyncio.gather(
                client.get_decimals(token_in_address),
                client.get_decimals(token_out_address),
            )
            token_a = Token(settings.chain_id, token_in_address, decimals_in)
            token_b = Token(settings.chain_id, token_out_address, decimals_out)

            pool_address = Pool.get_address(
                token_a,
                token_b,
                fee,
                factory_address=settings.pool_factory_address,
                init_code_hash=settings.pool_init_code_hash,
            )
            sqrt_price_x96, tick = await client.get_slot0(pool_address)

            # Liquidity is zeroed: only the price path is needed for routing
            pools.append(Pool(token_a, token_b, fee, sqrt_price_x96, 0, tick))
            logger.debug(f"Loaded pool {pool_address} ({token_in_address} -> {token_out_address}, fee {fee}, tick {tick})")

        except Exception as e:
            logger.error(f"Error fetching pool data for {token_in_address} and {token_out_address}: {e}")
            raise

    return pools
