"""Round-trip multi-hop swaps on Uniswap V3 style exchanges.

The package does not configure logging on import. Applications call
``configure_logging`` once at startup, before the first swap:

    from hopswap import configure_logging, get_settings
    from hopswap.swap import double_multi_hop_swap

    settings = get_settings()
    configure_logging(settings)
    await double_multi_hop_swap(token_in, token_out, amount_in, forward, backward, settings=settings)
"""

from hopswap.config import Settings, configure_logging, get_settings

__all__ = ["Settings", "configure_logging", "get_settings"]
