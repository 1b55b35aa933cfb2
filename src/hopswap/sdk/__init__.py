"""Uniswap V3 entities and encoders.

Provides:
- Token, CurrencyAmount, Percent, Price: value types
- Pool, Route, Trade: pricing entities
- SwapRouter, SwapQuoter: calldata encoders
- FirstPoolPricing, RoutePricing: output-amount strategies
"""

from hopswap.sdk.base import (
    CurrencyAmount,
    MethodParameters,
    Percent,
    PoolPricingProvider,
    Price,
    SwapEncoder,
    SwapOptions,
    Token,
    TradeType,
)
from hopswap.sdk.pool import POOL_INIT_CODE_HASH, V3_FACTORY_ADDRESS, Pool
from hopswap.sdk.pricing import FirstPoolPricing, RoutePricing
from hopswap.sdk.router import SwapQuoter, SwapRouter, encode_route_to_path
from hopswap.sdk.trade import Route, Trade

__all__ = [
    # Value types
    "Token",
    "CurrencyAmount",
    "Percent",
    "Price",
    "TradeType",
    "MethodParameters",
    "SwapOptions",
    # Entities
    "Pool",
    "Route",
    "Trade",
    "V3_FACTORY_ADDRESS",
    "POOL_INIT_CODE_HASH",
    # Encoders
    "SwapRouter",
    "SwapQuoter",
    "encode_route_to_path",
    # Capabilities
    "PoolPricingProvider",
    "SwapEncoder",
    "FirstPoolPricing",
    "RoutePricing",
]
