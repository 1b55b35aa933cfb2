"""Double multi-hop swap execution.

Swaps token A into token B along a forward route, waits for the receipt,
then swaps the received token B back into token A along a backward route.

Output amounts:
    By default each leg's trade output is the forward route's first pool
    applied to the forward input, re-denominated in the leg's output token.
    Multi-hop pricing is therefore not honoured, and the backward leg reuses
    forward-leg values. Set ``use_route_output`` to price each leg over its
    own full route instead.

A failure in either leg raises. Nothing compensates a confirmed forward leg
when the backward leg fails.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from hopswap.config import Settings, get_settings
from hopswap.sdk import (
    CurrencyAmount,
    FirstPoolPricing,
    PoolPricingProvider,
    Route,
    RoutePricing,
    SwapEncoder,
    SwapOptions,
    SwapQuoter,
    SwapRouter,
    Token,
    Trade,
    TradeType,
)
from hopswap.swap.pools import Hop, create_pools_from_route
from hopswap.swap.signer import ChainClient, ChainClientProtocol

logger = logging.getLogger(__name__)


class SwapLeg(str, Enum):
    """Which half of the round trip."""
    FORWARD = "forward"
    BACKWARD = "backward"


class SwapError(Exception):
    """Base exception for swap execution failures."""
    pass


class SwapLegError(SwapError):
    """Raised when a leg's transaction is not confirmed."""

    def __init__(self, leg: SwapLeg, message: str):
        self.leg = leg
        super().__init__(message)


@dataclass
class LegResult:
    """Outcome of one confirmed leg."""
    leg: SwapLeg
    route: Route
    input_amount: CurrencyAmount
    output_amount: CurrencyAmount
    tx_hash: str
    receipt: dict


class DoubleSwapExecutor:
    """Runs the forward and backward legs of a round-trip swap."""

    def __init__(
        self,
        settings: Settings,
        client: ChainClientProtocol,
        encoder: Optional[SwapEncoder] = None,
        pricing: Optional[PoolPricingProvider] = None,
    ):
        self.settings = settings
        self.client = client
        self.encoder = encoder or SwapRouter
        if pricing is None:
            pricing = RoutePricing() if settings.use_route_output else FirstPoolPricing()
        self.pricing = pricing

    async def run(
        self,
        token_in: Token,
        token_out: Token,
        amount_in: Union[int, str],
        forward_route: list[Hop],
        backward_route: list[Hop],
    ) -> tuple[LegResult, LegResult]:
        """Execute both legs in order; the backward leg starts only after a confirmed forward leg."""
        forward_input = CurrencyAmount.from_raw_amount(token_in, amount_in)
        logger.info(
            f"Starting double swap: {forward_input} -> {token_out!r} -> {token_in!r} "
            f"({len(forward_route)} + {len(backward_route)} hops)"
        )

        forward = await self._execute_leg(SwapLeg.FORWARD, forward_route, token_in, token_out, forward_input)

        backward_input = CurrencyAmount.from_raw_amount(token_out, forward.output_amount.quotient)
        backward = await self._execute_leg(
            SwapLeg.BACKWARD, backward_route, token_out, token_in, backward_input, forward=forward
        )

        logger.info(f"Double swap complete: forward {forward.tx_hash}, backward {backward.tx_hash}")
        return forward, backward

    async def _execute_leg(
        self,
        leg: SwapLeg,
        hops: list[Hop],
        token_from: Token,
        token_to: Token,
        amount_in: CurrencyAmount,
        forward: Optional[LegResult] = None,
    ) -> LegResult:
        pools = await create_pools_from_route(hops, self.client, self.settings)
        route = Route(pools, token_from, token_to)
        logger.debug(f"{leg.value} route {route!r}, mid price {route.mid_price.adjusted()}")

        quote = SwapQuoter.quote_call_parameters(route, amount_in, TradeType.EXACT_INPUT)
        logger.debug(f"{leg.value} quote calldata for {self.settings.quoter_address}: {quote.calldata}")

        output_amount = self._output_amount(leg, route, amount_in, forward)
        trade = Trade.create_unchecked_trade(
            route=route,
            input_amount=amount_in,
            output_amount=output_amount,
            trade_type=TradeType.EXACT_INPUT,
        )

        options = SwapOptions(
            slippage_tolerance=self.settings.slippage_tolerance,
            deadline=int(time.time()) + self.settings.deadline_seconds,
            recipient=self.client.address,
        )
        method_parameters = self.encoder.swap_call_parameters(trade, options)

        tx = {
            "data": method_parameters.calldata,
            "to": self.settings.swap_router_address,
            "value": int(method_parameters.value, 16),
            "from": self.client.address,
            "gasPrice": await self.client.get_gas_price(),
            "gas": self.settings.gas_limit,
        }

        logger.info(f"Submitting {leg.value} swap: {trade!r}")
        tx_hash = await self.client.send_transaction(tx)
        receipt = await self.client.wait_for_receipt(
            tx_hash,
            timeout=self.settings.receipt_timeout,
            poll_interval=self.settings.receipt_poll_interval,
        )

        if not receipt or not receipt.get("transactionHash"):
            raise SwapLegError(leg, f"{leg.value.capitalize()} transaction failed")
        if receipt.get("status") == 0:
            raise SwapLegError(leg, f"{leg.value.capitalize()} transaction {receipt['transactionHash']} reverted")

        logger.info(f"{leg.value.capitalize()} swap confirmed: {receipt['transactionHash']}")
        return LegResult(
            leg=leg,
            route=route,
            input_amount=amount_in,
            output_amount=output_amount,
            tx_hash=receipt["transactionHash"],
            receipt=receipt,
        )

    def _output_amount(
        self,
        leg: SwapLeg,
        route: Route,
        amount_in: CurrencyAmount,
        forward: Optional[LegResult],
    ) -> CurrencyAmount:
        if self.settings.use_route_output:
            return self.pricing.output_amount(route, amount_in)

        # Both legs price the forward route's first pool at the forward input
        if forward is not None:
            priced_route, priced_input = forward.route, forward.input_amount
        else:
            priced_route, priced_input = route, amount_in

        if leg == SwapLeg.BACKWARD or len(priced_route) > 1:
            logger.warning(
                f"{leg.value} output taken from first forward pool only; "
                f"set USE_ROUTE_OUTPUT=true to price the full {leg.value} route"
            )

        raw = self.pricing.output_amount(priced_route, priced_input)
        return CurrencyAmount.from_raw_amount(route.output, raw.quotient)


async def double_multi_hop_swap(
    token_in: Token,
    token_out: Token,
    amount_in: Union[int, str],
    forward_route: list[Hop],
    backward_route: list[Hop],
    provider_address: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
    client: Optional[ChainClientProtocol] = None,
    encoder: Optional[SwapEncoder] = None,
    pricing: Optional[PoolPricingProvider] = None,
) -> tuple[str, str]:
    """Swap ``token_in`` to ``token_out`` and back, returning both tx hashes.

    Args:
        token_in: Token spent on the forward leg and received on the backward leg
        token_out: Token received on the forward leg
        amount_in: Raw forward input amount
        forward_route: Hops from token_in to token_out
        backward_route: Hops from token_out to token_in
        provider_address: JSON-RPC URL (defaults to settings.rpc_url)
        settings: Overrides the cached environment settings
        client: Overrides the web3 chain client
        encoder: Overrides the SwapRouter calldata encoder
        pricing: Overrides the output-amount strategy

    Returns:
        (forward_tx_hash, backward_tx_hash)

    Raises:
        SwapLegError: If either leg is not confirmed
    """
    settings = settings or get_settings()
    owned_client = None
    if client is None:
        client = owned_client = ChainClient(provider_address or settings.rpc_url, settings.private_key)

    executor = DoubleSwapExecutor(settings, client, encoder=encoder, pricing=pricing)
    try:
        forward, backward = await executor.run(token_in, token_out, amount_in, forward_route, backward_route)
    finally:
        if owned_client is not None:
            await owned_client.close()
    return forward.tx_hash, backward.tx_hash
