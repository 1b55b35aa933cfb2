"""Calldata encoders for the V3 SwapRouter and Quoter contracts.

Single-pool routes use the ``*Single`` entry points; longer routes pass a
packed path of ``token (20 bytes) | fee (3 bytes) | token ...``.
"""

import logging

from eth_utils import to_bytes
from web3 import Web3

from hopswap.sdk.base import CurrencyAmount, MethodParameters, SwapOptions, TradeType
from hopswap.sdk.trade import Route, Trade

logger = logging.getLogger(__name__)


def _router_function(name: str, single: bool, amount: str, limit: str, output: str) -> dict:
    if single:
        components = [
            {"name": "tokenIn", "type": "address"},
            {"name": "tokenOut", "type": "address"},
            {"name": "fee", "type": "uint24"},
        ]
    else:
        components = [{"name": "path", "type": "bytes"}]
    components += [
        {"name": "recipient", "type": "address"},
        {"name": "deadline", "type": "uint256"},
        {"name": amount, "type": "uint256"},
        {"name": limit, "type": "uint256"},
    ]
    if single:
        components.append({"name": "sqrtPriceLimitX96", "type": "uint160"})
    return {
        "inputs": [{"components": components, "name": "params", "type": "tuple"}],
        "name": name,
        "outputs": [{"name": output, "type": "uint256"}],
        "stateMutability": "payable",
        "type": "function",
    }


# SwapRouter (V1, deadline inside the params struct)
SWAP_ROUTER_ABI = [
    _router_function("exactInputSingle", True, "amountIn", "amountOutMinimum", "amountOut"),
    _router_function("exactInput", False, "amountIn", "amountOutMinimum", "amountOut"),
    _router_function("exactOutputSingle", True, "amountOut", "amountInMaximum", "amountIn"),
    _router_function("exactOutput", False, "amountOut", "amountInMaximum", "amountIn"),
]


def _quoter_function(name: str, single: bool, amount: str, output: str) -> dict:
    if single:
        inputs = [
            {"name": "tokenIn", "type": "address"},
            {"name": "tokenOut", "type": "address"},
            {"name": "fee", "type": "uint24"},
            {"name": amount, "type": "uint256"},
            {"name": "sqrtPriceLimitX96", "type": "uint160"},
        ]
    else:
        inputs = [{"name": "path", "type": "bytes"}, {"name": amount, "type": "uint256"}]
    return {
        "inputs": inputs,
        "name": name,
        "outputs": [{"name": output, "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function",
    }


# Quoter (V1)
QUOTER_ABI = [
    _quoter_function("quoteExactInputSingle", True, "amountIn", "amountOut"),
    _quoter_function("quoteExactInput", False, "amountIn", "amountOut"),
    _quoter_function("quoteExactOutputSingle", True, "amountOut", "amountIn"),
    _quoter_function("quoteExactOutput", False, "amountOut", "amountIn"),
]

# Encoding only; no provider calls are made through these
_web3 = Web3()
_router_contract = _web3.eth.contract(abi=SWAP_ROUTER_ABI)
_quoter_contract = _web3.eth.contract(abi=QUOTER_ABI)


def encode_route_to_path(route: Route, exact_output: bool) -> bytes:
    """Packed path for multi-hop calls; reversed for exact-output swaps."""
    path = to_bytes(hexstr=route.token_path[0].address)
    for pool, token in zip(route.pools, route.token_path[1:]):
        path += pool.fee.to_bytes(3, "big") + to_bytes(hexstr=token.address)

    if not exact_output:
        return path

    reversed_path = to_bytes(hexstr=route.token_path[-1].address)
    for pool, token in zip(reversed(route.pools), reversed(route.token_path[:-1])):
        reversed_path += pool.fee.to_bytes(3, "big") + to_bytes(hexstr=token.address)
    return reversed_path


class SwapRouter:
    """Encodes trades for the V3 SwapRouter."""

    @staticmethod
    def swap_call_parameters(trade: Trade, options: SwapOptions) -> MethodParameters:
        """Router calldata for ``trade``.

        Args:
            trade: The trade to execute
            options: Slippage tolerance, recipient and deadline

        Returns:
            MethodParameters with calldata and a zero native value
        """
        route = trade.route
        amount_in = trade.maximum_amount_in(options.slippage_tolerance).quotient
        amount_out = trade.minimum_amount_out(options.slippage_tolerance).quotient
        sqrt_price_limit = options.sqrt_price_limit_x96 or 0
        recipient = Web3.to_checksum_address(options.recipient)

        if options.sqrt_price_limit_x96 and len(route.pools) > 1:
            raise ValueError("sqrt_price_limit_x96 is only supported for single-pool routes")

        if trade.trade_type == TradeType.EXACT_INPUT:
            if len(route.pools) == 1:
                function_name = "exactInputSingle"
                params = (
                    route.token_path[0].address,
                    route.token_path[1].address,
                    route.pools[0].fee,
                    recipient,
                    options.deadline,
                    amount_in,
                    amount_out,
                    sqrt_price_limit,
                )
            else:
                function_name = "exactInput"
                params = (
                    encode_route_to_path(route, exact_output=False),
                    recipient,
                    options.deadline,
                    amount_in,
                    amount_out,
                )
        else:
            if len(route.pools) == 1:
                function_name = "exactOutputSingle"
                params = (
                    route.token_path[0].address,
                    route.token_path[1].address,
                    route.pools[0].fee,
                    recipient,
                    options.deadline,
                    amount_out,
                    amount_in,
                    sqrt_price_limit,
                )
            else:
                function_name = "exactOutput"
                params = (
                    encode_route_to_path(route, exact_output=True),
                    recipient,
                    options.deadline,
                    amount_out,
                    amount_in,
                )

        calldata = _router_contract.encode_abi(function_name, args=[params])
        logger.debug(f"Encoded {function_name} for {trade!r} (min out {amount_out})")
        # ERC-20 input only, so no native value is attached
        return MethodParameters(calldata=calldata, value="0x00")


class SwapQuoter:
    """Encodes quote requests for the V3 Quoter."""

    @staticmethod
    def quote_call_parameters(route: Route, amount: CurrencyAmount, trade_type: TradeType) -> MethodParameters:
        single = len(route.pools) == 1

        if trade_type == TradeType.EXACT_INPUT:
            if single:
                function_name = "quoteExactInputSingle"
                args = [route.token_path[0].address, route.token_path[1].address, route.pools[0].fee, amount.quotient, 0]
            else:
                function_name = "quoteExactInput"
                args = [encode_route_to_path(route, exact_output=False), amount.quotient]
        else:
            if single:
                function_name = "quoteExactOutputSingle"
                args = [route.token_path[0].address, route.token_path[1].address, route.pools[0].fee, amount.quotient, 0]
            else:
                function_name = "quoteExactOutput"
                args = [encode_route_to_path(route, exact_output=True), amount.quotient]

        return MethodParameters(calldata=_quoter_contract.encode_abi(function_name, args=args))
