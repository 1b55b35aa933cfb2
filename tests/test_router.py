"""Tests for the SwapRouter and Quoter calldata encoders."""

import pytest
from eth_abi import decode
from eth_utils import encode_hex, function_signature_to_4byte_selector, to_bytes

from hopswap.sdk import (
    CurrencyAmount,
    Percent,
    Pool,
    Route,
    SwapOptions,
    SwapQuoter,
    SwapRouter,
    Trade,
    TradeType,
    encode_route_to_path,
)

from conftest import Q96, SIGNER_ADDRESS, USDC, WETH, WMATIC

DEADLINE = 1_700_001_200


def make_route(tokens, fees):
    pools = [Pool(a, b, fee, Q96, 0, 0) for (a, b), fee in zip(zip(tokens, tokens[1:]), fees)]
    return Route(pools, tokens[0], tokens[-1])


def split_calldata(calldata: str) -> tuple[str, bytes]:
    raw = to_bytes(hexstr=calldata)
    return "0x" + raw[:4].hex(), raw[4:]


@pytest.fixture
def options() -> SwapOptions:
    return SwapOptions(slippage_tolerance=Percent(50, 10000), recipient=SIGNER_ADDRESS, deadline=DEADLINE)


class TestPathEncoding:
    """Tests for packed path encoding."""

    def test_two_hop_path(self, wmatic, usdc, weth):
        route = make_route([wmatic, usdc, weth], [3000, 500])
        path = encode_route_to_path(route, exact_output=False)

        assert len(path) == 20 + 3 + 20 + 3 + 20
        assert path[:20] == to_bytes(hexstr=WMATIC)
        assert path[20:23] == bytes.fromhex("000bb8")
        assert path[23:43] == to_bytes(hexstr=USDC)
        assert path[43:46] == bytes.fromhex("0001f4")
        assert path[46:] == to_bytes(hexstr=WETH)

    def test_exact_output_path_reversed(self, wmatic, usdc, weth):
        route = make_route([wmatic, usdc, weth], [3000, 500])
        path = encode_route_to_path(route, exact_output=True)

        assert path[:20] == to_bytes(hexstr=WETH)
        assert path[20:23] == bytes.fromhex("0001f4")
        assert path[46:] == to_bytes(hexstr=WMATIC)


class TestSwapRouter:
    """Tests for SwapRouter.swap_call_parameters."""

    def test_single_hop_exact_input(self, wmatic, usdc, options):
        route = make_route([wmatic, usdc], [3000])
        trade = Trade.create_unchecked_trade(
            route=route,
            input_amount=CurrencyAmount.from_raw_amount(wmatic, 10**18),
            output_amount=CurrencyAmount.from_raw_amount(usdc, 997_000),
            trade_type=TradeType.EXACT_INPUT,
        )

        params = SwapRouter.swap_call_parameters(trade, options)
        selector, body = split_calldata(params.calldata)
        (decoded,) = decode(["(address,address,uint24,address,uint256,uint256,uint256,uint160)"], body)

        assert selector == "0x414bf389"
        assert params.value == "0x00"
        assert decoded[0].lower() == WMATIC.lower()
        assert decoded[1].lower() == USDC.lower()
        assert decoded[2] == 3000
        assert decoded[3].lower() == SIGNER_ADDRESS.lower()
        assert decoded[4] == DEADLINE
        assert decoded[5] == 10**18
        assert decoded[6] == 992_039
        assert decoded[7] == 0

    def test_multi_hop_exact_input(self, wmatic, usdc, weth, options):
        route = make_route([wmatic, usdc, weth], [3000, 500])
        trade = Trade.from_route(route, CurrencyAmount.from_raw_amount(wmatic, 1_000_000))

        params = SwapRouter.swap_call_parameters(trade, options)
        selector, body = split_calldata(params.calldata)
        (decoded,) = decode(["(bytes,address,uint256,uint256,uint256)"], body)

        assert selector == "0xc04b8d59"
        assert decoded[0] == encode_route_to_path(route, exact_output=False)
        assert decoded[2] == DEADLINE
        assert decoded[3] == 1_000_000

    def test_zero_amount_encodes(self, wmatic, usdc, options):
        route = make_route([wmatic, usdc], [3000])
        trade = Trade.from_route(route, CurrencyAmount.from_raw_amount(wmatic, 0))

        params = SwapRouter.swap_call_parameters(trade, options)
        _, body = split_calldata(params.calldata)
        (decoded,) = decode(["(address,address,uint24,address,uint256,uint256,uint256,uint160)"], body)

        assert decoded[5] == 0
        assert decoded[6] == 0

    def test_exact_output_single(self, wmatic, usdc, options):
        route = make_route([wmatic, usdc], [3000])
        trade = Trade(
            route,
            CurrencyAmount.from_raw_amount(wmatic, 1000),
            CurrencyAmount.from_raw_amount(usdc, 997),
            TradeType.EXACT_OUTPUT,
        )

        params = SwapRouter.swap_call_parameters(trade, options)
        _, body = split_calldata(params.calldata)
        (decoded,) = decode(["(address,address,uint24,address,uint256,uint256,uint256,uint160)"], body)

        # amountOut then amountInMaximum
        assert decoded[5] == 997
        assert decoded[6] == 1005

    def test_price_limit_rejected_for_multi_hop(self, wmatic, usdc, weth):
        route = make_route([wmatic, usdc, weth], [3000, 500])
        trade = Trade.from_route(route, CurrencyAmount.from_raw_amount(wmatic, 1000))
        options = SwapOptions(
            slippage_tolerance=Percent(50, 10000),
            recipient=SIGNER_ADDRESS,
            deadline=DEADLINE,
            sqrt_price_limit_x96=Q96,
        )

        with pytest.raises(ValueError):
            SwapRouter.swap_call_parameters(trade, options)


class TestSwapQuoter:
    """Tests for SwapQuoter.quote_call_parameters."""

    def test_single_hop_quote(self, wmatic, usdc):
        route = make_route([wmatic, usdc], [3000])
        params = SwapQuoter.quote_call_parameters(
            route, CurrencyAmount.from_raw_amount(wmatic, 10**18), TradeType.EXACT_INPUT
        )
        selector, body = split_calldata(params.calldata)
        decoded = decode(["address", "address", "uint24", "uint256", "uint160"], body)

        assert selector == "0xf7729d43"
        assert decoded[2] == 3000
        assert decoded[3] == 10**18

    def test_multi_hop_quote(self, wmatic, usdc, weth):
        route = make_route([wmatic, usdc, weth], [3000, 500])
        params = SwapQuoter.quote_call_parameters(
            route, CurrencyAmount.from_raw_amount(wmatic, 5), TradeType.EXACT_INPUT
        )
        selector, body = split_calldata(params.calldata)
        path, amount = decode(["bytes", "uint256"], body)

        assert selector == "0xcdca1753"
        assert path == encode_route_to_path(route, exact_output=False)
        assert amount == 5


class TestAbiSelectors:
    """Each encoded call carries the selector of its canonical signature."""

    @pytest.mark.parametrize(
        "trade_type,hops,signature",
        [
            (TradeType.EXACT_INPUT, 1, "exactInputSingle((address,address,uint24,address,uint256,uint256,uint256,uint160))"),
            (TradeType.EXACT_INPUT, 2, "exactInput((bytes,address,uint256,uint256,uint256))"),
            (TradeType.EXACT_OUTPUT, 1, "exactOutputSingle((address,address,uint24,address,uint256,uint256,uint256,uint160))"),
            (TradeType.EXACT_OUTPUT, 2, "exactOutput((bytes,address,uint256,uint256,uint256))"),
        ],
    )
    def test_router_selector(self, wmatic, usdc, weth, options, trade_type, hops, signature):
        route = make_route([wmatic, usdc, weth][: hops + 1], [3000, 500][:hops])
        trade = Trade(
            route,
            CurrencyAmount.from_raw_amount(wmatic, 1000),
            CurrencyAmount.from_raw_amount(route.output, 900),
            trade_type,
        )

        selector, _ = split_calldata(SwapRouter.swap_call_parameters(trade, options).calldata)

        assert selector == encode_hex(function_signature_to_4byte_selector(signature))

    @pytest.mark.parametrize(
        "trade_type,hops,signature",
        [
            (TradeType.EXACT_INPUT, 1, "quoteExactInputSingle(address,address,uint24,uint256,uint160)"),
            (TradeType.EXACT_INPUT, 2, "quoteExactInput(bytes,uint256)"),
            (TradeType.EXACT_OUTPUT, 1, "quoteExactOutputSingle(address,address,uint24,uint256,uint160)"),
            (TradeType.EXACT_OUTPUT, 2, "quoteExactOutput(bytes,uint256)"),
        ],
    )
    def test_quoter_selector(self, wmatic, usdc, weth, trade_type, hops, signature):
        route = make_route([wmatic, usdc, weth][: hops + 1], [3000, 500][:hops])

        params = SwapQuoter.quote_call_parameters(route, CurrencyAmount.from_raw_amount(wmatic, 7), trade_type)
        selector, _ = split_calldata(params.calldata)

        assert selector == encode_hex(function_signature_to_4byte_selector(signature))

    def test_lowercase_recipient_accepted(self, wmatic, usdc):
        route = make_route([wmatic, usdc], [3000])
        trade = Trade.from_route(route, CurrencyAmount.from_raw_amount(wmatic, 1000))
        options = SwapOptions(
            slippage_tolerance=Percent(50, 10000),
            recipient=SIGNER_ADDRESS.lower(),
            deadline=DEADLINE,
        )

        params = SwapRouter.swap_call_parameters(trade, options)
        _, body = split_calldata(params.calldata)
        (decoded,) = decode(["(address,address,uint24,address,uint256,uint256,uint256,uint160)"], body)

        assert decoded[3].lower() == SIGNER_ADDRESS.lower()
