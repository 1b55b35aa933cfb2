"""Routes through pools and trades along them."""

from fractions import Fraction

from hopswap.sdk.base import CurrencyAmount, Percent, Price, Token, TradeType
from hopswap.sdk.pool import Pool


class Route:
    """An ordered path of pools from ``input`` to ``output``."""

    def __init__(self, pools: list[Pool], input: Token, output: Token):
        if not pools:
            raise ValueError("Route requires at least one pool")

        chain_id = pools[0].chain_id
        if any(pool.chain_id != chain_id for pool in pools):
            raise ValueError("All pools in a route must be on the same chain")
        if not pools[0].involves_token(input):
            raise ValueError(f"Input token {input!r} not in first pool {pools[0]!r}")
        if not pools[-1].involves_token(output):
            raise ValueError(f"Output token {output!r} not in last pool {pools[-1]!r}")

        token_path = [input]
        for index, pool in enumerate(pools):
            current = token_path[index]
            if not pool.involves_token(current):
                raise ValueError(f"Route is not contiguous at pool {index}: {pool!r}")
            token_path.append(pool.other_token(current))

        if token_path[-1] != output:
            raise ValueError(f"Route ends in {token_path[-1]!r}, expected {output!r}")

        self.pools = list(pools)
        self.token_path = token_path
        self.input = input
        self.output = output

    @property
    def chain_id(self) -> int:
        return self.pools[0].chain_id

    @property
    def mid_price(self) -> Price:
        """Spot price of ``input`` in ``output`` across every pool."""
        price = self.pools[0].price_of(self.input)
        for index, pool in enumerate(self.pools[1:], start=1):
            price = price * pool.price_of(self.token_path[index])
        return price

    def __len__(self) -> int:
        return len(self.pools)

    def __repr__(self) -> str:
        return " -> ".join(repr(token) for token in self.token_path)


class Trade:
    """A swap of ``input_amount`` for ``output_amount`` along a route."""

    def __init__(
        self,
        route: Route,
        input_amount: CurrencyAmount,
        output_amount: CurrencyAmount,
        trade_type: TradeType,
    ):
        if input_amount.currency != route.input:
            raise ValueError(f"Input currency {input_amount.currency!r} does not match route input {route.input!r}")
        if output_amount.currency != route.output:
            raise ValueError(f"Output currency {output_amount.currency!r} does not match route output {route.output!r}")

        self.route = route
        self.input_amount = input_amount
        self.output_amount = output_amount
        self.trade_type = trade_type

    @classmethod
    def create_unchecked_trade(
        cls,
        route: Route,
        input_amount: CurrencyAmount,
        output_amount: CurrencyAmount,
        trade_type: TradeType,
    ) -> "Trade":
        """Build a trade from amounts computed elsewhere, without re-simulating."""
        return cls(route, input_amount, output_amount, trade_type)

    @classmethod
    def from_route(cls, route: Route, amount_in: CurrencyAmount) -> "Trade":
        """Exact-input trade whose output is simulated hop by hop."""
        if amount_in.currency != route.input:
            raise ValueError(f"Amount currency {amount_in.currency!r} does not match route input {route.input!r}")

        amount = amount_in
        for pool in route.pools:
            amount, _ = pool.get_output_amount(amount)
        return cls(route, amount_in, amount, TradeType.EXACT_INPUT)

    def minimum_amount_out(self, slippage_tolerance: Percent) -> CurrencyAmount:
        """Smallest output accepted under ``slippage_tolerance``."""
        if slippage_tolerance < 0:
            raise ValueError(f"Negative slippage tolerance: {slippage_tolerance}")
        if self.trade_type == TradeType.EXACT_OUTPUT:
            return self.output_amount
        adjusted = Fraction(self.output_amount.quotient) / (1 + slippage_tolerance)
        return CurrencyAmount.from_raw_amount(self.output_amount.currency, adjusted.numerator // adjusted.denominator)

    def maximum_amount_in(self, slippage_tolerance: Percent) -> CurrencyAmount:
        """Largest input spent under ``slippage_tolerance``."""
        if slippage_tolerance < 0:
            raise ValueError(f"Negative slippage tolerance: {slippage_tolerance}")
        if self.trade_type == TradeType.EXACT_INPUT:
            return self.input_amount
        adjusted = Fraction(self.input_amount.quotient) * (1 + slippage_tolerance)
        return CurrencyAmount.from_raw_amount(self.input_amount.currency, adjusted.numerator // adjusted.denominator)

    def __repr__(self) -> str:
        return f"Trade({self.input_amount} -> {self.output_amount} via {self.route!r})"
