"""Output-amount strategies for a swap leg."""

from hopswap.sdk.base import CurrencyAmount
from hopswap.sdk.trade import Route, Trade


class FirstPoolPricing:
    """Prices only the first pool of the route, as a single-hop swap.

    Multi-hop pricing is ignored: the output is in the first pool's other
    token, whatever the route's final token is.
    """

    def output_amount(self, route: Route, input_amount: CurrencyAmount) -> CurrencyAmount:
        output, _ = route.pools[0].get_output_amount(input_amount)
        return output


class RoutePricing:
    """Prices the whole route hop by hop."""

    def output_amount(self, route: Route, input_amount: CurrencyAmount) -> CurrencyAmount:
        return Trade.from_route(route, input_amount).output_amount
