"""Uniswap V3 pool snapshot.

A ``Pool`` holds the ``slot0`` state of one pool (sqrt price and tick) plus
its liquidity. Routing only needs the price path, so pools loaded for a swap
carry zero liquidity and quote at the current spot price.
"""

from fractions import Fraction

from eth_abi import encode
from eth_utils import keccak, to_bytes, to_checksum_address

from hopswap.sdk.base import CurrencyAmount, Price, Token

# Uniswap V3 core deployment (same address on Ethereum, Polygon, Arbitrum, Optimism)
V3_FACTORY_ADDRESS = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
POOL_INIT_CODE_HASH = "0xe34f199b19b2b4f47f68442619d555527d244f78a3297ea89325f843f87b8b54"

# Fee tiers in hundredths of a bip -> tick spacing
FEE_TICK_SPACING = {
    100: 1,     # 0.01%
    500: 10,    # 0.05%
    3000: 60,   # 0.3%
    10000: 200, # 1%
}
FEE_DENOMINATOR = 1_000_000

Q192 = 2**192
MIN_SQRT_RATIO = 4295128739
MAX_SQRT_RATIO = 1461446703485210103287273052203988822378723970342
MIN_TICK = -887272
MAX_TICK = 887272


class Pool:
    """Snapshot of a single V3 pool."""

    def __init__(
        self,
        token_a: Token,
        token_b: Token,
        fee: int,
        sqrt_price_x96,
        liquidity,
        tick_current: int,
    ):
        if fee not in FEE_TICK_SPACING:
            raise ValueError(f"Unsupported fee tier: {fee}")
        sqrt_price_x96 = int(sqrt_price_x96)
        if not MIN_SQRT_RATIO <= sqrt_price_x96 < MAX_SQRT_RATIO:
            raise ValueError(f"sqrtPriceX96 out of range: {sqrt_price_x96}")
        if not MIN_TICK <= int(tick_current) <= MAX_TICK:
            raise ValueError(f"Tick out of range: {tick_current}")

        if token_a.sorts_before(token_b):
            self.token0, self.token1 = token_a, token_b
        else:
            self.token0, self.token1 = token_b, token_a
        self.fee = fee
        self.sqrt_price_x96 = sqrt_price_x96
        self.liquidity = int(liquidity)
        self.tick_current = int(tick_current)

    @staticmethod
    def get_address(
        token_a: Token,
        token_b: Token,
        fee: int,
        factory_address: str = V3_FACTORY_ADDRESS,
        init_code_hash: str = POOL_INIT_CODE_HASH,
    ) -> str:
        """Compute the CREATE2 address of the pool for a token pair and fee."""
        token0, token1 = (token_a, token_b) if token_a.sorts_before(token_b) else (token_b, token_a)
        salt = keccak(encode(["address", "address", "uint24"], [token0.address, token1.address, fee]))
        digest = keccak(b"\xff" + to_bytes(hexstr=factory_address) + salt + to_bytes(hexstr=init_code_hash))
        return to_checksum_address(digest[12:])

    @property
    def chain_id(self) -> int:
        return self.token0.chain_id

    @property
    def token0_price(self) -> Price:
        """Price of token0 in terms of token1."""
        return Price(self.token0, self.token1, Fraction(self.sqrt_price_x96 * self.sqrt_price_x96, Q192))

    @property
    def token1_price(self) -> Price:
        """Price of token1 in terms of token0."""
        return Price(self.token1, self.token0, Fraction(Q192, self.sqrt_price_x96 * self.sqrt_price_x96))

    def involves_token(self, token: Token) -> bool:
        return token == self.token0 or token == self.token1

    def price_of(self, token: Token) -> Price:
        if not self.involves_token(token):
            raise ValueError(f"Token {token!r} not in pool {self!r}")
        return self.token0_price if token == self.token0 else self.token1_price

    def other_token(self, token: Token) -> Token:
        if not self.involves_token(token):
            raise ValueError(f"Token {token!r} not in pool {self!r}")
        return self.token1 if token == self.token0 else self.token0

    def get_output_amount(self, input_amount: CurrencyAmount) -> tuple[CurrencyAmount, "Pool"]:
        """Output of swapping ``input_amount`` through this pool.

        Priced at the current sqrt price after taking the fee; the pool is
        not moved, so the returned pool is this snapshot.
        """
        price = self.price_of(input_amount.currency)
        after_fee = Fraction(input_amount.quotient * (FEE_DENOMINATOR - self.fee), FEE_DENOMINATOR)
        raw_out = after_fee * price.value
        output = CurrencyAmount.from_raw_amount(
            self.other_token(input_amount.currency),
            raw_out.numerator // raw_out.denominator,
        )
        return output, self

    def __repr__(self) -> str:
        return f"Pool({self.token0!r}/{self.token1!r} fee={self.fee} tick={self.tick_current})"
