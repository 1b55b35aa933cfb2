"""Core value types shared by the pool, route and trade entities.

Amounts are always held as raw integer quantities of the token's smallest
unit. Prices and percentages are exact rationals backed by
``fractions.Fraction`` so nothing is ever rounded before encoding.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Optional, Protocol

from eth_utils import is_address, to_checksum_address

if TYPE_CHECKING:
    from hopswap.sdk.trade import Route, Trade

MAX_UINT256 = 2**256 - 1


class TradeType(str, Enum):
    """Which side of a trade is fixed."""
    EXACT_INPUT = "exact_input"
    EXACT_OUTPUT = "exact_output"


@dataclass(frozen=True, eq=False)
class Token:
    """An ERC-20 token on a specific chain.

    Two tokens are equal when they share chain id and address, regardless
    of decimals or symbol.
    """

    chain_id: int
    address: str
    decimals: int
    symbol: Optional[str] = None

    def __post_init__(self):
        if not is_address(self.address):
            raise ValueError(f"Invalid token address: {self.address}")
        if not 0 <= self.decimals < 255:
            raise ValueError(f"Invalid decimals for {self.address}: {self.decimals}")
        object.__setattr__(self, "address", to_checksum_address(self.address))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Token):
            return NotImplemented
        return self.chain_id == other.chain_id and self.address.lower() == other.address.lower()

    def __hash__(self) -> int:
        return hash((self.chain_id, self.address.lower()))

    def __repr__(self) -> str:
        return self.symbol or self.address

    def sorts_before(self, other: "Token") -> bool:
        """Check whether this token is token0 in a pool with ``other``."""
        if self.chain_id != other.chain_id:
            raise ValueError("Tokens are on different chains")
        if self == other:
            raise ValueError(f"Identical token addresses: {self.address}")
        return self.address.lower() < other.address.lower()


class Percent(Fraction):
    """A rational percentage, e.g. ``Percent(50, 10000)`` for 0.5%."""

    def __repr__(self) -> str:
        return f"Percent({self.numerator}, {self.denominator})"

    def __str__(self) -> str:
        return f"{Decimal(self.numerator * 100) / Decimal(self.denominator):f}%"


@dataclass(frozen=True)
class CurrencyAmount:
    """A raw amount of a token."""

    currency: Token
    quotient: int

    def __post_init__(self):
        if self.quotient < 0:
            raise ValueError(f"Negative amount: {self.quotient}")
        if self.quotient > MAX_UINT256:
            raise ValueError(f"Amount exceeds uint256: {self.quotient}")

    @classmethod
    def from_raw_amount(cls, currency: Token, raw_amount) -> "CurrencyAmount":
        """Wrap a raw integer (or decimal or 0x-hex string) amount of ``currency``."""
        if isinstance(raw_amount, str):
            text = raw_amount.strip()
            raw_amount = int(text, 16) if text[:2].lower() == "0x" else int(text, 10)
        if isinstance(raw_amount, bool) or not isinstance(raw_amount, int):
            raise TypeError(f"Raw amount must be an integer, got {type(raw_amount).__name__}")
        return cls(currency=currency, quotient=raw_amount)

    def to_exact(self) -> Decimal:
        """Amount in whole token units."""
        return Decimal(self.quotient) / Decimal(10**self.currency.decimals)

    def __str__(self) -> str:
        return f"{self.to_exact()} {self.currency!r}"


@dataclass(frozen=True)
class Price:
    """Price of ``base`` denominated in ``quote``, in raw units."""

    base: Token
    quote: Token
    value: Fraction

    def __mul__(self, other: "Price") -> "Price":
        if self.quote != other.base:
            raise ValueError(f"Cannot chain prices {self.base!r}/{self.quote!r} and {other.base!r}/{other.quote!r}")
        return Price(self.base, other.quote, self.value * other.value)

    def adjusted(self) -> Decimal:
        """Human readable price corrected for token decimals."""
        scaled = self.value * Fraction(10**self.base.decimals, 10**self.quote.decimals)
        return Decimal(scaled.numerator) / Decimal(scaled.denominator)


@dataclass
class MethodParameters:
    """Encoded contract call: hex calldata plus hex native value."""
    calldata: str
    value: str = "0x00"


@dataclass
class SwapOptions:
    """Options for encoding a router swap call."""

    slippage_tolerance: Percent
    recipient: str
    deadline: int
    sqrt_price_limit_x96: Optional[int] = None


class PoolPricingProvider(Protocol):
    """Computes the output of swapping an exact input along a route."""

    def output_amount(self, route: "Route", input_amount: CurrencyAmount) -> CurrencyAmount:
        ...


class SwapEncoder(Protocol):
    """Turns a trade into router call parameters."""

    def swap_call_parameters(self, trade: "Trade", options: SwapOptions) -> MethodParameters:
        ...
