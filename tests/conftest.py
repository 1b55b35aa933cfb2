"""Pytest configuration and fixtures."""

import asyncio
import os
from typing import Optional

import pytest

# Set test environment
os.environ["PRIVATE_KEY"] = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
os.environ["SWAP_ROUTER_ADDRESS"] = "0xE592427A0AEce92De3Edee1F18E0157C05861564"
os.environ["DEBUG"] = "true"

from hopswap.config import Settings, get_settings
from hopswap.sdk import Token

SIGNER_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# Polygon tokens, in ascending address order
WMATIC = "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270"
USDC = "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174"
WETH = "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619"

DECIMALS = {WMATIC: 18, USDC: 6, WETH: 18}

Q96 = 2**96


class FakeChainClient:
    """In-memory stand-in for ChainClient.

    Every pool reports the same slot0 unless overridden per pool address.
    Receipts are returned for every transaction except those whose
    1-based send index is listed in ``missing_receipts``.
    """

    def __init__(
        self,
        decimals: Optional[dict] = None,
        slot0: Optional[dict] = None,
        default_slot0: tuple[int, int] = (Q96, 0),
        failing_tokens: Optional[set] = None,
        missing_receipts: Optional[set] = None,
        reverted: Optional[set] = None,
    ):
        self.decimals = {k.lower(): v for k, v in (decimals or DECIMALS).items()}
        self.slot0 = {k.lower(): v for k, v in (slot0 or {}).items()}
        self.default_slot0 = default_slot0
        self.failing_tokens = {t.lower() for t in (failing_tokens or set())}
        self.missing_receipts = missing_receipts or set()
        self.reverted = reverted or set()
        self.calls: list[tuple[str, str]] = []
        self.sent: list[dict] = []
        self.closed = False

    @property
    def address(self) -> str:
        return SIGNER_ADDRESS

    async def get_decimals(self, token_address: str) -> int:
        self.calls.append(("decimals_start", token_address))
        await asyncio.sleep(0)
        if token_address.lower() in self.failing_tokens:
            raise RuntimeError(f"execution reverted: decimals() on {token_address}")
        self.calls.append(("decimals_end", token_address))
        return self.decimals[token_address.lower()]

    async def get_slot0(self, pool_address: str) -> tuple[int, int]:
        self.calls.append(("slot0", pool_address))
        return self.slot0.get(pool_address.lower(), self.default_slot0)

    async def get_gas_price(self) -> int:
        return 30_000_000_000

    async def send_transaction(self, tx_params: dict) -> str:
        self.sent.append(tx_params)
        return "0x" + f"{len(self.sent):x}".rjust(64, "a")

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 120, poll_interval: float = 2) -> Optional[dict]:
        index = len(self.sent)
        if index in self.missing_receipts:
            return None
        return {
            "transactionHash": tx_hash,
            "status": 0 if index in self.reverted else 1,
            "blockNumber": 1000 + index,
        }

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def wmatic() -> Token:
    return Token(137, WMATIC, 18, "WMATIC")


@pytest.fixture
def usdc() -> Token:
    return Token(137, USDC, 6, "USDC")


@pytest.fixture
def weth() -> Token:
    return Token(137, WETH, 18, "WETH")


@pytest.fixture
def fake_client() -> FakeChainClient:
    return FakeChainClient()
