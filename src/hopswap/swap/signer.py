"""Chain client for reading pool state and sending signed swaps.

Wraps an ``AsyncWeb3`` connection and a local ``eth_account`` key. All
reads and writes are awaitable; nothing is cached between calls.
"""

import asyncio
import logging
from typing import Optional, Protocol

from eth_account import Account
from web3 import AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound

logger = logging.getLogger(__name__)

ERC20_DECIMALS_ABI = [
    {
        "inputs": [],
        "name": "decimals",
        "outputs": [{"name": "", "type": "uint8"}],
        "stateMutability": "view",
        "type": "function",
    }
]

POOL_SLOT0_ABI = [
    {
        "inputs": [],
        "name": "slot0",
        "outputs": [
            {"name": "sqrtPriceX96", "type": "uint160"},
            {"name": "tick", "type": "int24"},
            {"name": "observationIndex", "type": "uint16"},
            {"name": "observationCardinality", "type": "uint16"},
            {"name": "observationCardinalityNext", "type": "uint16"},
            {"name": "feeProtocol", "type": "uint8"},
            {"name": "unlocked", "type": "bool"},
        ],
        "stateMutability": "view",
        "type": "function",
    }
]


class ChainClientProtocol(Protocol):
    """Network operations used by the pool loader and the swap executor."""

    @property
    def address(self) -> str:
        ...

    async def get_decimals(self, token_address: str) -> int:
        ...

    async def get_slot0(self, pool_address: str) -> tuple[int, int]:
        ...

    async def get_gas_price(self) -> int:
        ...

    async def send_transaction(self, tx_params: dict) -> str:
        ...

    async def wait_for_receipt(self, tx_hash: str, timeout: float, poll_interval: float) -> Optional[dict]:
        ...


class ChainClient:
    """Async EVM client with a local signing key."""

    def __init__(self, rpc_url: str, private_key: str):
        self.rpc_url = rpc_url
        self.web3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        """Signer address, used as sender and swap recipient."""
        return self._account.address

    async def get_decimals(self, token_address: str) -> int:
        contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(token_address),
            abi=ERC20_DECIMALS_ABI,
        )
        return int(await contract.functions.decimals().call())

    async def get_slot0(self, pool_address: str) -> tuple[int, int]:
        """Current ``(sqrtPriceX96, tick)`` of a pool."""
        contract = self.web3.eth.contract(
            address=Web3.to_checksum_address(pool_address),
            abi=POOL_SLOT0_ABI,
        )
        slot0 = await contract.functions.slot0().call()
        return int(slot0[0]), int(slot0[1])

    async def get_gas_price(self) -> int:
        return await self.web3.eth.gas_price

    async def close(self) -> None:
        """Disconnect the HTTP provider session."""
        await self.web3.provider.disconnect()

    async def send_transaction(self, tx_params: dict) -> str:
        """Sign and broadcast a transaction.

        Nonce and chain id are filled in when missing. The ``from`` field, if
        present, must be the signer address.

        Returns:
            Transaction hash as 0x-prefixed hex
        """
        tx = dict(tx_params)
        sender = tx.pop("from", self.address)
        if sender.lower() != self.address.lower():
            raise ValueError(f"Transaction sender {sender} is not the signer {self.address}")

        if "nonce" not in tx:
            tx["nonce"] = await self.web3.eth.get_transaction_count(self.address, "pending")
        if "chainId" not in tx:
            tx["chainId"] = await self.web3.eth.chain_id

        signed_tx = self._account.sign_transaction(tx)
        tx_hash = await self.web3.eth.send_raw_transaction(signed_tx.raw_transaction)
        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info(f"Sent transaction {tx_hash_hex} (nonce {tx['nonce']})")
        return tx_hash_hex

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120,
        poll_interval: float = 2,
    ) -> Optional[dict]:
        """Poll for a transaction receipt.

        Returns:
            Receipt dict with ``transactionHash`` as hex, or None on timeout
        """
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        while loop.time() - start_time <= timeout:
            try:
                receipt = await self.web3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                receipt = None

            if receipt is not None:
                result = dict(receipt)
                result["transactionHash"] = Web3.to_hex(receipt["transactionHash"])
                logger.debug(f"Receipt for {tx_hash}: block {result.get('blockNumber')}, status {result.get('status')}")
                return result

            await asyncio.sleep(poll_interval)

        logger.warning(f"No receipt for {tx_hash} after {timeout}s")
        return None
