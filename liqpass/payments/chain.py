"""Typed access to the guard contract and USDC over JSON-RPC.

Every write is simulated with ``eth_call`` first so reverts surface before a
transaction is signed, then built, signed by the wallet and broadcast.
"""

from __future__ import annotations

import logging

from web3 import AsyncWeb3, Web3

from liqpass.config import LiqPassConfig
from liqpass.payments.contracts import ERC20_ABI, GUARD_ABI
from liqpass.payments.models import ContractNotConfiguredError, PaymentError, PermitData
from liqpass.payments.wallet import WalletSigner

logger = logging.getLogger(__name__)


class ChainGateway:
    def __init__(self, config: LiqPassConfig, w3: AsyncWeb3 | None = None):
        self.w3 = w3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(config.rpc_url, request_kwargs={"timeout": 30})
        )
        self.chain_id = config.chain_id
        self.usdc_address = Web3.to_checksum_address(config.usdc_address)
        self.permit2_address = Web3.to_checksum_address(config.permit2_address)
        self._guard_address = config.guard_contract_address

    @property
    def guard_configured(self) -> bool:
        return bool(self._guard_address)

    @property
    def guard_address(self) -> str:
        if not self._guard_address:
            raise ContractNotConfiguredError()
        return Web3.to_checksum_address(self._guard_address)

    def _usdc(self):
        return self.w3.eth.contract(address=self.usdc_address, abi=ERC20_ABI)

    def _guard(self):
        return self.w3.eth.contract(address=self.guard_address, abi=GUARD_ABI)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def allowance(self, owner: str, spender: str) -> int:
        return await self._usdc().functions.allowance(
            Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
        ).call()

    async def balance_of(self, owner: str) -> int:
        return await self._usdc().functions.balanceOf(Web3.to_checksum_address(owner)).call()

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def approve(self, signer: WalletSigner, owner: str, spender: str, amount: int) -> str:
        fn = self._usdc().functions.approve(Web3.to_checksum_address(spender), amount)
        return await self._simulate_and_send(signer, owner, fn)

    async def buy_with_permit2(
        self,
        signer: WalletSigner,
        owner: str,
        order_id: bytes,
        permit: PermitData,
        signature: str,
    ) -> str:
        fn = self._guard().functions.buyWithPermit2(
            order_id, permit.to_contract_args(), Web3.to_bytes(hexstr=signature)
        )
        return await self._simulate_and_send(signer, owner, fn)

    async def buy_with_usdc(self, signer: WalletSigner, owner: str, order_id: bytes, amount: int) -> str:
        fn = self._guard().functions.buyWithUSDC(order_id, amount)
        return await self._simulate_and_send(signer, owner, fn)

    async def wait_for_receipt(self, tx_hash: str, timeout: float = 120) -> dict:
        receipt = await self.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=timeout)
        if receipt.get("status") == 0:
            raise PaymentError(f"Transaction {tx_hash} reverted")
        return dict(receipt)

    async def _simulate_and_send(self, signer: WalletSigner, owner: str, fn) -> str:
        owner = Web3.to_checksum_address(owner)
        await fn.call({"from": owner})
        tx = await fn.build_transaction(
            {
                "from": owner,
                "chainId": self.chain_id,
                "nonce": await self.w3.eth.get_transaction_count(owner),
            }
        )
        raw = await signer.sign_transaction(tx)
        tx_hash = await self.w3.eth.send_raw_transaction(raw)
        logger.info("Sent %s from %s: %s", fn.fn_name, owner, Web3.to_hex(tx_hash))
        return Web3.to_hex(tx_hash)
