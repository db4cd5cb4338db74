"""Wallet signers.

The payment service only needs three things from a wallet: its address, an
EIP-712 typed-data signature, and a signed transaction. ``LocalAccountSigner``
provides them from a private key; browser or hardware wallets plug in by
implementing the same protocol.
"""

from __future__ import annotations

from typing import Protocol

from eth_account import Account
from eth_account.messages import encode_typed_data
from web3 import Web3


class WalletSigner(Protocol):
    async def get_address(self) -> str: ...

    async def sign_typed_data(self, typed_data: dict) -> str: ...

    async def sign_transaction(self, tx: dict) -> bytes: ...


class LocalAccountSigner:
    """Signs with a private key held in process."""

    def __init__(self, private_key: str):
        self._account = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    async def get_address(self) -> str:
        return self._account.address

    async def sign_typed_data(self, typed_data: dict) -> str:
        signable = encode_typed_data(full_message=typed_data)
        signed = self._account.sign_message(signable)
        return Web3.to_hex(signed.signature)

    async def sign_transaction(self, tx: dict) -> bytes:
        signed = self._account.sign_transaction(tx)
        return bytes(signed.raw_transaction)
