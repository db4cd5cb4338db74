"""USDC premium payment with a Permit2-first strategy.

``smart_payment`` walks::

    amount check -> processed-order check -> Permit2 attempt
        -> (success | approve + buyWithUSDC fallback) -> (success | failure)

Any Permit2 failure (rejected signature, failed simulation, revert) falls
back to the allowance path exactly once. A failure there is returned to the
caller. Nothing is retried. Results never raise; errors travel in
``PaymentResult.error``.
"""

from __future__ import annotations

import logging
import time

from liqpass.config import LiqPassConfig
from liqpass.payments.chain import ChainGateway
from liqpass.payments.contracts import (
    PERMIT_TRANSFER_FROM_TYPES,
    PERMIT_VALIDITY_SECONDS,
    from_usdc_units,
    order_id_to_bytes32,
    to_usdc_units,
)
from liqpass.payments.dedupe import DedupeStore, JsonFileDedupeStore
from liqpass.payments.models import (
    ApprovalError,
    ContractNotConfiguredError,
    DuplicateOrderError,
    InvalidAmountError,
    InvalidOrderIdError,
    PaymentError,
    PaymentResult,
    PermitData,
    SignatureRejectedError,
)
from liqpass.payments.wallet import WalletSigner
from liqpass.utils import now_ms

logger = logging.getLogger(__name__)


def _encode_order_id(order_id: str) -> bytes:
    try:
        return order_id_to_bytes32(order_id)
    except ValueError as exc:
        raise InvalidOrderIdError(order_id) from exc


class USDCPaymentService:
    def __init__(
        self,
        config: LiqPassConfig,
        signer: WalletSigner,
        chain: ChainGateway | None = None,
        store: DedupeStore | None = None,
    ):
        self.config = config
        self.signer = signer
        self.chain = chain or ChainGateway(config)
        self.store = store or JsonFileDedupeStore(config.dedupe_store_path)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def smart_payment(self, amount: float, order_id: str) -> PaymentResult:
        """Pay ``amount`` USDC for ``order_id``, preferring Permit2."""
        try:
            if amount <= 0:
                raise InvalidAmountError()
            _encode_order_id(order_id)
            if self.store.is_processed(order_id):
                raise DuplicateOrderError(order_id)
        except PaymentError as exc:
            return PaymentResult(success=False, method="none", order_id=order_id, error=str(exc))

        try:
            result = await self.pay_with_permit2(amount, order_id)
            if not result.success:
                logger.warning("Permit2 payment failed, falling back to USDC approve: %s", result.error)
                result = await self.pay_with_usdc(amount, order_id)
        except Exception as exc:
            logger.exception("Smart payment for order %s failed", order_id)
            return PaymentResult(
                success=False, method="none", order_id=order_id, error=str(exc) or "Smart payment failed"
            )

        if result.success:
            self._record(order_id, amount, result.method)
        return result

    def _record(self, order_id: str, amount: float, method: str) -> None:
        # Called after the purchase is on chain; store failures are logged only.
        try:
            self.store.mark_processed(order_id, amount, method)
        except Exception:
            logger.exception("Failed to record processed order %s", order_id)

    # ------------------------------------------------------------------
    # Payment paths
    # ------------------------------------------------------------------

    async def pay_with_permit2(self, amount: float, order_id: str) -> PaymentResult:
        try:
            encoded_order_id = _encode_order_id(order_id)
            account = await self.signer.get_address()
            permit = self.prepare_permit_data(amount)
            signature = await self.sign_permit_data(permit)
            tx_hash = await self.chain.buy_with_permit2(self.signer, account, encoded_order_id, permit, signature)
        except Exception as exc:
            logger.error("Permit2 payment failed: %s", exc)
            return PaymentResult(
                success=False, method="permit2", order_id=order_id, error=str(exc) or "Permit2 payment failed"
            )
        return PaymentResult(success=True, method="permit2", transaction_hash=tx_hash, order_id=order_id)

    async def pay_with_usdc(self, amount: float, order_id: str) -> PaymentResult:
        try:
            encoded_order_id = _encode_order_id(order_id)
            account = await self.signer.get_address()
            await self.approve_usdc(amount, account)
            tx_hash = await self.chain.buy_with_usdc(self.signer, account, encoded_order_id, to_usdc_units(amount))
        except Exception as exc:
            logger.error("USDC payment failed: %s", exc)
            return PaymentResult(
                success=False, method="usdc", order_id=order_id, error=str(exc) or "USDC payment failed"
            )
        return PaymentResult(success=True, method="usdc", transaction_hash=tx_hash, order_id=order_id)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def prepare_permit_data(self, amount: float) -> PermitData:
        # Millisecond timestamp as an unordered Permit2 nonce; the contract's
        # nonce bitmap is not consulted.
        return PermitData(
            token=self.chain.usdc_address,
            amount=to_usdc_units(amount),
            spender=self.chain.guard_address,
            nonce=now_ms(),
            deadline=int(time.time()) + PERMIT_VALIDITY_SECONDS,
        )

    def permit_typed_data(self, permit: PermitData) -> dict:
        return {
            "types": PERMIT_TRANSFER_FROM_TYPES,
            "primaryType": "PermitTransferFrom",
            "domain": {
                "name": "Permit2",
                "chainId": self.chain.chain_id,
                "verifyingContract": self.chain.permit2_address,
            },
            "message": permit.to_message(),
        }

    async def sign_permit_data(self, permit: PermitData) -> str:
        try:
            return await self.signer.sign_typed_data(self.permit_typed_data(permit))
        except Exception as exc:
            raise SignatureRejectedError(f"Failed to sign permit data: {exc}") from exc

    async def approve_usdc(self, amount: float, account: str) -> None:
        """Make sure the guard contract may pull ``amount``; approve and wait if not."""
        units = to_usdc_units(amount)
        spender = self.chain.guard_address

        try:
            allowance = await self.chain.allowance(account, spender)
            if allowance >= units:
                logger.info("Allowance is sufficient, skipping approval")
                return

            tx_hash = await self.chain.approve(self.signer, account, spender, units)
            await self.chain.wait_for_receipt(tx_hash)
        except ContractNotConfiguredError:
            raise
        except Exception as exc:
            raise ApprovalError(f"USDC approval failed: {exc}") from exc
        logger.info("Approved %s USDC for %s (tx %s)", amount, spender, tx_hash)

    # ------------------------------------------------------------------
    # Probes
    # ------------------------------------------------------------------

    async def supports_permit2(self) -> bool:
        """True if the wallet can produce a Permit2 typed-data signature."""
        try:
            await self.signer.get_address()
            await self.sign_permit_data(self.prepare_permit_data(1))
        except Exception as exc:
            logger.debug("Permit2 probe failed: %s", exc)
            return False
        return True

    async def get_usdc_balance(self, account: str) -> float:
        try:
            return from_usdc_units(await self.chain.balance_of(account))
        except Exception as exc:
            logger.error("Failed to get USDC balance: %s", exc)
            return 0.0


def create_payment_service(config: LiqPassConfig, signer: WalletSigner) -> USDCPaymentService:
    return USDCPaymentService(config, signer)
