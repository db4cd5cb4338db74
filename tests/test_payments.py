"""Tests for USDCPaymentService (Permit2 first, approve + buyWithUSDC fallback).

The chain gateway and wallet are mocks - no RPC calls or real signatures.
"""

from __future__ import annotations

import asyncio
import time
from unittest.mock import AsyncMock, MagicMock

import pytest

from liqpass.payments.chain import ChainGateway
from liqpass.payments.contracts import order_id_to_bytes32
from liqpass.payments.dedupe import InMemoryDedupeStore, JsonFileDedupeStore
from liqpass.payments.models import ApprovalError
from liqpass.payments.service import USDCPaymentService, create_payment_service

GUARD_ADDRESS = "0x000000000000000000000000000000000000dEaD"
WALLET_ADDRESS = "0x1111111111111111111111111111111111111111"


@pytest.fixture
def store():
    return InMemoryDedupeStore()


@pytest.fixture
def service(real_config, mock_signer, mock_chain, store):
    return USDCPaymentService(real_config, mock_signer, chain=mock_chain, store=store)


def _pay(service, amount=0.29, order_id="ORD-1"):
    return asyncio.run(service.smart_payment(amount, order_id))


# ---------------------------------------------------------------------------
# Pre-checks
# ---------------------------------------------------------------------------
class TestPreChecks:
    @pytest.mark.parametrize("amount", [0, -1, -0.01])
    def test_non_positive_amount(self, service, mock_chain, mock_signer, amount):
        result = _pay(service, amount=amount)
        assert result.success is False
        assert result.method == "none"
        assert result.error == "Payment amount must be positive"
        mock_signer.sign_typed_data.assert_not_called()
        mock_chain.buy_with_permit2.assert_not_called()
        mock_chain.buy_with_usdc.assert_not_called()

    def test_duplicate_order(self, service, mock_chain):
        first = _pay(service)
        second = _pay(service)

        assert first.success is True
        assert second.success is False
        assert second.method == "none"
        assert second.error == "Duplicate submission: order ORD-1 has already been processed"
        assert mock_chain.buy_with_permit2.await_count == 1

    def test_failed_payment_is_not_marked(self, service, mock_chain, store):
        mock_chain.buy_with_permit2.side_effect = Exception("revert")
        mock_chain.buy_with_usdc.side_effect = Exception("revert")
        _pay(service)
        assert store.is_processed("ORD-1") is False


# ---------------------------------------------------------------------------
# Permit2 path
# ---------------------------------------------------------------------------
class TestPermit2Path:
    def test_permit2_success(self, service, mock_chain, mock_signer, store):
        result = _pay(service)

        assert result.success is True
        assert result.method == "permit2"
        assert result.transaction_hash == "0xpermit2hash"
        assert result.order_id == "ORD-1"
        mock_chain.buy_with_usdc.assert_not_called()

        args = mock_chain.buy_with_permit2.await_args.args
        assert args[0] is mock_signer
        assert args[1] == WALLET_ADDRESS
        assert args[2] == order_id_to_bytes32("ORD-1")
        assert args[3].amount == 290000
        assert args[3].spender == GUARD_ADDRESS
        assert args[4] == "0x" + "ab" * 65

        record = store.get("ORD-1")
        assert record["method"] == "permit2"
        assert record["amount"] == 0.29

    def test_signature_rejection_falls_back_once(self, service, mock_chain, mock_signer):
        mock_signer.sign_typed_data.side_effect = Exception("User rejected the request")
        result = _pay(service)

        assert result.success is True
        assert result.method == "usdc"
        assert result.transaction_hash == "0xusdchash"
        mock_chain.buy_with_permit2.assert_not_called()
        assert mock_chain.buy_with_usdc.await_count == 1

    def test_permit2_revert_falls_back(self, service, mock_chain, store):
        mock_chain.buy_with_permit2.side_effect = Exception("execution reverted")
        result = _pay(service)
        assert result.method == "usdc"
        assert store.get("ORD-1")["method"] == "usdc"

    def test_fallback_failure_is_terminal(self, service, mock_chain):
        mock_chain.buy_with_permit2.side_effect = Exception("permit2 revert")
        mock_chain.buy_with_usdc.side_effect = Exception("usdc revert")
        result = _pay(service)

        assert result.success is False
        assert result.method == "usdc"
        assert result.error == "usdc revert"
        assert mock_chain.buy_with_permit2.await_count == 1
        assert mock_chain.buy_with_usdc.await_count == 1

    def test_order_id_too_long_touches_nothing(self, service, mock_chain, mock_signer):
        mock_chain.allowance.return_value = 0
        result = _pay(service, order_id="X" * 40)

        assert result.success is False
        assert result.method == "none"
        assert result.error == f"Order id '{'X' * 40}' is longer than 32 bytes"
        mock_signer.sign_typed_data.assert_not_awaited()
        mock_chain.allowance.assert_not_awaited()
        mock_chain.approve.assert_not_awaited()
        mock_chain.buy_with_permit2.assert_not_called()
        mock_chain.buy_with_usdc.assert_not_called()

    def test_usdc_path_rejects_long_order_id_before_approving(self, service, mock_chain, mock_signer):
        mock_chain.allowance.return_value = 0
        result = asyncio.run(service.pay_with_usdc(0.29, "X" * 40))

        assert result.success is False
        mock_chain.approve.assert_not_awaited()
        mock_chain.wait_for_receipt.assert_not_awaited()

    def test_store_failure_keeps_successful_result(self, real_config, mock_signer, mock_chain):
        store = MagicMock()
        store.is_processed.return_value = False
        store.mark_processed.side_effect = OSError("disk full")
        service = USDCPaymentService(real_config, mock_signer, chain=mock_chain, store=store)

        result = _pay(service)

        assert result.success is True
        assert result.method == "permit2"
        assert result.transaction_hash == "0xpermit2hash"
        assert result.error is None
        assert mock_chain.buy_with_permit2.await_count == 1
        store.mark_processed.assert_called_once_with("ORD-1", 0.29, "permit2")


# ---------------------------------------------------------------------------
# Allowance path
# ---------------------------------------------------------------------------
class TestUSDCPath:
    def test_sufficient_allowance_skips_approve(self, service, mock_chain):
        result = asyncio.run(service.pay_with_usdc(0.29, "ORD-2"))
        assert result.success is True
        mock_chain.approve.assert_not_called()
        mock_chain.buy_with_usdc.assert_awaited_once()
        assert mock_chain.buy_with_usdc.await_args.args[3] == 290000

    def test_insufficient_allowance_approves_and_waits(self, service, mock_chain, mock_signer):
        mock_chain.allowance.return_value = 0
        result = asyncio.run(service.pay_with_usdc(0.29, "ORD-2"))

        assert result.success is True
        mock_chain.approve.assert_awaited_once_with(mock_signer, WALLET_ADDRESS, GUARD_ADDRESS, 290000)
        mock_chain.wait_for_receipt.assert_awaited_once_with("0xapprovehash")

    def test_approval_failure(self, service, mock_chain):
        mock_chain.allowance.return_value = 0
        mock_chain.approve.side_effect = Exception("insufficient funds for gas")
        with pytest.raises(ApprovalError, match="insufficient funds for gas"):
            asyncio.run(service.approve_usdc(0.29, WALLET_ADDRESS))

    def test_approval_failure_result(self, service, mock_chain):
        mock_chain.allowance.return_value = 0
        mock_chain.wait_for_receipt.side_effect = Exception("reverted")
        result = asyncio.run(service.pay_with_usdc(0.29, "ORD-2"))
        assert result.success is False
        assert result.error.startswith("USDC approval failed")
        mock_chain.buy_with_usdc.assert_not_called()


# ---------------------------------------------------------------------------
# Guard contract configuration
# ---------------------------------------------------------------------------
class TestGuardNotConfigured:
    def test_both_paths_fail_without_guard(self, real_config, mock_signer, store):
        chain = ChainGateway(real_config, w3=MagicMock())
        service = USDCPaymentService(real_config, mock_signer, chain=chain, store=store)
        result = _pay(service)

        assert result.success is False
        assert result.error == "Guard contract address not set"
        assert store.is_processed("ORD-1") is False


# ---------------------------------------------------------------------------
# Permit data / probes
# ---------------------------------------------------------------------------
class TestPermitData:
    def test_prepare_permit_data(self, service, mock_chain):
        before = int(time.time())
        permit = service.prepare_permit_data(1.5)
        assert permit.token == mock_chain.usdc_address
        assert permit.amount == 1_500_000
        assert permit.spender == GUARD_ADDRESS
        assert permit.deadline >= before + 24 * 60 * 60
        assert permit.nonce > 0

    def test_typed_data_domain(self, service, mock_chain):
        typed = service.permit_typed_data(service.prepare_permit_data(1))
        assert typed["primaryType"] == "PermitTransferFrom"
        assert typed["domain"] == {
            "name": "Permit2",
            "chainId": 8453,
            "verifyingContract": mock_chain.permit2_address,
        }
        assert typed["message"]["permitted"]["amount"] == 1_000_000

    def test_supports_permit2(self, service):
        assert asyncio.run(service.supports_permit2()) is True

    def test_supports_permit2_false_when_signing_fails(self, service, mock_signer):
        mock_signer.sign_typed_data.side_effect = Exception("unsupported method")
        assert asyncio.run(service.supports_permit2()) is False

    def test_usdc_balance(self, service):
        assert asyncio.run(service.get_usdc_balance(WALLET_ADDRESS)) == 25.5

    def test_usdc_balance_error_is_zero(self, service, mock_chain):
        mock_chain.balance_of = AsyncMock(side_effect=Exception("rpc down"))
        assert asyncio.run(service.get_usdc_balance(WALLET_ADDRESS)) == 0.0


class TestFactory:
    def test_create_payment_service_uses_file_store(self, make_config, mock_signer, tmp_path):
        config = make_config(dedupe_store_path=tmp_path / "orders.json", guard_contract_address=GUARD_ADDRESS)
        service = create_payment_service(config, mock_signer)
        assert isinstance(service.store, JsonFileDedupeStore)
        assert service.store.path == tmp_path / "orders.json"
        assert service.chain.guard_configured is True
