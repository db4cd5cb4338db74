"""Tests for ChainGateway with a mocked AsyncWeb3 instance."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from liqpass.payments.chain import ChainGateway
from liqpass.payments.models import ContractNotConfiguredError, PaymentError, PermitData

GUARD = "0x000000000000000000000000000000000000dEaD"
OWNER = "0x1111111111111111111111111111111111111111"


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.get_transaction_count = AsyncMock(return_value=4)
    w3.eth.send_raw_transaction = AsyncMock(return_value=b"\x12" * 32)
    return w3


@pytest.fixture
def contract(w3):
    contract = MagicMock()
    w3.eth.contract.return_value = contract
    return contract


@pytest.fixture
def chain(make_config, w3):
    return ChainGateway(make_config(guard_contract_address=GUARD), w3=w3)


def _writable(fn_mock: MagicMock, name: str) -> MagicMock:
    fn = fn_mock.return_value
    fn.fn_name = name
    fn.call = AsyncMock(return_value=None)
    fn.build_transaction = AsyncMock(return_value={"to": GUARD, "data": "0x"})
    return fn


class TestGuardAddress:
    def test_unset_guard_raises(self, real_config, w3):
        chain = ChainGateway(real_config, w3=w3)
        assert chain.guard_configured is False
        with pytest.raises(ContractNotConfiguredError, match="Guard contract address not set"):
            chain.guard_address

    def test_guard_is_checksummed(self, make_config, w3):
        chain = ChainGateway(make_config(guard_contract_address=GUARD.lower()), w3=w3)
        assert chain.guard_address == GUARD


class TestReads:
    def test_allowance(self, chain, contract):
        contract.functions.allowance.return_value.call = AsyncMock(return_value=123)
        assert asyncio.run(chain.allowance(OWNER, GUARD)) == 123
        contract.functions.allowance.assert_called_once_with(OWNER, GUARD)

    def test_balance_of(self, chain, contract):
        contract.functions.balanceOf.return_value.call = AsyncMock(return_value=5_000_000)
        assert asyncio.run(chain.balance_of(OWNER)) == 5_000_000


class TestWrites:
    def test_simulate_sign_send(self, chain, contract, w3, mock_signer):
        fn = _writable(contract.functions.approve, "approve")
        tx_hash = asyncio.run(chain.approve(mock_signer, OWNER, GUARD, 290000))

        assert tx_hash == "0x" + "12" * 32
        fn.call.assert_awaited_once_with({"from": OWNER})
        fn.build_transaction.assert_awaited_once_with({"from": OWNER, "chainId": 8453, "nonce": 4})
        mock_signer.sign_transaction.assert_awaited_once_with({"to": GUARD, "data": "0x"})
        w3.eth.send_raw_transaction.assert_awaited_once_with(b"\x01\x02")

    def test_failed_simulation_sends_nothing(self, chain, contract, w3, mock_signer):
        fn = _writable(contract.functions.buyWithUSDC, "buyWithUSDC")
        fn.call.side_effect = Exception("execution reverted: order exists")
        with pytest.raises(Exception, match="order exists"):
            asyncio.run(chain.buy_with_usdc(mock_signer, OWNER, b"\x00" * 32, 290000))
        mock_signer.sign_transaction.assert_not_called()
        w3.eth.send_raw_transaction.assert_not_called()

    def test_buy_with_permit2_arguments(self, chain, contract, mock_signer):
        _writable(contract.functions.buyWithPermit2, "buyWithPermit2")
        permit = PermitData(token=OWNER, amount=290000, spender=GUARD, nonce=1, deadline=2)
        asyncio.run(chain.buy_with_permit2(mock_signer, OWNER, b"\x01" * 32, permit, "0x" + "ab" * 65))
        contract.functions.buyWithPermit2.assert_called_once_with(
            b"\x01" * 32, ((OWNER, 290000), GUARD, 1, 2), bytes.fromhex("ab" * 65)
        )

    def test_reverted_receipt_raises(self, chain, w3):
        w3.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": 0})
        with pytest.raises(PaymentError, match="reverted"):
            asyncio.run(chain.wait_for_receipt("0xabc"))

    def test_successful_receipt(self, chain, w3):
        w3.eth.wait_for_transaction_receipt = AsyncMock(return_value={"status": 1, "blockNumber": 9})
        assert asyncio.run(chain.wait_for_receipt("0xabc"))["blockNumber"] == 9
