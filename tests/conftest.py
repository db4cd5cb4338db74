"""Shared test fixtures for the LiqPass test suite."""

import os

import pytest
from unittest.mock import AsyncMock, MagicMock

# Ensure a predictable environment before any config import
os.environ.setdefault("VERIFY_MODE", "real")
os.environ.setdefault("LOG_LEVEL", "INFO")

from liqpass.config import LiqPassConfig
from liqpass.verification.models import VerificationRequest

GUARD_ADDRESS = "0x000000000000000000000000000000000000dEaD"
WALLET_ADDRESS = "0x1111111111111111111111111111111111111111"


def _config(**overrides) -> LiqPassConfig:
    values = dict(
        verify_mode="real",
        okx_base_url="https://okx.test",
        binance_base_url="https://binance.test",
        google_mcp_base_url="https://gemini.test",
        okx_api_key="",
        okx_secret_key="",
        okx_passphrase="",
        binance_api_key="",
        binance_secret_key="",
        google_mcp_api_key="",
        us_api_base="https://us.test",
        jp_api_base="https://jp.test",
        guard_contract_address="",
    )
    values.update(overrides)
    return LiqPassConfig(**values)


@pytest.fixture
def make_config():
    """Factory for configs with all credentials blank unless overridden."""
    return _config


@pytest.fixture
def stub_config():
    return _config(verify_mode="stub")


@pytest.fixture
def real_config():
    return _config()


@pytest.fixture
def credentialed_config():
    return _config(
        okx_api_key="okx-key",
        okx_secret_key="okx-secret",
        okx_passphrase="okx-pass",
        binance_api_key="bn-key",
        binance_secret_key="bn-secret",
        google_mcp_api_key="gemini-key",
    )


@pytest.fixture
def order_payload():
    return {
        "exchange": "okx",
        "pair": "BTC-USDT",
        "orderRef": "test-order-123",
        "wallet": "test-wallet-456",
    }


@pytest.fixture
def okx_request():
    return VerificationRequest(exchange="okx", pair="BTC-USDT", order_ref="test-order-123", wallet="w1")


@pytest.fixture
def binance_request():
    return VerificationRequest(exchange="binance", pair="BTCUSDT", order_ref="test-order-123", wallet="w1")


@pytest.fixture
def mock_signer():
    """Wallet signer whose every call succeeds."""
    signer = MagicMock()
    signer.get_address = AsyncMock(return_value=WALLET_ADDRESS)
    signer.sign_typed_data = AsyncMock(return_value="0x" + "ab" * 65)
    signer.sign_transaction = AsyncMock(return_value=b"\x01\x02")
    return signer


@pytest.fixture
def mock_chain():
    """Chain gateway with ample allowance and successful writes."""
    chain = MagicMock()
    chain.chain_id = 8453
    chain.usdc_address = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
    chain.permit2_address = "0x000000000022D473030F116dDEE9F6B43aC78BA3"
    chain.guard_address = GUARD_ADDRESS
    chain.buy_with_permit2 = AsyncMock(return_value="0xpermit2hash")
    chain.buy_with_usdc = AsyncMock(return_value="0xusdchash")
    chain.allowance = AsyncMock(return_value=10**12)
    chain.approve = AsyncMock(return_value="0xapprovehash")
    chain.wait_for_receipt = AsyncMock(return_value={"status": 1})
    chain.balance_of = AsyncMock(return_value=25_500_000)
    return chain
