"""On-chain surface used by the payment client.

ABIs cover only the entry points the purchase flow calls: the guard
contract's two purchase functions and the USDC approve/allowance/balanceOf
trio. Amounts are in USDC base units (6 decimals).
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal

USDC_DECIMALS = 6
PERMIT_VALIDITY_SECONDS = 24 * 60 * 60

GUARD_ABI = [
    {
        "type": "function",
        "name": "buyWithPermit2",
        "inputs": [
            {"name": "orderId", "type": "bytes32"},
            {
                "name": "permitData",
                "type": "tuple",
                "components": [
                    {
                        "name": "permitted",
                        "type": "tuple",
                        "components": [
                            {"name": "token", "type": "address"},
                            {"name": "amount", "type": "uint256"},
                        ],
                    },
                    {"name": "spender", "type": "address"},
                    {"name": "nonce", "type": "uint256"},
                    {"name": "deadline", "type": "uint256"},
                ],
            },
            {"name": "sig", "type": "bytes"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "buyWithUSDC",
        "inputs": [
            {"name": "orderId", "type": "bytes32"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [],
        "stateMutability": "nonpayable",
    },
]

ERC20_ABI = [
    {
        "type": "function",
        "name": "approve",
        "inputs": [
            {"name": "_spender", "type": "address"},
            {"name": "_value", "type": "uint256"},
        ],
        "outputs": [{"name": "", "type": "bool"}],
        "stateMutability": "nonpayable",
    },
    {
        "type": "function",
        "name": "allowance",
        "inputs": [
            {"name": "_owner", "type": "address"},
            {"name": "_spender", "type": "address"},
        ],
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
    },
    {
        "type": "function",
        "name": "balanceOf",
        "inputs": [{"name": "_owner", "type": "address"}],
        "outputs": [{"name": "balance", "type": "uint256"}],
        "stateMutability": "view",
    },
]

# EIP-712 types for a Permit2 signature transfer
PERMIT_TRANSFER_FROM_TYPES = {
    "EIP712Domain": [
        {"name": "name", "type": "string"},
        {"name": "chainId", "type": "uint256"},
        {"name": "verifyingContract", "type": "address"},
    ],
    "PermitTransferFrom": [
        {"name": "permitted", "type": "TokenPermissions"},
        {"name": "spender", "type": "address"},
        {"name": "nonce", "type": "uint256"},
        {"name": "deadline", "type": "uint256"},
    ],
    "TokenPermissions": [
        {"name": "token", "type": "address"},
        {"name": "amount", "type": "uint256"},
    ],
}


def to_usdc_units(amount: float | int | str | Decimal) -> int:
    """Convert a USDC amount to base units, truncating below 1e-6."""
    scaled = Decimal(str(amount)) * (Decimal(10) ** USDC_DECIMALS)
    return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def from_usdc_units(units: int) -> float:
    return units / 10 ** USDC_DECIMALS


def order_id_to_bytes32(order_id: str) -> bytes:
    """UTF-8 order id right-padded with zeros to 32 bytes."""
    raw = order_id.encode("utf-8")
    if len(raw) > 32:
        raise ValueError(f"Order id '{order_id}' is longer than 32 bytes")
    return raw.ljust(32, b"\x00")
