"""Payment result, permit data and the payment error hierarchy."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

PaymentMethod = Literal["permit2", "usdc", "none"]


@dataclass(frozen=True)
class PaymentResult:
    success: bool
    method: PaymentMethod
    transaction_hash: Optional[str] = None
    order_id: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict = {"success": self.success, "method": self.method}
        if self.transaction_hash is not None:
            data["transactionHash"] = self.transaction_hash
        if self.order_id is not None:
            data["orderId"] = self.order_id
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class PermitData:
    """Permit2 ``PermitTransferFrom`` message (amount in USDC base units)."""

    token: str
    amount: int
    spender: str
    nonce: int
    deadline: int

    def to_message(self) -> dict:
        return {
            "permitted": {"token": self.token, "amount": self.amount},
            "spender": self.spender,
            "nonce": self.nonce,
            "deadline": self.deadline,
        }

    def to_contract_args(self) -> tuple:
        return ((self.token, self.amount), self.spender, self.nonce, self.deadline)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PaymentError(Exception):
    """Base class for failures at a specific payment stage."""

    message = "Payment failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidAmountError(PaymentError):
    message = "Payment amount must be positive"


class DuplicateOrderError(PaymentError):
    def __init__(self, order_id: str):
        super().__init__(f"Duplicate submission: order {order_id} has already been processed")
        self.order_id = order_id


class SignatureRejectedError(PaymentError):
    message = "Wallet rejected the permit signature"


class InvalidOrderIdError(PaymentError):
    def __init__(self, order_id: str):
        super().__init__(f"Order id '{order_id}' is longer than 32 bytes")
        self.order_id = order_id


class ContractNotConfiguredError(PaymentError):
    message = "Guard contract address not set"


class ApprovalError(PaymentError):
    message = "USDC approval failed"
