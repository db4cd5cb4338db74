"""USDC premium payments: Permit2 first, approve + transfer as fallback."""

from liqpass.payments.dedupe import InMemoryDedupeStore, JsonFileDedupeStore
from liqpass.payments.models import PaymentError, PaymentResult, PermitData
from liqpass.payments.service import USDCPaymentService, create_payment_service
from liqpass.payments.wallet import LocalAccountSigner, WalletSigner

__all__ = [
    "InMemoryDedupeStore",
    "JsonFileDedupeStore",
    "LocalAccountSigner",
    "PaymentError",
    "PaymentResult",
    "PermitData",
    "USDCPaymentService",
    "WalletSigner",
    "create_payment_service",
]
