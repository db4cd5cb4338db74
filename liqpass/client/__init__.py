"""Clients for the verification gateway and the order/claim backend."""

from liqpass.client.base import ApiError
from liqpass.client.catalog import CatalogClient
from liqpass.client.orders import OrderClient, new_idempotency_key
from liqpass.client.verification import VerificationClient

__all__ = [
    "ApiError",
    "CatalogClient",
    "OrderClient",
    "VerificationClient",
    "new_idempotency_key",
]
