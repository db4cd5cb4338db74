"""Request signing for exchange private REST endpoints.

Both exchanges use HMAC-SHA256 with the account secret:

- OKX signs ``timestamp + method + request_path + query_string`` and sends the
  digest base64-encoded in ``OK-ACCESS-SIGN``.
- Binance signs the literal query string and appends the hex digest as the
  ``signature`` parameter.

The OKX pre-hash string is concatenated exactly as the order-lookup flow has
always built it (no ``?`` between path and query). It has not been checked
against the live API; a mismatch there shows up only as a failed lookup.
"""

from __future__ import annotations

import base64
import hashlib
import hmac

OKX_ORDER_PATH = "/api/v5/trade/order"
BINANCE_ORDER_PATH = "/api/v3/order"


def hmac_sha256(secret: str, message: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).digest()


def okx_query_string(pair: str, order_ref: str) -> str:
    return f"instId={pair}&clOrdId={order_ref}"


def okx_signature(
    secret: str,
    timestamp: str,
    method: str = "GET",
    request_path: str = OKX_ORDER_PATH,
    query_string: str = "",
) -> str:
    """Base64 HMAC-SHA256 over ``timestamp + method + request_path + query_string``."""
    prehash = f"{timestamp}{method.upper()}{request_path}{query_string}"
    return base64.b64encode(hmac_sha256(secret, prehash)).decode("ascii")


def okx_headers(api_key: str, passphrase: str, timestamp: str, signature: str) -> dict[str, str]:
    return {
        "OK-ACCESS-KEY": api_key,
        "OK-ACCESS-SIGN": signature,
        "OK-ACCESS-TIMESTAMP": timestamp,
        "OK-ACCESS-PASSPHRASE": passphrase,
    }


def binance_query_string(pair: str, order_ref: str, timestamp_ms: int) -> str:
    return f"symbol={pair}&origClientOrderId={order_ref}&timestamp={timestamp_ms}"


def binance_signature(secret: str, query_string: str) -> str:
    """Hex HMAC-SHA256 over the literal query string."""
    return hmac_sha256(secret, query_string).hex()


def binance_signed_path(pair: str, order_ref: str, timestamp_ms: int, secret: str) -> str:
    """Order-lookup path with the signed query appended verbatim."""
    query = binance_query_string(pair, order_ref, timestamp_ms)
    return f"{BINANCE_ORDER_PATH}?{query}&signature={binance_signature(secret, query)}"
