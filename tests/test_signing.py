"""Tests for exchange request signing in liqpass/verification/signing.py."""

from __future__ import annotations

import base64
import hashlib
import hmac

from liqpass.verification.signing import (
    BINANCE_ORDER_PATH,
    OKX_ORDER_PATH,
    binance_query_string,
    binance_signature,
    binance_signed_path,
    okx_headers,
    okx_query_string,
    okx_signature,
)


def _digest(secret: str, message: str) -> bytes:
    return hmac.new(secret.encode(), message.encode(), hashlib.sha256).digest()


class TestOKXSigning:
    def test_query_string_order(self):
        assert okx_query_string("BTC-USDT", "abc") == "instId=BTC-USDT&clOrdId=abc"

    def test_signature_is_base64_hmac_of_concatenation(self):
        ts = "2024-05-01T12:00:00.123Z"
        query = okx_query_string("BTC-USDT", "abc")
        expected = base64.b64encode(
            _digest("secret", f"{ts}GET{OKX_ORDER_PATH}instId=BTC-USDT&clOrdId=abc")
        ).decode()
        assert okx_signature("secret", ts, "GET", OKX_ORDER_PATH, query) == expected

    def test_method_is_upper_cased(self):
        ts = "2024-05-01T12:00:00.123Z"
        assert okx_signature("s", ts, "get", OKX_ORDER_PATH, "q") == okx_signature("s", ts, "GET", OKX_ORDER_PATH, "q")

    def test_different_secrets_differ(self):
        ts = "2024-05-01T12:00:00.123Z"
        assert okx_signature("a", ts) != okx_signature("b", ts)

    def test_headers(self):
        headers = okx_headers("key", "pass", "ts", "sig")
        assert headers == {
            "OK-ACCESS-KEY": "key",
            "OK-ACCESS-SIGN": "sig",
            "OK-ACCESS-TIMESTAMP": "ts",
            "OK-ACCESS-PASSPHRASE": "pass",
        }


class TestBinanceSigning:
    def test_query_string(self):
        assert (
            binance_query_string("BTCUSDT", "abc", 1700000000000)
            == "symbol=BTCUSDT&origClientOrderId=abc&timestamp=1700000000000"
        )

    def test_signature_is_hex_hmac_of_query(self):
        query = "symbol=BTCUSDT&origClientOrderId=abc&timestamp=1"
        assert binance_signature("secret", query) == _digest("secret", query).hex()

    def test_signed_path_appends_signature_verbatim(self):
        path = binance_signed_path("BTCUSDT", "abc", 1700000000000, "secret")
        query = "symbol=BTCUSDT&origClientOrderId=abc&timestamp=1700000000000"
        assert path == f"{BINANCE_ORDER_PATH}?{query}&signature={_digest('secret', query).hex()}"
