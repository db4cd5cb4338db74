"""
Test suite for LiqPass

- Unit tests for signing, checkers, the dispatcher and the gateway API
- Client tests against mocked HTTP transports
- Payment tests against a mocked chain gateway and wallet
"""
