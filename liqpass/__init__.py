"""
LiqPass
Exchange order verification gateway and USDC premium payment client
"""

__version__ = "1.0.0"
__author__ = "LiqPass Team"

from liqpass.config import LiqPassConfig, get_config

__all__ = [
    "LiqPassConfig",
    "get_config",
]
