"""LiqPass configuration settings.

Loads settings from:
1. Environment variables (and ``.env``)
2. An optional YAML overlay (``config/config.yaml``)
3. Default values

The resulting object is built once at startup and handed to the gateway,
checkers, clients and payment service explicitly.
"""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LiqPassConfig(BaseSettings):
    """Central configuration for the verification gateway and clients."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # --- Gateway ---
    host: str = "0.0.0.0"
    port: int = Field(default=8787, validation_alias=AliasChoices("JP_PORT", "PORT", "port"))
    verify_mode: Literal["stub", "real"] = "real"

    # --- Exchange endpoints ---
    okx_base_url: str = "https://www.okx.com"
    binance_base_url: str = "https://api.binance.com"
    google_mcp_base_url: str = "https://generativelanguage.googleapis.com"

    # --- Exchange credentials ---
    okx_api_key: str = ""
    okx_secret_key: str = ""
    okx_passphrase: str = ""
    binance_api_key: str = ""
    binance_secret_key: str = ""

    # --- Heuristic checker ---
    google_mcp_api_key: str = ""
    google_mcp_model: str = "gemini-pro"
    heuristic_provider: Literal["gemini", "openai"] = "gemini"
    heuristic_timeout: float = 30.0

    # --- Backend services ---
    us_api_base: str = "http://localhost:8080"
    jp_api_base: str = "http://localhost:8787"

    # --- Payments (Base mainnet defaults) ---
    rpc_url: str = "https://mainnet.base.org"
    chain_id: int = 8453
    usdc_address: str = "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
    permit2_address: str = "0x000000000022D473030F116dDEE9F6B43aC78BA3"
    guard_contract_address: str = ""
    dedupe_store_path: Path = Field(
        default_factory=lambda: Path.home() / ".liqpass" / "processed_orders.json"
    )

    # --- Logging ---
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    @field_validator("verify_mode", "heuristic_provider", mode="before")
    @classmethod
    def lower_case(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def okx_configured(self) -> bool:
        return bool(self.okx_api_key and self.okx_secret_key and self.okx_passphrase)

    @property
    def binance_configured(self) -> bool:
        return bool(self.binance_api_key and self.binance_secret_key)

    @property
    def google_mcp_configured(self) -> bool:
        return bool(self.google_mcp_api_key)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path = "config/config.yaml") -> "LiqPassConfig":
        """Load configuration from a YAML file, falling back to env/defaults."""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            return cls()

        with open(yaml_path) as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)


# Global configuration instance
_config: Optional[LiqPassConfig] = None


def get_config() -> LiqPassConfig:
    """Get or create the process-wide configuration instance."""
    global _config
    if _config is None:
        _config = LiqPassConfig.from_yaml()
    return _config

