"""Pydantic BaseSettings — process configuration loaded once at startup."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration loaded from env / .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ── Application ─────────────────────────────────────────────
    APP_ENV: Literal["dev", "prod"] = "dev"
    APP_NAME: str = "rfq-maker"
    LOG_LEVEL: str = "INFO"

    # ── Maker identity (never commit real values) ───────────────
    MAKER_PRIVATE_KEY: str = ""
    SIGNER_MAX_WORKERS: int = Field(default=2, ge=1)

    # ── Quoting features ────────────────────────────────────────
    ALLOW_CONTRACT_SENDER: bool = False
    ALLOW_PARTIAL_FILL: bool = False
    OFFER_EXPIRY_SECONDS: int = Field(default=300, gt=0)
    RATE_TABLE_PATH: str = ""

    # ── Network / RPC ───────────────────────────────────────────
    # Default endpoint, used for any chain without its own entry below.
    JSON_RPC_PROVIDER: str = ""
    # JSON object, e.g. '{"11155111": "https://sepolia.example"}'
    JSON_RPC_PROVIDERS: dict[int, str] = Field(default_factory=dict)
    RPC_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    # ── HTTP ────────────────────────────────────────────────────
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 9000

    def rpc_endpoints(self, chain_ids: list[int]) -> dict[int, str]:
        """Resolve one RPC URL per chain, falling back to ``JSON_RPC_PROVIDER``."""
        endpoints: dict[int, str] = {}
        for chain_id in chain_ids:
            url = self.JSON_RPC_PROVIDERS.get(chain_id) or self.JSON_RPC_PROVIDER
            if url:
                endpoints[chain_id] = url
        return endpoints


settings = Settings()
