"""Configuration schema using Pydantic."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from alchemykit import __version__
from alchemykit.network import Network, SupportedNetworks
from alchemykit.transport.backoff import BackoffPolicy
from alchemykit.utils.exceptions import ConfigError, MissingAPIKeyError, NetworkNotFoundError


class AlchemyConfig(BaseSettings):
    """Root configuration for an Alchemy client."""
    api_key: str = ""
    network: str = "eth-mainnet"
    timeout: float = Field(default=30.0, description="Per-request timeout in seconds")
    max_retries: int = 3
    retry_initial_delay: float = 1.0
    retry_max_delay: float = 30.0
    retry_multiplier: float = 2.0
    retry_jitter: float = 0.1
    base_url: str | None = None  # overrides the node URL (api key is not appended)
    nft_base_url: str | None = None
    webhook_auth_token: str | None = None
    user_agent: str = f"alchemykit/{__version__}"
    log_requests: bool = False

    model_config = SettingsConfigDict(
        env_prefix="ALCHEMY_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    def validate_settings(self) -> Network:
        """Check required fields and return the resolved network."""
        if not self.api_key.strip() and not self.base_url:
            raise MissingAPIKeyError()
        network = SupportedNetworks.get_network(self.network)
        if network is None:
            raise NetworkNotFoundError(self.network)
        if self.timeout <= 0:
            raise ConfigError("timeout must be positive", field="timeout")
        if self.max_retries < 0:
            raise ConfigError("max_retries must be >= 0", field="max_retries")
        if self.retry_initial_delay < 0 or self.retry_max_delay < 0:
            raise ConfigError("retry delays must be >= 0", field="retry_initial_delay")
        if not 0 <= self.retry_jitter <= 1:
            raise ConfigError("retry_jitter must be within [0, 1]", field="retry_jitter")
        return network

    def backoff_policy(self) -> BackoffPolicy:
        return BackoffPolicy(
            max_retries=self.max_retries,
            initial_delay=self.retry_initial_delay,
            max_delay=self.retry_max_delay,
            multiplier=self.retry_multiplier,
            jitter=self.retry_jitter,
        )

    def node_url(self) -> str:
        if self.base_url:
            return self.base_url.rstrip("/")
        return SupportedNetworks.require_network(self.network).node_url(self.api_key)

    def nft_url(self) -> str:
        if self.nft_base_url:
            return self.nft_base_url.rstrip("/")
        return SupportedNetworks.require_network(self.network).nft_url(self.api_key)
