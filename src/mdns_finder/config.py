"""Configuration management for the mDNS finder."""

import json
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DiscoveryConfig(BaseModel): # Nested under Config (BaseSettings)
    """Configuration for mDNS service discovery."""

    multicast_group: str = Field(default="224.0.0.251", description="IPv4 mDNS multicast group the query is sent to.")
    multicast_port: int = Field(default=5353, ge=1, le=65535, description="mDNS port on the multicast group.")
    multicast_ttl: int = Field(default=255, ge=1, le=255, description="IP TTL for outgoing multicast queries.")
    query_name: str = Field(default="_services._dns-sd._udp.local", description="Name queried with a PTR question to enumerate service types.")

    debounce_seconds: float = Field(default=0.025, gt=0, le=5, description="Window in which registry updates collapse into a single callback.")
    timeout_seconds: float = Field(default=10.0, gt=0, le=300, description="Delay after which an empty registry is reported as an empty result.")

    skip_loopback: bool = Field(default=True, description="Skip loopback interfaces when enumerating local addresses.")
    network_interfaces: List[str] = Field(default_factory=list, description="Specific network interfaces to use for discovery (e.g., ['eth0', 'wlan0']). If empty, uses all suitable.")

    buffer_initial_size: int = Field(default=512, ge=12, description="Initial size of the query serialization buffer.")
    buffer_max_size: int = Field(default=9000, ge=12, description="Hard ceiling for the query serialization buffer.")

    @model_validator(mode="after")
    def check_buffer_sizes(self) -> "DiscoveryConfig":
        if self.buffer_initial_size > self.buffer_max_size:
            raise ValueError("buffer_initial_size must not exceed buffer_max_size")
        return self

class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="console", description="Log format ('console' or 'json')")


class Config(BaseSettings):
    """Main configuration for the mDNS finder. Loads from environment variables prefixed with MDNS_FINDER_."""

    model_config = SettingsConfigDict(
        env_prefix='MDNS_FINDER_',
        env_nested_delimiter='__', # e.g., MDNS_FINDER_DISCOVERY__TIMEOUT_SECONDS
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, file_path: Path) -> "Config":
        """Create configuration strictly from a JSON file.
        Note: This does not layer with environment variables.
        """
        with open(file_path) as f:
            config_data = json.load(f)
        return cls.model_validate(config_data)
