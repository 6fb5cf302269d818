"""
Configuration settings for the RPC requester and its shared transport
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass, field


_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class TransportConfig:
    """Configuration for the shared HTTP transport"""
    timeout_seconds: float = 30.0
    max_retries: int = 3  # Upper bound on retry_count accepted by the transport
    verify_ssl: bool = True

    @classmethod
    def from_env(cls) -> "TransportConfig":
        """Create config from environment variables"""
        return cls(
            timeout_seconds=float(os.getenv("RPC_TIMEOUT_SECONDS", "30")),
            max_retries=int(os.getenv("RPC_MAX_RETRIES", "3")),
            verify_ssl=_env_bool("RPC_VERIFY_SSL", True),
        )


@dataclass
class AppIdentity:
    """Application identity sent with every request"""
    app_name: str = "platform-rpc"
    app_version: str = "0.1.0"
    platform: str = "python"
    language: str = "en"
    device_id: Optional[str] = None
    testnet: bool = False

    @classmethod
    def from_env(cls) -> "AppIdentity":
        """Create identity from environment variables"""
        return cls(
            app_name=os.getenv("RPC_APP_NAME", "platform-rpc"),
            app_version=os.getenv("RPC_APP_VERSION", "0.1.0"),
            platform=os.getenv("RPC_APP_PLATFORM", "python"),
            language=os.getenv("RPC_APP_LANGUAGE", "en"),
            device_id=os.getenv("RPC_DEVICE_ID"),
            testnet=_env_bool("RPC_TESTNET", False),
        )


@dataclass
class RequesterConfig:
    """Main configuration for the RPC requester"""
    transport: TransportConfig = field(default_factory=TransportConfig)
    identity: AppIdentity = field(default_factory=AppIdentity)

    # Payloads and bodies are only written to logs when enabled, redacted
    log_payloads: bool = False
    log_preview_chars: int = 200

    # When False the mandatory JSON headers win over colliding provider headers
    allow_header_override: bool = False

    # Tracing configuration
    enable_tracing: bool = True
    service_name: str = "platform.rpc"

    @classmethod
    def from_env(cls) -> "RequesterConfig":
        """Create config from environment variables"""
        return cls(
            transport=TransportConfig.from_env(),
            identity=AppIdentity.from_env(),
            log_payloads=_env_bool("RPC_LOG_PAYLOADS", False),
            log_preview_chars=int(os.getenv("RPC_LOG_PREVIEW_CHARS", "200")),
            allow_header_override=_env_bool("RPC_ALLOW_HEADER_OVERRIDE", False),
            enable_tracing=_env_bool("RPC_ENABLE_TRACING", True),
            service_name=os.getenv("RPC_SERVICE_NAME", "platform.rpc"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "timeout_seconds": self.transport.timeout_seconds,
            "max_retries": self.transport.max_retries,
            "verify_ssl": self.transport.verify_ssl,
            "app_name": self.identity.app_name,
            "app_version": self.identity.app_version,
            "log_payloads": self.log_payloads,
            "allow_header_override": self.allow_header_override,
            "enable_tracing": self.enable_tracing,
            "service_name": self.service_name,
        }
