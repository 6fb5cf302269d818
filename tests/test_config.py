"""
Tests for requester configuration
"""
import os
from unittest.mock import patch

from platform_rpc.config import AppIdentity, RequesterConfig, TransportConfig


class TestTransportConfig:
    """Test transport configuration"""

    def test_default_values(self):
        config = TransportConfig()
        assert config.timeout_seconds == 30.0
        assert config.max_retries == 3
        assert config.verify_ssl is True

    def test_from_env(self):
        """Test transport config creation from environment"""
        with patch.dict(os.environ, {
            "RPC_TIMEOUT_SECONDS": "12.5",
            "RPC_MAX_RETRIES": "1",
            "RPC_VERIFY_SSL": "no",
        }):
            config = TransportConfig.from_env()
            assert config.timeout_seconds == 12.5
            assert config.max_retries == 1
            assert config.verify_ssl is False


class TestAppIdentity:
    """Test application identity configuration"""

    def test_from_env(self):
        """Test identity creation from environment"""
        with patch.dict(os.environ, {
            "RPC_APP_NAME": "wallet",
            "RPC_APP_VERSION": "4.2.0",
            "RPC_DEVICE_ID": "device-123",
            "RPC_TESTNET": "TRUE",
        }):
            identity = AppIdentity.from_env()
            assert identity.app_name == "wallet"
            assert identity.app_version == "4.2.0"
            assert identity.device_id == "device-123"
            assert identity.testnet is True

    def test_defaults_without_env(self):
        """Test defaults when no variables are set"""
        with patch.dict(os.environ, clear=True):
            identity = AppIdentity.from_env()
            assert identity.app_name == "platform-rpc"
            assert identity.device_id is None
            assert identity.testnet is False


class TestRequesterConfig:
    """Test main requester configuration"""

    def test_default_values(self):
        config = RequesterConfig()
        assert config.log_payloads is False
        assert config.allow_header_override is False
        assert config.enable_tracing is True
        assert config.service_name == "platform.rpc"
        assert isinstance(config.transport, TransportConfig)
        assert isinstance(config.identity, AppIdentity)

    def test_from_env(self):
        """Test requester config creation from environment"""
        with patch.dict(os.environ, {
            "RPC_LOG_PAYLOADS": "1",
            "RPC_ALLOW_HEADER_OVERRIDE": "on",
            "RPC_ENABLE_TRACING": "false",
            "RPC_SERVICE_NAME": "wallet.rpc",
            "RPC_TIMEOUT_SECONDS": "3",
        }):
            config = RequesterConfig.from_env()
            assert config.log_payloads is True
            assert config.allow_header_override is True
            assert config.enable_tracing is False
            assert config.service_name == "wallet.rpc"
            assert config.transport.timeout_seconds == 3.0

    def test_config_to_dict(self):
        """Test config serialization to dictionary"""
        config_dict = RequesterConfig().to_dict()

        assert config_dict["timeout_seconds"] == 30.0
        assert config_dict["allow_header_override"] is False
        assert "log_payloads" in config_dict
        assert "enable_tracing" in config_dict
        assert "service_name" in config_dict
