"""
Tests for session configuration.
"""

import pytest

from relaycat.config import (
    SessionConfig,
    Role,
    Transport,
    DEFAULT_PORT,
    DEFAULT_HOST,
)


class TestRoleAndTransport:
    """Tests for mode selection."""

    def test_defaults(self):
        """Test that the default session is a TCP client."""
        config = SessionConfig()
        assert config.role == Role.CLIENT
        assert config.transport == Transport.TCP

    def test_listen_udp(self):
        """Test UDP server selection."""
        config = SessionConfig(listen=True, udp=True)
        assert config.role == Role.SERVER
        assert config.transport == Transport.UDP


class TestEffectivePort:
    """Tests for port precedence."""

    def test_default_port(self):
        """Test fallback when no port is given."""
        assert SessionConfig().effective_port == DEFAULT_PORT == 8080
        assert SessionConfig(listen=True).effective_port == 8080

    def test_client_prefers_positional(self):
        """Test that a client prefers the positional port over --port."""
        config = SessionConfig(port=1111, target_port=2222)
        assert config.effective_port == 2222

    def test_client_falls_back_to_option(self):
        """Test that a client uses --port when no positional port is given."""
        assert SessionConfig(port=1111).effective_port == 1111

    def test_server_prefers_option(self):
        """Test that a server prefers --port over the positional port."""
        config = SessionConfig(listen=True, port=1111, target_port=2222)
        assert config.effective_port == 1111

    def test_server_falls_back_to_positional(self):
        """Test that a server uses the positional port when --port is absent."""
        config = SessionConfig(listen=True, target_port=2222)
        assert config.effective_port == 2222

    def test_port_zero_is_explicit(self):
        """Test that port 0 counts as given."""
        assert SessionConfig(port=0).effective_port == 0


class TestEffectiveHost:
    """Tests for host selection."""

    def test_client_default_host(self):
        """Test the default client host."""
        assert SessionConfig().effective_host == DEFAULT_HOST == "localhost"

    def test_client_host(self):
        """Test an explicit client host."""
        assert SessionConfig(host="example.com").effective_host == "example.com"

    @pytest.mark.parametrize("udp", [False, True])
    def test_server_ignores_host(self, udp):
        """Test that servers always bind every interface."""
        config = SessionConfig(listen=True, udp=udp, host="example.com")
        assert config.effective_host == "0.0.0.0"

    def test_to_dict(self):
        """Test serialization for logging."""
        data = SessionConfig(udp=True, host="h", target_port=5).to_dict()
        assert data["transport"] == "udp"
        assert data["role"] == "client"
        assert data["effective_host"] == "h"
        assert data["effective_port"] == 5
