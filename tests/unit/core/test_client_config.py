"""
Tests for ClientConfig and its parts.
"""

import dataclasses

import pytest

from request_shaper.core.config import (
    DEFAULT_USER_AGENT,
    ClientConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    TimeoutConfig,
)
from request_shaper.core.impersonation import ImpersonationConfig


class TestTimeoutConfig:

    def test_defaults(self):
        assert TimeoutConfig().as_tuple() == (5, 30)

    @pytest.mark.parametrize("kwargs", [{"connect": 0}, {"read": -1}])
    def test_must_be_positive(self, kwargs):
        with pytest.raises(ValueError):
            TimeoutConfig(**kwargs)


class TestPoolAndSecurity:

    def test_pool_validation(self):
        with pytest.raises(ValueError):
            ConnectionPoolConfig(pool_maxsize=0)

    def test_security_validation(self):
        with pytest.raises(ValueError):
            SecurityConfig(max_response_size=0)

    def test_ca_bundle_path(self):
        assert SecurityConfig(verify_ssl="/etc/ssl/ca.crt").verify_ssl == "/etc/ssl/ca.crt"


class TestClientConfig:

    def test_defaults(self):
        config = ClientConfig()
        assert config.base_url is None
        assert dict(config.headers) == {}
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.impersonate is None
        assert config.logging is None

    def test_base_url_trailing_slash_stripped(self):
        assert ClientConfig(base_url="https://api.example.com/").base_url == "https://api.example.com"

    def test_headers_frozen(self):
        headers = {"X-Team": "platform"}
        config = ClientConfig(headers=headers)
        headers["X-Team"] = "other"
        assert config.headers["X-Team"] == "platform"
        with pytest.raises(TypeError):
            config.headers["X-New"] = "1"

    def test_frozen(self):
        config = ClientConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.base_url = "https://other"

    def test_create_timeout_number(self):
        config = ClientConfig.create(timeout=60)
        assert config.timeout.as_tuple() == (5, 60)

    def test_create_timeout_tuple(self):
        config = ClientConfig.create(timeout=(2, 20), verify_ssl=False)
        assert config.timeout.as_tuple() == (2, 20)
        assert config.security.verify_ssl is False

    def test_create_passes_extra_kwargs(self):
        config = ClientConfig.create(pool=ConnectionPoolConfig(pool_maxsize=50))
        assert config.pool.pool_maxsize == 50

    def test_with_timeout(self):
        config = ClientConfig.create(timeout=10)
        updated = config.with_timeout(TimeoutConfig(connect=1, read=2))
        assert updated.timeout.as_tuple() == (1, 2)
        assert config.timeout.as_tuple() == (5, 10)

    def test_with_headers_merges(self):
        config = ClientConfig.create(headers={"X-A": "1"})
        updated = config.with_headers({"X-B": "2"})
        assert dict(updated.headers) == {"X-A": "1", "X-B": "2"}
        assert dict(config.headers) == {"X-A": "1"}

    def test_with_impersonation(self):
        alice = ImpersonationConfig(username="alice")
        config = ClientConfig.create(base_url="https://api.example.com")
        as_alice = config.with_impersonation(alice)
        assert as_alice.impersonate is alice
        assert config.impersonate is None
        assert as_alice.with_impersonation(None).impersonate is None
