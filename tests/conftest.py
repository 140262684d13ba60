"""Pytest configuration and fixtures for remote_table tests."""

from __future__ import annotations

import socket
from typing import Generator

import pytest
from prometheus_client import CollectorRegistry

from helpers import RowStorePeer
from remote_table.infrastructure.config import Config, RowStoreConfig
from remote_table.infrastructure.metrics import MetricsRegistry


@pytest.fixture
def metrics_registry() -> MetricsRegistry:
    """Provide a fresh metrics registry for each test."""
    # Use a separate registry to avoid conflicts between tests
    registry = CollectorRegistry(auto_describe=True)
    return MetricsRegistry(registry=registry)


@pytest.fixture
def row_store_peer() -> Generator[RowStorePeer, None, None]:
    """Provide a running in-process row store on an ephemeral port."""
    peer = RowStorePeer()
    peer.start()
    yield peer
    peer.stop()


@pytest.fixture
def test_config(row_store_peer: RowStorePeer) -> Config:
    """Provide a configuration pointing at the in-process row store."""
    endpoint = row_store_peer.endpoint
    return Config(
        row_store=RowStoreConfig(
            host=endpoint.host,
            port=endpoint.port,
            connect_timeout_seconds=2.0,
            read_timeout_seconds=2.0,
        ),
    )


@pytest.fixture
def unused_tcp_port() -> int:
    """Provide a local port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


# Markers for test categories
def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests")
