"""Shared fixtures."""

from __future__ import annotations

import socket

import pytest

from fake_device import FakeDevice


@pytest.fixture
def device():
    """Factory starting a one-shot loopback device: ``device(handler, transport)``."""
    started: list[FakeDevice] = []

    def start(handler, transport: str = "tcp") -> FakeDevice:
        dev = FakeDevice(handler, transport)
        started.append(dev)
        return dev

    yield start
    for dev in started:
        dev.close()


@pytest.fixture
def closed_port() -> int:
    """A loopback TCP port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
