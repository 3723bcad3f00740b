"""Shared fixtures and fakes for the wolscan tests."""

import threading

import pytest

from neighbors.base import BaseNeighborReader
from registry import DeviceRegistry


class FakeNeighborReader(BaseNeighborReader):
    def __init__(self, table="", events=None):
        self.table = table
        self.events = events
        self.calls = 0

    def read_table(self):
        self.calls += 1
        if self.events is not None:
            self.events.append("read")
        return self.table


class FakeReachability:
    """Thread-safe stand-in for ping_host with a fixed set of live IPs."""

    def __init__(self, reachable=(), events=None):
        self.reachable = set(reachable)
        self.events = events
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, ip, timeout):
        with self._lock:
            self.calls.append((ip, timeout))
            if self.events is not None:
                self.events.append(("probe", ip))
        return ip in self.reachable


@pytest.fixture
def devices_file(tmp_path):
    return tmp_path / "devices.json"


@pytest.fixture
def registry(devices_file):
    reg = DeviceRegistry(devices_file)
    reg.load()
    return reg
