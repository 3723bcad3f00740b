"""Tests for LivenessProber.update_statuses."""

import json
from datetime import datetime

from device import Device
from prober import LivenessProber
from registry import DeviceRegistry

from conftest import FakeReachability

EARLIER = datetime(2024, 1, 1, 8, 0, 0)


def seed(registry, name, mac, ip, last_online=None):
    dev = Device(id="", name=name, mac=mac, ip=ip, last_online=last_online)
    return registry.add(dev)


class TestLivenessProber:
    def test_mixed_results(self, registry, devices_file):
        a = seed(registry, "a", "AA:BB:CC:DD:EE:01", "192.168.1.2")
        b = seed(registry, "b", "AA:BB:CC:DD:EE:02", "192.168.1.3", last_online=EARLIER)
        c = seed(registry, "c", "AA:BB:CC:DD:EE:03", "192.168.1.4")
        reach = FakeReachability(reachable={"192.168.1.2", "192.168.1.4"})

        before = datetime.now()
        results = LivenessProber(registry, reach, timeout=1.0).update_statuses()

        assert results == {a.id: True, b.id: False, c.id: True}
        after_a, after_b, after_c = registry.list_devices()
        assert after_a.is_online is True and after_a.last_online >= before
        assert after_c.is_online is True and after_c.last_online >= before
        assert after_b.is_online is False
        assert after_b.last_online == EARLIER
        assert sorted(ip for ip, _ in reach.calls) == ["192.168.1.2", "192.168.1.3", "192.168.1.4"]
        assert all(timeout == 1.0 for _, timeout in reach.calls)

        stored = {record["id"]: record for record in json.loads(devices_file.read_text(encoding="utf-8"))}
        assert stored[a.id]["is_online"] is True
        assert stored[b.id]["last_online"] == EARLIER.isoformat()

    def test_unreachable_keeps_previous_success(self, registry):
        dev = seed(registry, "a", "AA:BB:CC:DD:EE:01", "192.168.1.2")
        prober = LivenessProber(registry, FakeReachability(reachable={"192.168.1.2"}))
        prober.update_statuses()
        first_seen = registry.get(dev.id).last_online

        prober.reachability = FakeReachability()
        prober.update_statuses()

        current = registry.get(dev.id)
        assert current.is_online is False
        assert current.last_online == first_seen

    def test_device_without_ip_is_not_probed(self, registry):
        dev = seed(registry, "a", "AA:BB:CC:DD:EE:01", "")
        reach = FakeReachability()
        results = LivenessProber(registry, reach).update_statuses()
        assert results == {dev.id: False}
        assert reach.calls == []

    def test_probe_exception_counts_as_offline(self, registry):
        dev = seed(registry, "a", "AA:BB:CC:DD:EE:01", "192.168.1.2")

        def broken(ip, timeout):
            raise RuntimeError("ping exploded")

        assert LivenessProber(registry, broken).update_statuses() == {dev.id: False}

    def test_empty_registry(self, registry):
        assert LivenessProber(registry, FakeReachability()).update_statuses() == {}

    def test_persist_failure_is_not_raised(self, tmp_path):
        reg = DeviceRegistry(tmp_path / "devices.json")
        dev = reg.add(Device(id="", name="a", mac="AA:BB:CC:DD:EE:01", ip="192.168.1.2"))
        # Point the store at a directory so the sweep's save fails.
        reg.devices_file = tmp_path

        LivenessProber(reg, FakeReachability(reachable={"192.168.1.2"})).update_statuses()

        assert reg.get(dev.id).is_online is True
