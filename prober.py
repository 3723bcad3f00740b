# prober.py
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime
from typing import Dict

from reachability import Reachability, STATUS_TIMEOUT, ping_host
from registry import DeviceRegistry

logger = logging.getLogger(__name__)


class LivenessProber:
    """Pings every registered device in parallel and records who answered."""

    def __init__(self, registry: DeviceRegistry, reachability: Reachability = ping_host,
                 timeout: float = STATUS_TIMEOUT):
        self.registry = registry
        self.reachability = reachability
        self.timeout = timeout

    def update_statuses(self) -> Dict[str, bool]:
        """Runs one sweep and applies it to the registry.

        The device list is copied up front; one probe per device with an IP runs
        concurrently and all results are collected before anything is written
        back. Devices without an IP count as unreachable.

        Returns:
            Mapping of device id to reachability for this sweep.
        """
        devices = self.registry.list_devices()
        results: Dict[str, bool] = {device.id: False for device in devices if not device.ip}
        targets = [device for device in devices if device.ip]

        if targets:
            with ThreadPoolExecutor(max_workers=len(targets)) as executor:
                futures = {executor.submit(self._probe, device.ip): device.id for device in targets}
                for future in as_completed(futures):
                    results[futures[future]] = future.result()

        self.registry.apply_statuses(results, datetime.now())
        online = sum(1 for status in results.values() if status)
        logger.info(f"Status sweep complete: {online}/{len(results)} devices online")
        return results

    def _probe(self, ip: str) -> bool:
        try:
            return bool(self.reachability(ip, self.timeout))
        except Exception as e:  # pylint: disable=broad-except
            logger.debug(f"Probe of {ip} failed: {e}")
            return False
