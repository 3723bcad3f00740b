# registry.py
import logging
import threading
import time
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from data import load_device_data, save_device_data
from device import Device
from errors import DeviceNotFoundError, DuplicateDeviceError, PersistenceError
from utils import format_mac

logger = logging.getLogger(__name__)


class DeviceRegistry:
    """Authoritative, lock-guarded list of wakeable devices backed by a JSON file.

    One instance is built at startup and handed to every consumer. Every read
    returns copies, and every mutation is followed by a full rewrite of the
    store while the lock is still held.
    """

    def __init__(self, devices_file: Path):
        self.devices_file = Path(devices_file)
        self._devices: List[Device] = []
        self._lock = threading.Lock()

    def load(self) -> None:
        """Replaces the in-memory list with the store's contents.

        A missing store yields an empty registry.

        Raises:
            PersistenceError: If the store exists but cannot be read.
        """
        with self._lock:
            self._devices = load_device_data(self.devices_file)
            logger.info(f"Loaded {len(self._devices)} devices from {self.devices_file}")

    def list_devices(self) -> List[Device]:
        """Returns an independent copy of all devices in insertion order."""
        with self._lock:
            return [replace(device) for device in self._devices]

    def get(self, device_id: str) -> Device:
        with self._lock:
            return replace(self._find(device_id))

    def add(self, device: Device) -> Device:
        """Registers a device and persists the registry.

        A device without an id is given a fresh one; a given id must be unused.
        On a persist failure the device stays registered in memory and the next
        successful save writes it.

        Returns:
            A copy of the registered device, with its id.

        Raises:
            DuplicateDeviceError: If the id, the MAC, or a non-empty IP is already taken.
            PersistenceError: If the store could not be written.
        """
        with self._lock:
            for existing in self._devices:
                if format_mac(existing.mac) == format_mac(device.mac) or (
                        device.ip and existing.ip == device.ip):
                    raise DuplicateDeviceError(
                        f"device with MAC {device.mac} or IP {device.ip} already exists")
                if device.id and existing.id == device.id:
                    raise DuplicateDeviceError(f"device with id {device.id} already exists")
            stored = replace(device, id=device.id or self._new_id())
            self._devices.append(stored)
            logger.info(f"Added device {stored.id}: {stored.name} ({stored.mac})")
            self._save_unlocked()
            return replace(stored)

    def remove(self, device_id: str) -> None:
        """Unregisters a device and persists the registry.

        Raises:
            DeviceNotFoundError: If no device has that id. The store is not touched.
            PersistenceError: If the store could not be written.
        """
        with self._lock:
            device = self._find(device_id)
            self._devices.remove(device)
            logger.info(f"Removed device {device_id}: {device.name} ({device.mac})")
            self._save_unlocked()

    def save(self) -> None:
        with self._lock:
            self._save_unlocked()

    def apply_statuses(self, results: Dict[str, bool], when: Optional[datetime] = None) -> None:
        """Writes one sweep's reachability results back and persists once.

        Reachable devices get is_online=True and last_online=when. Unreachable
        ones get is_online=False and keep their last_online. Devices missing from
        results (added after the sweep started) are left alone. A persist failure
        is logged, not raised.
        """
        when = when or datetime.now()
        with self._lock:
            for device in self._devices:
                if device.id not in results:
                    continue
                device.is_online = results[device.id]
                if device.is_online:
                    device.last_online = when
            try:
                self._save_unlocked()
            except PersistenceError as e:
                logger.error(f"Failed to persist device statuses: {e}")

    def _find(self, device_id: str) -> Device:
        for device in self._devices:
            if device.id == device_id:
                return device
        raise DeviceNotFoundError(f"device {device_id} not found")

    def _new_id(self) -> str:
        taken = {device.id for device in self._devices}
        candidate = time.time_ns()
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)

    def _save_unlocked(self) -> None:
        # Caller must hold self._lock.
        save_device_data(self._devices, self.devices_file)
