# data.py
import json
import logging
from typing import List, Optional
from pathlib import Path

from device import Device
from errors import PersistenceError

logger = logging.getLogger(__name__)


def default_devices_path(devices_file: Optional[str] = None) -> Path:
    """Resolves the device store path.

    An explicit path wins. Otherwise data/devices.json is used when a data
    directory exists (container deployments), else devices.json.
    """
    if devices_file:
        return Path(devices_file)
    if Path("data").is_dir():
        return Path("data") / "devices.json"
    return Path("devices.json")


def load_device_data(json_file: Path) -> List[Device]:
    """Loads devices from the JSON file.

    Args:
        json_file (Path): Path to the JSON file.

    Returns:
        List[Device]: Devices in stored order, empty if the file does not exist.

    Raises:
        PersistenceError: If the file exists but cannot be read or decoded.
    """
    try:
        with json_file.open("r", encoding="utf-8") as file:
            data = json.load(file)
    except FileNotFoundError:
        logger.debug("Device store %s not found, starting empty", json_file)
        return []
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as err:
        raise PersistenceError(f"Could not read device store {json_file}: {err}") from err

    if data is None:
        return []
    try:
        return [Device.from_dict(record) for record in data]
    except (KeyError, TypeError, ValueError) as err:
        raise PersistenceError(f"Malformed device record in {json_file}: {err}") from err


def save_device_data(devices: List[Device], json_file: Path) -> None:
    """Overwrites the JSON file with the full device list.

    The file is rewritten in place, not via a temporary file and rename, so an
    interrupted write can leave it truncated.

    Args:
        devices (List[Device]): Devices to save, in order.
        json_file (Path): Path to the JSON file.

    Raises:
        PersistenceError: If the file cannot be written.
    """
    try:
        payload = json.dumps([device.to_dict() for device in devices], indent=2)
        with json_file.open("w", encoding="utf-8") as file:
            file.write(payload)
    except (OSError, TypeError, ValueError) as err:
        raise PersistenceError(f"Could not write device store {json_file}: {err}") from err
    logger.debug("Saved %d devices to %s", len(devices), json_file)
