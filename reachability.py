# reachability.py
"""Host reachability check backed by the operating system's ping utility."""
import logging
import platform
import subprocess
from typing import Callable, List

logger = logging.getLogger(__name__)

# probe(ip, timeout_seconds) -> reachable
Reachability = Callable[[str, float], bool]

STATUS_TIMEOUT = 1.0


def is_windows() -> bool:
    return platform.system() == "Windows"


def default_scan_timeout() -> float:
    """Per-probe timeout used while warming the neighbor cache."""
    return 0.5 if is_windows() else 1.0


def ping_command(ip: str, timeout: float) -> List[str]:
    """Builds a single-echo ping command for the current platform."""
    if is_windows():
        return ["ping", "-n", "1", "-w", str(int(timeout * 1000)), ip]
    # -W takes whole seconds here
    return ["ping", "-c", "1", "-W", str(max(1, int(round(timeout)))), ip]


def ping_host(ip: str, timeout: float = STATUS_TIMEOUT) -> bool:
    """Sends one echo request to ip. Returns True only on a reply."""
    if not ip:
        return False
    try:
        result = subprocess.run(
            ping_command(ip, timeout),
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout + 5,
        )
    except subprocess.TimeoutExpired:
        logger.debug(f"Ping timeout: {ip}")
        return False
    except OSError as e:
        logger.debug(f"Ping error for {ip}: {e}")
        return False
    return result.returncode == 0
