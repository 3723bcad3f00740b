# utils.py
import re
import logging
from typing import List, Optional, Tuple

import netifaces
import paramiko
from mac_vendor_lookup import MacLookup

from errors import NeighborTableError

logger = logging.getLogger(__name__)

_MAC_PATTERN = re.compile(r"^([0-9A-Fa-f]{1,2}[:-]){5}[0-9A-Fa-f]{1,2}$|^[0-9A-Fa-f]{12}$")


def format_mac(mac: str) -> str:
    """Formats a MAC address to uppercase with colons and two digits per octet."""
    cleaned = mac.strip()
    if not cleaned:
        return ""
    parts = re.split(r"[:-]", cleaned)
    if len(parts) == 1 and len(cleaned) == 12:
        parts = [cleaned[i:i + 2] for i in range(0, 12, 2)]
    return ":".join(part.zfill(2) for part in parts).upper()


def is_valid_mac_address(mac: str) -> bool:
    """Checks if a string is a MAC address (colon, hyphen or bare hex form)."""
    return bool(_MAC_PATTERN.match(mac.strip()))


def is_valid_ipv4(ip: str) -> bool:
    """Checks if a string is a valid IPv4 address."""
    pattern = r"^(\d{1,3}\.){3}\d{1,3}$"
    if re.match(pattern, ip):
        parts = ip.split('.')
        return all(0 <= int(part) <= 255 for part in parts)
    return False


def list_interface_addresses() -> List[Tuple[str, str]]:
    """Returns (ip, netmask) for every IPv4 address on the local interfaces."""
    addresses: List[Tuple[str, str]] = []
    for interface_name in netifaces.interfaces():
        try:
            addrs = netifaces.ifaddresses(interface_name)
        except ValueError as e:
            logger.debug(f"Skipping interface {interface_name}: {e}")
            continue
        for addr_info in addrs.get(netifaces.AF_INET, []):
            ip = addr_info.get('addr')
            netmask = addr_info.get('netmask')
            if ip and netmask:
                addresses.append((ip, netmask))
    return addresses


def lookup_vendor(mac: str, mac_lookup: Optional[MacLookup] = None) -> Optional[str]:
    """Returns the vendor registered for a MAC's OUI, or None if unknown."""
    try:
        return (mac_lookup or MacLookup()).lookup(mac)
    except Exception as e:  # pylint: disable=broad-except
        logger.debug(f"Could not determine vendor for MAC {mac}: {e}")
        return None


class SSHClient:
    """A utility class for handling SSH connections and command execution."""

    def __init__(self, hostname: str, username: str, password: Optional[str] = None,
                  timeout: int = 10):
        self.hostname = hostname
        self.username = username
        self.password = password
        self.timeout = timeout
        self.client: Optional[paramiko.SSHClient] = None

    def connect(self) -> bool:
        """Connects to the SSH server, using a password or the default keys and agent."""
        self.client = paramiko.SSHClient()
        self.client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            if self.password:
                self.client.connect(hostname=self.hostname, username=self.username,
                                    password=self.password, timeout=self.timeout)
            else:
                self.client.connect(hostname=self.hostname, username=self.username,
                                    timeout=self.timeout, look_for_keys=True, allow_agent=True)
            return True
        except (paramiko.SSHException, OSError) as e:
            logger.error(f"Error connecting to {self.hostname}: {e}")
            self.client = None
            return False

    def execute_command(self, command: str) -> str:
        """Executes a command on the connected SSH server and returns its stdout."""
        if not self.client:
            raise NeighborTableError("SSH client not connected. Call connect() first.")
        try:
            _, stdout, stderr = self.client.exec_command(command, timeout=self.timeout)
            output = stdout.read().decode()
            error = stderr.read().decode().strip()
        except (paramiko.SSHException, OSError) as e:
            raise NeighborTableError(f"Error executing command '{command}' on {self.hostname}: {e}") from e
        if error:
            logger.warning(f"Command '{command}' returned error: {error}")
        return output

    def close(self):
        """Closes the SSH connection."""
        if self.client:
            self.client.close()
            self.client = None
