# network_scanner.py
import ipaddress
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional, Tuple

from device import ScannedDevice
from errors import NoLocalNetworkError
from neighbors.base import BaseNeighborReader
from neighbors.parser import parse_neighbor_table
from reachability import Reachability, default_scan_timeout, ping_host
from utils import is_valid_ipv4, list_interface_addresses

logger = logging.getLogger(__name__)

MAX_SCAN_HOSTS = 512
MAX_IN_FLIGHT = 100
PROBE_RETRIES = 1
SETTLE_DELAY = 0.5

_BLOCKED_MAC_PREFIXES = ("FF:FF:FF", "01:00:5E", "33:33")
_ZERO_MAC = "00:00:00:00:00:00"


def is_valid_scan_ip(ip: str) -> bool:
    """Checks that an IP is a unicast, non-loopback, non-link-local IPv4 address."""
    if not is_valid_ipv4(ip):
        return False
    octets = [int(part) for part in ip.split('.')]
    first = octets[0]
    if 224 <= first <= 239:  # multicast
        return False
    if first >= 240:  # reserved
        return False
    if first == 127:
        return False
    if first == 169 and octets[1] == 254:
        return False
    return True


def is_valid_mac(mac: str) -> bool:
    """Checks that a normalized MAC is not broadcast, multicast or all-zero."""
    mac = mac.upper()
    if mac.startswith(_BLOCKED_MAC_PREFIXES):
        return False
    return mac != _ZERO_MAC


def filter_candidates(entries: Iterable[Tuple[str, str]]) -> List[ScannedDevice]:
    """Drops unusable entries and keeps the first entry seen for each MAC."""
    devices: List[ScannedDevice] = []
    seen = set()
    for ip, mac in entries:
        if not is_valid_scan_ip(ip) or not is_valid_mac(mac):
            continue
        if mac in seen:
            continue
        seen.add(mac)
        devices.append(ScannedDevice(ip=ip, mac=mac))
    return devices


def get_local_interface(addresses: Iterable[Tuple[str, str]]) -> ipaddress.IPv4Interface:
    """Returns the first non-loopback IPv4 interface from (ip, netmask) pairs."""
    for ip, netmask in addresses:
        try:
            interface = ipaddress.IPv4Interface(f"{ip}/{netmask}")
        except ValueError:
            continue
        if not interface.ip.is_loopback:
            return interface
    raise NoLocalNetworkError("no valid local IP found")


def subnet_hosts(network: ipaddress.IPv4Network, limit: int = MAX_SCAN_HOSTS) -> List[str]:
    """Lists host addresses of a subnet, excluding network and broadcast.

    At most limit addresses are returned, counting up from the network address.
    """
    host_count = min((1 << (32 - network.prefixlen)) - 2, limit)
    base = int(network.network_address)
    return [str(ipaddress.IPv4Address(base + offset)) for offset in range(1, host_count + 1)]


class NetworkScanner:
    """Finds devices on the local subnet via ping sweep and the neighbor table.

    The sweep only warms the OS neighbor cache; its results are discarded and
    candidates come solely from the table read afterwards.
    """

    def __init__(self,
                 neighbor_reader: BaseNeighborReader,
                 reachability: Reachability = ping_host,
                 interface_lister: Callable[[], List[Tuple[str, str]]] = list_interface_addresses,
                 probe_timeout: Optional[float] = None,
                 max_hosts: int = MAX_SCAN_HOSTS,
                 max_in_flight: int = MAX_IN_FLIGHT,
                 retries: int = PROBE_RETRIES,
                 settle_delay: float = SETTLE_DELAY,
                 vendor_lookup: Optional[Callable[[str], Optional[str]]] = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.neighbor_reader = neighbor_reader
        self.reachability = reachability
        self.interface_lister = interface_lister
        self.probe_timeout = probe_timeout if probe_timeout is not None else default_scan_timeout()
        self.max_hosts = max_hosts
        self.max_in_flight = max_in_flight
        self.retries = retries
        self.settle_delay = settle_delay
        self.vendor_lookup = vendor_lookup
        self.sleep = sleep

    def scan(self) -> List[ScannedDevice]:
        """Scans the local subnet.

        Returns:
            Candidate devices in neighbor-table order; may be empty.

        Raises:
            NoLocalNetworkError: If no non-loopback IPv4 interface exists.
            NeighborTableError: If the neighbor table could not be read.
        """
        interface = get_local_interface(self.interface_lister())
        local_ip = str(interface.ip)
        targets = [ip for ip in subnet_hosts(interface.network, self.max_hosts) if ip != local_ip]
        logger.info(f"Scanning {interface.network} from {local_ip}: {len(targets)} hosts")

        self._warm_neighbor_cache(targets)
        self.sleep(self.settle_delay)

        entries = parse_neighbor_table(self.neighbor_reader.read_table())
        devices = filter_candidates(entries)
        if self.vendor_lookup:
            for device in devices:
                device.vendor = self.vendor_lookup(device.mac)
        logger.info(f"Scan found {len(devices)} devices ({len(entries)} table entries)")
        return devices

    def _warm_neighbor_cache(self, targets: List[str]) -> None:
        if not targets:
            return
        # The pool size is the in-flight limit.
        with ThreadPoolExecutor(max_workers=min(self.max_in_flight, len(targets))) as executor:
            for future in [executor.submit(self._probe, ip) for ip in targets]:
                future.result()

    def _probe(self, ip: str) -> None:
        for _ in range(1 + self.retries):
            try:
                if self.reachability(ip, self.probe_timeout):
                    return
            except Exception as e:  # pylint: disable=broad-except
                logger.debug(f"Probe of {ip} failed: {e}")
