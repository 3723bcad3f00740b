# neighbors/parser.py
"""Tolerant line parser for neighbor table dumps.

Handles the layouts printed by common tools, e.g.:

    Linux arp -a:    ? (192.168.1.1) at 11:22:33:44:55:66 [ether] on eth0
    ip neigh:        192.168.1.1 dev eth0 lladdr 11:22:33:44:55:66 REACHABLE
    Windows arp -a:    192.168.1.1          11-22-33-44-55-66     dynamic
    macOS arp -a:    ? (192.168.1.1) at 0:11:2:33:44:55 on en0 ifscope [ethernet]

A line is kept only if it has both an IPv4 token and a MAC token.
"""
import re
from typing import List, Optional, Tuple

from utils import format_mac

IP_PATTERN = re.compile(r"(?<![\d.])(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})(?![\d.])")
MAC_PATTERN = re.compile(
    r"(?<![0-9A-Fa-f:-])([0-9A-Fa-f]{1,2}(?:[:-][0-9A-Fa-f]{1,2}){5})(?![0-9A-Fa-f:-])"
)


def parse_neighbor_line(line: str) -> Optional[Tuple[str, str]]:
    """Extracts (ip, mac) from one line, with the MAC normalized."""
    ip_match = IP_PATTERN.search(line)
    mac_match = MAC_PATTERN.search(line)
    if not ip_match or not mac_match:
        return None
    return ip_match.group(1), format_mac(mac_match.group(1))


def parse_neighbor_table(output: str) -> List[Tuple[str, str]]:
    """Parses every recognizable line of a dump, in table order."""
    entries = []
    for line in output.splitlines():
        entry = parse_neighbor_line(line)
        if entry:
            entries.append(entry)
    return entries
