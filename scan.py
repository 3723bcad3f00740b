# scan.py
import argparse
import json
import logging
import sys
from functools import partial
from typing import List, Optional

from dynaconf import Dynaconf
from mac_vendor_lookup import MacLookup

from data import default_devices_path
from device import Device
from errors import WolScanError
from neighbors import get_neighbor_reader
from network_scanner import (MAX_IN_FLIGHT, MAX_SCAN_HOSTS, PROBE_RETRIES, SETTLE_DELAY,
                             NetworkScanner)
from prober import LivenessProber
from reachability import STATUS_TIMEOUT
from registry import DeviceRegistry
from utils import lookup_vendor

logger = logging.getLogger(__name__)


def load_config(settings_files: Optional[List[str]] = None) -> Dynaconf:
    return Dynaconf(
        envvar_prefix="WOLSCAN",
        settings_files=settings_files or ['config/settings.toml'],
    )


def build_registry(config: Dynaconf) -> DeviceRegistry:
    registry = DeviceRegistry(default_devices_path(config.get("general.devices_file")))
    registry.load()
    return registry


def build_prober(config: Dynaconf, registry: DeviceRegistry) -> LivenessProber:
    return LivenessProber(registry, timeout=float(config.get("probe.status_timeout", STATUS_TIMEOUT)))


def build_scanner(config: Dynaconf) -> NetworkScanner:
    vendor_lookup = None
    if config.get("scan.lookup_vendors", False):
        vendor_lookup = partial(lookup_vendor, mac_lookup=MacLookup())
    scan_timeout = config.get("probe.scan_timeout")
    return NetworkScanner(
        get_neighbor_reader(config),
        probe_timeout=float(scan_timeout) if scan_timeout is not None else None,
        max_hosts=int(config.get("probe.max_hosts", MAX_SCAN_HOSTS)),
        max_in_flight=int(config.get("probe.max_in_flight", MAX_IN_FLIGHT)),
        retries=int(config.get("probe.retries", PROBE_RETRIES)),
        settle_delay=float(config.get("probe.settle_delay", SETTLE_DELAY)),
        vendor_lookup=vendor_lookup,
    )


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def run(args: argparse.Namespace, config: Dynaconf) -> None:
    if args.command == "update-mac-db":
        MacLookup().update_vendors()
        logger.info("MAC vendor database updated")
        return

    if args.command == "discover":
        _print_json([device.to_dict() for device in build_scanner(config).scan()])
        return

    registry = build_registry(config)
    if args.command == "list":
        if args.refresh:
            build_prober(config, registry).update_statuses()
        _print_json([device.to_dict() for device in registry.list_devices()])
    elif args.command == "show":
        _print_json(registry.get(args.id).to_dict())
    elif args.command == "add":
        device = registry.add(Device.create(args.name, args.mac, args.ip, args.port))
        _print_json(device.to_dict())
    elif args.command == "remove":
        registry.remove(args.id)
        logger.info(f"Device {args.id} deleted")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Wake-on-LAN device registry and network scanner")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--settings", action="append", help="Settings file (default: config/settings.toml)")
    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List registered devices")
    list_parser.add_argument("--refresh", action="store_true", help="Ping devices before listing")
    show_parser = commands.add_parser("show", help="Show one device")
    show_parser.add_argument("id")
    add_parser = commands.add_parser("add", help="Register a device")
    add_parser.add_argument("--name", required=True)
    add_parser.add_argument("--mac", required=True)
    add_parser.add_argument("--ip", default="")
    add_parser.add_argument("--port", default="9")
    remove_parser = commands.add_parser("remove", help="Remove a device")
    remove_parser.add_argument("id")
    commands.add_parser("discover", help="Scan the local subnet for devices")
    commands.add_parser("update-mac-db", help="Force update of the MAC vendor database")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    try:
        run(args, load_config(args.settings))
    except WolScanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
