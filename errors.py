# errors.py


class WolScanError(Exception):
    """Base class for registry, store and scanner errors."""


class DuplicateDeviceError(WolScanError):
    """A device with the same MAC or IP is already registered."""


class DeviceNotFoundError(WolScanError):
    """No registered device has the requested id."""


class PersistenceError(WolScanError):
    """The device store could not be read or written."""


class NoLocalNetworkError(WolScanError):
    """No non-loopback IPv4 interface is available to scan from."""


class NeighborTableError(WolScanError):
    """The neighbor (ARP) table could not be read."""


class InvalidMACError(WolScanError, ValueError):
    """A MAC address is not six hex octets."""


class ConfigError(WolScanError, ValueError):
    """A setting is missing or has an unsupported value."""
