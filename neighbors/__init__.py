# neighbors/__init__.py
from dynaconf import Dynaconf

from errors import ConfigError
from .base import BaseNeighborReader
from .local import DEFAULT_COMMAND, LocalNeighborReader
from .ssh import SshNeighborReader


def get_neighbor_reader(config: Dynaconf) -> BaseNeighborReader:
    """Neighbor reader factory: returns the reader selected by neighbors.source."""

    source = config.get("neighbors.source", "local")
    command = config.get("neighbors.command", DEFAULT_COMMAND)

    if source == "local":
        return LocalNeighborReader(command)
    elif source == "ssh":
        return SshNeighborReader(config.get("ssh", {}), command)
    else:
        raise ConfigError(f"Unsupported neighbor source: {source}")
