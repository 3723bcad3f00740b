# neighbors/ssh.py
import logging

from dynaconf import Dynaconf

from errors import ConfigError, NeighborTableError
from utils import SSHClient
from .base import BaseNeighborReader
from .local import DEFAULT_COMMAND

logger = logging.getLogger(__name__)


class SshNeighborReader(BaseNeighborReader):
    """Reads the neighbor table of a remote host (typically the router) over SSH."""

    def __init__(self, config: Dynaconf, command: str = DEFAULT_COMMAND):
        self.host = config.get("host")
        self.user = config.get("user")
        self.password = config.get("password")
        self.ssh_timeout = config.get("timeout", 10)
        self.arp_cmd = command
        if not self.host or not self.user:
            raise ConfigError("SSH neighbor source requires ssh.host and ssh.user")

    def read_table(self) -> str:
        ssh_client = SSHClient(hostname=self.host, username=self.user,
                               password=self.password, timeout=self.ssh_timeout)
        if not ssh_client.connect():
            raise NeighborTableError(f"Could not connect to {self.host} over SSH")
        try:
            output = ssh_client.execute_command(self.arp_cmd)
        finally:
            ssh_client.close()
        logger.debug(f"Read {len(output.splitlines())} neighbor lines from {self.host}")
        return output
