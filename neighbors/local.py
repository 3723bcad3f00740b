# neighbors/local.py
import logging
import shlex
import subprocess

from errors import NeighborTableError
from .base import BaseNeighborReader

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "arp -a"


class LocalNeighborReader(BaseNeighborReader):
    """Reads this host's neighbor table by running a local command."""

    def __init__(self, command: str = DEFAULT_COMMAND, timeout: float = 10):
        self.command = command
        self.timeout = timeout

    def read_table(self) -> str:
        try:
            result = subprocess.run(
                shlex.split(self.command),
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=True,
            )
        except FileNotFoundError as e:
            logger.error(f"Neighbor table command not found: {self.command}")
            raise NeighborTableError(f"Command not found: {self.command}") from e
        except subprocess.CalledProcessError as e:
            logger.error(f"Command '{self.command}' exited with {e.returncode}: {e.stderr}")
            raise NeighborTableError(f"Command '{self.command}' failed with exit code {e.returncode}") from e
        except (subprocess.TimeoutExpired, OSError) as e:
            raise NeighborTableError(f"Command '{self.command}' failed: {e}") from e
        return result.stdout
