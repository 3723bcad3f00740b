# neighbors/base.py
from abc import ABC, abstractmethod


class BaseNeighborReader(ABC):
    """Abstract base class for reading an address-resolution (ARP) table."""

    @abstractmethod
    def read_table(self) -> str:
        """Returns the raw neighbor table dump as text.

        The text is parsed by neighbors.parser; its layout depends on the
        platform and tool that produced it.

        Raises:
            NeighborTableError: If the table could not be read.
        """
        pass
