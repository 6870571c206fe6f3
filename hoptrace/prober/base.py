# hoptrace/prober/base.py
from abc import ABC, abstractmethod
from typing import Tuple


class ProbeSocket(ABC):
    """ICMP endpoint with per-packet TTL control. One owner, closed exactly once."""

    @abstractmethod
    def set_ttl(self, ttl: int) -> None:
        """Set the IP TTL used by every following send (1..255)."""
        raise NotImplementedError

    @abstractmethod
    def set_deadline(self, deadline: float) -> None:
        """Arm an absolute time.monotonic() deadline for receive()."""
        raise NotImplementedError

    @abstractmethod
    def send(self, data: bytes, address: str) -> None:
        """Send one datagram, no retry. Raises SendError."""
        raise NotImplementedError

    @abstractmethod
    def receive(self, bufsize: int) -> Tuple[bytes, str]:
        """Block for one datagram and return (bytes, sender ip). Raises ReceiveError."""
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def check_ttl(ttl: int) -> int:
    if not 1 <= ttl <= 255:
        raise ValueError(f"ttl must be within 1..255, got {ttl}")
    return ttl
