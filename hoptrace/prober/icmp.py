# hoptrace/prober/icmp.py
import logging
import socket
import time
from typing import Optional, Tuple

from hoptrace.errors import ReceiveError, SendError, SocketUnavailable
from hoptrace.prober.base import ProbeSocket, check_ttl

logger = logging.getLogger(__name__)


class IcmpSocket(ProbeSocket):
    """
    Raw AF_INET/IPPROTO_ICMP socket. Reads return the whole IPv4 datagram,
    IP header included. The receive deadline is absolute: once it has passed
    every receive fails immediately until it is armed again.
    """

    def __init__(self, sock: socket.socket):
        self._sock = sock
        self._deadline: Optional[float] = None
        self._closed = False

    def set_ttl(self, ttl: int) -> None:
        check_ttl(ttl)
        try:
            self._sock.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
        except OSError as e:
            raise SendError(f"cannot set ttl {ttl}: {e}") from e
        logger.debug("socket ttl set to %d", ttl)

    def set_deadline(self, deadline: float) -> None:
        self._deadline = deadline
        logger.debug("receive deadline armed %.3fs ahead", deadline - time.monotonic())

    def send(self, data: bytes, address: str) -> None:
        try:
            self._sock.sendto(data, (address, 0))
        except OSError as e:
            raise SendError(str(e)) from e
        logger.debug("sent %d bytes to %s", len(data), address)

    def receive(self, bufsize: int) -> Tuple[bytes, str]:
        if self._deadline is not None:
            remaining = self._deadline - time.monotonic()
            if remaining <= 0:
                raise ReceiveError("i/o timeout", timeout=True)
            self._sock.settimeout(remaining)
        else:
            self._sock.settimeout(None)

        try:
            data, addr = self._sock.recvfrom(bufsize)
        except socket.timeout as e:
            raise ReceiveError("i/o timeout", timeout=True) from e
        except OSError as e:
            raise ReceiveError(str(e)) from e
        return data, addr[0]

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()
        logger.debug("icmp socket closed")


def open_socket(bind_address: str = "0.0.0.0") -> IcmpSocket:
    """Open the raw ICMP endpoint on all local addresses. Needs CAP_NET_RAW or root."""
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_RAW, socket.IPPROTO_ICMP)
    except OSError as e:
        raise SocketUnavailable(f"cannot open raw ICMP socket: {e} (try running with sudo)") from e
    try:
        sock.bind((bind_address, 0))
    except OSError as e:
        sock.close()
        raise SocketUnavailable(f"cannot bind raw ICMP socket to {bind_address}: {e}") from e
    logger.debug("raw icmp socket bound to %s", bind_address)
    return IcmpSocket(sock)
