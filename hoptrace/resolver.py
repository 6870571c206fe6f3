import logging
import socket
from dataclasses import dataclass
from typing import List

from hoptrace.errors import ResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Destination:
    name: str       # as typed by the user
    address: str    # dotted IPv4


def resolve(name: str) -> Destination:
    """Resolve a hostname or IPv4 literal to the first IPv4 address."""
    try:
        infos = socket.getaddrinfo(name, None, socket.AF_INET, socket.SOCK_RAW)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(f"cannot resolve {name}: {e}") from e
    if not infos:
        raise ResolutionError(f"cannot resolve {name}: no IPv4 address")
    address = infos[0][4][0]
    logger.debug("resolved %s to %s", name, address)
    return Destination(name=name, address=address)


def reverse_lookup(address: str) -> List[str]:
    hostname, aliases, _ = socket.gethostbyaddr(address)
    return [hostname, *aliases]


def display_name(address: str) -> str:
    """First reverse DNS name for address, or the address itself."""
    try:
        names = reverse_lookup(address)
    except OSError as e:
        logger.debug("reverse lookup of %s failed: %s", address, e)
        return address
    return names[0] if names else address
