"""
ICMPv4 wire handling on top of scapy's inet layers.

Requests are built as bare ICMP messages (the kernel prepends the IP header on
send), while replies read from a raw IPv4 socket still carry their IP header,
so they are dissected starting from the IP layer.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from scapy.layers.inet import ICMP, IP, icmptypes
from scapy.packet import Raw

from hoptrace.errors import MessageParseError, SerializationError

logger = logging.getLogger(__name__)

ICMP_ECHO_REPLY = 0
ICMP_DEST_UNREACH = 3
ICMP_ECHO_REQUEST = 8
ICMP_TIME_EXCEEDED = 11

IPPROTO_ICMP = 1
_IP_MIN_HEADER = 20
_ICMP_MIN_HEADER = 4       # type, code, checksum
_ECHO_TYPES = (ICMP_ECHO_REPLY, ICMP_ECHO_REQUEST)


@dataclass(frozen=True)
class IcmpMessage:
    type: int
    code: int
    identifier: Optional[int] = None
    sequence: Optional[int] = None


def build_echo_request(identifier: int, sequence: int, payload: bytes = b"") -> bytes:
    """Serialize an Echo Request, checksum included."""
    try:
        pkt = ICMP(type=ICMP_ECHO_REQUEST, code=0, id=identifier, seq=sequence)
        if payload:
            pkt = pkt / Raw(load=payload)
        return bytes(pkt)
    except Exception as e:
        raise SerializationError(f"cannot serialize echo request id={identifier} seq={sequence}: {e}") from e


def parse_message(data: bytes) -> IcmpMessage:
    """Parse a datagram read from a raw IPv4 ICMP socket."""
    if len(data) < _IP_MIN_HEADER:
        raise MessageParseError(f"datagram too short: {len(data)} bytes")

    version, ihl = data[0] >> 4, (data[0] & 0x0F) * 4
    if version != 4:
        raise MessageParseError(f"not an IPv4 datagram (version {version})")
    if ihl < _IP_MIN_HEADER or len(data) < ihl + _ICMP_MIN_HEADER:
        raise MessageParseError(f"truncated ICMP message: {len(data)} bytes, header {ihl}")

    try:
        pkt = IP(data)
    except Exception as e:
        raise MessageParseError(f"malformed datagram: {e}") from e

    if pkt.proto != IPPROTO_ICMP:
        raise MessageParseError(f"not an ICMP message (protocol {pkt.proto})")
    if not pkt.haslayer(ICMP):
        raise MessageParseError(f"truncated ICMP message: no ICMP header in {len(data)} bytes")

    layer = pkt[ICMP]
    msg = IcmpMessage(type=int(layer.type), code=int(layer.code))
    if msg.type in _ECHO_TYPES:
        msg = IcmpMessage(type=msg.type, code=msg.code,
                          identifier=getattr(layer, "id", None),
                          sequence=getattr(layer, "seq", None))
    logger.debug("parsed ICMP %s from %s", type_name(msg.type), pkt.src)
    return msg


def type_name(icmp_type: int) -> str:
    return icmptypes.get(icmp_type, f"type {icmp_type}")
