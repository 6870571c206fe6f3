from dataclasses import dataclass
from typing import Literal, Optional, TypedDict

Classification = Literal[
    "intermediate_hop",
    "destination",
    "unexpected_type",
    "send_error",
    "receive_error",
    "parse_error",
]

StopReason = Literal["dest_reached", "interrupted", "hop_limit"]


@dataclass(frozen=True)
class Probe:
    """One outbound Echo Request. Sequence always mirrors the ttl."""
    ttl: int
    identifier: int
    sequence: int
    payload: bytes = b""

    @classmethod
    def for_ttl(cls, ttl: int, identifier: int) -> "Probe":
        return cls(ttl=ttl, identifier=identifier, sequence=ttl)


class ProbeResult(TypedDict, total=False):
    ttl: int
    status: Classification
    hop_ip: Optional[str]
    rtt_ms: Optional[float]
    icmp_type: Optional[int]
    detail: Optional[str]     # error text for the *_error statuses
