import os
from dataclasses import dataclass, field


def _process_identifier() -> int:
    return os.getpid() & 0xFFFF


@dataclass
class Settings:
    max_hops: int = 64
    timeout_s: float = 2.0
    recv_buffer: int = 1500           # fits a full ICMP error quoting the original datagram
    identifier: int = field(default_factory=_process_identifier)

    # re-arm the receive deadline before every hop instead of once per run
    per_hop_deadline: bool = False
    # print the final hop as a literal address, no reverse lookup
    numeric: bool = False

    def validate(self) -> "Settings":
        if not 1 <= self.max_hops <= 255:
            raise ValueError(f"max_hops must be within 1..255, got {self.max_hops}")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive, got {self.timeout_s}")
        if self.recv_buffer < 28:
            raise ValueError(f"recv_buffer too small for an ICMP reply: {self.recv_buffer}")
        if not 0 <= self.identifier <= 0xFFFF:
            raise ValueError(f"identifier must fit in 16 bits, got {self.identifier}")
        return self
