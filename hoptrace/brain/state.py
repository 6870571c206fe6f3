# hoptrace/brain/state.py
from dataclasses import dataclass
from typing import Optional

from hoptrace.schemas import StopReason


@dataclass
class RunState:
    max_ttl: int
    ttl: int = 1
    done: bool = False
    stop_reason: Optional[StopReason] = None
    probes_sent: int = 0

    def finish(self, reason: StopReason) -> None:
        self.done = True
        self.stop_reason = reason
