# hoptrace/brain/controller.py

import logging
import time
from typing import Callable

from hoptrace.brain.rules import classify, render
from hoptrace.brain.state import RunState
from hoptrace.errors import MessageParseError, ReceiveError, SendError
from hoptrace.message import build_echo_request, parse_message, type_name
from hoptrace.resolver import Destination, display_name
from hoptrace.schemas import Probe, ProbeResult

logger = logging.getLogger(__name__)


class ProbeLoop:
    """
    Walks the path to a destination one TTL at a time with a single probe in
    flight. Each ttl gets exactly one attempt; per-hop failures are printed
    and the loop moves on. SerializationError is the only error that escapes.
    """

    def __init__(self, sock, settings, interrupt,
                 name_for: Callable[[str], str] = display_name,
                 emit: Callable[[str], None] = print):
        self.sock = sock
        self.s = settings
        self.interrupt = interrupt
        self.name_for = name_for
        self.emit = emit

    def run(self, dest: Destination) -> RunState:
        run = RunState(max_ttl=self.s.max_hops)

        if not self.s.per_hop_deadline:
            # one deadline for the whole run; late hops get whatever time is left
            self.sock.set_deadline(time.monotonic() + self.s.timeout_s)

        while not run.done:
            ttl = run.ttl

            # -------------------------------
            # 1) Probe this ttl once
            # -------------------------------
            result = self.probe(dest.address, ttl)
            if result["status"] != "send_error":
                run.probes_sent += 1

            if result["status"] == "destination":
                name = dest.address if self.s.numeric else self.name_for(dest.address)
                self.emit(render(result, name))
                run.finish("dest_reached")
                break
            self.emit(render(result))

            # -------------------------------
            # 2) Stop on interrupt or hop limit
            # -------------------------------
            if self.interrupt.triggered():
                self.emit("Traceroute interrupted.")
                run.finish("interrupted")
            elif ttl >= run.max_ttl:
                self.emit("Max hops reached.")
                run.finish("hop_limit")
            else:
                run.ttl += 1

        logger.debug("run to %s finished at ttl %d: %s", dest.address, run.ttl, run.stop_reason)
        return run

    def probe(self, address: str, ttl: int) -> ProbeResult:
        try:
            self.sock.set_ttl(ttl)
        except SendError as e:
            logger.debug("ttl %d: cannot set ttl: %s", ttl, e)
            return {"ttl": ttl, "status": "send_error", "hop_ip": None, "rtt_ms": None, "detail": str(e)}
        probe = Probe.for_ttl(ttl, self.s.identifier)
        data = build_echo_request(probe.identifier, probe.sequence, probe.payload)

        if self.s.per_hop_deadline:
            self.sock.set_deadline(time.monotonic() + self.s.timeout_s)

        start = time.perf_counter()
        try:
            self.sock.send(data, address)
        except SendError as e:
            logger.debug("ttl %d: send failed: %s", ttl, e)
            return {"ttl": ttl, "status": "send_error", "hop_ip": None, "rtt_ms": None, "detail": str(e)}

        try:
            reply, sender = self.sock.receive(self.s.recv_buffer)
        except ReceiveError as e:
            logger.debug("ttl %d: receive failed (timeout=%s): %s", ttl, e.timeout, e)
            return {"ttl": ttl, "status": "receive_error", "hop_ip": None, "rtt_ms": None, "detail": str(e)}
        rtt_ms = (time.perf_counter() - start) * 1000.0

        try:
            msg = parse_message(reply)
        except MessageParseError as e:
            logger.debug("ttl %d: unparsable reply from %s: %s", ttl, sender, e)
            return {"ttl": ttl, "status": "parse_error", "hop_ip": sender, "rtt_ms": rtt_ms, "detail": str(e)}

        status = classify(msg.type)
        logger.debug("ttl %d: %s from %s in %.3fms -> %s", ttl, type_name(msg.type), sender, rtt_ms, status)
        return {"ttl": ttl, "status": status, "hop_ip": sender, "rtt_ms": rtt_ms, "icmp_type": msg.type}
