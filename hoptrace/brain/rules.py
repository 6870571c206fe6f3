# hoptrace/brain/rules.py
from typing import Optional

from hoptrace.message import ICMP_ECHO_REPLY, ICMP_TIME_EXCEEDED, type_name
from hoptrace.schemas import Classification, ProbeResult


def classify(icmp_type: int) -> Classification:
    """
    Attribute a reply to the probe just sent by its ICMP type alone.
    Identifier and sequence are not compared: only one probe is ever in flight.
    """
    if icmp_type == ICMP_TIME_EXCEEDED:
        return "intermediate_hop"
    if icmp_type == ICMP_ECHO_REPLY:
        return "destination"
    return "unexpected_type"


def format_rtt(rtt_ms: Optional[float]) -> str:
    return "*" if rtt_ms is None else f"{rtt_ms:.3f}ms"


def render(result: ProbeResult, name: Optional[str] = None) -> str:
    """One output line for a ProbeResult. `name` replaces the address on the final hop."""
    ttl = result["ttl"]
    status = result["status"]
    detail = result.get("detail")

    if status == "intermediate_hop":
        return f"{ttl}: {result['hop_ip']} {format_rtt(result.get('rtt_ms'))}"
    if status == "destination":
        return f"{ttl}: {name or result['hop_ip']} {format_rtt(result.get('rtt_ms'))}"
    if status == "unexpected_type":
        return f"{ttl}: Unexpected ICMP message type: {type_name(result['icmp_type'])}"
    if status == "send_error":
        return f"{ttl}: Error sending ICMP message: {detail}"
    if status == "receive_error":
        return f"{ttl}: Error receiving ICMP reply: {detail}"
    return f"{ttl}: Error parsing ICMP reply: {detail}"
