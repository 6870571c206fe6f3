# tests/conftest.py
import pytest
from scapy.layers.inet import ICMP, IP, ICMPerror, IPerror

LOCAL_IP = "192.168.1.10"
DEST_IP = "93.184.216.34"


@pytest.fixture
def time_exceeded():
    """Build the datagram a router returns when a probe's TTL runs out."""
    def build(router_ip, ttl=1, ident=0x1234):
        quoted = IPerror(src=LOCAL_IP, dst=DEST_IP, ttl=1) / ICMPerror(type=8, id=ident, seq=ttl)
        pkt = IP(src=router_ip, dst=LOCAL_IP) / ICMP(type=11, code=0) / quoted
        return bytes(pkt), router_ip
    return build


@pytest.fixture
def echo_reply():
    def build(src_ip=DEST_IP, ident=0x1234, seq=1):
        pkt = IP(src=src_ip, dst=LOCAL_IP) / ICMP(type=0, code=0, id=ident, seq=seq)
        return bytes(pkt), src_ip
    return build


@pytest.fixture
def icmp_reply():
    """Any other ICMP type, e.g. 3 for destination unreachable."""
    def build(icmp_type, src_ip="10.9.9.9", code=0):
        pkt = IP(src=src_ip, dst=LOCAL_IP) / ICMP(type=icmp_type, code=code)
        return bytes(pkt), src_ip
    return build
