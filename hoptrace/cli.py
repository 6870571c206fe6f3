# hoptrace/cli.py
# Usage examples:
#   sudo hoptrace 8.8.8.8
#   sudo hoptrace example.com --max-hops 30 --timeout 5 --per-hop-deadline
#   sudo python3 -m hoptrace -n -v 1.1.1.1

import argparse
import logging
import sys

from hoptrace.brain.controller import ProbeLoop
from hoptrace.config import Settings
from hoptrace.errors import ResolutionError, SerializationError, SocketUnavailable
from hoptrace.interrupt import InterruptWatcher
from hoptrace.prober.icmp import open_socket
from hoptrace.resolver import resolve

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class _ArgumentParser(argparse.ArgumentParser):
    # usage errors share exit code 1 with the other fatal errors
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def build_argparser():
    defaults = Settings()
    ap = _ArgumentParser(prog="hoptrace",
                         description="Trace the route to a host with ICMP Echo probes of increasing TTL")
    ap.add_argument("destination", help="Destination hostname or IPv4 address")
    ap.add_argument("--max-hops", type=int, default=defaults.max_hops,
                    help="Highest TTL to probe (default: %(default)s)")
    ap.add_argument("--timeout", type=float, default=defaults.timeout_s,
                    help="Receive deadline in seconds (default: %(default)s)")
    ap.add_argument("--per-hop-deadline", action="store_true",
                    help="Re-arm the deadline for every hop instead of once per run")
    ap.add_argument("-n", dest="numeric", action="store_true",
                    help="Print the final hop numerically, no reverse DNS lookup")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return ap


def main(argv=None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format=LOG_FORMAT, stream=sys.stderr)

    settings = Settings(
        max_hops=args.max_hops,
        timeout_s=args.timeout,
        per_hop_deadline=args.per_hop_deadline,
        numeric=args.numeric,
    )
    try:
        settings.validate()
    except ValueError as e:
        ap.error(str(e))

    try:
        dest = resolve(args.destination)
    except ResolutionError as e:
        logger.debug("resolution failed", exc_info=True)
        print(f"Error resolving destination IP: {e}", file=sys.stderr)
        return 1

    try:
        sock = open_socket()
    except SocketUnavailable as e:
        print(f"Error creating ICMP socket: {e}", file=sys.stderr)
        return 1

    watcher = InterruptWatcher()
    try:
        print(f"traceroute to {dest.name} ({dest.address}), {settings.max_hops} hops max")
        watcher.install()
        ProbeLoop(sock, settings, watcher).run(dest)
    except SerializationError as e:
        print(f"Error marshaling ICMP message: {e}", file=sys.stderr)
        return 1
    finally:
        watcher.restore()
        sock.close()
    return 0
