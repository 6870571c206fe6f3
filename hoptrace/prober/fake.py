# hoptrace/prober/fake.py
from collections import deque

from hoptrace.errors import ReceiveError, SendError
from hoptrace.prober.base import ProbeSocket, check_ttl


class FakeSocket(ProbeSocket):
    """
    script: dict[ttl] -> list of replies handed out by receive() while that ttl is set.
    A reply is a (bytes, sender_ip) tuple, an exception instance to raise, or a
    zero-argument callable returning either of those.
    If no scripted reply is left, receive() times out.

    send_errors: dict[ttl] -> exception raised by send() at that ttl.
    """
    def __init__(self, script=None, send_errors=None):
        self.script = {}
        if script:
            for k, v in script.items():
                self.script[k] = deque(v)
        self.send_errors = dict(send_errors or {})
        self.ttl = None
        self.sent = []          # (ttl, bytes, address) per send
        self.deadlines = []
        self.close_calls = 0

    def set_ttl(self, ttl: int) -> None:
        self.ttl = check_ttl(ttl)

    def set_deadline(self, deadline: float) -> None:
        self.deadlines.append(deadline)

    def send(self, data: bytes, address: str) -> None:
        err = self.send_errors.get(self.ttl)
        if err is not None:
            raise err if isinstance(err, Exception) else SendError(str(err))
        self.sent.append((self.ttl, data, address))

    def receive(self, bufsize: int):
        dq = self.script.get(self.ttl)
        if not dq:
            raise ReceiveError("i/o timeout", timeout=True)
        reply = dq.popleft()
        if callable(reply):
            reply = reply()
        if isinstance(reply, Exception):
            raise reply
        data, sender = reply
        return data[:bufsize], sender

    def close(self) -> None:
        self.close_calls += 1

    @property
    def sent_ttls(self):
        return [ttl for ttl, _, _ in self.sent]
