import logging
import signal
import threading

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class InterruptWatcher:
    """
    Records that a termination signal arrived. The probe loop polls
    triggered() between hops; a send or receive in progress is not cut short.
    """

    def __init__(self, signals=DEFAULT_SIGNALS):
        self.signals = tuple(signals)
        self._event = threading.Event()
        self._previous = {}

    def install(self) -> "InterruptWatcher":
        logger.debug("watching signals %s", ", ".join(signal.Signals(s).name for s in self.signals))
        for signum in self.signals:
            self._previous[signum] = signal.signal(signum, self._handle)
        return self

    def restore(self) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def _handle(self, signum, frame) -> None:
        self._event.set()

    def trigger(self) -> None:
        self._event.set()

    def triggered(self) -> bool:
        return self._event.is_set()

    def __enter__(self):
        return self.install()

    def __exit__(self, exc_type, exc, tb):
        self.restore()
        return False
