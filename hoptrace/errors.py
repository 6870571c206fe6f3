class HoptraceError(Exception):
    """Base class for every error raised by hoptrace."""


# fatal: the run cannot start or continue

class ResolutionError(HoptraceError):
    pass


class SocketUnavailable(HoptraceError):
    pass


class SerializationError(HoptraceError):
    pass


# per hop: reported on the hop's line, the loop moves on

class SendError(HoptraceError):
    pass


class ReceiveError(HoptraceError):
    def __init__(self, message: str = "receive failed", timeout: bool = False):
        super().__init__(message)
        self.timeout = timeout


class MessageParseError(HoptraceError):
    pass
