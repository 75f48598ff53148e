"""
Exceptions raised while rewriting a fast-export stream.

Every error here is fatal: a partially consumed stream cannot be
resumed, so the command line aborts on the first one.
"""


class RewriteError(Exception):
    """Base exception for all stream rewriting errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ShortReadError(RewriteError):
    """Raised when the input ends before a length-prefixed payload is complete."""

    def __init__(self, expected: int, received: int):
        super().__init__(f"Unexpected end of stream: expected {expected} bytes, got {received}")
        self.expected = expected
        self.received = received


class NoActiveRecordError(RewriteError):
    """Raised when a commit field arrives outside of a reset/commit record."""

    def __init__(self, token: str):
        super().__init__(f"No reset or commit in progress for: {token}")
        self.token = token


class UnexpectedDataError(RewriteError):
    """Raised when a commit receives a second data block."""

    def __init__(self, token: str, ref_line: str | None = None):
        message = f"Commit already has a message, refusing extra block: {token}"
        if ref_line:
            message += f" (in '{ref_line}')"
        super().__init__(message)
        self.token = token
        self.ref_line = ref_line
