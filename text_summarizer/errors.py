from __future__ import annotations


class SummarizerError(Exception):
    """Base class for every failure the summarizer reports to its caller."""


class InvalidParameters(SummarizerError, ValueError):
    """Raised before any work starts when a size, count, timeout or cap is unusable."""


class RankingTimeout(SummarizerError, TimeoutError):
    """The ranking engine did not finish before its deadline.

    No scores accompany this error; a timed-out attempt is discarded whole.
    """

    def __init__(self, timeout: float):
        super().__init__(f"ranking did not finish within {timeout:g}s")
        self.timeout = timeout


class AcquisitionFailure(SummarizerError):
    """Source content could not be fetched, read or decoded."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"could not load {source}: {reason}")
        self.source = source
        self.reason = reason
