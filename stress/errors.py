class StressError(Exception):
    """Base class for errors raised by the load generator."""


class HeaderLoadError(StressError):
    """The header file for an API-style target could not be read or parsed."""


class LimiterCancelled(StressError):
    """The run was cancelled while a worker waited for a rate-limit token."""


class InvalidURLError(StressError):
    pass


class NoTimingSamplesError(StressError):
    """Average response time requested with no recorded samples."""
